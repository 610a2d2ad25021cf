"""
Runtime settings loaded from the environment.

Project files (eas.json, credentials.json) describe *what* to build; these
settings describe *how* this process talks to the outside world: whether it
may prompt, how verbose it logs, and where the remote credential store lives.

Example:
    >>> settings = BuildSettings()  # reads EAS_BUILD_* variables
    >>> settings.non_interactive
    False
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, HttpUrl, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class BuildSettings(BaseSettings):
    """Process-wide settings for build preparation."""

    model_config = SettingsConfigDict(
        env_prefix="EAS_BUILD_",
        case_sensitive=False,
    )

    non_interactive: bool = Field(default=False, description="Fail instead of prompting the user")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Minimum log level"
    )
    api_base_url: HttpUrl = Field(
        default="https://api.expo.dev/v2",
        validate_default=True,
        description="Base URL of the remote credential store",
    )
    api_token: SecretStr | None = Field(default=None, description="Access token for the remote credential store")
    request_timeout: float = Field(default=30.0, ge=1.0, le=300.0, description="HTTP timeout in seconds")
