"""Enumerations for platforms, workflows and credential sources."""

from enum import Enum

from eas_build.exceptions import ConfigurationError


class Platform(str, Enum):
    """Target platforms a build preset can describe."""

    ANDROID = "android"
    IOS = "ios"

    def __str__(self) -> str:
        return self.value


class RequestedPlatform(str, Enum):
    """Platform selection passed by the caller.

    ``all`` expands to every supported platform.
    """

    ANDROID = "android"
    IOS = "ios"
    ALL = "all"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str | None) -> "RequestedPlatform":
        """Parse a user supplied platform name.

        Raises:
            ConfigurationError: If the value is missing or not a known platform
        """
        try:
            return cls((value or "").strip().lower())
        except ValueError as e:
            raise ConfigurationError(
                f"Platform is required, pass valid platform: [android|ios|all] (got: {value!r})"
            ) from e

    @property
    def platforms(self) -> tuple[Platform, ...]:
        """Concrete platforms covered by this selection, android first."""
        if self == RequestedPlatform.ALL:
            return (Platform.ANDROID, Platform.IOS)
        return (Platform(self.value),)


class Workflow(str, Enum):
    """Project workflow of a preset.

    - generic: developer-managed native project
    - managed: platform-managed project

    The workflow selects both the preset schema and the credential policy.
    """

    GENERIC = "generic"
    MANAGED = "managed"

    def __str__(self) -> str:
        return self.value


class CredentialsSource(str, Enum):
    """Where signing credentials for a build come from."""

    LOCAL = "local"
    REMOTE = "remote"
    AUTO = "auto"

    def __str__(self) -> str:
        return self.value
