"""
Reader for the eas.json build configuration file.

The file holds a global credentials source preference and, per platform, a
mapping of preset names to preset bodies. Only the requested preset of the
requested platforms is validated; everything else in the file is left alone
apart from the permissive top-level shape check.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from eas_build.config.presets import AndroidPreset, IosPreset, Preset, format_violations, validate_preset
from eas_build.enums import CredentialsSource, Platform, RequestedPlatform, Workflow
from eas_build.exceptions import ConfigFileError, ConfigurationError, PresetNotFoundError, SchemaValidationError

log = structlog.get_logger(__name__)

EAS_JSON_FILENAME = "eas.json"


class RawPresetBody(BaseModel):
    """Loosely typed preset body; only the workflow tag is enforced here."""

    model_config = ConfigDict(extra="allow")

    workflow: Workflow

    @field_validator("workflow", mode="before")
    @classmethod
    def _strip_workflow(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class EasJsonFile(BaseModel):
    """Top-level shape of eas.json."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    credentials_source: CredentialsSource | None = Field(default=None, alias="credentialsSource")
    android: dict[str, RawPresetBody] | None = None
    ios: dict[str, RawPresetBody] | None = None

    def presets_for(self, platform: Platform) -> dict[str, RawPresetBody]:
        section = self.android if platform == Platform.ANDROID else self.ios
        return section or {}


@dataclass(frozen=True)
class ResolvedConfiguration:
    """eas.json resolved for one preset and the requested platforms.

    A requested platform whose preset could not be resolved has no preset
    here; its error is kept in ``errors`` so the other platform can still
    be built.
    """

    credentials_source: CredentialsSource
    android: AndroidPreset | None = None
    ios: IosPreset | None = None
    errors: dict[Platform, ConfigurationError] = field(default_factory=dict)

    def preset_for(self, platform: Platform) -> Preset | None:
        return self.android if platform == Platform.ANDROID else self.ios

    def error_for(self, platform: Platform) -> ConfigurationError | None:
        return self.errors.get(platform)

    def to_dict(self) -> dict[str, Any]:
        """Render the resolved configuration with eas.json field names."""
        result: dict[str, Any] = {"credentialsSource": self.credentials_source.value}
        if self.android is not None:
            result["android"] = self.android.to_dict()
        if self.ios is not None:
            result["ios"] = self.ios.to_dict()
        return result


class EasJsonReader:
    """Resolve a named preset from eas.json.

    Example:
        >>> reader = EasJsonReader(project_dir, platform=RequestedPlatform.ANDROID)
        >>> config = reader.read_preset("release")
        >>> config.android.workflow
        'generic'
    """

    def __init__(
        self,
        project_dir: Path | str,
        platform: RequestedPlatform | str = RequestedPlatform.ALL,
        credentials_source: CredentialsSource | str | None = None,
    ) -> None:
        """Initialize the reader.

        Args:
            project_dir: Project root containing eas.json
            platform: Platforms to resolve the preset for
            credentials_source: Explicit override of the file's credentialsSource
        """
        self.project_dir = Path(project_dir)
        self.platform = RequestedPlatform.parse(platform)
        try:
            self.credentials_source = CredentialsSource(credentials_source) if credentials_source else None
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid credentials source {credentials_source!r}, expected one of: local, remote, auto"
            ) from e

    @property
    def config_path(self) -> Path:
        return self.project_dir / EAS_JSON_FILENAME

    def read_preset(self, preset_name: str) -> ResolvedConfiguration:
        """Resolve ``preset_name`` for every requested platform.

        Args:
            preset_name: Name of the preset (e.g. "release")

        Returns:
            Resolved configuration containing only the requested platforms.
            When some but not all requested platforms fail, the failures are
            recorded in ``errors`` instead of being raised.

        Raises:
            ConfigFileError: If eas.json cannot be read or parsed
            SchemaValidationError: If eas.json is invalid, or the preset is
                invalid for every requested platform
            PresetNotFoundError: If the preset is missing for every requested
                platform
        """
        eas_json = self._read_file()

        presets: dict[Platform, Preset] = {}
        failures: dict[Platform, ConfigurationError] = {}
        for platform in self.platform.platforms:
            try:
                presets[platform] = self._resolve_platform_preset(eas_json, platform, preset_name)
            except ConfigurationError as e:
                log.error("preset_resolution_failed", platform=str(platform), preset=preset_name, error=e.message)
                failures[platform] = e

        if not presets:
            raise next(iter(failures.values()))

        credentials_source = self.credentials_source or eas_json.credentials_source or CredentialsSource.AUTO
        log.debug(
            "preset_resolved",
            preset=preset_name,
            platforms=[str(p) for p in presets],
            credentials_source=str(credentials_source),
        )
        return ResolvedConfiguration(
            credentials_source=credentials_source,
            android=presets.get(Platform.ANDROID),  # type: ignore[arg-type]
            ios=presets.get(Platform.IOS),  # type: ignore[arg-type]
            errors=failures,
        )

    def _resolve_platform_preset(self, eas_json: EasJsonFile, platform: Platform, preset_name: str) -> Preset:
        raw_body = eas_json.presets_for(platform).get(preset_name)
        if raw_body is None:
            raise PresetNotFoundError(preset_name, str(platform))
        return validate_preset(
            platform,
            raw_body.workflow,
            raw_body.model_dump(mode="json"),
            preset_name=preset_name,
        )

    def _read_file(self) -> EasJsonFile:
        path = self.config_path
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigFileError(path, e) from e

        if not isinstance(raw, dict):
            raise SchemaValidationError(EAS_JSON_FILENAME, ["<root>: must be a JSON object"])

        try:
            return EasJsonFile.model_validate(raw)
        except ValidationError as e:
            raise SchemaValidationError(EAS_JSON_FILENAME, format_violations(e)) from e
