"""
Build preset schemas keyed by platform and workflow.

Each preset body in eas.json carries a ``workflow`` tag that selects which
schema applies. Schemas strip unknown fields, trim whitespace on strings and
never coerce strings into booleans. Validation is exhaustive so every
violated field is reported at once.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, ValidationError
from pydantic.alias_generators import to_camel

from eas_build.enums import Platform, Workflow
from eas_build.exceptions import PresetInvalidError, UnknownWorkflowError


class PresetModel(BaseModel):
    """Common configuration for preset schemas."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
        frozen=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """Render the preset with its eas.json field names.

        Only fields present in the source object are included.
        """
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")


class AndroidGenericPreset(PresetModel):
    """Android preset for a developer-managed native project."""

    workflow: Literal["generic"]
    build_command: StrictStr | None = Field(default=None, description="Gradle command to run")
    artifact_path: StrictStr | None = Field(default=None, description="Path of the produced artifact")
    without_credentials: StrictBool = Field(default=False, description="Build without signing credentials")


class AndroidManagedPreset(PresetModel):
    """Android preset for a platform-managed project."""

    workflow: Literal["managed"]
    build_type: Literal["apk", "app-bundle"] | None = None


class IosGenericPreset(PresetModel):
    """iOS preset for a developer-managed native project."""

    workflow: Literal["generic"]


class IosManagedPreset(PresetModel):
    """iOS preset for a platform-managed project."""

    workflow: Literal["managed"]
    build_type: Literal["archive", "simulator"] | None = None


AndroidPreset = AndroidGenericPreset | AndroidManagedPreset
IosPreset = IosGenericPreset | IosManagedPreset
Preset = AndroidPreset | IosPreset

PRESET_SCHEMAS: dict[tuple[Platform, Workflow], type[PresetModel]] = {
    (Platform.ANDROID, Workflow.GENERIC): AndroidGenericPreset,
    (Platform.ANDROID, Workflow.MANAGED): AndroidManagedPreset,
    (Platform.IOS, Workflow.GENERIC): IosGenericPreset,
    (Platform.IOS, Workflow.MANAGED): IosManagedPreset,
}


def format_violations(error: ValidationError) -> list[str]:
    """Turn a pydantic ValidationError into one message per violated field.

    Args:
        error: Validation error raised by pydantic

    Returns:
        Messages of the form ``"<field path>: <message>"``
    """
    violations = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "<root>"
        violations.append(f"{location}: {detail['msg']}")
    return violations


def validate_preset(
    platform: Platform | str,
    workflow: Workflow | str,
    raw_preset: dict[str, Any],
    *,
    preset_name: str,
) -> Preset:
    """Validate a raw preset body against the schema for (platform, workflow).

    Args:
        platform: Platform the preset belongs to
        workflow: Workflow tag read from the preset body
        raw_preset: Preset body as parsed from eas.json
        preset_name: Name of the preset, used in error messages

    Returns:
        Validated preset with unknown fields removed

    Raises:
        UnknownWorkflowError: If no schema exists for the pair
        PresetInvalidError: If the body violates the schema
    """
    try:
        key = (Platform(platform), Workflow(workflow))
    except ValueError as e:
        raise UnknownWorkflowError(str(platform), str(workflow)) from e

    schema = PRESET_SCHEMAS.get(key)
    if schema is None:
        raise UnknownWorkflowError(str(platform), str(workflow))

    try:
        return schema.model_validate(raw_preset)  # type: ignore[return-value]
    except ValidationError as e:
        raise PresetInvalidError(str(platform), preset_name, format_violations(e)) from e
