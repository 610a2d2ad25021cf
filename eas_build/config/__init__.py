"""Configuration for build preparation.

Key Components:
    - EasJsonReader: Resolves a named preset from eas.json
    - validate_preset: Validates a preset body for a (platform, workflow) pair
    - BuildSettings: Runtime settings read from EAS_BUILD_* variables

Example:
    >>> from eas_build.config import EasJsonReader
    >>> config = EasJsonReader(project_dir, platform="android").read_preset("release")
    >>> config.to_dict()
    {'credentialsSource': 'auto', 'android': {'workflow': 'generic'}}
"""

from .presets import (
    AndroidGenericPreset,
    AndroidManagedPreset,
    IosGenericPreset,
    IosManagedPreset,
    validate_preset,
)
from .reader import EasJsonReader, ResolvedConfiguration
from .settings import BuildSettings

__all__ = [
    "AndroidGenericPreset",
    "AndroidManagedPreset",
    "IosGenericPreset",
    "IosManagedPreset",
    "validate_preset",
    "EasJsonReader",
    "ResolvedConfiguration",
    "BuildSettings",
]
