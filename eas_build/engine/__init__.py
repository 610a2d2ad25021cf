"""Credential reconciliation and per-platform build preparation."""

from .builders import AndroidBuilder, BuilderContext, IosBuilder
from .pipeline import BuildRequest, PlatformBuildResult, prepare_builds, prepare_builds_from_settings
from .reconciler import ensure_credentials

__all__ = [
    "AndroidBuilder",
    "IosBuilder",
    "BuilderContext",
    "BuildRequest",
    "PlatformBuildResult",
    "prepare_builds",
    "prepare_builds_from_settings",
    "ensure_credentials",
]
