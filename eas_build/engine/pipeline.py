"""
Build preparation pipeline.

Resolves the requested preset from eas.json, then runs one pipeline per
requested platform: reconcile credentials, assemble the job payload. The
platform pipelines run concurrently and independently; a failure in one is
reported in its result and never cancels the other.

Example:
    >>> request = BuildRequest(
    ...     project_dir=Path("."),
    ...     preset_name="release",
    ...     platform=RequestedPlatform.ALL,
    ...     account_name="jane",
    ...     project_name="app",
    ...     archive_url="https://storage.example.com/archive.tar.gz",
    ...     bundle_identifier="com.jane.app",
    ... )
    >>> results = await prepare_builds_from_settings(request, BuildSettings())
    >>> results[Platform.ANDROID].job["type"]
    'generic'
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from eas_build.config.reader import EasJsonReader
from eas_build.config.settings import BuildSettings
from eas_build.credentials.context import CredentialsContext
from eas_build.credentials.remote import HttpRemoteCredentialStore, RemoteCredentialStore
from eas_build.engine.builders import BuilderContext, create_builder
from eas_build.enums import CredentialsSource, Platform, RequestedPlatform
from eas_build.utils.logging_config import configure_logging
from eas_build.utils.prompts import Prompter, create_prompter

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class BuildRequest:
    """What the caller asked to build."""

    project_dir: Path
    preset_name: str
    platform: RequestedPlatform
    account_name: str
    project_name: str
    archive_url: str
    bundle_identifier: str | None = None
    credentials_source: CredentialsSource | None = None


@dataclass(frozen=True)
class PlatformBuildResult:
    """Outcome of one platform pipeline: a job payload or the error that stopped it."""

    platform: Platform
    job: dict[str, Any] | None = None
    error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


async def prepare_builds(
    request: BuildRequest,
    remote: RemoteCredentialStore,
    prompter: Prompter,
) -> dict[Platform, PlatformBuildResult]:
    """Resolve the preset and prepare a job for every requested platform.

    Args:
        request: Build request
        remote: Remote credential store client
        prompter: Prompt collaborator

    Returns:
        One result per requested platform

    Raises:
        ConfigurationError: If eas.json cannot be read, or no requested
            platform resolves; no platform pipeline is started in that case.
            A preset missing for only some platforms fails just those
    """
    config = EasJsonReader(
        request.project_dir,
        platform=request.platform,
        credentials_source=request.credentials_source,
    ).read_preset(request.preset_name)

    builder_ctx = BuilderContext(
        config=config,
        credentials=CredentialsContext(
            project_dir=request.project_dir,
            account_name=request.account_name,
            project_name=request.project_name,
            remote=remote,
        ),
        prompter=prompter,
        bundle_identifier=request.bundle_identifier,
    )

    platforms = request.platform.platforms
    outcomes = await asyncio.gather(
        *(_prepare_platform(platform, builder_ctx, request.archive_url) for platform in platforms),
        return_exceptions=True,
    )

    results: dict[Platform, PlatformBuildResult] = {}
    for platform, outcome in zip(platforms, outcomes, strict=True):
        if isinstance(outcome, Exception):
            log.error("platform_build_failed", platform=str(platform), error=str(outcome))
            results[platform] = PlatformBuildResult(platform=platform, error=outcome)
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            results[platform] = PlatformBuildResult(platform=platform, job=outcome)
    return results


async def prepare_builds_from_settings(
    request: BuildRequest,
    settings: BuildSettings,
) -> dict[Platform, PlatformBuildResult]:
    """Run ``prepare_builds`` with collaborators built from runtime settings."""
    configure_logging(settings.log_level)
    token = settings.api_token.get_secret_value() if settings.api_token else None
    async with HttpRemoteCredentialStore(
        str(settings.api_base_url),
        token=token,
        timeout=settings.request_timeout,
    ) as remote:
        return await prepare_builds(request, remote, create_prompter(settings.non_interactive))


async def _prepare_platform(platform: Platform, ctx: BuilderContext, archive_url: str) -> dict[str, Any]:
    builder = create_builder(platform, ctx)
    await builder.ensure_credentials()
    job = builder.prepare_job(archive_url)
    log.info("platform_job_prepared", platform=str(platform), has_secrets="secrets" in job)
    return job
