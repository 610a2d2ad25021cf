"""
Per-platform builders.

A builder takes the resolved preset of its platform, loads signing
credentials through the reconciler when the preset needs them, and turns
both into the job payload handed to the build service. Submitting the job is
the caller's business.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import structlog

from eas_build.config.presets import (
    AndroidGenericPreset,
    AndroidManagedPreset,
    AndroidPreset,
    IosManagedPreset,
    IosPreset,
)
from eas_build.config.reader import ResolvedConfiguration
from eas_build.credentials.android import AndroidCredentialsProvider
from eas_build.credentials.context import CredentialsContext
from eas_build.credentials.ios import IosCredentialsProvider
from eas_build.credentials.models import AndroidCredentials, IosCredentials
from eas_build.engine.reconciler import ensure_credentials
from eas_build.enums import Platform, Workflow
from eas_build.exceptions import ConfigurationError
from eas_build.utils.prompts import Prompter

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class BuilderContext:
    """Inputs shared by the builders of one build request.

    Attributes:
        config: Resolved eas.json configuration
        credentials: Context handed to the credentials providers
        prompter: Prompt collaborator for credential reconciliation
        bundle_identifier: iOS bundle identifier (required for iOS builds)
    """

    config: ResolvedConfiguration
    credentials: CredentialsContext
    prompter: Prompter
    bundle_identifier: str | None = None


class Builder(Protocol):
    platform: Platform

    async def ensure_credentials(self) -> None:
        ...

    def prepare_job(self, archive_url: str) -> dict[str, Any]:
        ...


class AndroidBuilder:
    """Builder for Android presets."""

    platform = Platform.ANDROID

    def __init__(self, ctx: BuilderContext) -> None:
        if ctx.config.android is None:
            raise ctx.config.error_for(self.platform) or ConfigurationError("Missing android configuration")
        self.ctx = ctx
        self.preset: AndroidPreset = ctx.config.android
        self.credentials: AndroidCredentials | None = None

    def should_load_credentials(self) -> bool:
        if isinstance(self.preset, AndroidGenericPreset):
            return not self.preset.without_credentials
        return True

    async def ensure_credentials(self) -> None:
        if not self.should_load_credentials():
            log.info("credentials_skipped", platform=str(self.platform), reason="withoutCredentials")
            return

        provider = AndroidCredentialsProvider(self.ctx.credentials)
        await ensure_credentials(
            provider,
            self.ctx.config.credentials_source,
            Workflow(self.preset.workflow),
            self.ctx.prompter,
        )
        if provider.is_committed:
            self.credentials = provider.get_credentials()

    def prepare_job(self, archive_url: str) -> dict[str, Any]:
        job: dict[str, Any] = {"platform": self.platform.value, "projectUrl": archive_url}
        if self.credentials is not None:
            keystore = self.credentials.keystore
            job["secrets"] = {
                "keystore": {
                    "dataBase64": keystore.keystore,
                    "keystorePassword": keystore.keystore_password,
                    "keyAlias": keystore.key_alias,
                    "keyPassword": keystore.key_password,
                }
            }

        if isinstance(self.preset, AndroidGenericPreset):
            job["type"] = Workflow.GENERIC.value
            if self.preset.build_command is not None:
                job["gradleCommand"] = self.preset.build_command
            if self.preset.artifact_path is not None:
                job["artifactPath"] = self.preset.artifact_path
        elif isinstance(self.preset, AndroidManagedPreset):
            job["type"] = Workflow.MANAGED.value
            if self.preset.build_type is not None:
                job["buildType"] = self.preset.build_type
        return job


class IosBuilder:
    """Builder for iOS presets."""

    platform = Platform.IOS

    def __init__(self, ctx: BuilderContext) -> None:
        if ctx.config.ios is None:
            raise ctx.config.error_for(self.platform) or ConfigurationError("Missing ios configuration")
        self.ctx = ctx
        self.preset: IosPreset = ctx.config.ios
        self.credentials: IosCredentials | None = None

    def should_load_credentials(self) -> bool:
        # Managed builds only sign archives; simulator builds are unsigned.
        if isinstance(self.preset, IosManagedPreset):
            return self.preset.build_type == "archive"
        return True

    async def ensure_credentials(self) -> None:
        if not self.should_load_credentials():
            log.info("credentials_skipped", platform=str(self.platform), reason="unsignedBuildType")
            return

        bundle_identifier = self.ctx.bundle_identifier
        if not bundle_identifier:
            raise ConfigurationError("A bundle identifier is required to build for iOS")

        provider = IosCredentialsProvider(self.ctx.credentials, bundle_identifier)
        await ensure_credentials(
            provider,
            self.ctx.config.credentials_source,
            Workflow(self.preset.workflow),
            self.ctx.prompter,
        )
        if provider.is_committed:
            self.credentials = provider.get_credentials()

    def prepare_job(self, archive_url: str) -> dict[str, Any]:
        job: dict[str, Any] = {
            "platform": self.platform.value,
            "projectUrl": archive_url,
            "type": self.preset.workflow,
        }
        if self.credentials is not None:
            job["secrets"] = {
                "provisioningProfileBase64": self.credentials.provisioning_profile,
                "distributionCertificate": {
                    "dataBase64": self.credentials.distribution_certificate.cert_p12,
                    "password": self.credentials.distribution_certificate.cert_password,
                },
            }
        if isinstance(self.preset, IosManagedPreset) and self.preset.build_type is not None:
            job["buildType"] = self.preset.build_type
        return job


def create_builder(platform: Platform, ctx: BuilderContext) -> Builder:
    if platform == Platform.ANDROID:
        return AndroidBuilder(ctx)
    return IosBuilder(ctx)
