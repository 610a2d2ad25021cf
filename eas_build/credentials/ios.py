"""iOS credentials provider: distribution certificate plus provisioning profile."""

import asyncio

import structlog

from eas_build.credentials import local
from eas_build.credentials.context import CredentialsContext
from eas_build.credentials.models import IosCredentials
from eas_build.enums import Platform
from eas_build.exceptions import (
    InvalidLocalCredentialsError,
    LocalCredentialsError,
    NoCredentialsCommittedError,
    RemoteSetupFailedError,
)

log = structlog.get_logger(__name__)


class IosCredentialsProvider:
    """Loads iOS signing material from credentials.json or the remote store.

    Remote credentials count as present only when both the distribution
    certificate and the provisioning profile exist for the bundle identifier.
    """

    platform = Platform.IOS

    def __init__(self, ctx: CredentialsContext, bundle_identifier: str) -> None:
        self.ctx = ctx
        self.bundle_identifier = bundle_identifier
        self._credentials: IosCredentials | None = None

    @property
    def project_full_name(self) -> str:
        return self.ctx.project_full_name

    async def has_remote(self) -> bool:
        dist_cert = await self.ctx.remote.fetch_ios_distribution_certificate(
            self.project_full_name, self.bundle_identifier
        )
        profile = await self.ctx.remote.fetch_ios_provisioning_profile(self.project_full_name, self.bundle_identifier)
        return dist_cert is not None and profile is not None

    async def has_local(self) -> bool:
        if not local.exists(self.ctx.project_dir):
            return False
        try:
            credentials = await local.read_ios(self.ctx.project_dir)
        except LocalCredentialsError as e:
            log.debug("local_credentials_unusable", platform=str(self.platform), error=e.message)
            return False
        return credentials.is_valid

    async def use_remote(self) -> None:
        remote = self.ctx.remote
        await remote.ensure_ios_distribution_certificate(self.project_full_name, self.bundle_identifier)
        dist_cert = await remote.fetch_ios_distribution_certificate(self.project_full_name, self.bundle_identifier)
        if dist_cert is None:
            raise RemoteSetupFailedError("Missing distribution certificate", platform=str(self.platform))

        await remote.ensure_ios_provisioning_profile(self.project_full_name, self.bundle_identifier, dist_cert)
        credentials = await self._fetch_remote()
        if credentials is None or not credentials.is_valid:
            raise RemoteSetupFailedError("Unable to set up credentials", platform=str(self.platform))
        self._commit(credentials, source="remote")

    async def use_local(self) -> None:
        credentials = await local.read_ios(self.ctx.project_dir)
        if not credentials.is_valid:
            raise InvalidLocalCredentialsError(
                f"Invalid iOS credentials in {local.CREDENTIALS_JSON_FILENAME}", platform=str(self.platform)
            )
        self._commit(credentials, source="local")

    async def is_local_synced(self) -> bool:
        remote, local_credentials = await asyncio.gather(
            self._fetch_remote(),
            local.read_ios(self.ctx.project_dir),
            return_exceptions=True,
        )
        if isinstance(remote, BaseException) or isinstance(local_credentials, BaseException):
            log.debug("credentials_sync_check_skipped", platform=str(self.platform))
            return True
        if remote is None:
            return True
        return (
            remote.provisioning_profile == local_credentials.provisioning_profile
            and remote.distribution_certificate.cert_p12 == local_credentials.distribution_certificate.cert_p12
            and remote.distribution_certificate.cert_password
            == local_credentials.distribution_certificate.cert_password
            and remote.is_valid
        )

    @property
    def is_committed(self) -> bool:
        return self._credentials is not None

    def get_credentials(self) -> IosCredentials:
        if self._credentials is None:
            raise NoCredentialsCommittedError("Credentials not specified", platform=str(self.platform))
        return self._credentials

    async def _fetch_remote(self) -> IosCredentials | None:
        dist_cert = await self.ctx.remote.fetch_ios_distribution_certificate(
            self.project_full_name, self.bundle_identifier
        )
        if dist_cert is None:
            return None
        profile = await self.ctx.remote.fetch_ios_provisioning_profile(self.project_full_name, self.bundle_identifier)
        if profile is None:
            return None
        return IosCredentials(provisioning_profile=profile.provisioning_profile, distribution_certificate=dist_cert)

    def _commit(self, credentials: IosCredentials, source: str) -> None:
        self._credentials = credentials
        log.info(
            "credentials_committed",
            platform=str(self.platform),
            source=source,
            project=self.project_full_name,
            bundle=self.bundle_identifier,
        )
