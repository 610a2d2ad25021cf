"""Android credentials provider: an upload keystore and its passwords."""

import asyncio

import structlog

from eas_build.credentials import local
from eas_build.credentials.context import CredentialsContext
from eas_build.credentials.models import AndroidCredentials, AndroidKeystore
from eas_build.enums import Platform
from eas_build.exceptions import (
    InvalidLocalCredentialsError,
    LocalCredentialsError,
    NoCredentialsCommittedError,
    RemoteSetupFailedError,
)

log = structlog.get_logger(__name__)


class AndroidCredentialsProvider:
    """Loads the Android keystore from credentials.json or the remote store."""

    platform = Platform.ANDROID

    def __init__(self, ctx: CredentialsContext) -> None:
        self.ctx = ctx
        self._credentials: AndroidCredentials | None = None

    @property
    def project_full_name(self) -> str:
        return self.ctx.project_full_name

    async def has_remote(self) -> bool:
        keystore = await self.ctx.remote.fetch_android_keystore(self.project_full_name)
        return keystore is not None and keystore.is_valid

    async def has_local(self) -> bool:
        if not local.exists(self.ctx.project_dir):
            return False
        try:
            credentials = await local.read_android(self.ctx.project_dir)
        except LocalCredentialsError as e:
            log.debug("local_credentials_unusable", platform=str(self.platform), error=e.message)
            return False
        return credentials.is_valid

    async def use_remote(self) -> None:
        await self.ctx.remote.ensure_android_keystore(self.project_full_name)
        keystore = await self.ctx.remote.fetch_android_keystore(self.project_full_name)
        if keystore is None or not keystore.is_valid:
            raise RemoteSetupFailedError("Unable to set up credentials", platform=str(self.platform))
        self._commit(AndroidCredentials(keystore=keystore), source="remote")

    async def use_local(self) -> None:
        credentials = await local.read_android(self.ctx.project_dir)
        if not credentials.is_valid:
            raise InvalidLocalCredentialsError(
                f"Invalid keystore in {local.CREDENTIALS_JSON_FILENAME}", platform=str(self.platform)
            )
        self._commit(credentials, source="local")

    async def is_local_synced(self) -> bool:
        remote, local_credentials = await asyncio.gather(
            self.ctx.remote.fetch_android_keystore(self.project_full_name),
            local.read_android(self.ctx.project_dir),
            return_exceptions=True,
        )
        if isinstance(remote, BaseException) or isinstance(local_credentials, BaseException):
            log.debug("credentials_sync_check_skipped", platform=str(self.platform))
            return True
        if remote is None:
            return True
        return self._keystores_match(remote, local_credentials.keystore) and remote.is_valid

    @property
    def is_committed(self) -> bool:
        return self._credentials is not None

    def get_credentials(self) -> AndroidCredentials:
        if self._credentials is None:
            raise NoCredentialsCommittedError("Credentials not specified", platform=str(self.platform))
        return self._credentials

    def _commit(self, credentials: AndroidCredentials, source: str) -> None:
        self._credentials = credentials
        log.info("credentials_committed", platform=str(self.platform), source=source, project=self.project_full_name)

    @staticmethod
    def _keystores_match(remote: AndroidKeystore, local_keystore: AndroidKeystore) -> bool:
        return (
            remote.keystore == local_keystore.keystore
            and remote.keystore_password == local_keystore.keystore_password
            and remote.key_alias == local_keystore.key_alias
            and remote.key_password == local_keystore.key_password
        )
