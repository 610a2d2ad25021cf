"""Capability set implemented by the per-platform credentials providers."""

from typing import Protocol

from eas_build.credentials.models import AndroidCredentials, IosCredentials
from eas_build.enums import Platform


class CredentialsProvider(Protocol):
    """Loads signing credentials for one platform of one build.

    Lifecycle: constructed per build, queried with ``has_local``,
    ``has_remote`` and ``is_local_synced`` any number of times, then
    committed to one source with ``use_local`` or ``use_remote``, after which
    ``get_credentials`` returns the bundle.

    These queries never raise for expected absence or mismatch.
    """

    @property
    def platform(self) -> Platform:
        ...

    async def has_local(self) -> bool:
        """Whether credentials.json holds a complete bundle for this platform."""
        ...

    async def has_remote(self) -> bool:
        """Whether the remote store holds a complete bundle for this project."""
        ...

    async def use_local(self) -> None:
        """Commit to the local bundle.

        Raises:
            InvalidLocalCredentialsError: If the bundle is incomplete
        """
        ...

    async def use_remote(self) -> None:
        """Run the remote setup flow and commit to the remote bundle.

        Raises:
            RemoteSetupFailedError: If no complete bundle could be obtained
        """
        ...

    async def is_local_synced(self) -> bool:
        """Whether local and remote bundles match. True when either is unavailable."""
        ...

    @property
    def is_committed(self) -> bool:
        """Whether use_local or use_remote has succeeded."""
        ...

    def get_credentials(self) -> AndroidCredentials | IosCredentials:
        """Return the committed bundle.

        Raises:
            NoCredentialsCommittedError: If no source was committed
        """
        ...
