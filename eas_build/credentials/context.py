"""Per-build context shared by the credentials providers of one build."""

from dataclasses import dataclass
from pathlib import Path

from eas_build.credentials.remote import RemoteCredentialStore


@dataclass(frozen=True)
class CredentialsContext:
    """Everything a credentials provider needs from the outside world.

    Constructed once by the caller and passed into each provider, so
    providers can be exercised with fake stores in tests.

    Attributes:
        project_dir: Project root containing credentials.json
        account_name: Account owning the project on the remote store
        project_name: Project slug on the remote store
        remote: Remote credential store client
    """

    project_dir: Path
    account_name: str
    project_name: str
    remote: RemoteCredentialStore

    @property
    def project_full_name(self) -> str:
        return f"@{self.account_name}/{self.project_name}"
