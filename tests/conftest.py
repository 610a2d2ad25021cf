"""Pytest configuration and shared fixtures."""

import base64
import json
from pathlib import Path
from typing import Any

import pytest

from eas_build.credentials.context import CredentialsContext
from eas_build.credentials.models import AndroidKeystore, IosDistributionCertificate, IosProvisioningProfile

KEYSTORE_BYTES = b"\xfe\xed\xfe\xed keystore"
CERT_BYTES = b"0\x82 p12 certificate"
PROFILE_BYTES = b"<plist>profile</plist>"


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


class FakeRemoteStore:
    """In-memory remote credential store.

    ``ensure_*`` calls store the ``generated_*`` material when nothing exists
    yet and record every call in ``calls``.
    """

    def __init__(
        self,
        keystore: AndroidKeystore | None = None,
        dist_cert: IosDistributionCertificate | None = None,
        profile: IosProvisioningProfile | None = None,
    ) -> None:
        self.keystore = keystore
        self.dist_cert = dist_cert
        self.profile = profile
        self.generated_keystore: AndroidKeystore | None = AndroidKeystore(
            keystore=b64(b"generated"), keystore_password="gen-pass", key_alias="gen-alias", key_password="gen-key"
        )
        self.generated_dist_cert: IosDistributionCertificate | None = IosDistributionCertificate(
            cert_p12=b64(b"generated-cert"), cert_password="gen-cert-pass", id="cert-1"
        )
        self.generated_profile: IosProvisioningProfile | None = IosProvisioningProfile(
            provisioning_profile=b64(b"generated-profile"), id="profile-1"
        )
        self.fetch_error: Exception | None = None
        self.calls: list[tuple[Any, ...]] = []

    async def fetch_android_keystore(self, full_name: str) -> AndroidKeystore | None:
        self.calls.append(("fetch_android_keystore", full_name))
        if self.fetch_error:
            raise self.fetch_error
        return self.keystore

    async def fetch_ios_distribution_certificate(
        self, full_name: str, bundle_identifier: str
    ) -> IosDistributionCertificate | None:
        self.calls.append(("fetch_ios_distribution_certificate", full_name, bundle_identifier))
        if self.fetch_error:
            raise self.fetch_error
        return self.dist_cert

    async def fetch_ios_provisioning_profile(
        self, full_name: str, bundle_identifier: str
    ) -> IosProvisioningProfile | None:
        self.calls.append(("fetch_ios_provisioning_profile", full_name, bundle_identifier))
        if self.fetch_error:
            raise self.fetch_error
        return self.profile

    async def ensure_android_keystore(self, full_name: str) -> AndroidKeystore | None:
        self.calls.append(("ensure_android_keystore", full_name))
        if self.keystore is None:
            self.keystore = self.generated_keystore
        return self.keystore

    async def ensure_ios_distribution_certificate(
        self, full_name: str, bundle_identifier: str
    ) -> IosDistributionCertificate | None:
        self.calls.append(("ensure_ios_distribution_certificate", full_name, bundle_identifier))
        if self.dist_cert is None:
            self.dist_cert = self.generated_dist_cert
        return self.dist_cert

    async def ensure_ios_provisioning_profile(
        self,
        full_name: str,
        bundle_identifier: str,
        distribution_certificate: IosDistributionCertificate,
    ) -> IosProvisioningProfile | None:
        self.calls.append(("ensure_ios_provisioning_profile", full_name, bundle_identifier))
        if self.profile is None:
            self.profile = self.generated_profile
        return self.profile

    def called(self, name: str) -> bool:
        return any(call[0] == name for call in self.calls)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Empty project directory."""
    directory = tmp_path / "project"
    directory.mkdir()
    return directory


@pytest.fixture
def write_eas_json(project_dir: Path):
    """Write eas.json into the project directory."""

    def _write(content: Any) -> Path:
        path = project_dir / "eas.json"
        path.write_text(content if isinstance(content, str) else json.dumps(content))
        return path

    return _write


@pytest.fixture
def write_credentials_json(project_dir: Path):
    """Write credentials.json plus the keystore/certificate/profile files it references."""

    def _write(content: dict[str, Any] | None = None, with_files: bool = True) -> Path:
        if content is None:
            content = {
                "android": {
                    "keystore": {
                        "keystorePath": "keystores/release.keystore",
                        "keystorePassword": "store-pass",
                        "keyAlias": "upload",
                        "keyPassword": "key-pass",
                    }
                },
                "ios": {
                    "provisioningProfilePath": "ios/profile.mobileprovision",
                    "distributionCertificate": {"path": "ios/dist.p12", "password": "cert-pass"},
                },
            }
        if with_files:
            for relative, data in (
                ("keystores/release.keystore", KEYSTORE_BYTES),
                ("ios/profile.mobileprovision", PROFILE_BYTES),
                ("ios/dist.p12", CERT_BYTES),
            ):
                path = project_dir / relative
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_bytes(data)
        path = project_dir / "credentials.json"
        path.write_text(json.dumps(content))
        return path

    return _write


@pytest.fixture
def local_keystore() -> AndroidKeystore:
    """Keystore matching the default credentials.json written by write_credentials_json."""
    return AndroidKeystore(
        keystore=b64(KEYSTORE_BYTES),
        keystore_password="store-pass",
        key_alias="upload",
        key_password="key-pass",
    )


@pytest.fixture
def local_dist_cert() -> IosDistributionCertificate:
    """Distribution certificate matching the default credentials.json."""
    return IosDistributionCertificate(cert_p12=b64(CERT_BYTES), cert_password="cert-pass", id="cert-local")


@pytest.fixture
def local_profile() -> IosProvisioningProfile:
    """Provisioning profile matching the default credentials.json."""
    return IosProvisioningProfile(provisioning_profile=b64(PROFILE_BYTES), id="profile-local")


@pytest.fixture
def remote_store() -> FakeRemoteStore:
    """Remote store with no credentials."""
    return FakeRemoteStore()


@pytest.fixture
def credentials_ctx(project_dir: Path, remote_store: FakeRemoteStore) -> CredentialsContext:
    """Credentials context for project @jane/app."""
    return CredentialsContext(
        project_dir=project_dir,
        account_name="jane",
        project_name="app",
        remote=remote_store,
    )
