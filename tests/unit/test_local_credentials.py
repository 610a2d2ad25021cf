"""Tests for eas_build/credentials/local.py (credentials.json)."""

import base64

import pytest

from eas_build.credentials import local
from eas_build.exceptions import LocalCredentialsError


class TestExists:
    """Test credentials.json detection."""

    def test_absent(self, project_dir):
        """No file means False, not an error."""
        assert local.exists(project_dir) is False

    def test_present(self, project_dir, write_credentials_json):
        """An existing file is detected."""
        write_credentials_json()
        assert local.exists(project_dir) is True

    def test_missing_project_dir(self, tmp_path):
        """A missing project directory is not an error."""
        assert local.exists(tmp_path / "nope") is False


class TestReadAndroid:
    """Test reading Android credentials."""

    @pytest.mark.asyncio
    async def test_reads_and_encodes_keystore(self, project_dir, write_credentials_json, local_keystore):
        """The keystore file is read relative to the project and base64 encoded."""
        write_credentials_json()

        credentials = await local.read_android(project_dir)

        assert credentials.keystore == local_keystore
        assert credentials.is_valid

    @pytest.mark.asyncio
    async def test_accepts_path_argument_as_string(self, project_dir, write_credentials_json):
        """Project dir may be given as a string."""
        write_credentials_json()

        credentials = await local.read_android(str(project_dir))

        assert base64.b64decode(credentials.keystore.keystore).startswith(b"\xfe\xed")

    @pytest.mark.asyncio
    async def test_missing_android_section(self, project_dir, write_credentials_json):
        """A file without android credentials raises."""
        write_credentials_json(
            {
                "ios": {
                    "provisioningProfilePath": "ios/profile.mobileprovision",
                    "distributionCertificate": {"path": "ios/dist.p12", "password": "pw"},
                }
            }
        )

        with pytest.raises(LocalCredentialsError, match="Android credentials are missing") as exc_info:
            await local.read_android(project_dir)

        assert exc_info.value.platform == "android"
        assert exc_info.value.path == project_dir / "credentials.json"

    @pytest.mark.asyncio
    async def test_missing_keystore_file(self, project_dir, write_credentials_json):
        """A referenced file that does not exist is a hard failure."""
        write_credentials_json(with_files=False)

        with pytest.raises(LocalCredentialsError, match="keystores/release.keystore") as exc_info:
            await local.read_android(project_dir)

        assert exc_info.value.path == project_dir / "keystores/release.keystore"

    @pytest.mark.asyncio
    async def test_missing_file(self, project_dir):
        """Reading without credentials.json raises."""
        with pytest.raises(LocalCredentialsError, match="must exist"):
            await local.read_android(project_dir)

    @pytest.mark.asyncio
    async def test_invalid_json(self, project_dir):
        """Unparsable content names the file."""
        (project_dir / "credentials.json").write_text("{not json")

        with pytest.raises(LocalCredentialsError, match="credentials.json is not valid JSON"):
            await local.read_android(project_dir)

    @pytest.mark.asyncio
    async def test_invalid_utf8(self, project_dir):
        """Bytes that are not UTF-8 are reported as unparsable content of the file."""
        (project_dir / "credentials.json").write_bytes(b'{"android": "\xff\xfe"}')

        with pytest.raises(LocalCredentialsError, match="credentials.json is not valid JSON") as exc_info:
            await local.read_android(project_dir)

        assert exc_info.value.path == project_dir / "credentials.json"
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    @pytest.mark.asyncio
    async def test_schema_violations_are_listed(self, project_dir, write_credentials_json):
        """Every missing or empty field is reported."""
        write_credentials_json({"android": {"keystore": {"keystorePath": "k.jks", "keystorePassword": ""}}})

        with pytest.raises(LocalCredentialsError) as exc_info:
            await local.read_android(project_dir)

        message = str(exc_info.value)
        for field in ("keystorePassword", "keyAlias", "keyPassword"):
            assert f"android.keystore.{field}" in message

    @pytest.mark.asyncio
    async def test_rereads_on_every_call(self, project_dir, write_credentials_json):
        """Changes to the file are visible on the next read."""
        write_credentials_json()
        first = await local.read_android(project_dir)

        (project_dir / "keystores/release.keystore").write_bytes(b"rotated")
        second = await local.read_android(project_dir)

        assert first.keystore.keystore != second.keystore.keystore
        assert second.keystore.keystore == base64.b64encode(b"rotated").decode()


class TestReadIos:
    """Test reading iOS credentials."""

    @pytest.mark.asyncio
    async def test_reads_profile_and_certificate(
        self, project_dir, write_credentials_json, local_dist_cert, local_profile
    ):
        """Profile and certificate are base64 encoded, password copied."""
        write_credentials_json()

        credentials = await local.read_ios(project_dir)

        assert credentials.provisioning_profile == local_profile.provisioning_profile
        assert credentials.distribution_certificate.cert_p12 == local_dist_cert.cert_p12
        assert credentials.distribution_certificate.cert_password == "cert-pass"
        assert credentials.is_valid

    @pytest.mark.asyncio
    async def test_missing_ios_section(self, project_dir, write_credentials_json):
        """A file without ios credentials raises."""
        write_credentials_json(
            {
                "android": {
                    "keystore": {
                        "keystorePath": "keystores/release.keystore",
                        "keystorePassword": "a",
                        "keyAlias": "b",
                        "keyPassword": "c",
                    }
                }
            }
        )

        with pytest.raises(LocalCredentialsError, match="iOS credentials are missing"):
            await local.read_ios(project_dir)

    @pytest.mark.asyncio
    async def test_distribution_certificate_required(self, project_dir, write_credentials_json):
        """distributionCertificate is required in the ios section."""
        write_credentials_json({"ios": {"provisioningProfilePath": "ios/profile.mobileprovision"}})

        with pytest.raises(LocalCredentialsError, match="ios.distributionCertificate"):
            await local.read_ios(project_dir)

    @pytest.mark.asyncio
    async def test_missing_certificate_file(self, project_dir, write_credentials_json):
        """A missing certificate file is a hard failure."""
        write_credentials_json()
        (project_dir / "ios/dist.p12").unlink()

        with pytest.raises(LocalCredentialsError, match="ios/dist.p12"):
            await local.read_ios(project_dir)

    @pytest.mark.asyncio
    async def test_empty_certificate_yields_invalid_bundle(self, project_dir, write_credentials_json):
        """An empty file reads fine but the bundle is not valid."""
        write_credentials_json()
        (project_dir / "ios/dist.p12").write_bytes(b"")

        credentials = await local.read_ios(project_dir)

        assert credentials.distribution_certificate.cert_p12 == ""
        assert credentials.is_valid is False
