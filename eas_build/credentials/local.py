"""
Project-local credentials stored in credentials.json.

The file points at keystore / certificate / provisioning profile files and
holds the passwords needed to use them. Paths are resolved relative to the
project directory. Every read re-parses and re-validates the file.

Example credentials.json::

    {
      "android": {
        "keystore": {
          "keystorePath": "android/keystores/release.keystore",
          "keystorePassword": "...",
          "keyAlias": "upload",
          "keyPassword": "..."
        }
      },
      "ios": {
        "provisioningProfilePath": "ios/profile.mobileprovision",
        "distributionCertificate": {"path": "ios/dist.p12", "password": "..."}
      }
    }
"""

from __future__ import annotations

import base64
import json
import os
from pathlib import Path
from typing import Annotated

import aiofiles
import structlog
from pydantic import BaseModel, ConfigDict, StringConstraints, ValidationError
from pydantic.alias_generators import to_camel

from eas_build.config.presets import format_violations
from eas_build.credentials.models import AndroidCredentials, AndroidKeystore, IosCredentials, IosDistributionCertificate
from eas_build.exceptions import LocalCredentialsError

log = structlog.get_logger(__name__)

CREDENTIALS_JSON_FILENAME = "credentials.json"

NonEmptyStr = Annotated[str, StringConstraints(min_length=1, strict=True)]


class _CredentialsJsonModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class KeystoreEntry(_CredentialsJsonModel):
    keystore_path: NonEmptyStr
    keystore_password: NonEmptyStr
    key_alias: NonEmptyStr
    key_password: NonEmptyStr


class AndroidEntry(_CredentialsJsonModel):
    keystore: KeystoreEntry


class DistributionCertificateEntry(_CredentialsJsonModel):
    path: NonEmptyStr
    password: NonEmptyStr


class IosEntry(_CredentialsJsonModel):
    provisioning_profile_path: NonEmptyStr
    distribution_certificate: DistributionCertificateEntry


class CredentialsJson(_CredentialsJsonModel):
    """Schema of credentials.json."""

    android: AndroidEntry | None = None
    ios: IosEntry | None = None


def credentials_json_path(project_dir: Path | str) -> Path:
    return Path(project_dir) / CREDENTIALS_JSON_FILENAME


def exists(project_dir: Path | str) -> bool:
    """Check whether credentials.json is present. Never raises."""
    return os.path.isfile(credentials_json_path(project_dir))


async def read_android(project_dir: Path | str) -> AndroidCredentials:
    """Read Android credentials from credentials.json.

    Args:
        project_dir: Project root containing credentials.json

    Returns:
        Android credentials with the keystore base64 encoded

    Raises:
        LocalCredentialsError: If the file, its android section or the
            referenced keystore cannot be used
    """
    project_dir = Path(project_dir)
    credentials_json = await read(project_dir)
    if credentials_json.android is None:
        raise LocalCredentialsError(
            f"Android credentials are missing from {CREDENTIALS_JSON_FILENAME}",
            path=credentials_json_path(project_dir),
            platform="android",
        )

    keystore_info = credentials_json.android.keystore
    return AndroidCredentials(
        keystore=AndroidKeystore(
            keystore=await _read_base64(project_dir, keystore_info.keystore_path),
            keystore_password=keystore_info.keystore_password,
            key_alias=keystore_info.key_alias,
            key_password=keystore_info.key_password,
        )
    )


async def read_ios(project_dir: Path | str) -> IosCredentials:
    """Read iOS credentials from credentials.json.

    Args:
        project_dir: Project root containing credentials.json

    Returns:
        iOS credentials with profile and certificate base64 encoded

    Raises:
        LocalCredentialsError: If the file, its ios section or a referenced
            file cannot be used
    """
    project_dir = Path(project_dir)
    credentials_json = await read(project_dir)
    if credentials_json.ios is None:
        raise LocalCredentialsError(
            f"iOS credentials are missing from {CREDENTIALS_JSON_FILENAME}",
            path=credentials_json_path(project_dir),
            platform="ios",
        )

    ios = credentials_json.ios
    return IosCredentials(
        provisioning_profile=await _read_base64(project_dir, ios.provisioning_profile_path),
        distribution_certificate=IosDistributionCertificate(
            cert_p12=await _read_base64(project_dir, ios.distribution_certificate.path),
            cert_password=ios.distribution_certificate.password,
        ),
    )


async def read(project_dir: Path | str) -> CredentialsJson:
    """Parse and validate credentials.json.

    Raises:
        LocalCredentialsError: If the file is missing, not JSON or invalid
    """
    path = credentials_json_path(project_dir)
    try:
        async with aiofiles.open(path, "rb") as f:
            contents = await f.read()
    except FileNotFoundError as e:
        raise LocalCredentialsError(
            f"{CREDENTIALS_JSON_FILENAME} must exist in the project root directory",
            path=path,
        ) from e

    try:
        # UnicodeDecodeError is a ValueError
        raw = json.loads(contents.decode("utf-8"))
    except ValueError as e:
        raise LocalCredentialsError(f"{path} is not valid JSON: {e}", path=path) from e

    try:
        return CredentialsJson.model_validate(raw)
    except ValidationError as e:
        raise LocalCredentialsError(
            f"{path} is not valid [{'; '.join(format_violations(e))}]",
            path=path,
        ) from e


async def _read_base64(project_dir: Path, relative_path: str) -> str:
    path = project_dir / relative_path
    try:
        async with aiofiles.open(path, "rb") as f:
            data = await f.read()
    except FileNotFoundError as e:
        raise LocalCredentialsError(
            f"File {relative_path} referenced in {CREDENTIALS_JSON_FILENAME} does not exist",
            path=path,
        ) from e

    log.debug("local_credentials_file_read", path=str(path), size=len(data))
    return base64.b64encode(data).decode("ascii")
