"""
Signing credential bundles.

Binary material (keystores, certificates, provisioning profiles) is carried
as base64 text and never interpreted. A bundle is valid only when every
required field is non-empty.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AndroidKeystore:
    """Android upload keystore and the secrets needed to use it."""

    keystore: str
    """Base64 encoded keystore file."""

    keystore_password: str
    key_alias: str
    key_password: str

    @property
    def is_valid(self) -> bool:
        return bool(self.keystore and self.keystore_password and self.key_alias and self.key_password)


@dataclass(frozen=True)
class AndroidCredentials:
    """Credentials bundle for an Android build."""

    keystore: AndroidKeystore

    @property
    def is_valid(self) -> bool:
        return self.keystore.is_valid


@dataclass(frozen=True)
class IosDistributionCertificate:
    """iOS distribution certificate (p12) and its password."""

    cert_p12: str
    """Base64 encoded p12 file."""

    cert_password: str
    id: str | None = None
    """Identifier in the remote store, when the certificate came from there."""

    @property
    def is_valid(self) -> bool:
        return bool(self.cert_p12 and self.cert_password)


@dataclass(frozen=True)
class IosProvisioningProfile:
    """iOS provisioning profile as stored remotely."""

    provisioning_profile: str
    """Base64 encoded .mobileprovision file."""

    id: str | None = None


@dataclass(frozen=True)
class IosCredentials:
    """Credentials bundle for an iOS build."""

    provisioning_profile: str
    distribution_certificate: IosDistributionCertificate

    @property
    def is_valid(self) -> bool:
        return bool(self.provisioning_profile and self.distribution_certificate.is_valid)
