"""Signing credentials for Android and iOS builds.

This package provides:
- Credential bundle models (keystores, certificates, provisioning profiles)
- The project-local credentials.json store
- The remote credential store interface and its HTTP client
- Per-platform credentials providers

Example usage:

    from eas_build.credentials import AndroidCredentialsProvider, CredentialsContext

    ctx = CredentialsContext(project_dir, "jane", "app", remote=store)
    provider = AndroidCredentialsProvider(ctx)
    if await provider.has_local():
        await provider.use_local()
"""

from .android import AndroidCredentialsProvider
from .context import CredentialsContext
from .ios import IosCredentialsProvider
from .models import (
    AndroidCredentials,
    AndroidKeystore,
    IosCredentials,
    IosDistributionCertificate,
    IosProvisioningProfile,
)
from .provider import CredentialsProvider
from .remote import HttpRemoteCredentialStore, RemoteCredentialStore

__all__ = [
    # Providers
    "CredentialsProvider",
    "AndroidCredentialsProvider",
    "IosCredentialsProvider",
    "CredentialsContext",
    # Models
    "AndroidCredentials",
    "AndroidKeystore",
    "IosCredentials",
    "IosDistributionCertificate",
    "IosProvisioningProfile",
    # Remote store
    "RemoteCredentialStore",
    "HttpRemoteCredentialStore",
]
