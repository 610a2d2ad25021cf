"""Remote, account-scoped credential store.

The store is an external collaborator. ``RemoteCredentialStore`` is the
interface the providers consume; ``HttpRemoteCredentialStore`` implements it
over HTTP.

Fetch operations return ``None`` when the material does not exist. The
``ensure_*`` operations are the setup flows: they make sure the material
exists remotely (generating it when needed) and return it, or raise.

``full_name`` is always ``@{account_name}/{project_name}``.
"""

from __future__ import annotations

from typing import Any, Protocol, TypeVar
from urllib.parse import quote

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError
from pydantic.alias_generators import to_camel

from eas_build.config.presets import format_violations
from eas_build.credentials.models import AndroidKeystore, IosDistributionCertificate, IosProvisioningProfile
from eas_build.exceptions import ExternalServiceError
from eas_build.utils.retry import async_retry

log = structlog.get_logger(__name__)


class _StorePayload(BaseModel):
    """Credential store response body. Missing or null fields read as empty."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class KeystorePayload(_StorePayload):
    keystore: StrictStr | None = None
    keystore_password: StrictStr | None = None
    key_alias: StrictStr | None = None
    key_password: StrictStr | None = None


class DistributionCertificatePayload(_StorePayload):
    id: StrictStr | None = None
    cert_p12: StrictStr | None = None
    cert_password: StrictStr | None = None


class ProvisioningProfilePayload(_StorePayload):
    id: StrictStr | None = None
    provisioning_profile: StrictStr | None = None


_PayloadT = TypeVar("_PayloadT", bound=_StorePayload)


class RemoteCredentialStore(Protocol):
    """Protocol for the remote credential store."""

    async def fetch_android_keystore(self, full_name: str) -> AndroidKeystore | None:
        """Return the project's Android keystore, or None if there is none."""
        ...

    async def fetch_ios_distribution_certificate(
        self, full_name: str, bundle_identifier: str
    ) -> IosDistributionCertificate | None:
        """Return the distribution certificate for the app, or None."""
        ...

    async def fetch_ios_provisioning_profile(
        self, full_name: str, bundle_identifier: str
    ) -> IosProvisioningProfile | None:
        """Return the provisioning profile for the app, or None."""
        ...

    async def ensure_android_keystore(self, full_name: str) -> AndroidKeystore:
        """Make sure a keystore exists remotely and return it."""
        ...

    async def ensure_ios_distribution_certificate(
        self, full_name: str, bundle_identifier: str
    ) -> IosDistributionCertificate:
        """Make sure a distribution certificate exists remotely and return it."""
        ...

    async def ensure_ios_provisioning_profile(
        self,
        full_name: str,
        bundle_identifier: str,
        distribution_certificate: IosDistributionCertificate,
    ) -> IosProvisioningProfile:
        """Make sure a provisioning profile signed by the certificate exists."""
        ...


_retry_transport = async_retry(max_attempts=3, backoff_factor=2.0, exceptions=(httpx.TransportError,))


class HttpRemoteCredentialStore:
    """Remote credential store backed by a JSON HTTP API.

    Endpoints, relative to ``base_url``::

        GET|POST /projects/{full_name}/credentials/android/keystore
        GET|POST /projects/{full_name}/credentials/ios/{bundle_id}/distribution-certificate
        GET|POST /projects/{full_name}/credentials/ios/{bundle_id}/provisioning-profile

    GET returns the stored material (404 when absent); POST creates it when
    missing and returns it.

    Example:
        >>> async with HttpRemoteCredentialStore("https://api.example.com/v2", token) as store:
        ...     keystore = await store.fetch_android_keystore("@jane/app")
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the store client.

        Args:
            base_url: API base URL
            token: Bearer token for the account
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token.strip()}"
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HttpRemoteCredentialStore:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def fetch_android_keystore(self, full_name: str) -> AndroidKeystore | None:
        data = await self._get(self._android_path(full_name))
        return self._parse_keystore(data) if data is not None else None

    async def fetch_ios_distribution_certificate(
        self, full_name: str, bundle_identifier: str
    ) -> IosDistributionCertificate | None:
        data = await self._get(self._ios_path(full_name, bundle_identifier, "distribution-certificate"))
        return self._parse_distribution_certificate(data) if data is not None else None

    async def fetch_ios_provisioning_profile(
        self, full_name: str, bundle_identifier: str
    ) -> IosProvisioningProfile | None:
        data = await self._get(self._ios_path(full_name, bundle_identifier, "provisioning-profile"))
        return self._parse_provisioning_profile(data) if data is not None else None

    async def ensure_android_keystore(self, full_name: str) -> AndroidKeystore:
        log.info("remote_setup", kind="android_keystore", project=full_name)
        return self._parse_keystore(await self._post(self._android_path(full_name)))

    async def ensure_ios_distribution_certificate(
        self, full_name: str, bundle_identifier: str
    ) -> IosDistributionCertificate:
        log.info("remote_setup", kind="ios_distribution_certificate", project=full_name, bundle=bundle_identifier)
        data = await self._post(self._ios_path(full_name, bundle_identifier, "distribution-certificate"))
        return self._parse_distribution_certificate(data)

    async def ensure_ios_provisioning_profile(
        self,
        full_name: str,
        bundle_identifier: str,
        distribution_certificate: IosDistributionCertificate,
    ) -> IosProvisioningProfile:
        log.info("remote_setup", kind="ios_provisioning_profile", project=full_name, bundle=bundle_identifier)
        data = await self._post(
            self._ios_path(full_name, bundle_identifier, "provisioning-profile"),
            json={"distributionCertificateId": distribution_certificate.id},
        )
        return self._parse_provisioning_profile(data)

    @staticmethod
    def _android_path(full_name: str) -> str:
        return f"/projects/{quote(full_name, safe='')}/credentials/android/keystore"

    @staticmethod
    def _ios_path(full_name: str, bundle_identifier: str, kind: str) -> str:
        return f"/projects/{quote(full_name, safe='')}/credentials/ios/{quote(bundle_identifier, safe='')}/{kind}"

    @_retry_transport
    async def _get(self, path: str) -> dict[str, Any] | None:
        response = await self._client.get(path)
        if response.status_code == 404:
            return None
        return self._json(response)

    @_retry_transport
    async def _post(self, path: str, json: dict[str, Any] | None = None) -> dict[str, Any]:
        response = await self._client.post(path, json=json or {})
        return self._json(response)

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ExternalServiceError(
                f"Credential store request failed: {response.request.method} {response.request.url.path}",
                status_code=response.status_code,
                response_text=response.text,
            ) from e

        try:
            data = response.json()
        except ValueError as e:
            raise ExternalServiceError(
                "Credential store returned a response that is not valid JSON",
                status_code=response.status_code,
                response_text=response.text,
            ) from e
        if not isinstance(data, dict):
            raise ExternalServiceError("Credential store returned an unexpected payload")
        return data

    @staticmethod
    def _parse_keystore(data: dict[str, Any]) -> AndroidKeystore:
        payload = _validate_payload(KeystorePayload, data)
        return AndroidKeystore(
            keystore=payload.keystore or "",
            keystore_password=payload.keystore_password or "",
            key_alias=payload.key_alias or "",
            key_password=payload.key_password or "",
        )

    @staticmethod
    def _parse_distribution_certificate(data: dict[str, Any]) -> IosDistributionCertificate:
        payload = _validate_payload(DistributionCertificatePayload, data)
        return IosDistributionCertificate(
            cert_p12=payload.cert_p12 or "",
            cert_password=payload.cert_password or "",
            id=payload.id,
        )

    @staticmethod
    def _parse_provisioning_profile(data: dict[str, Any]) -> IosProvisioningProfile:
        payload = _validate_payload(ProvisioningProfilePayload, data)
        return IosProvisioningProfile(
            provisioning_profile=payload.provisioning_profile or "",
            id=payload.id,
        )


def _validate_payload(model: type[_PayloadT], data: dict[str, Any]) -> _PayloadT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ExternalServiceError(
            f"Credential store returned an invalid {model.__name__} [{'; '.join(format_violations(e))}]"
        ) from e
