"""Credential source reconciliation.

Decides which source supplies the signing credentials of one platform
build and commits the provider to it:

- ``local`` / ``remote``: use that source, no existence checks, no fallback.
- ``auto`` with the managed workflow: local when present, otherwise remote.
- ``auto`` with the generic workflow:
    - both present and different: ask the user which one to use;
    - both present and identical: commit nothing, the build service keeps
      using what it already stores;
    - only one present: use it;
    - neither present: offer to generate remote credentials, abort otherwise.
"""

import structlog

from eas_build.credentials.provider import CredentialsProvider
from eas_build.enums import CredentialsSource, Workflow
from eas_build.exceptions import CredentialsNotConfiguredError
from eas_build.utils.prompts import Prompter

log = structlog.get_logger(__name__)

SOURCE_CHOICES = [
    ("Local credentials.json", CredentialsSource.LOCAL.value),
    ("Credentials stored on the remote build service", CredentialsSource.REMOTE.value),
]


async def ensure_credentials(
    provider: CredentialsProvider,
    credentials_source: CredentialsSource,
    workflow: Workflow,
    prompter: Prompter,
) -> None:
    """Commit ``provider`` to the credential source selected by the policy.

    Args:
        provider: Credentials provider for one platform of one build
        credentials_source: Resolved credentials source preference
        workflow: Workflow of the preset being built
        prompter: Prompt collaborator for the ambiguous cases

    Raises:
        CredentialsNotConfiguredError: If nothing is configured and the user
            declined to generate new credentials
    """
    platform = str(provider.platform)
    log.debug("ensure_credentials", platform=platform, source=str(credentials_source), workflow=str(workflow))

    if credentials_source == CredentialsSource.LOCAL:
        await provider.use_local()
    elif credentials_source == CredentialsSource.REMOTE:
        await provider.use_remote()
    elif workflow == Workflow.MANAGED:
        if await provider.has_local():
            await provider.use_local()
        else:
            await provider.use_remote()
    elif workflow == Workflow.GENERIC:
        await _ensure_generic_credentials(provider, prompter, platform)


async def _ensure_generic_credentials(provider: CredentialsProvider, prompter: Prompter, platform: str) -> None:
    has_local = await provider.has_local()
    has_remote = await provider.has_remote()

    if has_local and has_remote:
        if await provider.is_local_synced():
            log.info("credentials_in_sync", platform=platform)
            return
        log.warning(
            "credentials_drift",
            platform=platform,
            detail="Content of credentials.json is not the same as credentials on the remote build service",
        )
        selected = await prompter.select("Which credentials do you want to use for this build?", SOURCE_CHOICES)
        if selected == CredentialsSource.LOCAL.value:
            await provider.use_local()
        else:
            await provider.use_remote()
    elif has_local:
        await provider.use_local()
    elif has_remote:
        await provider.use_remote()
    else:
        log.warning(
            "credentials_not_configured",
            platform=platform,
            detail="Credentials for this app are not configured and there is no credentials.json in the project",
        )
        if await prompter.confirm("Do you want to generate new credentials?"):
            await provider.use_remote()
        else:
            raise CredentialsNotConfiguredError(
                "Aborting build process, credentials are not configured", platform=platform
            )
