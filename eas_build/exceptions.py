"""Custom exception hierarchy for eas-build.

This module defines the structured exception hierarchy used by preset
resolution and credential reconciliation, so callers can tell user errors
(bad configuration, declined prompts) from contract violations.

Exception Hierarchy:
    EasBuildError (base)
    ├── ConfigurationError
    │   ├── ConfigFileError
    │   ├── SchemaValidationError
    │   │   └── PresetInvalidError
    │   ├── PresetNotFoundError
    │   └── UnknownWorkflowError
    ├── CredentialError
    │   ├── LocalCredentialsError
    │   ├── InvalidLocalCredentialsError
    │   ├── RemoteSetupFailedError
    │   ├── CredentialsNotConfiguredError
    │   └── NoCredentialsCommittedError
    ├── PromptError
    └── ExternalServiceError

Example Usage:
    >>> from eas_build.exceptions import ConfigFileError
    >>> try:
    ...     raw = path.read_text()
    ... except OSError as e:
    ...     raise ConfigFileError(path, e) from e
"""

from collections.abc import Sequence
from pathlib import Path


class EasBuildError(Exception):
    """Base exception for all eas-build errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(EasBuildError):
    """Configuration-related errors.

    Raised when eas.json cannot be read, does not match its schema, or does
    not contain the requested preset.
    """

    pass


class ConfigFileError(ConfigurationError):
    """The configuration file is missing, unreadable or not valid JSON.

    Attributes:
        path: Path of the offending file
        cause: Underlying exception
    """

    def __init__(self, path: Path | str, cause: Exception) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Cannot load {self.path}: {cause}")


class SchemaValidationError(ConfigurationError):
    """An object failed schema validation.

    Carries every field-level violation, never only the first one.

    Attributes:
        path: Object path that failed (e.g. "eas.json" or "android.release")
        violations: One entry per violated field constraint
    """

    def __init__(self, path: str, violations: Sequence[str], source: str = "eas.json") -> None:
        """Initialize exception.

        Args:
            path: Object path of the invalid object
            violations: Field-level violation messages
            source: File the object was read from
        """
        self.path = path
        self.violations = list(violations)
        self.source = source

        if path == source:
            prefix = f"{source} is not valid"
        else:
            prefix = f'Object "{path}" in {source} is not valid'
        super().__init__(f"{prefix} [{'; '.join(self.violations)}]")


class PresetInvalidError(SchemaValidationError):
    """A preset body does not match the schema for its platform and workflow."""

    def __init__(self, platform: str, preset_name: str, violations: Sequence[str]) -> None:
        self.platform = platform
        self.preset_name = preset_name
        super().__init__(f"{platform}.{preset_name}", violations)


class PresetNotFoundError(ConfigurationError):
    """The requested preset does not exist for a requested platform."""

    def __init__(self, preset_name: str, platform: str) -> None:
        self.preset_name = preset_name
        self.platform = platform
        super().__init__(f"There is no preset named {preset_name} for platform {platform}")


class UnknownWorkflowError(ConfigurationError):
    """No preset schema is registered for a (platform, workflow) pair.

    The top-level schema already restricts workflow values, so reaching this
    indicates an internal inconsistency.
    """

    def __init__(self, platform: str, workflow: str) -> None:
        self.platform = platform
        self.workflow = workflow
        super().__init__(f"Invalid workflow {workflow!r} for platform {platform}")


class CredentialError(EasBuildError):
    """Credential-related errors.

    Base class for failures while loading or reconciling signing credentials.

    Attributes:
        message: Human-readable error description
        platform: Platform whose credentials failed, if known
        suggestion: Optional suggestion for resolution
    """

    def __init__(
        self,
        message: str,
        platform: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            platform: Platform whose credentials failed
            suggestion: Optional suggestion for resolution
        """
        self.platform = platform
        self.suggestion = suggestion

        full_message = message
        if platform:
            full_message = f"{message} (platform: {platform})"
        if suggestion:
            full_message = f"{full_message}\nSuggestion: {suggestion}"

        super().__init__(full_message)
        # Preserve original message (super sets self.message to full_message)
        self.message = message


class LocalCredentialsError(CredentialError):
    """credentials.json or a file it references cannot be used.

    Attributes:
        path: File that caused the failure
    """

    def __init__(
        self,
        message: str,
        path: Path | str,
        platform: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        self.path = Path(path)
        super().__init__(message, platform=platform, suggestion=suggestion)


class InvalidLocalCredentialsError(CredentialError):
    """Local credentials were read but are incomplete."""

    pass


class RemoteSetupFailedError(CredentialError):
    """The remote setup flow did not produce a complete credentials bundle."""

    pass


class CredentialsNotConfiguredError(CredentialError):
    """No credentials are configured and the user declined to generate them."""

    pass


class NoCredentialsCommittedError(CredentialError):
    """Credentials were requested before a source was committed.

    Indicates a caller bug, not a user error.
    """

    pass


class PromptError(EasBuildError):
    """An interactive answer was required but prompting is not possible."""

    pass


class ExternalServiceError(EasBuildError):
    """Remote credential store communication errors.

    Attributes:
        status_code: HTTP status code (if applicable)
        response_text: Response body text (if applicable)
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_text: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            status_code: HTTP status code (if applicable)
            response_text: Response body text (if applicable)
        """
        self.status_code = status_code
        self.response_text = response_text

        full_message = message
        if status_code:
            full_message = f"{message} (HTTP {status_code})"

        super().__init__(full_message)
        self.message = message
