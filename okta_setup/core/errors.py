"""
Domain-specific exceptions for Okta environment setup.

I/O failures (``OSError``) and remote-call failures (``httpx.HTTPError``)
are not wrapped; they propagate to the caller unchanged. The CLI layer is the
only place that turns any of these into user-facing output.
"""

from typing import Any


class OktaSetupError(Exception):
    """Base exception for all setup domain errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ClientConfigurationError(OktaSetupError):
    """
    Raised when the local Okta client configuration cannot be used.

    Examples:
    - okta.yaml is not valid YAML
    - orgUrl is missing, not https, or still a placeholder
    - API token is missing or still a placeholder
    """

    pass


class UnsupportedApplicationTypeError(OktaSetupError):
    """
    Raised when an OIDC application type has no creation operation.

    This is a caller defect, not a recoverable condition.
    """

    pass


class PromptError(OktaSetupError):
    """
    Raised when required user input is missing.

    Examples:
    - Batch mode run without the registration fields on the command line
    - Empty answer to a required prompt
    """

    pass


# CLI exit code mapping
ERROR_EXIT_CODES = {
    ClientConfigurationError: 2,
    UnsupportedApplicationTypeError: 3,
    PromptError: 4,
}


def get_exit_code(error: Exception) -> int:
    """
    Get the process exit code for a given exception.

    Args:
        error: The exception instance

    Returns:
        Exit code (defaults to 1 for unknown errors)
    """
    return ERROR_EXIT_CODES.get(type(error), 1)
