"""Syntactic checks for Okta client configuration values.

None of these make a network call; a value that passes may still be
unknown to (or revoked by) the org.
"""

from dataclasses import dataclass

from okta_setup.core.errors import ClientConfigurationError
from okta_setup.domain.models import ClientConfiguration

CLIENT_ID_PLACEHOLDER = "{clientId}"
ORG_URL_PLACEHOLDER = "{yourOktaDomain}"
API_TOKEN_PLACEHOLDER = "{apiToken}"


@dataclass(frozen=True)
class ValidationResponse:
    """Outcome of a configuration check; `message` is empty when valid."""

    message: str = ""

    @property
    def is_valid(self) -> bool:
        return not self.message


VALID = ValidationResponse()


def _has_text(value: str | None) -> bool:
    return value is not None and bool(value.strip())


def validate_client_id(client_id: str | None) -> ValidationResponse:
    """
    Check a client ID for obvious defects.

    Args:
        client_id: Value read from the target application's configuration

    Returns:
        ValidationResponse; invalid when blank or still a placeholder
    """
    if not _has_text(client_id):
        return ValidationResponse("Your client ID is missing.")
    if CLIENT_ID_PLACEHOLDER in client_id:
        return ValidationResponse(
            f"Replace {CLIENT_ID_PLACEHOLDER} with the client ID of your application."
        )
    return VALID


def validate_org_url(org_url: str | None) -> ValidationResponse:
    """
    Check an Okta org URL.

    Args:
        org_url: e.g. https://dev-123456.okta.com

    Returns:
        ValidationResponse; invalid when blank, not https, a placeholder,
        an admin console URL, or has a doubled `.com`
    """
    if not _has_text(org_url):
        return ValidationResponse("Your Okta URL is missing.")
    if ORG_URL_PLACEHOLDER in org_url:
        return ValidationResponse(
            f"Replace {ORG_URL_PLACEHOLDER} with your Okta domain."
        )
    if not org_url.startswith("https://"):
        return ValidationResponse(
            f"Your Okta URL must start with https. Current value: {org_url}"
        )
    if "-admin." in org_url:
        return ValidationResponse(
            f"Your Okta domain should not contain -admin. Current value: {org_url}"
        )
    if ".com.com" in org_url:
        return ValidationResponse(
            f"It looks like there's a typo in your Okta domain. Current value: {org_url}"
        )
    return VALID


def validate_api_token(api_token: str | None) -> ValidationResponse:
    """Check an Okta API token is present and not a placeholder."""
    if not _has_text(api_token):
        return ValidationResponse("Your Okta API token is missing.")
    if API_TOKEN_PLACEHOLDER in api_token:
        return ValidationResponse(
            f"Replace {API_TOKEN_PLACEHOLDER} with your Okta API token."
        )
    return VALID


def require_valid_configuration(configuration: ClientConfiguration) -> ClientConfiguration:
    """
    Return the configuration unchanged if its org URL and token pass the checks.

    Raises:
        ClientConfigurationError: With the first failing check's message
    """
    for check in (
        validate_org_url(configuration.base_url),
        validate_api_token(configuration.api_token),
    ):
        if not check.is_valid:
            raise ClientConfigurationError(check.message, details={"source": configuration.source})
    return configuration
