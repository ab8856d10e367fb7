"""
Domain enums.

ApplicationType mirrors the `application_type` values Okta accepts for
OpenID Connect clients.
"""

from enum import Enum


class ApplicationType(str, Enum):
    """Kind of OIDC application to provision."""

    WEB = "web"
    NATIVE = "native"
    BROWSER = "browser"
    SERVICE = "service"


class GrantType(str, Enum):
    """OAuth 2.0 grant types used by the application templates."""

    AUTHORIZATION_CODE = "authorization_code"
    REFRESH_TOKEN = "refresh_token"
    IMPLICIT = "implicit"
    CLIENT_CREDENTIALS = "client_credentials"


class TokenEndpointAuthMethod(str, Enum):
    """How a client authenticates to the token endpoint."""

    CLIENT_SECRET_BASIC = "client_secret_basic"
    CLIENT_SECRET_POST = "client_secret_post"
    NONE = "none"


class ClaimType(str, Enum):
    """Token a custom authorization server claim is added to."""

    IDENTITY = "IDENTITY"
    RESOURCE = "RESOURCE"
