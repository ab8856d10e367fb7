"""
OIDC application provisioning.

Each create method looks the application up by label first and reuses it if
found; otherwise a new application is created from the template for its
type and assigned to the `Everyone` group so every user can sign in.

All four methods return the client credentials as a dict with the keys
`client_id` and `client_secret` (`client_secret` is None for public clients).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from okta_setup.clients.okta_client import OktaClient
from okta_setup.domain.enums import ApplicationType, GrantType, TokenEndpointAuthMethod

logger = logging.getLogger(__name__)

EVERYONE_GROUP = "Everyone"


def _oidc_app_payload(
    *,
    label: str,
    app_type: ApplicationType,
    grant_types: list[GrantType],
    response_types: list[str],
    auth_method: TokenEndpointAuthMethod,
    redirect_uris: Sequence[str],
) -> dict:
    oauth_settings: dict = {
        "application_type": app_type.value,
        "grant_types": [g.value for g in grant_types],
        "response_types": response_types,
        "consent_method": "TRUSTED",
    }
    if redirect_uris:
        oauth_settings["redirect_uris"] = list(redirect_uris)

    return {
        "name": "oidc_client",
        "label": label,
        "signOnMode": "OPENID_CONNECT",
        "credentials": {
            "oauthClient": {
                "autoKeyRotation": True,
                "token_endpoint_auth_method": auth_method.value,
            }
        },
        "settings": {"oauthClient": oauth_settings},
    }


class OidcAppCreator:
    def create_oidc_app(
        self, client: OktaClient, name: str, redirect_uris: Sequence[str]
    ) -> dict:
        """Confidential web application (authorization code with a client secret)."""
        payload = _oidc_app_payload(
            label=name,
            app_type=ApplicationType.WEB,
            grant_types=[GrantType.AUTHORIZATION_CODE, GrantType.REFRESH_TOKEN],
            response_types=["code"],
            auth_method=TokenEndpointAuthMethod.CLIENT_SECRET_BASIC,
            redirect_uris=redirect_uris,
        )
        return self._create_or_reuse(client, name, payload)

    def create_oidc_native_app(
        self, client: OktaClient, name: str, redirect_uris: Sequence[str]
    ) -> dict:
        """Native/mobile application (authorization code + PKCE, no secret)."""
        payload = _oidc_app_payload(
            label=name,
            app_type=ApplicationType.NATIVE,
            grant_types=[GrantType.AUTHORIZATION_CODE, GrantType.REFRESH_TOKEN],
            response_types=["code"],
            auth_method=TokenEndpointAuthMethod.NONE,
            redirect_uris=redirect_uris,
        )
        return self._create_or_reuse(client, name, payload)

    def create_oidc_spa_app(
        self, client: OktaClient, name: str, redirect_uris: Sequence[str]
    ) -> dict:
        """Single-page application (authorization code + PKCE, no secret)."""
        payload = _oidc_app_payload(
            label=name,
            app_type=ApplicationType.BROWSER,
            grant_types=[GrantType.AUTHORIZATION_CODE],
            response_types=["code"],
            auth_method=TokenEndpointAuthMethod.NONE,
            redirect_uris=redirect_uris,
        )
        return self._create_or_reuse(client, name, payload)

    def create_oidc_service_app(
        self, client: OktaClient, name: str, redirect_uris: Sequence[str]
    ) -> dict:
        """Machine-to-machine service (client credentials); redirect URIs are ignored."""
        payload = _oidc_app_payload(
            label=name,
            app_type=ApplicationType.SERVICE,
            grant_types=[GrantType.CLIENT_CREDENTIALS],
            response_types=["token"],
            auth_method=TokenEndpointAuthMethod.CLIENT_SECRET_BASIC,
            redirect_uris=(),
        )
        return self._create_or_reuse(client, name, payload)

    def _create_or_reuse(self, client: OktaClient, name: str, payload: dict) -> dict:
        existing = client.find_application_by_label(name)
        if existing:
            app_id = existing["id"]
            logger.info("Reusing existing OIDC application", extra={"app_id": app_id})
        else:
            created = client.create_application(payload)
            app_id = created["id"]
            logger.info("Created OIDC application", extra={"app_id": app_id})

            everyone = client.find_group_by_name(EVERYONE_GROUP)
            if everyone:
                client.assign_group_to_application(app_id=app_id, group_id=everyone["id"])
            else:
                logger.warning("Group '%s' not found; application has no users", EVERYONE_GROUP)

        creds = client.get_client_credentials(app_id) or {}
        return {
            "client_id": creds.get("client_id"),
            "client_secret": creds.get("client_secret"),
        }
