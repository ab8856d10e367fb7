"""Custom claims on an Okta authorization server."""

from __future__ import annotations

import logging

from okta_setup.clients.okta_client import OktaClient
from okta_setup.domain.enums import ClaimType

logger = logging.getLogger(__name__)


def _group_claim(name: str, claim_type: ClaimType) -> dict:
    # Every group the user belongs to ends up in the claim.
    return {
        "name": name,
        "status": "ACTIVE",
        "claimType": claim_type.value,
        "valueType": "GROUPS",
        "value": ".*",
        "group_filter_type": "REGEX",
        "alwaysIncludeInToken": True,
        "conditions": {"scopes": []},
        "system": False,
    }


class AuthorizationServerService:
    def create_group_claim(
        self, client: OktaClient, group_claim_name: str, auth_server_id: str
    ) -> None:
        """
        Add a groups claim to both the ID token and the access token.

        There is no existence check; running this twice with the same name is
        left to the server to reject.
        """
        for claim_type in (ClaimType.IDENTITY, ClaimType.RESOURCE):
            client.create_authorization_server_claim(
                auth_server_id=auth_server_id, claim=_group_claim(group_claim_name, claim_type)
            )
        logger.info(
            "Created group claim",
            extra={"claim": group_claim_name, "auth_server_id": auth_server_id},
        )
