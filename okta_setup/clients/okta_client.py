"""Thin Okta management API client built on httpx.

Every non-2xx response raises `httpx.HTTPStatusError`; nothing is retried.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from okta_setup import __version__
from okta_setup.core.validators import require_valid_configuration
from okta_setup.domain.models import ClientConfiguration

logger = logging.getLogger(__name__)

USER_AGENT = f"okta-setup/{__version__}"


class OktaClient:
    def __init__(
        self,
        *,
        org_url: str,
        api_token: str,
        timeout_s: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.org_url = org_url.rstrip("/")
        self._client = httpx.Client(
            base_url=f"{self.org_url}/api/v1/",
            headers={
                "Authorization": f"SSWS {api_token}",
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
            },
            timeout=timeout_s,
            transport=transport,
        )

    @classmethod
    def from_configuration(
        cls,
        configuration: ClientConfiguration,
        *,
        timeout_s: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> OktaClient:
        """Build a client, refusing configuration that cannot work."""
        require_valid_configuration(configuration)
        return cls(
            org_url=configuration.base_url,
            api_token=configuration.api_token,
            timeout_s=timeout_s,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> OktaClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict | None = None,
        json: dict | list | None = None,
    ) -> Any:
        logger.debug("Okta API request", extra={"method": method, "path": path})
        resp = self._client.request(method, path, params=params, json=json)
        resp.raise_for_status()
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    # -------------------------------------------------------------------------
    # Applications
    # -------------------------------------------------------------------------

    def find_application_by_label(self, label: str) -> dict | None:
        # `q` is a prefix search; confirm the exact label.
        apps = self.request("GET", "apps", params={"q": label, "limit": 200})
        if isinstance(apps, list):
            for app in apps:
                if app.get("label") == label:
                    return app
        return None

    def create_application(self, payload: dict) -> dict:
        return self.request("POST", "apps", json=payload)

    def get_client_credentials(self, app_id: str) -> dict:
        # Internal endpoint: lives under /api, not /api/v1.
        return self.request(
            "GET", f"{self.org_url}/api/internal/apps/{app_id}/settings/clientcreds"
        )

    def assign_group_to_application(self, *, app_id: str, group_id: str) -> None:
        self.request("PUT", f"apps/{app_id}/groups/{group_id}", json={})

    # -------------------------------------------------------------------------
    # Groups
    # -------------------------------------------------------------------------

    def find_group_by_name(self, name: str) -> dict | None:
        groups = self.request("GET", "groups", params={"q": name})
        if isinstance(groups, list):
            for group in groups:
                if group.get("profile", {}).get("name") == name:
                    return group
        return None

    # -------------------------------------------------------------------------
    # Authorization servers
    # -------------------------------------------------------------------------

    def create_authorization_server_claim(self, *, auth_server_id: str, claim: dict) -> dict:
        return self.request("POST", f"authorizationServers/{auth_server_id}/claims", json=claim)
