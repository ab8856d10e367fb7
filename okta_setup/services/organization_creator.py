"""Creates new Okta developer organizations through the registration service."""

from __future__ import annotations

import logging
from urllib.parse import urljoin

import httpx

from okta_setup.clients.okta_client import USER_AGENT
from okta_setup.domain.models import OrganizationRequest, OrganizationResponse

logger = logging.getLogger(__name__)

# Org creation can take a while on the service side.
DEFAULT_TIMEOUT_S = 120.0


class OktaOrganizationCreator:
    def __init__(
        self,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        transport: httpx.BaseTransport | None = None,
    ):
        self._timeout_s = timeout_s
        self._transport = transport

    def create_new_org(
        self, api_base_url: str, request: OrganizationRequest
    ) -> OrganizationResponse:
        """
        Register a new organization.

        Args:
            api_base_url: Registration service base URL
            request: Registration details entered by the user

        Returns:
            The new org URL and its API token

        Raises:
            httpx.HTTPError: Network failure or non-2xx response
            pydantic.ValidationError: The response lacks orgUrl or apiToken
        """
        url = urljoin(api_base_url if api_base_url.endswith("/") else api_base_url + "/", "create")
        logger.info("Requesting new Okta organization", extra={"service": api_base_url})

        with httpx.Client(
            timeout=self._timeout_s,
            transport=self._transport,
            headers={"Accept": "application/json", "User-Agent": USER_AGENT},
        ) as client:
            resp = client.post(url, json=request.model_dump(by_alias=True))
            resp.raise_for_status()

        response = OrganizationResponse.model_validate(resp.json())
        logger.info("Created Okta organization", extra={"org_url": response.org_url})
        return response
