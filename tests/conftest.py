"""
Pytest configuration and shared fixtures.

Provides:
- Import path setup so `okta_setup` and `cli` resolve from the repo root
- Isolation from the developer's real Okta environment variables
- Fake collaborators for the setup service
"""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import MagicMock

ROOT = Path(__file__).resolve().parents[1]

# Add repo root to path for imports
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402 (import after path setup)

from okta_setup.clients.okta_client import OktaClient  # noqa: E402
from okta_setup.domain.models import (  # noqa: E402
    ClientConfiguration,
    OrganizationRequest,
    OrganizationResponse,
)
from okta_setup.services.authorization_server import AuthorizationServerService  # noqa: E402
from okta_setup.services.oidc_app_creator import OidcAppCreator  # noqa: E402
from okta_setup.services.organization_creator import OktaOrganizationCreator  # noqa: E402
from okta_setup.services.sdk_configuration import SdkConfigurationService  # noqa: E402

from tests.fakes import API_TOKEN, CLIENT_ID, CLIENT_SECRET, ORG_URL  # noqa: E402

_OKTA_ENV_VARS = (
    "OKTA_CLI_BASE_URL",
    "OKTA_CLIENT_ORGURL",
    "OKTA_CLIENT_TOKEN",
    "OKTA_CLI_OKTA_YAML",
    "ENV_FILE",
    "APP_LOG_LEVEL",
    "OBSERVABILITY_STRUCTURED_LOGS",
    "HTTP_TIMEOUT_SECONDS",
)


@pytest.fixture(autouse=True)
def clean_okta_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Never let a developer's real Okta settings leak into a test."""
    for name in _OKTA_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def organization_request() -> OrganizationRequest:
    return OrganizationRequest(
        first_name="Jo",
        last_name="Coder",
        email="jo.coder@example.com",
        organization="Example Inc",
    )


@pytest.fixture
def sdk_configuration() -> MagicMock:
    service = MagicMock(spec=SdkConfigurationService)
    service.load_unvalidated_configuration.return_value = ClientConfiguration()
    return service


@pytest.fixture
def organization_creator() -> MagicMock:
    creator = MagicMock(spec=OktaOrganizationCreator)
    creator.create_new_org.return_value = OrganizationResponse(
        org_url=ORG_URL, api_token=API_TOKEN
    )
    return creator


@pytest.fixture
def oidc_app_creator() -> MagicMock:
    creator = MagicMock(spec=OidcAppCreator)
    creds = {"client_id": CLIENT_ID, "client_secret": CLIENT_SECRET}
    creator.create_oidc_app.return_value = creds
    creator.create_oidc_native_app.return_value = creds
    creator.create_oidc_spa_app.return_value = creds
    creator.create_oidc_service_app.return_value = creds
    return creator


@pytest.fixture
def authorization_server_service() -> MagicMock:
    return MagicMock(spec=AuthorizationServerService)


@pytest.fixture
def okta_client() -> MagicMock:
    client = MagicMock(spec=OktaClient)
    client.__enter__.return_value = client
    return client


@pytest.fixture
def client_factory(okta_client: MagicMock) -> MagicMock:
    return MagicMock(return_value=okta_client)
