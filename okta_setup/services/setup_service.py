"""
Setup orchestration: org first, then the OIDC application.

Both steps are idempotent in the cheap sense only:
- an org is assumed to exist whenever a base URL is configured locally
- an application is assumed to exist whenever the configured client ID is
  syntactically valid

Neither assumption is re-checked against Okta, so stale or revoked
credentials are skipped silently rather than reported.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from okta_setup.clients.okta_client import OktaClient
from okta_setup.config.property_source import MutablePropertySource
from okta_setup.core.config import resolve_api_base_url
from okta_setup.core.errors import OktaSetupError, UnsupportedApplicationTypeError
from okta_setup.core.progress import progress_bar
from okta_setup.core.validators import validate_client_id
from okta_setup.domain.enums import ApplicationType
from okta_setup.domain.models import OrganizationRequest
from okta_setup.services.authorization_server import AuthorizationServerService
from okta_setup.services.oidc_app_creator import OidcAppCreator
from okta_setup.services.organization_creator import OktaOrganizationCreator
from okta_setup.services.sdk_configuration import SdkConfigurationService

logger = logging.getLogger(__name__)

DEFAULT_AUTHORIZATION_SERVER_ID = "default"

OrganizationRequestSupplier = Callable[[], OrganizationRequest]


@dataclass(frozen=True)
class PropertyNames:
    """Keys the issuer URI and client credentials are written under."""

    issuer_uri: str
    client_id: str
    client_secret: str

    @classmethod
    def for_profile(cls, spring_property_key: str | None) -> PropertyNames:
        """
        Derive the key triple for an integration profile.

        Without a profile the flat `okta.oauth2.*` keys of the Okta starters
        are used; with one, the Spring Security client registration keys.
        """
        if spring_property_key is None:
            return cls(
                issuer_uri="okta.oauth2.issuer",
                client_id="okta.oauth2.client-id",
                client_secret="okta.oauth2.client-secret",
            )
        return cls(
            issuer_uri=f"spring.security.oauth2.client.provider.{spring_property_key}.issuer-uri",
            client_id=f"spring.security.oauth2.client.registration.{spring_property_key}.client-id",
            client_secret=(
                f"spring.security.oauth2.client.registration.{spring_property_key}.client-secret"
            ),
        )


class SetupService:
    def __init__(
        self,
        spring_property_key: str | None = None,
        *,
        sdk_configuration_service: SdkConfigurationService | None = None,
        organization_creator: OktaOrganizationCreator | None = None,
        oidc_app_creator: OidcAppCreator | None = None,
        authorization_server_service: AuthorizationServerService | None = None,
        client_factory: Callable[[], OktaClient] | None = None,
        api_base_url: str | None = None,
    ):
        self.sdk_configuration_service = sdk_configuration_service or SdkConfigurationService()
        self.organization_creator = organization_creator or OktaOrganizationCreator()
        self.oidc_app_creator = oidc_app_creator or OidcAppCreator()
        self.authorization_server_service = (
            authorization_server_service or AuthorizationServerService()
        )
        self.property_names = PropertyNames.for_profile(spring_property_key)
        self._client_factory = client_factory or self._default_client
        self._api_base_url = api_base_url

    def _default_client(self) -> OktaClient:
        # Re-read so a freshly written okta.yaml is picked up.
        return OktaClient.from_configuration(self.sdk_configuration_service.load_configuration())

    def get_api_base_url(self) -> str:
        """Registration service URL; an explicit value wins over the environment."""
        return self._api_base_url or resolve_api_base_url()

    def configure_environment(
        self,
        organization_request_supplier: OrganizationRequestSupplier,
        okta_props_file: str | Path,
        property_source: MutablePropertySource,
        oidc_app_name: str,
        group_claim_name: str | None,
        issuer_uri: str | None,
        authorization_server_id: str,
        demo: bool,
        interactive: bool,
        *redirect_uris: str,
    ) -> None:
        """
        Get or create an org, then create a confidential web application.

        Raises:
            OSError: okta.yaml or the property file could not be read or written
            ClientConfigurationError: The local Okta configuration is malformed
        """
        org_url = self.create_okta_org(
            organization_request_supplier, okta_props_file, demo, interactive
        )

        self.create_oidc_application(
            property_source,
            oidc_app_name,
            org_url,
            group_claim_name,
            issuer_uri,
            authorization_server_id,
            interactive,
            ApplicationType.WEB,
            *redirect_uris,
        )

    def create_okta_org(
        self,
        organization_request_supplier: OrganizationRequestSupplier,
        okta_props_file: str | Path,
        demo: bool,
        interactive: bool,
    ) -> str:
        """Return the configured org URL, registering a new org if there is none."""
        client_configuration = self.sdk_configuration_service.load_unvalidated_configuration()

        with progress_bar(interactive) as progress:
            if not client_configuration.base_url:
                # Resolve the request (and prompt) before the spinner starts.
                organization_request = organization_request_supplier()
                progress.start("Creating new Okta Organization, this may take a minute:")

                new_org = self.organization_creator.create_new_org(
                    self.get_api_base_url(), organization_request
                )
                org_url = new_org.org_url

                progress.info(f"OrgUrl: {org_url}")
                progress.info("Check your email address to verify your account.\n")

                self.sdk_configuration_service.write_okta_yaml(
                    org_url, new_org.api_token, okta_props_file
                )
            else:
                if demo:
                    # The answers are not used; demo mode just shows the prompts.
                    organization_request_supplier()

                org_url = client_configuration.base_url
                progress.info(f"Current OrgUrl: {org_url}")

        logger.info("Using Okta organization", extra={"org_url": org_url})
        return org_url

    def create_oidc_application(
        self,
        property_source: MutablePropertySource,
        oidc_app_name: str,
        org_url: str,
        group_claim_name: str | None,
        issuer_uri: str | None,
        authorization_server_id: str,
        interactive: bool,
        app_type: ApplicationType,
        *redirect_uris: str,
    ) -> None:
        """Create an OIDC application unless the property source already names one."""
        names = self.property_names
        client_id = property_source.get_property(names.client_id)

        with progress_bar(interactive) as progress:
            if validate_client_id(client_id).is_valid:
                progress.info(
                    f"Existing OIDC application detected for clientId: {client_id}, "
                    "skipping new application creation\n"
                )
                logger.info("Skipping application creation", extra={"client_id": client_id})
                return

            create = self._creator_for(app_type)
            progress.start("Configuring a new OIDC Application, almost done:")

            with self._client_factory() as client:
                creds = create(client, oidc_app_name, list(redirect_uris))

                if not issuer_uri:
                    issuer_uri = org_url + "/oauth2/" + authorization_server_id

                new_client_id = creds.get("client_id")
                if not new_client_id:
                    raise OktaSetupError(
                        "Okta returned no client ID for the new application",
                        details={"app_name": oidc_app_name},
                    )

                property_source.add_properties(
                    {
                        names.issuer_uri: issuer_uri,
                        names.client_id: new_client_id,
                        names.client_secret: creds.get("client_secret") or "",
                    }
                )

                progress.info(f"Created OIDC application, client-id: {new_client_id}")

                if group_claim_name:
                    progress.info(f"Creating Authorization Server claim '{group_claim_name}':")
                    self.authorization_server_service.create_group_claim(
                        client, group_claim_name, authorization_server_id
                    )

    def _creator_for(self, app_type: ApplicationType) -> Callable[..., dict]:
        creator = self.oidc_app_creator
        if app_type == ApplicationType.WEB:
            return creator.create_oidc_app
        elif app_type == ApplicationType.NATIVE:
            return creator.create_oidc_native_app
        elif app_type == ApplicationType.BROWSER:
            return creator.create_oidc_spa_app
        elif app_type == ApplicationType.SERVICE:
            return creator.create_oidc_service_app
        raise UnsupportedApplicationTypeError(
            f"Unsupported Application Type: {app_type}",
            details={"app_type": str(app_type), "valid_types": [t.value for t in ApplicationType]},
        )
