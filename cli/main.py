"""okta-setup command line.

Usage:
  uv run okta-setup register
  uv run okta-setup setup --app-name my-web-app --redirect-uri http://localhost:8080/callback
  uv run okta-setup apps create --type browser --config-file .env

Commands:
- register      Reuse the configured Okta org or sign up for a new one
- setup         register + create a web application + write its credentials
- apps create   Create an application of any type for the configured org

Notes:
- Safe to re-run: an existing org (okta.yaml) or client ID is reused.
- Secrets are written to files, never printed.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import httpx
from pydantic import ValidationError
from rich.console import Console

from okta_setup.clients.okta_client import OktaClient
from okta_setup.config.property_source import property_source_for
from okta_setup.console.prompter import PromptOption, Prompter, organization_request_supplier
from okta_setup.core.config import Settings, get_settings
from okta_setup.core.errors import OktaSetupError, get_exit_code
from okta_setup.core.observability import configure_logging, start_run
from okta_setup.domain.enums import ApplicationType
from okta_setup.services.sdk_configuration import SdkConfigurationService
from okta_setup.services.setup_service import DEFAULT_AUTHORIZATION_SERVER_ID, SetupService

logger = logging.getLogger(__name__)

APP_TYPE_OPTIONS = [
    PromptOption.of("Web", ApplicationType.WEB),
    PromptOption.of("Single Page App", ApplicationType.BROWSER),
    PromptOption.of("Native App (mobile)", ApplicationType.NATIVE),
    PromptOption.of("Service (Machine-to-Machine)", ApplicationType.SERVICE),
]

DEFAULT_REDIRECT_URIS = {
    ApplicationType.WEB: ["http://localhost:8080/authorization-code/callback"],
    ApplicationType.BROWSER: ["http://localhost:8080/login/callback"],
    ApplicationType.NATIVE: ["com.okta.example:/callback"],
    ApplicationType.SERVICE: [],
}


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--batch", action="store_true", help="Never prompt; fail if input is missing"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log details to stderr")
    parser.add_argument(
        "--okta-yaml",
        type=Path,
        default=None,
        help="Where to write a new org's credentials (default: ~/.okta/okta.yaml)",
    )


def _add_registration_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--first-name")
    parser.add_argument("--last-name")
    parser.add_argument("--email")
    parser.add_argument("--organization", help="Company name")
    parser.add_argument(
        "--demo", action="store_true", help="Always show the registration prompts"
    )


def _add_app_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--app-name", default=Path.cwd().name, help="Application label in Okta")
    parser.add_argument(
        "--config-file",
        type=Path,
        default=Path("src/main/resources/application.properties"),
        help="File the issuer and client credentials are written to "
        "(.properties, .yml/.yaml or .env)",
    )
    parser.add_argument(
        "--spring-key",
        default=None,
        help="Write spring.security.oauth2.client.* keys for this registration id",
    )
    parser.add_argument(
        "--redirect-uri",
        action="append",
        dest="redirect_uris",
        default=None,
        help="Repeat for several URIs",
    )
    parser.add_argument("--group-claim", default=None, help="Add a groups claim with this name")
    parser.add_argument("--issuer-uri", default=None, help="Override the computed issuer URI")
    parser.add_argument("--authorization-server-id", default=DEFAULT_AUTHORIZATION_SERVER_ID)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="okta-setup",
        description="Create or reuse an Okta org and configure an OIDC application (idempotent)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    register = subparsers.add_parser("register", help="Get or create an Okta org")
    _add_common_args(register)
    _add_registration_args(register)

    setup = subparsers.add_parser("setup", help="Org + web application + config file")
    _add_common_args(setup)
    _add_registration_args(setup)
    _add_app_args(setup)

    apps = subparsers.add_parser("apps", help="Manage OIDC applications")
    apps_sub = apps.add_subparsers(dest="apps_command", required=True)
    create = apps_sub.add_parser("create", help="Create an OIDC application")
    _add_common_args(create)
    _add_app_args(create)
    create.add_argument(
        "--type",
        dest="app_type",
        choices=[t.value for t in ApplicationType],
        default=None,
        help="Application type (prompted for when omitted)",
    )

    return parser


def _run(args: argparse.Namespace, console: Console, settings: Settings) -> None:
    interactive = not args.batch
    okta_yaml = args.okta_yaml or settings.okta_yaml_path
    prompter = Prompter(console)

    sdk_configuration = SdkConfigurationService(
        search_paths=[Path(okta_yaml).expanduser(), Path.cwd() / "okta.yaml"]
    )

    def client_factory() -> OktaClient:
        return OktaClient.from_configuration(
            sdk_configuration.load_configuration(),
            timeout_s=settings.http_timeout_seconds,
        )

    service = SetupService(
        getattr(args, "spring_key", None),
        sdk_configuration_service=sdk_configuration,
        client_factory=client_factory,
        api_base_url=settings.api_base_url,
    )

    if args.command in ("register", "setup"):
        supplier = organization_request_supplier(
            prompter,
            first_name=args.first_name,
            last_name=args.last_name,
            email=args.email,
            organization=args.organization,
            interactive=interactive,
        )

    if args.command == "register":
        service.create_okta_org(supplier, okta_yaml, args.demo, interactive)
        return

    property_source = property_source_for(args.config_file)

    if args.command == "setup":
        redirect_uris = args.redirect_uris or DEFAULT_REDIRECT_URIS[ApplicationType.WEB]
        service.configure_environment(
            supplier,
            okta_yaml,
            property_source,
            args.app_name,
            args.group_claim,
            args.issuer_uri,
            args.authorization_server_id,
            args.demo,
            interactive,
            *redirect_uris,
        )
        return

    # apps create: the org must already be configured.
    if args.app_type:
        app_type = ApplicationType(args.app_type)
    elif interactive:
        app_type = prompter.prompt_options(
            "Type of Application", APP_TYPE_OPTIONS, default=APP_TYPE_OPTIONS[0]
        )
    else:
        app_type = ApplicationType.WEB

    configuration = service.sdk_configuration_service.load_unvalidated_configuration()
    if not configuration.base_url:
        raise OktaSetupError(
            "No Okta org configured; run 'okta-setup register' first",
            details={"okta_yaml": str(okta_yaml)},
        )

    redirect_uris = args.redirect_uris or DEFAULT_REDIRECT_URIS[app_type]
    service.create_oidc_application(
        property_source,
        args.app_name,
        configuration.base_url,
        args.group_claim,
        args.issuer_uri,
        args.authorization_server_id,
        interactive,
        app_type,
        *redirect_uris,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(
        "DEBUG" if args.verbose else settings.app_log_level,
        structured=settings.observability_structured_logs,
    )
    run_id = start_run()
    logger.debug("okta-setup started", extra={"command": args.command, "run": run_id})

    console = Console()
    try:
        _run(args, console, settings)
    except OktaSetupError as exc:
        console.print(f"[red]Error:[/red] {exc.message}", highlight=False)
        logger.debug("Setup failed", exc_info=True, extra={"details": exc.details})
        return get_exit_code(exc)
    except ValidationError as exc:
        console.print(f"[red]Invalid input:[/red] {exc}", highlight=False)
        return 1
    except httpx.HTTPStatusError as exc:
        console.print(
            f"[red]Okta request failed:[/red] {exc.response.status_code} {exc.request.url}",
            highlight=False,
        )
        return 1
    except httpx.HTTPError as exc:
        console.print(f"[red]Network error:[/red] {exc}", highlight=False)
        return 1
    except OSError as exc:
        console.print(f"[red]File error:[/red] {exc}", highlight=False)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
