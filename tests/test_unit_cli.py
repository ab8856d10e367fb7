"""
Unit tests for the okta-setup command line.

Tests cover:
- Argument wiring into the setup service
- Batch mode failures for missing registration input
- Application type selection for `apps create`
- Error to exit code mapping
"""

import logging
from pathlib import Path
from unittest.mock import ANY, patch

import httpx
import pytest

from cli import dev_tools
from cli.main import DEFAULT_REDIRECT_URIS, build_parser, main
from okta_setup.config.property_source import DotenvPropertySource, YamlPropertySource
from okta_setup.core.errors import ClientConfigurationError, OktaSetupError
from okta_setup.domain.enums import ApplicationType
from okta_setup.services.setup_service import SetupService
from tests.fakes import API_TOKEN, ORG_URL


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from an empty directory so no stray okta.yaml is picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def configured_okta_yaml(workdir: Path) -> Path:
    path = workdir / "home" / "okta.yaml"
    path.parent.mkdir()
    path.write_text(
        f"okta:\n  client:\n    orgUrl: {ORG_URL}\n    token: {API_TOKEN}\n", encoding="utf-8"
    )
    return path


class TestParser:
    def test_setup_defaults(self):
        args = build_parser().parse_args(["setup"])

        assert args.batch is False
        assert args.spring_key is None
        assert args.authorization_server_id == "default"
        assert args.config_file == Path("src/main/resources/application.properties")

    def test_redirect_uri_repeats(self):
        args = build_parser().parse_args(
            ["setup", "--redirect-uri", "http://a/cb", "--redirect-uri", "http://b/cb"]
        )

        assert args.redirect_uris == ["http://a/cb", "http://b/cb"]

    def test_unknown_app_type_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["apps", "create", "--type", "saml"])


class TestRegister:
    def test_batch_without_names_fails(self, workdir, capsys):
        code = main(["register", "--batch", "--okta-yaml", str(workdir / "okta.yaml")])

        assert code == 4
        assert "First name" in capsys.readouterr().out
        assert not (workdir / "okta.yaml").exists()

    def test_existing_org_is_reported(self, configured_okta_yaml, capsys):
        code = main(["register", "--okta-yaml", str(configured_okta_yaml)])

        assert code == 0
        assert f"Current OrgUrl: {ORG_URL}" in capsys.readouterr().out


class TestSetup:
    def test_arguments_forwarded(self, workdir):
        config_file = workdir / "application.yml"

        with patch("cli.main.SetupService") as service_cls:
            code = main(
                [
                    "setup",
                    "--batch",
                    "--okta-yaml",
                    str(workdir / "okta.yaml"),
                    "--config-file",
                    str(config_file),
                    "--app-name",
                    "my-web",
                    "--spring-key",
                    "okta",
                    "--group-claim",
                    "groups",
                ]
            )

        assert code == 0
        assert service_cls.call_args.args == ("okta",)
        service_cls.return_value.configure_environment.assert_called_once_with(
            ANY,
            workdir / "okta.yaml",
            ANY,
            "my-web",
            "groups",
            None,
            "default",
            False,
            False,
            *DEFAULT_REDIRECT_URIS[ApplicationType.WEB],
        )
        property_source = service_cls.return_value.configure_environment.call_args.args[2]
        assert isinstance(property_source, YamlPropertySource)


class TestAppsCreate:
    def test_explicit_type(self, configured_okta_yaml, workdir):
        with patch.object(SetupService, "create_oidc_application") as create:
            code = main(
                [
                    "apps",
                    "create",
                    "--batch",
                    "--type",
                    "browser",
                    "--okta-yaml",
                    str(configured_okta_yaml),
                    "--config-file",
                    str(workdir / ".env"),
                    "--app-name",
                    "my-spa",
                ]
            )

        assert code == 0
        args = create.call_args.args
        assert isinstance(args[0], DotenvPropertySource)
        assert args[1:7] == ("my-spa", ORG_URL, None, None, "default", False)
        assert args[7] == ApplicationType.BROWSER
        assert list(args[8:]) == DEFAULT_REDIRECT_URIS[ApplicationType.BROWSER]

    def test_batch_defaults_to_web(self, configured_okta_yaml, workdir):
        with patch.object(SetupService, "create_oidc_application") as create:
            main(["apps", "create", "--batch", "--okta-yaml", str(configured_okta_yaml)])

        assert create.call_args.args[7] == ApplicationType.WEB

    def test_interactive_prompts_for_type(self, configured_okta_yaml, workdir):
        with (
            patch("cli.main.Prompter.prompt_options", return_value=ApplicationType.NATIVE),
            patch.object(SetupService, "create_oidc_application") as create,
        ):
            main(["apps", "create", "--okta-yaml", str(configured_okta_yaml)])

        assert create.call_args.args[7] == ApplicationType.NATIVE
        assert list(create.call_args.args[8:]) == ["com.okta.example:/callback"]

    def test_requires_configured_org(self, workdir, capsys):
        code = main(["apps", "create", "--batch", "--okta-yaml", str(workdir / "okta.yaml")])

        assert code == 1
        assert "okta-setup register" in capsys.readouterr().out


class TestExitCodes:
    @pytest.mark.parametrize(
        "error, expected",
        [
            (OktaSetupError("generic"), 1),
            (ClientConfigurationError("bad okta.yaml"), 2),
            (httpx.ConnectError("connection refused"), 1),
            (PermissionError("read-only"), 1),
        ],
    )
    def test_errors_mapped(self, workdir, error, expected):
        with patch("cli.main._run", side_effect=error):
            assert main(["register", "--batch"]) == expected

    def test_http_status_error_reports_status(self, workdir, capsys):
        request = httpx.Request("POST", "https://start.example.test/create")
        response = httpx.Response(409, request=request)
        error = httpx.HTTPStatusError("conflict", request=request, response=response)

        with patch("cli.main._run", side_effect=error):
            code = main(["register", "--batch"])

        assert code == 1
        assert "409" in capsys.readouterr().out


class TestDevTools:
    def test_lint_covers_source_dirs(self, monkeypatch):
        monkeypatch.setattr("sys.argv", ["okta-setup-lint", "--fix"])

        with patch("cli.dev_tools.run") as run:
            dev_tools.lint()

        cmd = run.call_args.args[0]
        assert cmd[1:4] == ["-m", "ruff", "check"]
        assert cmd[4:] == ["okta_setup", "cli", "tests", "--fix"]

    def test_runner_propagates_exit_code(self):
        with patch("cli.dev_tools.subprocess.run") as subprocess_run:
            subprocess_run.return_value.returncode = 3
            with pytest.raises(SystemExit) as exc_info:
                dev_tools.run(["ruff", "--version"])

        assert exc_info.value.code == 3
