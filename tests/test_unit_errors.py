"""Unit tests for the exception hierarchy and exit codes."""

import pytest

from okta_setup.core.errors import (
    ClientConfigurationError,
    OktaSetupError,
    PromptError,
    UnsupportedApplicationTypeError,
    get_exit_code,
)


class TestOktaSetupError:
    def test_message_and_details(self):
        error = ClientConfigurationError("bad", details={"path": "okta.yaml"})

        assert str(error) == "bad"
        assert error.message == "bad"
        assert error.details == {"path": "okta.yaml"}
        assert isinstance(error, OktaSetupError)

    def test_details_default_empty(self):
        assert PromptError("missing").details == {}


class TestGetExitCode:
    @pytest.mark.parametrize(
        "error, code",
        [
            (ClientConfigurationError("x"), 2),
            (UnsupportedApplicationTypeError("x"), 3),
            (PromptError("x"), 4),
            (OktaSetupError("x"), 1),
            (RuntimeError("x"), 1),
        ],
    )
    def test_mapping(self, error, code):
        assert get_exit_code(error) == code
