"""Application configuration using Pydantic Settings.

Configuration is loaded from environment variables.

Optionally, you may point `ENV_FILE` at a local env file (for development).
Values already present in the environment are never overwritten by it.
"""

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Registration service used to create new Okta organizations.
DEFAULT_API_BASE_URL = "https://start.okta.dev/"
API_BASE_URL_ENV_VAR = "OKTA_CLI_BASE_URL"

DEFAULT_OKTA_YAML_PATH = Path.home() / ".okta" / "okta.yaml"

# Load an env file ONLY when explicitly requested.
_env_file = os.getenv("ENV_FILE")
if _env_file:
    env_path = Path(_env_file)
    if env_path.exists() and env_path.is_file():
        from okta_setup.core.dotenv import load_env_file

        load_env_file(env_path, overwrite=False)


def resolve_api_base_url(environ: Mapping[str, str] | None = None) -> str:
    """
    Resolve the base URL of the organization registration service.

    `OKTA_CLI_BASE_URL` wins over the hardcoded default when it is set
    and non-empty. The override source is read exactly once per call.

    Args:
        environ: Mapping to read the override from (defaults to os.environ)

    Returns:
        The registration service base URL
    """
    if environ is None:
        environ = os.environ
    override = environ.get(API_BASE_URL_ENV_VAR)
    if override:
        return override
    return DEFAULT_API_BASE_URL


class Settings(BaseSettings):
    """
    Tool settings with type validation.

    Every field can be set through the environment variable of the same
    name in upper case.
    """

    model_config = SettingsConfigDict(
        env_file=os.getenv("ENV_FILE") or None, env_prefix="", extra="ignore"
    )

    app_name: str = "okta-setup"
    app_log_level: str = "WARNING"

    # Observability
    observability_structured_logs: bool = False

    # HTTP
    http_timeout_seconds: float = 30.0

    # Okta SDK configuration file written after a new org is created
    okta_yaml_path: Path = Field(
        default=DEFAULT_OKTA_YAML_PATH, validation_alias="OKTA_CLI_OKTA_YAML"
    )

    okta_cli_base_url: str | None = Field(default=None, validation_alias=API_BASE_URL_ENV_VAR)

    @field_validator("app_log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize the log level name."""
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"app_log_level must be a logging level name, got '{v}'")
        return level

    @field_validator("http_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Reject non-positive timeouts."""
        if v <= 0:
            raise ValueError("http_timeout_seconds must be positive")
        return v

    @property
    def api_base_url(self) -> str:
        """Registration service base URL with the override applied."""
        return resolve_api_base_url({API_BASE_URL_ENV_VAR: self.okta_cli_base_url or ""})


def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()
