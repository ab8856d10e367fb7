"""
Okta SDK configuration discovery and persistence.

Configuration is read from, in increasing precedence:
1. ~/.okta/okta.yaml
2. ./okta.yaml in the working directory
3. OKTA_CLIENT_ORGURL / OKTA_CLIENT_TOKEN environment variables (the token
   variable is only honoured together with the org URL variable)

A new org's credentials are written back to ~/.okta/okta.yaml so later runs
(and the Okta SDKs) pick them up.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from pathlib import Path

import yaml

from okta_setup.core.config import DEFAULT_OKTA_YAML_PATH
from okta_setup.core.errors import ClientConfigurationError
from okta_setup.core.validators import require_valid_configuration
from okta_setup.domain.models import ClientConfiguration

logger = logging.getLogger(__name__)

ORG_URL_ENV_VAR = "OKTA_CLIENT_ORGURL"
TOKEN_ENV_VAR = "OKTA_CLIENT_TOKEN"


def _read_yaml_client_section(path: Path) -> dict[str, str]:
    """Return the `okta.client` mapping of an okta.yaml file (empty if absent)."""
    if not path.is_file():
        return {}

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ClientConfigurationError(
            f"Unable to parse Okta configuration file: {path}",
            details={"path": str(path), "error": str(exc)},
        ) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ClientConfigurationError(
            f"Okta configuration file must contain a mapping: {path}",
            details={"path": str(path)},
        )

    client = (data.get("okta") or {}).get("client") or {}
    if not isinstance(client, dict):
        raise ClientConfigurationError(
            f"'okta.client' must be a mapping in {path}", details={"path": str(path)}
        )
    return {k: "" if v is None else str(v) for k, v in client.items()}


class SdkConfigurationService:
    """Reads and writes the local Okta client configuration."""

    def __init__(
        self,
        *,
        search_paths: Sequence[Path] | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        if search_paths is None:
            search_paths = [DEFAULT_OKTA_YAML_PATH, Path.cwd() / "okta.yaml"]
        self._search_paths = list(search_paths)
        self._environ = environ

    def load_unvalidated_configuration(self) -> ClientConfiguration:
        """
        Merge every configuration source without validating values.

        Missing files and variables are skipped, so a machine with no Okta
        configuration yields an empty base URL rather than an error.

        Raises:
            ClientConfigurationError: A configuration file exists but is malformed
        """
        environ = os.environ if self._environ is None else self._environ
        base_url = ""
        api_token = ""
        source = ""

        for path in self._search_paths:
            client = _read_yaml_client_section(path)
            if client.get("orgUrl"):
                base_url = client["orgUrl"]
                source = str(path)
            if client.get("token"):
                api_token = client["token"]

        # OKTA_CLIENT_TOKEN counts only together with OKTA_CLIENT_ORGURL.
        if environ.get(ORG_URL_ENV_VAR):
            base_url = environ[ORG_URL_ENV_VAR]
            api_token = environ.get(TOKEN_ENV_VAR) or api_token
            source = "env"
        elif environ.get(TOKEN_ENV_VAR):
            logger.warning(
                "Ignoring %s because %s is not set", TOKEN_ENV_VAR, ORG_URL_ENV_VAR
            )

        logger.debug("Loaded Okta client configuration", extra={"source": source or "none"})
        return ClientConfiguration(
            base_url=base_url.strip(), api_token=api_token.strip(), source=source
        )

    def load_configuration(self) -> ClientConfiguration:
        """Like `load_unvalidated_configuration`, but the result must be usable.

        Raises:
            ClientConfigurationError: Malformed file, or missing/invalid org URL or token
        """
        return require_valid_configuration(self.load_unvalidated_configuration())

    def write_okta_yaml(self, org_url: str, api_token: str, target_file: str | Path) -> None:
        """
        Write the org URL and API token as an okta.yaml file.

        The parent directory is created if needed; on POSIX the file is
        readable by its owner only.

        Raises:
            OSError: The file could not be written
        """
        target = Path(target_file).expanduser()
        target.parent.mkdir(parents=True, exist_ok=True)

        content = yaml.safe_dump(
            {"okta": {"client": {"orgUrl": org_url, "token": api_token}}},
            default_flow_style=False,
            sort_keys=False,
        )
        target.write_text(content, encoding="utf-8")
        if os.name == "posix":
            target.chmod(0o600)

        logger.info("Wrote Okta client configuration", extra={"path": str(target)})
