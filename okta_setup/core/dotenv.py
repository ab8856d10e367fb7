"""
Minimal .env file reading and writing.

Used in two places:
- `ENV_FILE` opt-in loading of tool settings (see okta_setup.core.config)
- `DotenvPropertySource`, which merges OIDC credentials into a target
  application's `.env` file

Usage:
    from okta_setup.core.dotenv import load_env_file, read_env_file, merge_env_file

    load_env_file(".env.local")
    values = read_env_file(".env")
    merge_env_file(".env", {"OKTA_OAUTH2_CLIENT_ID": "0oa..."})
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from pathlib import Path

_SAFE_VALUE = re.compile(r"^[A-Za-z0-9_./:@+-]*$")


def _strip_inline_comment(value: str) -> str:
    """Drop a trailing ` # comment` from an unquoted value."""
    if not value or value[0] in ('"', "'"):
        return value

    for marker in (" #", "\t#"):
        idx = value.find(marker)
        if idx != -1:
            return value[:idx].rstrip()
    return value


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        inner = value[1:-1]
        if value[0] == '"':
            inner = inner.replace('\\"', '"').replace("\\\\", "\\")
        return inner
    return value


def parse_line(line: str) -> tuple[str, str] | None:
    """Parse one line of a .env file.

    Accepts an optional leading `export `.

    Returns:
        Tuple of (key, value) or None for blank lines, comments and junk.
    """
    line = line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None

    if line.startswith("export "):
        line = line[len("export ") :].lstrip()

    key, value = line.split("=", 1)
    key = key.strip()
    if not key:
        return None

    return key, _unquote(_strip_inline_comment(value.strip()))


def format_line(key: str, value: str) -> str:
    """Render a key/value pair, quoting the value when needed."""
    if _SAFE_VALUE.match(value):
        return f"{key}={value}"
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'{key}="{escaped}"'


def read_env_file(path: str | Path) -> dict[str, str]:
    """Read all key/value pairs from a .env file.

    A missing file reads as empty. Later duplicates win.
    """
    path = Path(path)
    if not path.exists():
        return {}

    values: dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        parsed = parse_line(raw_line)
        if parsed:
            values[parsed[0]] = parsed[1]
    return values


def merge_env_file(path: str | Path, updates: Mapping[str, str]) -> None:
    """Write `updates` into a .env file, keeping unrelated lines as they are.

    Existing keys are rewritten in place, new keys are appended. The parent
    directory is created when missing.
    """
    path = Path(path)
    lines = path.read_text(encoding="utf-8").splitlines() if path.exists() else []
    pending = dict(updates)

    out: list[str] = []
    for raw_line in lines:
        parsed = parse_line(raw_line)
        if parsed and parsed[0] in pending:
            out.append(format_line(parsed[0], pending.pop(parsed[0])))
        else:
            out.append(raw_line)

    out.extend(format_line(key, value) for key, value in pending.items())

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(out) + "\n", encoding="utf-8")


def load_env_file(path: str | Path, overwrite: bool = False) -> dict[str, str]:
    """Export the contents of a .env file into os.environ.

    Args:
        path: Path to the .env file
        overwrite: Replace variables that are already set

    Returns:
        The variables that were actually set
    """
    loaded: dict[str, str] = {}
    for key, value in read_env_file(path).items():
        if not overwrite and key in os.environ:
            continue
        os.environ[key] = value
        loaded[key] = value
    return loaded
