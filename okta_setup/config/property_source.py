"""
Mutable property sources for the application being configured.

A property source is a flat `key -> str` view of a configuration file. The
setup service reads a single key (the client ID) and writes its three
derived keys with one `add_properties` call.

Implementations:
- MapPropertySource: in memory
- PropertiesFilePropertySource: Java `.properties`
- YamlPropertySource: YAML, nested mappings flattened with dots
- DotenvPropertySource: `.env`, keys upper-snake-cased
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

import yaml

from okta_setup.core import dotenv
from okta_setup.core.errors import ClientConfigurationError


class MutablePropertySource(Protocol):
    def get_property(self, key: str) -> str | None: ...

    def add_properties(self, properties: Mapping[str, str]) -> None: ...


class MapPropertySource:
    def __init__(self, properties: Mapping[str, str] | None = None):
        self._properties: dict[str, str] = dict(properties or {})

    def get_property(self, key: str) -> str | None:
        return self._properties.get(key)

    def add_properties(self, properties: Mapping[str, str]) -> None:
        self._properties.update(properties)

    def as_dict(self) -> dict[str, str]:
        return dict(self._properties)


# =============================================================================
# .properties
# =============================================================================

_PROPERTIES_SEPARATOR = re.compile(r"(?<!\\)[=:]|(?<!\\)\s")


_PROPERTIES_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}


def _unescape_properties(value: str) -> str:
    return re.sub(r"\\(.)", lambda m: _PROPERTIES_ESCAPES.get(m.group(1), m.group(1)), value)


def _escape_properties_key(key: str) -> str:
    return re.sub(r"([=:\s\\])", r"\\\1", key)


def _format_properties_line(key: str, value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("\n", "\\n")
    return f"{_escape_properties_key(key)}={escaped}"


def _parse_properties_line(line: str) -> tuple[str, str] | None:
    stripped = line.strip()
    if not stripped or stripped[0] in "#!":
        return None
    match = _PROPERTIES_SEPARATOR.search(stripped)
    if not match:
        return _unescape_properties(stripped), ""
    key = stripped[: match.start()]
    rest = stripped[match.start() :].lstrip(" \t")
    if rest[:1] in ("=", ":"):
        rest = rest[1:]
    value = rest.lstrip(" \t")
    return _unescape_properties(key), _unescape_properties(value)


class PropertiesFilePropertySource:
    """
    Reads and merges a Java-style properties file.

    Line continuations are not supported; comments and unrelated keys are
    kept as they are when writing.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _lines(self) -> list[str]:
        if not self.path.exists():
            return []
        return self.path.read_text(encoding="utf-8").splitlines()

    def get_property(self, key: str) -> str | None:
        value = None
        for line in self._lines():
            parsed = _parse_properties_line(line)
            if parsed and parsed[0] == key:
                value = parsed[1]
        return value

    def add_properties(self, properties: Mapping[str, str]) -> None:
        pending = dict(properties)
        out: list[str] = []
        for line in self._lines():
            parsed = _parse_properties_line(line)
            if parsed and parsed[0] in pending:
                key = parsed[0]
                out.append(_format_properties_line(key, pending.pop(key)))
            else:
                out.append(line)
        for key, value in pending.items():
            out.append(_format_properties_line(key, value))

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("\n".join(out) + "\n", encoding="utf-8")


# =============================================================================
# YAML
# =============================================================================


def _flatten(data: Mapping, prefix: str = "") -> dict[str, str]:
    flat: dict[str, str] = {}
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(_flatten(value, full_key))
        elif value is not None:
            flat[full_key] = str(value)
    return flat


def _find_existing(node: dict, parts: list[str]) -> tuple[dict, str] | None:
    """Locate a key already present in any flat or nested spelling.

    `okta.oauth2.client-id` may be stored as one flat key, fully nested, or
    anything in between (`okta: {oauth2.client-id: ...}`).
    """
    for i in range(len(parts), 0, -1):
        head = ".".join(parts[:i])
        if head not in node:
            continue
        if i == len(parts):
            return node, head
        child = node[head]
        if isinstance(child, dict):
            found = _find_existing(child, parts[i:])
            if found:
                return found
    return None


def _set_nested(data: dict, dotted_key: str, value: str) -> None:
    parts = dotted_key.split(".")
    existing = _find_existing(data, parts)
    if existing:
        container, key = existing
        container[key] = value
        return
    node = data
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[parts[-1]] = value


class YamlPropertySource:
    """YAML config such as Spring Boot's application.yml."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ClientConfigurationError(
                f"Unable to parse YAML file: {self.path}",
                details={"path": str(self.path), "error": str(exc)},
            ) from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ClientConfigurationError(
                f"YAML file must contain a mapping: {self.path}", details={"path": str(self.path)}
            )
        return data

    def get_property(self, key: str) -> str | None:
        return _flatten(self._load()).get(key)

    def add_properties(self, properties: Mapping[str, str]) -> None:
        data = self._load()
        for key, value in properties.items():
            _set_nested(data, key, value)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            yaml.safe_dump(data, default_flow_style=False, sort_keys=False), encoding="utf-8"
        )


# =============================================================================
# .env
# =============================================================================


def to_env_key(key: str) -> str:
    """`okta.oauth2.client-id` -> `OKTA_OAUTH2_CLIENT_ID`."""
    return re.sub(r"[^A-Za-z0-9]", "_", key).upper()


class DotenvPropertySource:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def get_property(self, key: str) -> str | None:
        return dotenv.read_env_file(self.path).get(to_env_key(key))

    def add_properties(self, properties: Mapping[str, str]) -> None:
        dotenv.merge_env_file(self.path, {to_env_key(k): v for k, v in properties.items()})


def property_source_for(path: str | Path) -> MutablePropertySource:
    """Pick a property source implementation from the file name."""
    path = Path(path)
    if path.suffix in (".yml", ".yaml"):
        return YamlPropertySource(path)
    if path.name.startswith(".env") or path.suffix == ".env":
        return DotenvPropertySource(path)
    return PropertiesFilePropertySource(path)
