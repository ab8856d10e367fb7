"""
Unit tests for property sources.

Tests cover:
- In-memory source
- .properties read/merge keeping comments and unrelated keys
- YAML nested read/merge
- .env key mapping
- File type selection
"""

import pytest
import yaml

from okta_setup.config.property_source import (
    DotenvPropertySource,
    MapPropertySource,
    PropertiesFilePropertySource,
    YamlPropertySource,
    property_source_for,
    to_env_key,
)
from okta_setup.core.errors import ClientConfigurationError

NEW_PROPS = {
    "okta.oauth2.issuer": "https://dev-123456.okta.com/oauth2/default",
    "okta.oauth2.client-id": "0oa1new",
    "okta.oauth2.client-secret": "secret",
}


class TestMapPropertySource:
    def test_get_missing_is_none(self):
        assert MapPropertySource().get_property("x") is None

    def test_add_overwrites_and_keeps_others(self):
        source = MapPropertySource({"a": "1", "okta.oauth2.client-id": "old"})

        source.add_properties(NEW_PROPS)

        assert source.get_property("a") == "1"
        assert source.get_property("okta.oauth2.client-id") == "0oa1new"
        assert len(source.as_dict()) == 4


class TestPropertiesFilePropertySource:
    def test_missing_file_reads_none(self, tmp_path):
        source = PropertiesFilePropertySource(tmp_path / "application.properties")

        assert source.get_property("okta.oauth2.client-id") is None

    @pytest.mark.parametrize(
        "line, expected",
        [
            ("okta.oauth2.client-id=abc", "abc"),
            ("okta.oauth2.client-id = abc", "abc"),
            ("okta.oauth2.client-id: abc", "abc"),
            ("okta.oauth2.client-id abc", "abc"),
            ("okta.oauth2.client-id=https://x.okta.com", "https://x.okta.com"),
            ("okta.oauth2.client-id=:leading-colon", ":leading-colon"),
        ],
    )
    def test_separators(self, tmp_path, line, expected):
        path = tmp_path / "application.properties"
        path.write_text(f"# comment\n{line}\n", encoding="utf-8")

        assert PropertiesFilePropertySource(path).get_property("okta.oauth2.client-id") == expected

    def test_comments_are_ignored(self, tmp_path):
        path = tmp_path / "application.properties"
        path.write_text("#okta.oauth2.client-id=abc\n!okta.oauth2.client-id=def\n", "utf-8")

        assert PropertiesFilePropertySource(path).get_property("okta.oauth2.client-id") is None

    def test_merge_preserves_other_lines(self, tmp_path):
        path = tmp_path / "application.properties"
        path.write_text(
            "# app config\nserver.port=8080\nokta.oauth2.client-id={clientId}\n", encoding="utf-8"
        )
        source = PropertiesFilePropertySource(path)

        source.add_properties(NEW_PROPS)

        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "# app config"
        assert lines[1] == "server.port=8080"
        assert lines[2] == "okta.oauth2.client-id=0oa1new"
        assert source.get_property("okta.oauth2.issuer") == NEW_PROPS["okta.oauth2.issuer"]
        assert source.get_property("okta.oauth2.client-secret") == "secret"

    def test_creates_missing_file_and_directories(self, tmp_path):
        path = tmp_path / "src" / "main" / "resources" / "application.properties"

        PropertiesFilePropertySource(path).add_properties(NEW_PROPS)

        assert PropertiesFilePropertySource(path).get_property("okta.oauth2.client-id") == "0oa1new"

    def test_special_characters_survive(self, tmp_path):
        path = tmp_path / "application.properties"
        source = PropertiesFilePropertySource(path)

        source.add_properties({"my key": "a\\b\nc"})

        assert source.get_property("my key") == "a\\b\nc"


class TestYamlPropertySource:
    def test_reads_nested_keys(self, tmp_path):
        path = tmp_path / "application.yml"
        path.write_text("okta:\n  oauth2:\n    client-id: abc\n", encoding="utf-8")

        assert YamlPropertySource(path).get_property("okta.oauth2.client-id") == "abc"

    def test_merge_nests_keys_and_keeps_others(self, tmp_path):
        path = tmp_path / "application.yml"
        path.write_text("server:\n  port: 8080\nokta:\n  oauth2:\n    client-id: old\n", "utf-8")

        YamlPropertySource(path).add_properties(NEW_PROPS)

        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert data["server"] == {"port": 8080}
        assert data["okta"]["oauth2"] == {
            "client-id": "0oa1new",
            "issuer": "https://dev-123456.okta.com/oauth2/default",
            "client-secret": "secret",
        }

    def test_flat_dotted_key_overwritten_in_place(self, tmp_path):
        path = tmp_path / "application.yml"
        path.write_text('okta.oauth2.client-id: "{clientId}"\n', encoding="utf-8")
        source = YamlPropertySource(path)

        source.add_properties({"okta.oauth2.client-id": "0oa1new"})

        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert data == {"okta.oauth2.client-id": "0oa1new"}
        assert source.get_property("okta.oauth2.client-id") == "0oa1new"

    def test_partly_dotted_key_overwritten_in_place(self, tmp_path):
        path = tmp_path / "application.yml"
        path.write_text("okta:\n  oauth2.client-id: old\n", encoding="utf-8")

        YamlPropertySource(path).add_properties({"okta.oauth2.client-id": "0oa1new"})

        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert data == {"okta": {"oauth2.client-id": "0oa1new"}}

    def test_non_scalar_values_are_flattened(self, tmp_path):
        path = tmp_path / "application.yml"
        path.write_text("server:\n  port: 8080\n", encoding="utf-8")

        assert YamlPropertySource(path).get_property("server.port") == "8080"

    def test_malformed_yaml_raises(self, tmp_path):
        path = tmp_path / "application.yml"
        path.write_text("okta: [", encoding="utf-8")

        with pytest.raises(ClientConfigurationError):
            YamlPropertySource(path).get_property("okta.oauth2.client-id")


class TestDotenvPropertySource:
    def test_to_env_key(self):
        assert to_env_key("okta.oauth2.client-id") == "OKTA_OAUTH2_CLIENT_ID"
        assert (
            to_env_key("spring.security.oauth2.client.provider.custom.issuer-uri")
            == "SPRING_SECURITY_OAUTH2_CLIENT_PROVIDER_CUSTOM_ISSUER_URI"
        )

    def test_round_trip_through_file(self, tmp_path):
        path = tmp_path / ".env"
        path.write_text("PORT=8080\n", encoding="utf-8")
        source = DotenvPropertySource(path)

        source.add_properties(NEW_PROPS)

        assert source.get_property("okta.oauth2.client-id") == "0oa1new"
        content = path.read_text(encoding="utf-8")
        assert content.startswith("PORT=8080\n")
        assert "OKTA_OAUTH2_CLIENT_SECRET=secret" in content


class TestPropertySourceFor:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("application.yml", YamlPropertySource),
            ("application.yaml", YamlPropertySource),
            (".env", DotenvPropertySource),
            (".env.local", DotenvPropertySource),
            ("application.properties", PropertiesFilePropertySource),
            ("gradle.properties", PropertiesFilePropertySource),
        ],
    )
    def test_selects_by_file_name(self, tmp_path, name, expected):
        assert isinstance(property_source_for(tmp_path / name), expected)
