"""
Unit tests for setup configuration loading.
"""

import logging
from pathlib import Path

import pytest

from dnscontrolkit.config import (
    DEFAULT_CONFIG_FILE,
    SetupConfig,
    load_config,
    load_yaml_config,
    parse_bool,
)
from dnscontrolkit.core.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    """Keep a dnscontrolkit.yaml in the checkout from leaking into tests."""
    monkeypatch.chdir(tmp_path)


class TestSetupConfig:
    """Test SetupConfig validation."""

    def test_defaults(self):
        config = SetupConfig(version="latest")

        assert config.resolve_strategy == "auto"
        assert config.cache_enabled is True
        assert config.lock is False
        assert config.install_root is None
        assert config.cache_dir == Path.home() / ".dnscontrolkit" / "cache"

    def test_missing_version(self):
        with pytest.raises(ConfigurationError, match="Input required and not supplied: version"):
            SetupConfig(version="  ")

    def test_invalid_strategy(self):
        with pytest.raises(ConfigurationError, match="Invalid resolve-strategy"):
            SetupConfig(version="latest", resolve_strategy="guess")

    def test_invalid_timeout(self):
        with pytest.raises(ConfigurationError, match="http-timeout"):
            SetupConfig(version="latest", http_timeout=0)

    def test_token_not_in_repr(self):
        config = SetupConfig(version="latest", auth_token="ghp_secret")

        assert "ghp_secret" not in repr(config)

    def test_paths_expanded(self):
        config = SetupConfig(version="latest", install_root="~/tools")

        assert config.install_root == Path.home() / "tools"


class TestLoadYamlConfig:
    def test_missing_optional(self, tmp_path):
        assert load_yaml_config(tmp_path / "missing.yaml") == {}

    def test_missing_required(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_yaml_config(tmp_path / "missing.yaml", required=True)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("version: [unclosed")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_yaml_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="must be a mapping"):
            load_yaml_config(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_yaml_config(path) == {}


class TestParseBool:
    @pytest.mark.parametrize("value", ["true", "Yes", "1", "on", True])
    def test_true(self, value):
        assert parse_bool("cache", value) is True

    @pytest.mark.parametrize("value", ["false", "NO", "0", "off", False])
    def test_false(self, value):
        assert parse_bool("cache", value) is False

    def test_invalid(self):
        with pytest.raises(ConfigurationError, match="Invalid boolean for cache"):
            parse_bool("cache", "maybe")


class TestLoadConfig:
    """Test layering of defaults, file, inputs and overrides."""

    def test_inputs(self):
        config = load_config(
            environ={
                "INPUT_VERSION": "v4.2.0",
                "INPUT_AUTH-TOKEN": "ghp_secret",
                "INPUT_CACHE": "false",
                "INPUT_LOCK": "true",
            }
        )

        assert config.version == "v4.2.0"
        assert config.auth_token == "ghp_secret"
        assert config.cache_enabled is False
        assert config.lock is True

    def test_github_token_fallback(self):
        config = load_config(
            environ={"INPUT_VERSION": "latest", "INPUT_GITHUB-TOKEN": "ghp_fallback"}
        )

        assert config.auth_token == "ghp_fallback"

    def test_blank_input_is_unset(self):
        config = load_config(environ={"INPUT_VERSION": "latest", "INPUT_AUTH-TOKEN": "  "})

        assert config.auth_token is None

    def test_missing_version(self):
        with pytest.raises(ConfigurationError, match="version"):
            load_config(environ={})

    def test_default_file_in_cwd(self, tmp_path):
        (tmp_path / DEFAULT_CONFIG_FILE).write_text(
            "version: latest\nresolve-strategy: redirect\nhttp-timeout: 10\n"
        )

        config = load_config(environ={})

        assert config.version == "latest"
        assert config.resolve_strategy == "redirect"
        assert config.http_timeout == 10.0

    def test_explicit_file_must_exist(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(config_file=tmp_path / "custom.yaml", environ={})

    def test_precedence(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("version: v1.0.0\ncache: false\nlock: true\n")

        config = load_config(
            config_file=path,
            environ={"INPUT_VERSION": "v2.0.0", "INPUT_CACHE": "true"},
            overrides={"version": "v3.0.0", "lock": None},
        )

        assert config.version == "v3.0.0"
        assert config.cache_enabled is True
        assert config.lock is True

    def test_unknown_file_key_warns(self, tmp_path, caplog):
        path = tmp_path / "custom.yaml"
        path.write_text("version: latest\ncolour: blue\n")

        with caplog.at_level(logging.WARNING):
            load_config(config_file=path, environ={})

        assert "Ignoring unknown configuration key: colour" in caplog.text

    def test_invalid_boolean_input(self):
        with pytest.raises(ConfigurationError, match="Invalid boolean"):
            load_config(environ={"INPUT_VERSION": "latest", "INPUT_CACHE": "sometimes"})
