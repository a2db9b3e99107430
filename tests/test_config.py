"""Tests for YAML configuration and CLI overrides."""

from argparse import Namespace

import pytest

from cli_config import apply_cli_overrides, apply_file_config, get_github_token
from constants import Constants, apply_config, load_yaml_config

_TUNABLES = ("GITHUB_API_BASE", "REQUEST_TIMEOUT", "MAX_CONCURRENCY", "MANIFEST_ASSET_NAME", "HTTP_RETRY_MAX")


@pytest.fixture(autouse=True)
def restore_constants(monkeypatch):
    """Undo any change tests make to Constants."""
    for name in _TUNABLES:
        monkeypatch.setattr(Constants, name, getattr(Constants, name))
    monkeypatch.delenv(Constants.ENV_CONFIG_PATH, raising=False)
    monkeypatch.setattr(Constants, "CONFIG_FILE_CANDIDATES", [])


class TestLoadYamlConfig:
    """Test config file discovery and loading."""

    def test_explicit_path(self, tmp_path):
        """Test an explicit path is loaded."""
        cfg = tmp_path / "c.yml"
        cfg.write_text("swizzle:\n  max_concurrency: 3\n")

        assert load_yaml_config(str(cfg)) == {"swizzle": {"max_concurrency": 3}}

    def test_env_path(self, tmp_path, monkeypatch):
        """Test SWIZZLE_CONFIG points at the file."""
        cfg = tmp_path / "env.yml"
        cfg.write_text("swizzle:\n  request_timeout: 5\n")
        monkeypatch.setenv(Constants.ENV_CONFIG_PATH, str(cfg))

        assert load_yaml_config() == {"swizzle": {"request_timeout": 5}}

    def test_no_file(self):
        """Test no config file gives an empty dict."""
        assert load_yaml_config() == {}

    def test_invalid_yaml(self, tmp_path, caplog):
        """Test unreadable YAML is ignored with a warning."""
        cfg = tmp_path / "bad.yml"
        cfg.write_text("swizzle: [\n")

        assert load_yaml_config(str(cfg)) == {}
        assert "Failed to load config" in caplog.text

    def test_non_mapping(self, tmp_path):
        """Test a YAML list is ignored."""
        cfg = tmp_path / "list.yml"
        cfg.write_text("- a\n")

        assert load_yaml_config(str(cfg)) == {}


class TestApplyConfig:
    """Test copying config values onto Constants."""

    def test_applies_known_keys(self):
        """Test known keys are set and coerced."""
        apply_config({"swizzle": {
            "github_api_base": "https://ghe.example.test/api/v3",
            "max_concurrency": "2",
            "manifest_asset_name": "mod.zle",
            "unknown": 1,
        }})

        assert Constants.GITHUB_API_BASE == "https://ghe.example.test/api/v3"
        assert Constants.MAX_CONCURRENCY == 2
        assert Constants.MANIFEST_ASSET_NAME == "mod.zle"
        assert not hasattr(Constants, "unknown")

    def test_non_integer_ignored(self, caplog):
        """Test a bad integer leaves the default in place."""
        before = Constants.REQUEST_TIMEOUT

        apply_config({"swizzle": {"request_timeout": "soon"}})

        assert Constants.REQUEST_TIMEOUT == before
        assert "Ignoring non-integer" in caplog.text


class TestCliConfig:
    """Test CLI-level config handling."""

    def test_file_config_from_flag(self, tmp_path):
        """Test --config is loaded and applied."""
        cfg = tmp_path / "c.yml"
        cfg.write_text("swizzle:\n  http_retry_max: 7\n")

        apply_file_config(Namespace(CONFIG=str(cfg)))

        assert Constants.HTTP_RETRY_MAX == 7

    def test_cli_overrides_win(self):
        """Test flags override config values."""
        Constants.MAX_CONCURRENCY = 3

        apply_cli_overrides(Namespace(API_BASE="https://x.test/", MAX_CONCURRENCY=9))

        assert Constants.GITHUB_API_BASE == "https://x.test"
        assert Constants.MAX_CONCURRENCY == 9

    def test_invalid_concurrency_ignored(self):
        """Test a concurrency below one is ignored."""
        before = Constants.MAX_CONCURRENCY

        apply_cli_overrides(Namespace(API_BASE=None, MAX_CONCURRENCY=0))

        assert Constants.MAX_CONCURRENCY == before

    def test_token_precedence(self, monkeypatch):
        """Test --github-token beats GITHUB_TOKEN."""
        monkeypatch.setenv(Constants.ENV_GITHUB_TOKEN, "env")

        assert get_github_token(Namespace(GITHUB_TOKEN="flag")) == "flag"
        assert get_github_token(Namespace(GITHUB_TOKEN=None)) == "env"

    def test_no_token(self, monkeypatch):
        """Test None without flag or environment."""
        monkeypatch.delenv(Constants.ENV_GITHUB_TOKEN, raising=False)

        assert get_github_token(Namespace(GITHUB_TOKEN="  ")) is None
