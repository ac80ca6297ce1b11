"""Tests for client configuration loading and validation."""

import pytest
import yaml
from pydantic import ValidationError

from novaposhta.config import (
    DEFAULT_API_URI,
    NovaPoshtaConfig,
    load_config,
    resolve_env_vars,
)
from novaposhta.models import ResponseFormat


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate from real NOVAPOSHTA_* variables and config files."""
    for name in ("API_KEY", "API_URI", "LANGUAGE", "RESPONSE_FORMAT", "TIMEOUT"):
        monkeypatch.delenv(f"NOVAPOSHTA_{name}", raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


class TestNovaPoshtaConfig:
    """Tests for NovaPoshtaConfig defaults and validation."""

    def test_defaults(self):
        cfg = NovaPoshtaConfig()
        assert cfg.api_key == ""
        assert cfg.api_uri == DEFAULT_API_URI
        assert cfg.language == "ru"
        assert cfg.response_format == ResponseFormat.JSON
        assert cfg.timeout == 0

    def test_trailing_slash_stripped(self):
        cfg = NovaPoshtaConfig(api_uri="https://api.example.test/v2.0/")
        assert cfg.api_uri == "https://api.example.test/v2.0"

    def test_negative_timeout_rejected(self):
        with pytest.raises(ValidationError):
            NovaPoshtaConfig(timeout=-1)

    def test_unknown_format_rejected(self):
        with pytest.raises(ValidationError):
            NovaPoshtaConfig(response_format="csv")


class TestResolveEnvVars:
    """Tests for ${VAR} substitution."""

    def test_resolves_reference(self, monkeypatch):
        monkeypatch.setenv("NP_TEST_KEY", "k-123")
        assert resolve_env_vars("${NP_TEST_KEY}") == "k-123"

    def test_missing_var_becomes_empty(self):
        assert resolve_env_vars("key=${NP_UNSET_VAR_XYZ}") == "key="


class TestLoadConfig:
    """Tests for load_config file discovery and overrides."""

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text(yaml.dump({"api_key": "file-key", "language": "ua", "timeout": 15}))

        cfg = load_config(str(path))

        assert cfg.api_key == "file-key"
        assert cfg.language == "ua"
        assert cfg.timeout == 15

    def test_explicit_missing_path_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "absent.yaml"))

    def test_discovers_cwd_file(self, tmp_path):
        (tmp_path / "novaposhta.yaml").write_text(yaml.dump({"response_format": "xml"}))

        assert load_config().response_format == ResponseFormat.XML

    def test_discovers_home_file(self, tmp_path):
        home_dir = tmp_path / "home" / ".novaposhta"
        home_dir.mkdir(parents=True)
        (home_dir / "config.yaml").write_text(yaml.dump({"api_key": "home-key"}))

        assert load_config().api_key == "home-key"

    def test_no_file_uses_defaults(self):
        assert load_config() == NovaPoshtaConfig()

    def test_env_reference_in_yaml(self, tmp_path, monkeypatch):
        monkeypatch.setenv("NP_SECRET", "from-env")
        (tmp_path / "novaposhta.yaml").write_text("api_key: ${NP_SECRET}\n")

        assert load_config().api_key == "from-env"

    def test_env_override_wins(self, tmp_path, monkeypatch):
        (tmp_path / "novaposhta.yaml").write_text(yaml.dump({"api_key": "file-key"}))
        monkeypatch.setenv("NOVAPOSHTA_API_KEY", "env-key")
        monkeypatch.setenv("NOVAPOSHTA_TIMEOUT", "2.5")

        cfg = load_config()

        assert cfg.api_key == "env-key"
        assert cfg.timeout == 2.5

    def test_unrelated_env_ignored(self, monkeypatch):
        monkeypatch.setenv("NOVAPOSHTA_UNKNOWN_SETTING", "x")
        assert load_config() == NovaPoshtaConfig()
