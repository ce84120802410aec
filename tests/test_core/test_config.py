"""Tests for src/core/config.py — YAML loading, env overrides, SecretStr, require()."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from src.core.config import (
    DatadogConfig,
    LlamaConfig,
    LoggingConfig,
    Settings,
    get_settings,
    load_settings,
    reset_settings,
)
from src.core.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def _clean_settings() -> None:
    """Reset the global settings cache before each test."""
    reset_settings()


class TestDefaults:
    """Settings should have sensible defaults when no YAML is provided."""

    def test_default_datadog_config(self) -> None:
        cfg = DatadogConfig()
        assert cfg.site == "datadoghq.com"
        assert cfg.base_url == "https://api.datadoghq.com"
        assert cfg.api_key.get_secret_value() == ""
        assert cfg.verify_ssl is True

    def test_default_llama_config(self) -> None:
        cfg = LlamaConfig()
        assert cfg.base_url == "https://api.llama.com/v1"
        assert cfg.model == "Llama-4-Maverick-17B-128E-Instruct-FP8"
        assert cfg.temperature == 0.7
        assert cfg.max_tokens == 2000

    def test_default_logging_config(self) -> None:
        cfg = LoggingConfig()
        assert cfg.level == "INFO"
        assert cfg.format == "json"

    def test_default_settings(self) -> None:
        s = Settings()
        assert s.web.port == 3000
        assert s.web.host == "0.0.0.0"
        assert s.logging.level == "INFO"

    def test_site_changes_base_url(self) -> None:
        cfg = DatadogConfig(site="datadoghq.eu")
        assert cfg.base_url == "https://api.datadoghq.eu"


class TestYamlLoading:
    """Settings should load correctly from YAML files."""

    def test_load_from_yaml(self, tmp_path: Path) -> None:
        config_data = {
            "datadog": {
                "api_key": "dd-key",
                "app_key": "dd-app",
                "site": "us5.datadoghq.com",
            },
            "llm": {"api_key": "llama-key", "max_tokens": 500},
            "web": {"port": 8081},
            "logging": {"level": "DEBUG", "format": "console"},
        }
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(yaml.dump(config_data))

        settings = load_settings(config_file, environ={})

        assert settings.datadog.api_key.get_secret_value() == "dd-key"
        assert settings.datadog.app_key.get_secret_value() == "dd-app"
        assert settings.datadog.site == "us5.datadoghq.com"
        assert settings.llm.api_key.get_secret_value() == "llama-key"
        assert settings.llm.max_tokens == 500
        assert settings.web.port == 8081
        assert settings.logging.level == "DEBUG"
        assert settings.logging.format == "console"

    def test_load_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        settings = load_settings(tmp_path / "nonexistent.yaml", environ={})
        assert settings.datadog.site == "datadoghq.com"
        assert settings.web.port == 3000

    def test_load_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        settings = load_settings(config_file, environ={})
        assert settings.llm.temperature == 0.7

    def test_partial_yaml_merges_with_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(yaml.dump({"datadog": {"timeout_secs": 5}}))

        settings = load_settings(config_file, environ={})
        assert settings.datadog.timeout_secs == 5
        # Other defaults still intact
        assert settings.datadog.site == "datadoghq.com"
        assert settings.llm.model == "Llama-4-Maverick-17B-128E-Instruct-FP8"

    def test_get_settings_returns_cached_instance(self, tmp_path: Path) -> None:
        loaded = load_settings(tmp_path / "nonexistent.yaml", environ={})
        assert get_settings() is loaded


class TestEnvOverrides:
    def test_env_sets_credentials(self, tmp_path: Path) -> None:
        settings = load_settings(
            tmp_path / "nonexistent.yaml",
            environ={
                "DATADOG_API_KEY": "env-dd",
                "DATADOG_APP_KEY": "env-app",
                "LLAMA_API_KEY": "env-llama",
            },
        )
        assert settings.datadog.api_key.get_secret_value() == "env-dd"
        assert settings.datadog.app_key.get_secret_value() == "env-app"
        assert settings.llm.api_key.get_secret_value() == "env-llama"

    def test_env_wins_over_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(yaml.dump({"datadog": {"site": "datadoghq.eu"}, "web": {"port": 9000}}))

        settings = load_settings(config_file, environ={"DATADOG_SITE": "ddog-gov.com", "WEB_PORT": "9100"})
        assert settings.datadog.site == "ddog-gov.com"
        assert settings.web.port == 9100

    def test_empty_env_value_is_ignored(self, tmp_path: Path) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(yaml.dump({"logging": {"level": "WARNING"}}))

        settings = load_settings(config_file, environ={"LOG_LEVEL": ""})
        assert settings.logging.level == "WARNING"


class TestRequire:
    def test_datadog_require_returns_keys(self) -> None:
        cfg = DatadogConfig(api_key="a", app_key="b")  # type: ignore[arg-type]
        assert cfg.require() == ("a", "b")

    def test_datadog_missing_api_key_named(self) -> None:
        cfg = DatadogConfig(app_key="b")  # type: ignore[arg-type]
        with pytest.raises(ConfigurationError) as exc_info:
            cfg.require()
        assert exc_info.value.variable == "DATADOG_API_KEY"

    def test_datadog_missing_app_key_named(self) -> None:
        cfg = DatadogConfig(api_key="a")  # type: ignore[arg-type]
        with pytest.raises(ConfigurationError) as exc_info:
            cfg.require()
        assert exc_info.value.variable == "DATADOG_APP_KEY"
        assert "DATADOG_APP_KEY" in str(exc_info.value)

    def test_whitespace_key_counts_as_missing(self) -> None:
        cfg = LlamaConfig(api_key="   ")  # type: ignore[arg-type]
        with pytest.raises(ConfigurationError):
            cfg.require()

    def test_llama_require_returns_key(self) -> None:
        cfg = LlamaConfig(api_key="k")  # type: ignore[arg-type]
        assert cfg.require() == "k"


class TestSecretStr:
    """Sensitive fields should use SecretStr to prevent leaking."""

    def test_secret_str_repr_does_not_leak(self) -> None:
        cfg = DatadogConfig(
            api_key="super-secret",  # type: ignore[arg-type]
            app_key="app-secret",  # type: ignore[arg-type]
        )
        repr_str = repr(cfg)
        assert "super-secret" not in repr_str
        assert "app-secret" not in repr_str
        assert "**********" in repr_str

    def test_secret_str_get_value(self) -> None:
        cfg = LlamaConfig(api_key="my-secret")  # type: ignore[arg-type]
        assert cfg.api_key.get_secret_value() == "my-secret"
