"""Pydantic settings loaded from YAML configuration with environment overrides."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, SecretStr

from src.core.exceptions import ConfigurationError

_settings: Settings | None = None

_DEFAULT_CONFIG_PATH = Path("config/settings.yaml")

# Environment variable → (section, key)
_ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "DATADOG_API_KEY": ("datadog", "api_key"),
    "DATADOG_APP_KEY": ("datadog", "app_key"),
    "DATADOG_SITE": ("datadog", "site"),
    "LLAMA_API_KEY": ("llm", "api_key"),
    "LLAMA_MODEL": ("llm", "model"),
    "WEB_HOST": ("web", "host"),
    "WEB_PORT": ("web", "port"),
    "LOG_LEVEL": ("logging", "level"),
    "LOG_FORMAT": ("logging", "format"),
}


def _require(variable: str, value: SecretStr) -> str:
    secret = value.get_secret_value()
    if not secret.strip():
        raise ConfigurationError(variable)
    return secret


class DatadogConfig(BaseModel):
    """Datadog REST API configuration."""

    api_key: SecretStr = SecretStr("")
    app_key: SecretStr = SecretStr("")
    site: str = "datadoghq.com"
    console_url: str = "https://app.datadoghq.com"
    verify_ssl: bool = True
    timeout_secs: float = 30.0

    @property
    def base_url(self) -> str:
        return f"https://api.{self.site}"

    def require(self) -> tuple[str, str]:
        """Return (api_key, app_key), raising if either is unset."""
        return (
            _require("DATADOG_API_KEY", self.api_key),
            _require("DATADOG_APP_KEY", self.app_key),
        )


class LlamaConfig(BaseModel):
    """Llama chat-completions API configuration."""

    api_key: SecretStr = SecretStr("")
    base_url: str = "https://api.llama.com/v1"
    model: str = "Llama-4-Maverick-17B-128E-Instruct-FP8"
    temperature: float = 0.7
    max_tokens: int = 2000
    timeout_secs: float = 60.0

    def require(self) -> str:
        """Return the API key, raising if unset."""
        return _require("LLAMA_API_KEY", self.api_key)


class WebConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "0.0.0.0"
    port: int = 3000


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"


class Settings(BaseModel):
    """Root settings container."""

    datadog: DatadogConfig = DatadogConfig()
    llm: LlamaConfig = LlamaConfig()
    web: WebConfig = WebConfig()
    logging: LoggingConfig = LoggingConfig()


def _apply_env_overrides(
    data: dict[str, Any],
    environ: Mapping[str, str],
) -> dict[str, Any]:
    """Overlay non-empty environment variables onto the raw YAML mapping."""
    for var, (section, key) in _ENV_OVERRIDES.items():
        value = environ.get(var)
        if not value:
            continue
        block = data.get(section)
        if not isinstance(block, dict):
            block = {}
            data[section] = block
        block[key] = value
    return data


def load_settings(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings from a YAML file plus environment and cache globally.

    Args:
        path: Path to YAML config. Defaults to config/settings.yaml.
        environ: Environment mapping. Defaults to ``os.environ``.

    Returns:
        Parsed Settings instance.
    """
    global _settings  # noqa: PLW0603

    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f)
            if isinstance(raw, dict):
                data = raw

    data = _apply_env_overrides(data, os.environ if environ is None else environ)
    _settings = Settings(**data)
    return _settings


def get_settings() -> Settings:
    """Return the cached settings, loading defaults if not yet loaded."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the cached settings (useful for testing)."""
    global _settings  # noqa: PLW0603
    _settings = None
