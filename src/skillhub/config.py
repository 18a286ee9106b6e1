"""Settings for skillhub.

Settings are read from ``skillhub.config.yaml`` (discovered by walking up from
the working directory) with ``skillhub.secrets.yaml`` merged on top. Values
from the files are passed to :class:`Settings` directly, so they win over
``SKILLHUB_*`` environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from skillhub import __version__

CONFIG_FILENAME = "skillhub.config.yaml"
SECRETS_FILENAME = "skillhub.secrets.yaml"

DEFAULT_HUB_OWNER = "different-ai"
DEFAULT_HUB_REPO = "openwork-hub"
DEFAULT_HUB_REF = "main"


class HubSettings(BaseModel):
    """Remote content repository and HTTP behaviour."""

    owner: str = DEFAULT_HUB_OWNER
    repo: str = DEFAULT_HUB_REPO
    ref: str = DEFAULT_HUB_REF

    api_base_url: str = "https://api.github.com"
    raw_base_url: str = "https://raw.githubusercontent.com"
    user_agent: str = f"skillhub/{__version__}"

    github_token: str | None = None
    """Token sent as a bearer credential on API calls. Falls back to GITHUB_TOKEN / GH_TOKEN."""

    timeout_seconds: float = 20.0
    catalog_ttl_seconds: float = 300.0
    catalog_concurrency: int = Field(default=6, ge=1)

    model_config = ConfigDict(extra="ignore")

    @field_validator("api_base_url", "raw_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def resolved_token(self) -> str | None:
        token = self.github_token or os.environ.get("GITHUB_TOKEN") or os.environ.get("GH_TOKEN")
        if token and token.strip():
            return token.strip()
        return None


class LoggerSettings(BaseModel):
    level: Literal["debug", "info", "warning", "error"] = "warning"
    show_data: bool = True

    model_config = ConfigDict(extra="ignore")


class Settings(BaseSettings):
    hub: HubSettings = Field(default_factory=HubSettings)
    logger: LoggerSettings = Field(default_factory=LoggerSettings)

    config_file: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="SKILLHUB_",
        env_nested_delimiter="__",
        extra="ignore",
    )


_settings: Settings | None = None


def find_config_file(start: Path | None = None) -> Path | None:
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        existing = merged.get(key)
        if isinstance(existing, dict) and isinstance(value, dict):
            merged[key] = deep_merge(existing, value)
        else:
            merged[key] = value
    return merged


def _load_yaml_mapping(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}
    if not isinstance(payload, dict):
        raise ValueError(f"Configuration root must be a mapping: {path}")
    return payload


def load_settings(config_path: str | Path | None = None) -> Settings:
    path = Path(config_path).expanduser() if config_path else find_config_file()
    merged: dict[str, Any] = {}
    if path is not None:
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        merged = _load_yaml_mapping(path)
        secrets_path = path.parent / SECRETS_FILENAME
        if secrets_path.is_file():
            merged = deep_merge(merged, _load_yaml_mapping(secrets_path))
        merged["config_file"] = str(path)
    return Settings(**merged)


def get_settings(config_path: str | Path | None = None) -> Settings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if config_path is not None:
        _settings = load_settings(config_path)
        return _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def update_global_settings(settings: Settings | None) -> None:
    global _settings
    _settings = settings
