from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from tldr_core.schemas import Platform

DEFAULT_CONFIG_PATH = Path("~/.tldrrc")
DEFAULT_ARCHIVE_URL = (
    "https://github.com/tldr-pages/tldr-pages.github.io/raw/main/assets/tldr.zip"
)
DEFAULT_PAGES_REPOSITORY = "https://github.com/tldr-pages/tldr"


class CacheConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    directory: str = "~/.tldr"
    freshness_days: int = Field(default=30, ge=1)
    staging_namespace: str = "tldr"

    @field_validator("directory", "staging_namespace")
    @classmethod
    def validate_not_empty(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("cache path fields must not be empty")
        return normalized

    @field_validator("staging_namespace")
    @classmethod
    def validate_staging_namespace(cls, value: str) -> str:
        if "/" in value or "\\" in value or value in {".", ".."}:
            raise ValueError("cache.staging_namespace must be a single path segment")
        return value

    @property
    def store_root(self) -> Path:
        return Path(self.directory).expanduser() / "cache"


class RemoteConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    archive_url: str = DEFAULT_ARCHIVE_URL
    pages_repository: str = DEFAULT_PAGES_REPOSITORY
    timeout_seconds: float = Field(default=30.0, gt=0.0)

    @field_validator("archive_url")
    @classmethod
    def validate_archive_url(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized.startswith(("http://", "https://")):
            raise ValueError("remote.archive_url must be an http(s) URL")
        return normalized


class PagesConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    platform: Platform | None = None
    language: str | None = None

    @field_validator("platform", mode="before")
    @classmethod
    def normalize_platform(cls, value: object) -> object:
        if isinstance(value, str):
            normalized = value.strip().lower()
            return normalized or None
        return value

    @field_validator("language")
    @classmethod
    def normalize_language(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip()
        return normalized or None


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    cache: CacheConfig = Field(default_factory=CacheConfig)
    remote: RemoteConfig = Field(default_factory=RemoteConfig)
    pages: PagesConfig = Field(default_factory=PagesConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from ``path``, falling back to ``~/.tldrrc`` and then defaults."""
    if path is None:
        candidate = DEFAULT_CONFIG_PATH.expanduser()
        if not candidate.is_file():
            return AppConfig()
        path = candidate

    raw = Path(path).read_text(encoding="utf-8")
    payload = _parse_yaml_or_json(raw) if raw.strip() else {}
    try:
        return AppConfig.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc


def _parse_yaml_or_json(raw: str) -> dict[str, Any]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        parsed = _parse_yaml(raw)
    if not isinstance(parsed, dict):
        raise ValueError("Configuration root must be an object.")
    return parsed


def _parse_yaml(raw: str) -> dict[str, Any]:
    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ValueError(f"Configuration is neither JSON nor YAML: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ValueError("Configuration root must be an object.")
    return parsed
