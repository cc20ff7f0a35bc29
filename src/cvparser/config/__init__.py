"""Configuration loading utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from ..schemas.config import AppConfig, load_config


class ConfigError(ValueError):
    """Raised when a settings file cannot be read or validated."""


def read_yaml(path: str | Path) -> Any:
    with Path(path).open("r", encoding="utf-8") as handle:
        try:
            return yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc


def load_settings(path: str | Path | None) -> AppConfig:
    """Load and validate a YAML settings file; ``None`` yields the defaults."""
    if path is None:
        return AppConfig()
    raw = read_yaml(path)
    if raw is not None and not isinstance(raw, dict):
        raise ConfigError("Config file must be a YAML object")
    return load_config(raw)


__all__ = ["ConfigError", "load_settings", "read_yaml"]
