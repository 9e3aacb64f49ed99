"""Configuration loading for matching settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from ..schemas.config import AppConfig, load_config


class ConfigManager:
    """Load named YAML configuration files from one directory.

    ``load("matching")`` reads ``<base>/matching.yaml`` and validates it as an
    :class:`AppConfig`; ``settings("matching")`` returns the container
    overrides derived from it.
    """

    def __init__(self, base_path: str | Path):
        self._base_path = Path(base_path)

    def path_for(self, name: str) -> Path:
        return self._base_path / f"{name}.yaml"

    def load_raw(self, name: str) -> dict[str, Any]:
        with self.path_for(name).open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}

    def load(self, name: str) -> AppConfig:
        return load_config(self.load_raw(name))

    def settings(self, name: str) -> dict[str, Any]:
        return self.load(name).to_settings()


__all__ = ["ConfigManager"]
