"""Project configuration management."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from keyword_batch import paths

logger = logging.getLogger(__name__)


class ProjectConfig:
    """Access to project configuration values."""

    def __init__(self, config_path: Path | None = None) -> None:
        self._config_path = config_path
        self._data: dict[str, Any] = {}
        self._loaded = False

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return

        config_path = self._config_path or paths.get_config_file()
        if config_path.exists():
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    self._data = json.load(f)
            except (OSError, json.JSONDecodeError) as exc:
                # If config fails to load, we treat it as empty
                logger.warning("Ignoring unreadable config %s: %s", config_path, exc)
                self._data = {}
            if not isinstance(self._data, dict):
                self._data = {}

        self._loaded = True

    @property
    def model(self) -> str:
        """Get the configured generation model."""
        self._ensure_loaded()
        return self._data.get("model", "gemini-2.0-flash")

    @property
    def search_country(self) -> str:
        """Country hint sent to the search API."""
        self._ensure_loaded()
        return self._data.get("search_country", "KR")

    @property
    def search_lang(self) -> str:
        """Language hint sent to the search API."""
        self._ensure_loaded()
        return self._data.get("search_lang", "ko")

    @property
    def output_language(self) -> str:
        """Language the generated articles and quizzes are written in."""
        self._ensure_loaded()
        return self._data.get("output_language", "Korean")

    @property
    def data_root(self) -> Path:
        """Directory for the content store."""
        self._ensure_loaded()
        value = self._data.get("data_root")
        return Path(value) if value else paths.get_data_root()

    def get(self, key: str, default: Any = None) -> Any:
        """Get a raw configuration value."""
        self._ensure_loaded()
        return self._data.get(key, default)


@lru_cache(maxsize=1)
def get_config() -> ProjectConfig:
    """Get the singleton configuration instance."""
    return ProjectConfig()
