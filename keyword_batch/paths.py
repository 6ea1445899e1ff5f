"""Filesystem locations used by the batch pipeline."""

from __future__ import annotations

import os
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parent.parent


def get_project_root() -> Path:
    """Return the repository root directory."""
    return _PROJECT_ROOT


def get_data_root() -> Path:
    """Return the directory holding persisted keywords, articles and quizzes.

    Overridden by the ``KEYWORD_BATCH_DATA`` environment variable.
    """
    override = os.environ.get("KEYWORD_BATCH_DATA")
    if override:
        return Path(override)
    return _PROJECT_ROOT / "data"


def get_config_file() -> Path:
    """Return the JSON configuration file path.

    Overridden by the ``KEYWORD_BATCH_CONFIG`` environment variable.
    """
    override = os.environ.get("KEYWORD_BATCH_CONFIG")
    if override:
        return Path(override)
    return _PROJECT_ROOT / "config" / "batch.json"
