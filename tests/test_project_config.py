"""Tests for project configuration and batch settings."""

from __future__ import annotations

import json
from datetime import timedelta
from pathlib import Path

import pytest

from keyword_batch import paths
from keyword_batch.config import ProjectConfig
from keyword_batch.parsing.config import CrawlerOptions, RobotsCacheOptions
from keyword_batch.pipeline.config import BatchConfig


class TestProjectConfig:
    """Tests for ProjectConfig."""

    def test_defaults_without_file(self, tmp_path):
        """A missing config file yields the built-in defaults."""
        config = ProjectConfig(tmp_path / "missing.json")

        assert config.model == "gemini-2.0-flash"
        assert config.search_country == "KR"
        assert config.search_lang == "ko"
        assert config.output_language == "Korean"

    def test_reads_values(self, tmp_path):
        """Values in the JSON file override defaults."""
        path = tmp_path / "batch.json"
        path.write_text(
            json.dumps({"model": "custom", "output_language": "English", "data_root": str(tmp_path)}),
            encoding="utf-8",
        )
        config = ProjectConfig(path)

        assert config.model == "custom"
        assert config.output_language == "English"
        assert config.data_root == tmp_path
        assert config.get("missing", "fallback") == "fallback"

    def test_unreadable_file_is_ignored(self, tmp_path):
        """Broken JSON falls back to defaults."""
        path = tmp_path / "batch.json"
        path.write_text("{broken", encoding="utf-8")

        assert ProjectConfig(path).model == "gemini-2.0-flash"

    def test_data_root_env_override(self, tmp_path, monkeypatch):
        """KEYWORD_BATCH_DATA relocates the content store."""
        monkeypatch.setenv("KEYWORD_BATCH_DATA", str(tmp_path / "data"))

        assert ProjectConfig(tmp_path / "missing.json").data_root == tmp_path / "data"

    def test_config_file_env_override(self, monkeypatch):
        """KEYWORD_BATCH_CONFIG relocates the config file."""
        monkeypatch.setenv("KEYWORD_BATCH_CONFIG", "/etc/keyword-batch.json")

        assert paths.get_config_file() == Path("/etc/keyword-batch.json")


class TestBatchConfig:
    """Tests for BatchConfig defaults and validation."""

    def test_defaults(self):
        """Defaults match the production settings."""
        config = BatchConfig()

        assert config.top_k == 7
        assert config.max_text_length_for_ranking == 1000
        assert config.crawler == CrawlerOptions()
        assert config.crawler.user_agent == "Mozilla/5.0"
        assert config.crawler.min_text_length == 30
        assert config.robots == RobotsCacheOptions()
        assert config.robots.max_size == 1000
        assert config.robots.max_age == timedelta(hours=1)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"top_k": 0},
            {"max_text_length_for_ranking": 0},
            {"generation_workers": 0},
            {"crawler": CrawlerOptions(max_workers=0)},
        ],
    )
    def test_rejects_invalid_values(self, kwargs):
        """Non-positive limits are rejected."""
        with pytest.raises(ValueError):
            BatchConfig(**kwargs)

    def test_selector_strings(self):
        """Selector lists join into CSS selector groups."""
        options = CrawlerOptions(remove_selectors=("script", "nav"), content_selectors=("p",))

        assert options.remove_selector == "script, nav"
        assert options.content_selector == "p"
