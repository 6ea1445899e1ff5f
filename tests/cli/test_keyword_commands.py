"""Unit tests for keyword CLI commands and the main entry point."""

from __future__ import annotations

import json
from datetime import date
from unittest.mock import MagicMock, patch

import pytest

import main
from keyword_batch.cli.commands.keywords import EXIT_ERROR, EXIT_FAILURE, EXIT_SUCCESS
from keyword_batch.knowledge.storage import JsonContentStore


@pytest.fixture
def data_root(tmp_path):
    """Point the keyword commands at a temporary data directory."""
    config = MagicMock()
    config.data_root = tmp_path
    with patch("keyword_batch.cli.commands.keywords.get_config", return_value=config):
        yield tmp_path


class TestKeywordsAdd:
    """Tests for keywords add."""

    def test_adds_keyword(self, data_root, capsys):
        """The keyword is stored with its publish date."""
        exit_code = main.main([
            "keywords", "add",
            "--name", "Inflation",
            "--description", "A general increase in prices.",
            "--published-date", "2024-05-01",
        ])

        assert exit_code == EXIT_SUCCESS
        assert "Added keyword 1: Inflation" in capsys.readouterr().out
        keyword = JsonContentStore(data_root).get_keyword(1)
        assert keyword.published_date == date(2024, 5, 1)

    def test_publish_date_optional(self, data_root):
        """Keywords may be added without a publish date."""
        main.main(["keywords", "add", "--name", "GDP", "--description", "Output."])

        assert JsonContentStore(data_root).get_keyword(1).published_date is None

    def test_rejects_bad_date(self, data_root):
        """Malformed dates are argparse usage errors."""
        with pytest.raises(SystemExit) as excinfo:
            main.main([
                "keywords", "add", "--name", "GDP", "--description", "Output.",
                "--published-date", "May 1st",
            ])
        assert excinfo.value.code == 2

    def test_rejects_blank_name(self, data_root):
        """A blank name is refused."""
        assert main.main(["keywords", "add", "--name", "  ", "--description", "x"]) == EXIT_ERROR


class TestKeywordsShow:
    """Tests for keywords show."""

    def test_shows_keyword_with_content(self, data_root, capsys):
        """Articles and their quizzes are nested under the keyword."""
        store = JsonContentStore(data_root)
        keyword = store.save_keyword("Inflation", "A general increase in prices.", date(2024, 5, 1))
        with store.transaction() as tx:
            article = tx.insert_article(
                keyword_id=keyword.id,
                title="What is inflation",
                content="Body",
                summary="Short",
                published_at=date(2024, 5, 1),
            )
            tx.insert_quiz(
                article_id=article.id,
                question="Q?",
                answer="A",
                options=["A", "B"],
                explanation="",
            )

        exit_code = main.main(["keywords", "show", str(keyword.id)])

        assert exit_code == EXIT_SUCCESS
        output = json.loads(capsys.readouterr().out)
        assert output["name"] == "Inflation"
        assert output["articles"][0]["title"] == "What is inflation"
        assert output["articles"][0]["quizzes"][0]["question"] == "Q?"

    def test_unknown_keyword(self, data_root, capsys):
        """Unknown ids exit with the failure code."""
        assert main.main(["keywords", "show", "5"]) == EXIT_FAILURE
        assert "not found" in capsys.readouterr().err


def test_main_requires_command():
    """Running without a command is a usage error."""
    with pytest.raises(SystemExit):
        main.main([])
