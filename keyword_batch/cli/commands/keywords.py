"""CLI commands for managing keywords in the local content store.

Commands:
- keywords add: Register a keyword to generate content for
- keywords show: Print a keyword with its articles and quizzes
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import date

from keyword_batch.config import get_config
from keyword_batch.knowledge.storage import JsonContentStore

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_ERROR = 2


def register_commands(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Add keyword subcommands to the main CLI parser."""

    keywords_parser = subparsers.add_parser(
        "keywords",
        description="Manage keywords in the local content store.",
        help="Add or inspect keywords.",
    )
    keywords_subparsers = keywords_parser.add_subparsers(
        dest="keywords_command",
        metavar="SUBCOMMAND",
    )
    keywords_subparsers.required = True

    add_parser = keywords_subparsers.add_parser(
        "add",
        description="Register a keyword so content can be generated for it.",
        help="Add a keyword.",
    )
    add_parser.add_argument("--name", required=True, help="Keyword name.")
    add_parser.add_argument("--description", required=True, help="Short definition of the keyword.")
    add_parser.add_argument(
        "--published-date",
        type=_parse_date,
        default=None,
        help="Publish date for generated articles (YYYY-MM-DD).",
    )
    add_parser.set_defaults(func=keywords_add_cli, keywords_command="add")

    show_parser = keywords_subparsers.add_parser(
        "show",
        description="Print a keyword together with its articles and quizzes as JSON.",
        help="Show a keyword.",
    )
    show_parser.add_argument("keyword_id", type=int, help="Keyword identifier.")
    show_parser.set_defaults(func=keywords_show_cli, keywords_command="show")


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid date {value!r}, expected YYYY-MM-DD") from exc


def _open_store() -> JsonContentStore:
    return JsonContentStore(get_config().data_root)


def keywords_add_cli(args: argparse.Namespace) -> int:
    """Execute the keywords add command."""
    name = args.name.strip()
    if not name:
        print("Error: keyword name must not be empty", file=sys.stderr)
        return EXIT_ERROR

    keyword = _open_store().save_keyword(name, args.description.strip(), args.published_date)
    print(f"Added keyword {keyword.id}: {keyword.name}")
    return EXIT_SUCCESS


def keywords_show_cli(args: argparse.Namespace) -> int:
    """Execute the keywords show command."""
    store = _open_store()
    keyword = store.get_keyword(args.keyword_id)
    if keyword is None:
        print(f"Error: keyword {args.keyword_id} not found", file=sys.stderr)
        return EXIT_FAILURE

    articles = []
    for article in store.list_articles(keyword.id):
        payload = article.to_dict()
        payload["quizzes"] = [quiz.to_dict() for quiz in store.list_quizzes(article.id)]
        articles.append(payload)

    output = {**keyword.to_dict(), "articles": articles}
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return EXIT_SUCCESS
