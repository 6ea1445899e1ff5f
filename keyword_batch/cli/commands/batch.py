"""CLI commands for the keyword content pipeline.

Commands:
- batch generate: Generate articles and quizzes for one keyword
- batch job: Process a queue job payload
- batch rank: Search, crawl and rank pages for a query without generating
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from keyword_batch.errors import BatchError

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_ERROR = 2


def register_commands(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Add batch subcommands to the main CLI parser."""

    batch_parser = subparsers.add_parser(
        "batch",
        description="Generate grounded learning content for keywords.",
        help="Run the keyword content pipeline.",
    )
    batch_subparsers = batch_parser.add_subparsers(
        dest="batch_command",
        metavar="SUBCOMMAND",
    )
    batch_subparsers.required = True

    def add_common_args(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--json",
            action="store_true",
            dest="output_json",
            help="Output results in JSON format.",
        )
        parser.add_argument(
            "--verbose",
            action="store_true",
            help="Enable debug logging.",
        )

    # batch generate
    generate_parser = batch_subparsers.add_parser(
        "generate",
        description="Generate whatever articles and quizzes a keyword is missing.",
        help="Generate content for one keyword.",
    )
    generate_parser.add_argument("keyword_id", type=int, help="Keyword identifier.")
    add_common_args(generate_parser)
    generate_parser.set_defaults(func=batch_generate_cli, batch_command="generate")

    # batch job
    job_parser = batch_subparsers.add_parser(
        "job",
        description='Process a queue job payload such as \'{"id": "1", "name": "generate", "data": {"keywordId": 42}}\'.',
        help="Process one queue job.",
    )
    job_parser.add_argument("payload", help="Job payload as JSON.")
    add_common_args(job_parser)
    job_parser.set_defaults(func=batch_job_cli, batch_command="job")

    # batch rank
    rank_parser = batch_subparsers.add_parser(
        "rank",
        description="Search, crawl and BM25-rank pages for a query and print the grounding context.",
        help="Preview the ranked reference documents for a query.",
    )
    rank_parser.add_argument("query", help="Search query.")
    rank_parser.add_argument(
        "--top-k",
        type=int,
        default=7,
        help="Number of ranked documents to keep (default: 7).",
    )
    add_common_args(rank_parser)
    rank_parser.set_defaults(func=batch_rank_cli, batch_command="rank")


def _configure_logging(args: argparse.Namespace) -> None:
    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def batch_generate_cli(args: argparse.Namespace) -> int:
    """Execute the batch generate command."""
    from keyword_batch.pipeline import build_pipeline

    _configure_logging(args)

    try:
        pipeline = build_pipeline()
    except BatchError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR

    try:
        result = pipeline.generate_contents(args.keyword_id)
    except BatchError as exc:
        print(f"Error: {type(exc).__name__}: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    if args.output_json:
        print(json.dumps(result.to_dict(), indent=2, default=str))
    else:
        print(result.summary())
    return EXIT_SUCCESS


def batch_job_cli(args: argparse.Namespace) -> int:
    """Execute the batch job command."""
    from keyword_batch.pipeline import BatchJob, build_pipeline, process_job

    _configure_logging(args)

    try:
        job = BatchJob.from_payload(args.payload)
        pipeline = build_pipeline()
    except (ValueError, BatchError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR

    try:
        result = process_job(job, pipeline)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR
    except BatchError as exc:
        print(f"Error: {type(exc).__name__}: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    if result is None:
        print(f"Job {job.id} ignored (unknown job name {job.name!r})")
    elif args.output_json:
        print(json.dumps(result.to_dict(), indent=2, default=str))
    else:
        print(result.summary())
    return EXIT_SUCCESS


def batch_rank_cli(args: argparse.Namespace) -> int:
    """Execute the batch rank command."""
    from keyword_batch.config import get_config
    from keyword_batch.parsing.robots import RobotsPolicyCache
    from keyword_batch.pipeline import BatchConfig, Crawler
    from keyword_batch.pipeline.runner import rank_documents
    from keyword_batch.search.brave import BraveSearchClient

    _configure_logging(args)

    try:
        config = BatchConfig(top_k=args.top_k)
        project = get_config()
        search = BraveSearchClient(country=project.search_country, search_lang=project.search_lang)
    except (ValueError, BatchError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR

    crawler = Crawler(robots=RobotsPolicyCache(config.robots), options=config.crawler)

    try:
        ranked, candidates, indexed = rank_documents(
            args.query,
            search=search,
            crawler=crawler,
            config=config,
        )
    except BatchError as exc:
        print(f"Error: {type(exc).__name__}: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    if args.output_json:
        payload = {
            "query": args.query,
            "candidates": candidates,
            "documents_ranked": indexed,
            "results": [
                {"score": result.score, **result.document.to_dict()} for result in ranked
            ],
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        print(f"Query: {args.query}")
        print(f"  Candidates: {candidates}, ranked: {indexed}")
        for position, result in enumerate(ranked, start=1):
            print(f"  {position}. [{result.score:.3f}] {result.document.title}")
    return EXIT_SUCCESS
