"""Keyword content pipeline: search, crawl, rank and generate.

Usage:
    from keyword_batch.pipeline import build_pipeline

    pipeline = build_pipeline()
    result = pipeline.generate_contents(42)
"""

from keyword_batch.parsing.config import CrawlerOptions, RobotsCacheOptions

from .config import BatchConfig
from .crawler import Crawler, CrawlReport
from .jobs import BatchJob, process_job
from .runner import ContentPipeline, PipelineResult, build_pipeline

__all__ = [
    # Config
    "BatchConfig",
    "CrawlerOptions",
    "RobotsCacheOptions",
    # Crawler
    "Crawler",
    "CrawlReport",
    # Runner
    "ContentPipeline",
    "PipelineResult",
    "build_pipeline",
    # Jobs
    "BatchJob",
    "process_job",
]
