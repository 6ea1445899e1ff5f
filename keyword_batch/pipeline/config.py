"""Configuration for the keyword content pipeline run."""

from __future__ import annotations

from dataclasses import dataclass, field

from keyword_batch.parsing.config import CrawlerOptions, RobotsCacheOptions


@dataclass
class BatchConfig:
    """Configuration for a content generation run.

    Attributes:
        crawler: Page fetch and extraction settings.
        robots: robots.txt cache settings.
        max_text_length_for_ranking: Crawled documents with more characters
            than this are left out of the BM25 index.
        top_k: Number of ranked documents passed to the prompts.
        model: Generation model identifier.
        output_language: Language of the generated content.
        generation_workers: Concurrent generation calls per stage.
    """

    crawler: CrawlerOptions = field(default_factory=CrawlerOptions)
    robots: RobotsCacheOptions = field(default_factory=RobotsCacheOptions)
    max_text_length_for_ranking: int = 1000
    top_k: int = 7
    model: str = "gemini-2.0-flash"
    output_language: str = "Korean"
    generation_workers: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.top_k < 1:
            raise ValueError(f"Invalid top_k: {self.top_k}. Must be at least 1")
        if self.max_text_length_for_ranking < 1:
            raise ValueError(
                f"Invalid max_text_length_for_ranking: {self.max_text_length_for_ranking}"
            )
        if self.generation_workers < 1:
            raise ValueError(f"Invalid generation_workers: {self.generation_workers}")
        if self.crawler.max_workers < 1:
            raise ValueError(f"Invalid crawler max_workers: {self.crawler.max_workers}")
