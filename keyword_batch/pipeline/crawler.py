"""Crawler for search result pages.

Each candidate URL is checked against the shared robots.txt policy cache,
fetched once with a timeout, and reduced to deduplicated text blocks. A
failed or disallowed crawl yields ``None`` and never raises, so one bad page
only shrinks the corpus.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Sequence

import requests

from keyword_batch.parsing.config import CrawlerOptions
from keyword_batch.parsing.robots import RobotsPolicyCache
from keyword_batch.parsing.web import CrawledDocument, extract_content, response_html
from keyword_batch.search.brave import SearchResult

logger = logging.getLogger(__name__)


@dataclass
class CrawlReport:
    """Outcome counts for one batch of crawls.

    Attributes:
        attempted: Candidates handed to the crawler.
        fetched: Candidates that produced a document.
        skipped: Candidates that failed or were disallowed.
    """

    attempted: int = 0
    fetched: int = 0
    skipped: int = 0

    def to_dict(self) -> dict:
        """Serialize to dictionary for logging/reporting."""
        return {
            "attempted": self.attempted,
            "fetched": self.fetched,
            "skipped": self.skipped,
        }


class Crawler:
    """Fetches and extracts candidate pages, honouring robots.txt."""

    def __init__(
        self,
        robots: RobotsPolicyCache | None = None,
        options: CrawlerOptions | None = None,
    ):
        self.options = options or CrawlerOptions()
        self.robots = robots or RobotsPolicyCache()

    def crawl(self, result: SearchResult) -> CrawledDocument | None:
        """Fetch ``result.url`` and extract its content.

        Returns:
            The extracted document, or None if robots.txt disallows the URL
            or the fetch fails for any reason.
        """
        user_agent = self.options.user_agent
        if not self.robots.is_allowed(result.url, user_agent):
            logger.warning("Crawling not allowed for %s by robots.txt", result.url)
            return None

        try:
            response = requests.get(
                result.url,
                headers={"User-Agent": user_agent},
                timeout=self.options.request_timeout,
            )
        except requests.Timeout:
            logger.warning("Timeout fetching %s", result.url)
            return None
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Failed to crawl %s: %s", result.url, exc)
            return None

        if not response.ok:
            logger.error("Failed to fetch %s: %s", result.url, response.status_code)
            return None

        try:
            return extract_content(response_html(response), result.title, self.options)
        except Exception as exc:
            logger.warning("Failed to extract content from %s: %s", result.url, exc)
            return None

    def crawl_all(self, results: Sequence[SearchResult]) -> list[CrawledDocument | None]:
        """Crawl every result concurrently.

        Returns once every crawl has settled. The returned list lines up
        with ``results``.
        """
        if not results:
            return []

        workers = min(self.options.max_workers, len(results))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="crawl") as executor:
            documents = list(executor.map(self.crawl, results))

        report = CrawlReport(
            attempted=len(results),
            fetched=sum(1 for document in documents if document is not None),
        )
        report.skipped = report.attempted - report.fetched
        logger.info("Crawl complete: %s", report.to_dict())
        return documents
