"""Typed failures surfaced by the batch pipeline.

Each failure is terminal for one ``generate_contents`` invocation. Crawl and
robots.txt problems never appear here; they are absorbed by the crawler.
"""

from __future__ import annotations


class BatchError(Exception):
    """Base class for pipeline failures reported to the caller."""


class KeywordNotFoundError(BatchError):
    """The requested keyword does not exist in the store."""

    def __init__(self, keyword_id: int):
        super().__init__(f"Keyword {keyword_id} does not exist")
        self.keyword_id = keyword_id


class ContentsAlreadyExistError(BatchError):
    """Articles and quizzes already exist for the keyword."""

    def __init__(self, keyword_id: int):
        super().__init__(f"Contents already exist for keyword {keyword_id}")
        self.keyword_id = keyword_id


class PublishDateMissingError(BatchError):
    """The keyword has no publish date to stamp on generated articles."""

    def __init__(self, keyword_id: int):
        super().__init__(f"Keyword {keyword_id} has no publish date")
        self.keyword_id = keyword_id


class SearchUnavailableError(BatchError):
    """The web search API could not be queried."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GenerationError(BatchError):
    """The generation service failed or returned an unusable response."""


class RateLimitError(GenerationError):
    """The generation service rejected the request with HTTP 429."""

    def __init__(self, message: str, retry_after: float | None = None):
        super().__init__(message)
        self.retry_after = retry_after
