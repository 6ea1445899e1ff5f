"""Fetch and extraction settings for crawling candidate pages.

These dataclasses hold the politeness settings applied to every page and
robots.txt request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

DEFAULT_USER_AGENT = "Mozilla/5.0"

# Elements whose text never counts as article content
REMOVE_SELECTORS: tuple[str, ...] = (
    "script",
    "style",
    "nav",
    "header",
    "footer",
    "form",
    "button",
    "link",
    "a",
    "iframe",
    "noscript",
    "svg",
    "canvas",
    "input",
    "select",
    "textarea",
    "label",
    "aside",
    "img",
)

# Elements scanned for readable text blocks
CONTENT_SELECTORS: tuple[str, ...] = (
    "article",
    "section",
    "p",
    "blockquote",
    "dt",
    "dd",
    "div",
)


@dataclass(frozen=True)
class CrawlerOptions:
    """Fetch and extraction settings for candidate pages.

    Attributes:
        user_agent: Identifying User-Agent sent on page and robots.txt fetches.
        request_timeout: Seconds before a page fetch is abandoned.
        remove_selectors: Elements stripped before text is extracted.
        content_selectors: Elements whose text becomes a content block.
        min_text_length: Shortest normalized block that is kept.
        max_workers: Upper bound on concurrent page fetches.
    """

    user_agent: str = DEFAULT_USER_AGENT
    request_timeout: float = 10.0
    remove_selectors: tuple[str, ...] = REMOVE_SELECTORS
    content_selectors: tuple[str, ...] = CONTENT_SELECTORS
    min_text_length: int = 30
    max_workers: int = 8

    @property
    def remove_selector(self) -> str:
        return ", ".join(self.remove_selectors)

    @property
    def content_selector(self) -> str:
        return ", ".join(self.content_selectors)


@dataclass(frozen=True)
class RobotsCacheOptions:
    """Caching policy for per-origin robots.txt decisions.

    Attributes:
        max_size: Maximum number of origins remembered.
        max_age: How long a cached decision stays valid.
        request_timeout: Seconds before a robots.txt fetch counts as timed out.
    """

    max_size: int = 1000
    max_age: timedelta = field(default_factory=lambda: timedelta(hours=1))
    request_timeout: float = 5.0


