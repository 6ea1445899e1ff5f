"""Readable text extraction from fetched HTML pages."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import requests
from bs4 import BeautifulSoup

from keyword_batch.parsing.config import CrawlerOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CrawledDocument:
    """Deduplicated text blocks extracted from one page, in document order."""

    title: str
    texts: tuple[str, ...]

    def to_rankable(self) -> "RankableDocument":
        return RankableDocument(title=self.title, content="\n".join(self.texts))


@dataclass(frozen=True)
class RankableDocument:
    """A crawled page flattened to one string for ranking."""

    title: str
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "content": self.content}


def extract_content(html: str, title: str, options: CrawlerOptions | None = None) -> CrawledDocument:
    """Extract content blocks from ``html``.

    Non-content elements are removed first. Each remaining content element
    contributes its whitespace-normalized text unless it wraps another
    content element, so a container and its children are not counted twice.
    Blocks shorter than ``options.min_text_length`` are dropped and
    identical blocks collapse to their first occurrence.

    Args:
        html: Raw page markup.
        title: Title recorded on the resulting document.
        options: Selector lists and length threshold.

    Returns:
        CrawledDocument with the kept blocks.
    """
    options = options or CrawlerOptions()
    soup = BeautifulSoup(html, "html.parser")

    for element in soup.select(options.remove_selector):
        element.decompose()

    texts: dict[str, None] = {}
    for element in soup.select(options.content_selector):
        if element.select_one(options.content_selector) is not None:
            continue
        text = _normalize_whitespace(element.get_text())
        if len(text) >= options.min_text_length:
            texts.setdefault(text, None)

    logger.debug("Extracted %d text blocks for %r", len(texts), title)
    return CrawledDocument(title=title, texts=tuple(texts))


def _normalize_whitespace(value: str) -> str:
    return " ".join(value.split())


def decode_html(data: bytes) -> tuple[str, str]:
    """Decode raw page bytes, trying UTF-8 before the legacy fallbacks.

    Returns:
        Tuple of (markup, encoding used).
    """
    for encoding in ("utf-8", "utf-16", "latin-1"):
        try:
            return data.decode(encoding), encoding
        except UnicodeDecodeError:
            continue
    return data.decode("utf-8", errors="ignore"), "unknown"


def response_html(response: requests.Response) -> str:
    """Return the markup of ``response``.

    A charset declared in ``Content-Type`` is honoured. Without one,
    requests assumes ISO-8859-1 for ``text/html``, so the raw bytes are
    decoded with :func:`decode_html` instead.
    """
    content_type = response.headers.get("Content-Type", "")
    if "charset=" in content_type.lower():
        return response.text
    html, encoding = decode_html(response.content)
    logger.debug("Decoded %s as %s", response.url, encoding)
    return html
