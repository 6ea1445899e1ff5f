"""Brave Search API client used to discover candidate pages for a keyword."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

import requests

from keyword_batch.errors import SearchUnavailableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchResult:
    """A single web search hit."""

    title: str
    url: str
    description: str = ""

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "SearchResult":
        return cls(
            title=payload.get("title", ""),
            url=payload["url"],
            description=payload.get("description", ""),
        )


class BraveSearchClient:
    """Client for the Brave web search endpoint.

    Every call issues exactly one request; retries are left to the caller.
    """

    DEFAULT_API_URL = "https://api.search.brave.com/res/v1/web/search"
    DEFAULT_COUNTRY = "KR"
    DEFAULT_SEARCH_LANG = "ko"

    def __init__(
        self,
        *,
        api_key: str | None = None,
        api_url: str | None = None,
        country: str | None = None,
        search_lang: str | None = None,
        timeout: float = 10.0,
    ):
        """Initialize the search client.

        Args:
            api_key: Brave subscription token. Defaults to BRAVE_SEARCH_API_KEY env var.
            api_url: Search endpoint URL.
            country: Country hint for result localisation.
            search_lang: Language hint for result localisation.
            timeout: Request timeout in seconds.
        """
        self.api_key = api_key or os.environ.get("BRAVE_SEARCH_API_KEY")
        if not self.api_key:
            raise SearchUnavailableError(
                "Brave Search API key required. Set BRAVE_SEARCH_API_KEY environment "
                "variable or pass api_key parameter."
            )
        self.api_url = api_url or self.DEFAULT_API_URL
        self.country = country or self.DEFAULT_COUNTRY
        self.search_lang = search_lang or self.DEFAULT_SEARCH_LANG
        self.timeout = timeout

    def search(self, keyword: str) -> list[SearchResult]:
        """Search the web for ``keyword``.

        Args:
            keyword: Free-text query.

        Returns:
            Results in the order the API ranked them.

        Raises:
            SearchUnavailableError: If the request fails or returns a non-2xx status.
        """
        params = {
            "q": keyword,
            "country": self.country,
            "search_lang": self.search_lang,
        }
        headers = {
            "Accept": "application/json",
            "X-Subscription-Token": self.api_key,
        }

        try:
            response = requests.get(
                self.api_url,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise SearchUnavailableError(f"Brave Search API request failed: {exc}") from exc

        if not response.ok:
            logger.error(
                "Brave Search API returned %s for %r: %s",
                response.status_code,
                keyword,
                response.text,
            )
            raise SearchUnavailableError(
                f"Brave Search API request failed with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise SearchUnavailableError(f"Invalid JSON from Brave Search API: {exc}") from exc

        if not isinstance(data, dict):
            raise SearchUnavailableError("Unexpected Brave Search API response shape")

        web = data.get("web") or {}
        if not isinstance(web, dict):
            raise SearchUnavailableError("Unexpected Brave Search API response shape")
        raw_results = web.get("results") or []
        if not isinstance(raw_results, list) or not all(isinstance(item, dict) for item in raw_results):
            raise SearchUnavailableError("Unexpected Brave Search API response shape")
        results = [SearchResult.from_dict(item) for item in raw_results if item.get("url")]
        logger.info("Search for %r returned %d results", keyword, len(results))
        return results
