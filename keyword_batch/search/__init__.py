"""Web search integration."""

from .brave import BraveSearchClient, SearchResult

__all__ = ["BraveSearchClient", "SearchResult"]
