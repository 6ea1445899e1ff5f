"""Tests for the Brave Search API client."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from keyword_batch.errors import SearchUnavailableError
from keyword_batch.search.brave import BraveSearchClient, SearchResult


def _response(status_code: int = 200, payload=None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    response.json.return_value = payload
    return response


def test_requires_api_key():
    """The client refuses to start without a subscription token."""
    with patch.dict("os.environ", {}, clear=True):
        with pytest.raises(SearchUnavailableError, match="BRAVE_SEARCH_API_KEY"):
            BraveSearchClient()


def test_reads_api_key_from_env():
    """BRAVE_SEARCH_API_KEY is used when no key is passed."""
    with patch.dict("os.environ", {"BRAVE_SEARCH_API_KEY": "env-key"}, clear=True):
        client = BraveSearchClient()
    assert client.api_key == "env-key"
    assert client.country == "KR"
    assert client.search_lang == "ko"


class TestBraveSearch:
    """Tests for BraveSearchClient.search."""

    @patch("keyword_batch.search.brave.requests.get")
    def test_sends_query_and_token(self, mock_get):
        """The query, locale hints and token are sent on one GET."""
        mock_get.return_value = _response(payload={"web": {"results": []}})
        client = BraveSearchClient(api_key="secret", timeout=3.0)

        client.search("inflation economy")

        mock_get.assert_called_once_with(
            BraveSearchClient.DEFAULT_API_URL,
            params={"q": "inflation economy", "country": "KR", "search_lang": "ko"},
            headers={"Accept": "application/json", "X-Subscription-Token": "secret"},
            timeout=3.0,
        )

    @patch("keyword_batch.search.brave.requests.get")
    def test_returns_results_in_order(self, mock_get):
        """Results keep the API order; entries without a URL are dropped."""
        mock_get.return_value = _response(
            payload={
                "web": {
                    "results": [
                        {"title": "A", "url": "https://a.example.com", "description": "first"},
                        {"title": "No URL"},
                        {"title": "B", "url": "https://b.example.com"},
                    ]
                }
            }
        )
        client = BraveSearchClient(api_key="secret")

        results = client.search("inflation")

        assert results == [
            SearchResult(title="A", url="https://a.example.com", description="first"),
            SearchResult(title="B", url="https://b.example.com", description=""),
        ]

    @patch("keyword_batch.search.brave.requests.get")
    def test_missing_web_section_is_empty(self, mock_get):
        """A response without web results yields no candidates."""
        mock_get.return_value = _response(payload={"query": {"original": "x"}})
        client = BraveSearchClient(api_key="secret")

        assert client.search("x") == []

    @patch("keyword_batch.search.brave.requests.get")
    def test_non_2xx_raises(self, mock_get):
        """Any non-2xx status is a SearchUnavailableError carrying the status."""
        mock_get.return_value = _response(status_code=429, text="Too Many Requests")
        client = BraveSearchClient(api_key="secret")

        with pytest.raises(SearchUnavailableError) as excinfo:
            client.search("inflation")

        assert excinfo.value.status_code == 429

    @patch("keyword_batch.search.brave.requests.get")
    def test_transport_error_raises(self, mock_get):
        """Connection failures surface as SearchUnavailableError."""
        mock_get.side_effect = requests.ConnectionError("unreachable")
        client = BraveSearchClient(api_key="secret")

        with pytest.raises(SearchUnavailableError, match="unreachable"):
            client.search("inflation")

    @patch("keyword_batch.search.brave.requests.get")
    def test_invalid_json_raises(self, mock_get):
        """An undecodable body surfaces as SearchUnavailableError."""
        response = _response()
        response.json.side_effect = ValueError("not json")
        mock_get.return_value = response
        client = BraveSearchClient(api_key="secret")

        with pytest.raises(SearchUnavailableError, match="Invalid JSON"):
            client.search("inflation")

    @pytest.mark.parametrize(
        "payload",
        [
            {"web": ["not", "an", "object"]},
            {"web": {"results": ["https://a.example.com"]}},
            {"web": {"results": {"url": "https://a.example.com"}}},
        ],
    )
    @patch("keyword_batch.search.brave.requests.get")
    def test_unexpected_shape_raises(self, mock_get, payload):
        """Malformed web sections surface as SearchUnavailableError."""
        mock_get.return_value = _response(payload=payload)
        client = BraveSearchClient(api_key="secret")

        with pytest.raises(SearchUnavailableError, match="response shape"):
            client.search("inflation")
