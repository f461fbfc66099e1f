"""Unit tests for Exa web search."""

from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from qurse.errors import SearchError
from qurse.search.exa import (
    build_payload,
    clean_title,
    deduplicate,
    extract_domain,
    parse_result,
    search_exa,
)
from qurse.search.models import SearchResult


def _mock_exa_session(status=200, payload=None, text=""):
    """Mock aiohttp.ClientSession whose post() yields a canned response."""
    mock_response = MagicMock()
    mock_response.status = status
    mock_response.json = AsyncMock(return_value=payload or {})
    mock_response.text = AsyncMock(return_value=text)

    mock_post = MagicMock()
    mock_post.__aenter__ = AsyncMock(return_value=mock_response)
    mock_post.__aexit__ = AsyncMock(return_value=None)

    mock_session = MagicMock()
    mock_session.post = MagicMock(return_value=mock_post)

    mock_cm = MagicMock()
    mock_cm.__aenter__ = AsyncMock(return_value=mock_session)
    mock_cm.__aexit__ = AsyncMock(return_value=None)
    return mock_cm, mock_session


@pytest.mark.unit
class TestHelpers:
    """Tests for title cleaning, domains and de-duplication."""

    @pytest.mark.parametrize(
        "title,expected",
        [
            ("Paper [PDF]  (2024) Results", "Paper Results"),
            ("  Plain   title ", "Plain title"),
            ("[Only brackets]", ""),
            ("", ""),
        ],
    )
    def test_clean_title(self, title, expected):
        assert clean_title(title) == expected

    def test_extract_domain(self):
        assert extract_domain("https://www.bbc.co.uk/news/x?y=1") == "www.bbc.co.uk"
        assert extract_domain("example.com") == "example.com"

    def test_deduplicate_by_url_and_domain(self):
        results = [
            SearchResult(url="https://a.com/1", title="1"),
            SearchResult(url="https://a.com/2", title="2"),
            SearchResult(url="https://b.com/1", title="3"),
            SearchResult(url="https://b.com/1", title="4"),
        ]
        assert [r.title for r in deduplicate(results)] == ["1", "3"]


@pytest.mark.unit
class TestPayload:
    """Tests for the Exa request body."""

    def test_defaults(self):
        payload = build_payload("cats", 5)
        assert payload["type"] == "hybrid"
        assert payload["numResults"] == 10
        assert payload["contents"] == {"text": True, "livecrawl": "preferred"}
        assert "category" not in payload

    def test_best_quality_and_news(self):
        payload = build_payload("cats", 20, topic="news", quality="best")
        assert payload["type"] == "auto"
        assert payload["numResults"] == 20
        assert payload["category"] == "news"

    def test_finance_category(self):
        assert build_payload("q", 5, topic="finance")["category"] == "financial report"

    def test_domains(self):
        payload = build_payload(
            "q",
            5,
            include_domains=["https://arxiv.org/list"],
            exclude_domains=["", " "],
        )
        assert payload["includeDomains"] == ["arxiv.org"]
        assert "excludeDomains" not in payload

    def test_parse_result_keeps_date_only_for_news(self):
        item = {
            "url": "https://x.com",
            "title": "T (video)",
            "text": "a" * 600,
            "publishedDate": "2025-05-01",
        }
        general = parse_result(item)
        news = parse_result(item, topic="news")

        assert general.title == "T"
        assert len(general.content) == 500
        assert general.published_date is None
        assert news.published_date == "2025-05-01"


@pytest.mark.unit
@pytest.mark.asyncio
class TestSearchExa:
    """Tests for search_exa()."""

    async def test_missing_key(self):
        with pytest.raises(SearchError):
            await search_exa("q", "")

    async def test_successful_search(self):
        payload = {
            "results": [
                {"url": "https://a.com/1", "title": "A [1]", "text": "alpha"},
                {"url": "https://a.com/2", "title": "A again", "text": "dup"},
                {"url": "https://b.com/1", "title": "B", "text": "beta"},
                {"url": "https://c.com/1", "title": "C", "text": "gamma"},
            ]
        }
        mock_cm, mock_session = _mock_exa_session(payload=payload)

        with patch("qurse.search.exa.aiohttp.ClientSession", return_value=mock_cm):
            response = await search_exa("q", "key", max_results=2)

        assert response.backend == "exa"
        assert [r.url for r in response.results] == ["https://a.com/1", "https://b.com/1"]
        assert response.results[0].title == "A"

        _, kwargs = mock_session.post.call_args
        assert kwargs["headers"]["x-api-key"] == "key"
        assert kwargs["json"]["query"] == "q"

    async def test_http_error(self):
        mock_cm, _ = _mock_exa_session(status=401, text="bad key")

        with patch("qurse.search.exa.aiohttp.ClientSession", return_value=mock_cm):
            with pytest.raises(SearchError, match="401"):
                await search_exa("q", "key")

    async def test_client_error(self):
        mock_cm, mock_session = _mock_exa_session()
        mock_session.post.side_effect = aiohttp.ClientConnectionError("down")

        with patch("qurse.search.exa.aiohttp.ClientSession", return_value=mock_cm):
            with pytest.raises(SearchError, match="down"):
                await search_exa("q", "key")

    @pytest.mark.parametrize("payload", [["not", "an", "object"], "text"])
    async def test_non_object_response(self, payload):
        mock_cm, _ = _mock_exa_session(payload=payload)

        with patch("qurse.search.exa.aiohttp.ClientSession", return_value=mock_cm):
            with pytest.raises(SearchError, match="Unexpected Exa response"):
                await search_exa("q", "key")

    async def test_invalid_json(self):
        mock_cm, mock_session = _mock_exa_session()
        mock_response = mock_session.post.return_value.__aenter__.return_value
        mock_response.json.side_effect = ValueError("Expecting value")

        with patch("qurse.search.exa.aiohttp.ClientSession", return_value=mock_cm):
            with pytest.raises(SearchError, match="Expecting value"):
                await search_exa("q", "key")
