"""Unit tests for DuckDuckGo search."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from qurse.search.duckduckgo import search_duckduckgo


@pytest.mark.unit
@pytest.mark.asyncio
class TestSearchDuckDuckGo:
    """Tests for DuckDuckGo search functionality."""

    async def test_successful_search(self):
        with patch("qurse.search.duckduckgo.DDGS") as mock_ddgs:
            mock_instance = MagicMock()
            mock_instance.text.return_value = [
                {
                    "href": "https://example.com/page1",
                    "title": "PyTorch 2.9 Features (official)",
                    "body": "New features in PyTorch 2.9 include...",
                },
                {
                    "href": "https://pytorch.org/notes",
                    "title": "PyTorch Release Notes",
                    "body": "Release notes for PyTorch 2.9...",
                },
            ]
            mock_ddgs.return_value = mock_instance

            response = await search_duckduckgo("PyTorch 2.9", max_results=5)

            assert response.backend == "duckduckgo"
            assert len(response.results) == 2
            assert response.results[0].url == "https://example.com/page1"
            assert response.results[0].title == "PyTorch 2.9 Features"
            assert response.results[1].content == "Release notes for PyTorch 2.9..."
            mock_instance.text.assert_called_once_with(
                "PyTorch 2.9",
                region="us-en",
                safesearch="moderate",
                timelimit=None,
                max_results=5,
            )

    async def test_alternative_keys(self):
        with patch("qurse.search.duckduckgo.DDGS") as mock_ddgs:
            mock_instance = MagicMock()
            mock_instance.text.return_value = [
                {"link": "https://example.com/p", "title": "", "snippet": "Snippet"}
            ]
            mock_ddgs.return_value = mock_instance

            response = await search_duckduckgo("test query")

            assert response.results[0].url == "https://example.com/p"
            assert response.results[0].title == "Untitled"
            assert response.results[0].content == "Snippet"

    async def test_same_domain_deduplicated(self):
        with patch("qurse.search.duckduckgo.DDGS") as mock_ddgs:
            mock_instance = MagicMock()
            mock_instance.text.return_value = [
                {"href": "https://example.com/1", "title": "One", "body": ""},
                {"href": "https://example.com/2", "title": "Two", "body": ""},
            ]
            mock_ddgs.return_value = mock_instance

            response = await search_duckduckgo("q")

            assert [r.title for r in response.results] == ["One"]

    async def test_retry_then_success(self):
        with patch("qurse.search.duckduckgo.DDGS") as mock_ddgs, patch(
            "qurse.search.duckduckgo.asyncio.sleep", new=AsyncMock()
        ) as mock_sleep:
            mock_instance = MagicMock()
            mock_instance.text.side_effect = [
                Exception("Rate limited"),
                [{"href": "https://example.com", "title": "Test", "body": "Content"}],
            ]
            mock_ddgs.return_value = mock_instance

            response = await search_duckduckgo("q")

            assert len(response.results) == 1
            mock_sleep.assert_awaited_once_with(1)

    async def test_all_attempts_fail(self):
        with patch("qurse.search.duckduckgo.DDGS") as mock_ddgs, patch(
            "qurse.search.duckduckgo.asyncio.sleep", new=AsyncMock()
        ):
            mock_instance = MagicMock()
            mock_instance.text.side_effect = Exception("Rate limited")
            mock_ddgs.return_value = mock_instance

            response = await search_duckduckgo("q")

            assert response.results == []
            assert mock_instance.text.call_count == 3
