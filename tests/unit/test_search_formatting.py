"""Unit tests for search result formatting."""

import pytest

from qurse.core.constants import SEARCH_MARKER
from qurse.search.formatting import (
    REASONING_INSTRUCTIONS,
    STANDARD_INSTRUCTIONS,
    format_results_for_prompt,
    relevance_for_rank,
    results_to_sources,
    source_domain,
    time_period_to_topic,
)


@pytest.mark.unit
class TestFormatResultsForPrompt:
    """Tests for the prompt block built from search results."""

    def test_contains_marker(self, sample_results):
        text = format_results_for_prompt("cats", sample_results)
        assert text.startswith(f"{SEARCH_MARKER} cats")

    def test_sources_numbered(self, sample_results):
        text = format_results_for_prompt("cats", sample_results)
        assert "SOURCE 1: Example A" in text
        assert "URL: https://news.site.org/b" in text
        assert "DATE: 2025-01-02" in text
        assert "DATA: Beta content" in text

    def test_instructions_by_model_type(self, sample_results):
        standard = format_results_for_prompt("q", sample_results)
        reasoning = format_results_for_prompt("q", sample_results, reasoning_model=True)
        assert standard.endswith(STANDARD_INSTRUCTIONS)
        assert reasoning.endswith(REASONING_INSTRUCTIONS)

    def test_no_results(self):
        text = format_results_for_prompt("q", [])
        assert SEARCH_MARKER in text
        assert "No search results found." in text

    def test_author_included_for_papers(self, sample_paper):
        text = format_results_for_prompt("q", [sample_paper])
        assert "AUTHOR: Ashish Vaswani, Noam Shazeer" in text


@pytest.mark.unit
class TestResultsToSources:
    """Tests for UI source records."""

    def test_web_sources(self, sample_results):
        sources = results_to_sources(sample_results)

        assert [s.relevance_score for s in sources] == [1.0, 0.9, 0.8]
        assert sources[0].domain == "example.com"
        assert sources[0].favicon.startswith("https://www.google.com/s2/favicons")
        assert sources[2].content is None

    def test_arxiv_source(self, sample_paper):
        (source,) = results_to_sources([sample_paper])
        assert source.domain == "arxiv.org"
        assert source.arxiv_id == "1706.03762v7"
        assert source.pdf_url == "https://arxiv.org/pdf/1706.03762v7"

    def test_relevance_floor(self):
        assert relevance_for_rank(20) == 0.1

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://www.example.com/x", "example.com"),
            ("http://sub.site.org", "sub.site.org"),
            ("not a url", "unknown"),
        ],
    )
    def test_source_domain(self, url, expected):
        assert source_domain(url) == expected


@pytest.mark.unit
class TestTimePeriodToTopic:
    @pytest.mark.parametrize(
        "period,expected",
        [("recent", "news"), ("1h", "news"), ("1d", "news"), ("1w", "general")],
    )
    def test_mapping(self, period, expected):
        assert time_period_to_topic(period) == expected

    def test_no_period_keeps_topic(self):
        assert time_period_to_topic(None, "finance") == "finance"
