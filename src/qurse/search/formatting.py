"""Render search results for prompts and for the sources sidebar."""

from typing import Iterable, List, Optional
from urllib.parse import urlparse

from qurse.core.constants import ARXIV_DOMAIN, FAVICON_URL_TEMPLATE, SEARCH_MARKER
from qurse.search.models import SearchResult, Source

WEB_DATA_HEADER = "WEB SEARCH DATA (NOT REASONING - USE THIS INFORMATION TO ANSWER):"
NO_RESULTS = "No search results found."

REASONING_INSTRUCTIONS = (
    "INSTRUCTIONS: Analyze the above web data and provide your reasoning in "
    "<think> tags, then give a clear answer. Do NOT list the sources in your "
    "reasoning - use them to think through the problem."
)
STANDARD_INSTRUCTIONS = (
    "INSTRUCTIONS: Analyze the above web data and provide a clear, direct "
    "answer. Do NOT use <think> tags or list the sources - synthesize the "
    "information into a coherent response."
)

_RECENT_PERIODS = {"recent", "1h", "1d"}
_GENERAL_PERIODS = {"1w", "1m"}


def format_results_for_prompt(
    query: str, results: Iterable[SearchResult], reasoning_model: bool = False
) -> str:
    """Format search results as a block to append to the user's message.

    The block always starts with the search marker, so a response built on it
    is recognized as search-backed even when nothing was found.

    Args:
        query: Query the results belong to.
        results: Results in relevance order.
        reasoning_model: Ask for ``<think>`` reasoning instead of a direct answer.

    Returns:
        Prompt text.
    """
    results = list(results)
    lines = [f"{SEARCH_MARKER} {query}", ""]
    if not results:
        lines.append(NO_RESULTS)
        return "\n".join(lines)

    lines.extend([WEB_DATA_HEADER, ""])
    for index, result in enumerate(results, start=1):
        lines.append(f"SOURCE {index}: {result.title}")
        lines.append(f"URL: {result.url}")
        if result.author:
            lines.append(f"AUTHOR: {result.author}")
        if result.published_date:
            lines.append(f"DATE: {result.published_date}")
        lines.append(f"DATA: {result.content}")
        lines.append("")

    lines.append(REASONING_INSTRUCTIONS if reasoning_model else STANDARD_INSTRUCTIONS)
    return "\n".join(lines)


def source_domain(url: str) -> str:
    """Hostname of ``url`` without a leading ``www.``."""
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        host = ""
    if host.startswith("www."):
        host = host[4:]
    return host or "unknown"


def favicon_url(url: str) -> str:
    return FAVICON_URL_TEMPLATE.format(url=url)


def relevance_for_rank(index: int) -> float:
    """Relevance of the result at zero-based ``index``: 1.0, 0.9, ... floored at 0.1."""
    return round(max(0.1, 1 - index * 0.1), 2)


def results_to_sources(results: Iterable[SearchResult]) -> List[Source]:
    """Convert ranked search results into UI source records."""
    sources = []
    for index, result in enumerate(results):
        if result.is_arxiv:
            sources.append(
                Source(
                    title=result.title,
                    url=result.url,
                    domain=ARXIV_DOMAIN,
                    relevance_score=relevance_for_rank(index),
                    favicon=favicon_url(result.url),
                    content=result.content,
                    author=result.author,
                    published_date=result.published_date,
                    arxiv_id=result.arxiv_id,
                    pdf_url=result.pdf_url,
                    categories=result.categories,
                )
            )
            continue
        sources.append(
            Source(
                title=result.title,
                url=result.url,
                domain=source_domain(result.url),
                relevance_score=relevance_for_rank(index),
                favicon=favicon_url(result.url),
                content=result.content or None,
            )
        )
    return sources


def time_period_to_topic(time_period: Optional[str], topic: str = "general") -> str:
    """Map the legacy ``time_period`` tool argument onto an Exa topic."""
    if time_period in _RECENT_PERIODS:
        return "news"
    if time_period in _GENERAL_PERIODS:
        return "general"
    return topic
