"""DuckDuckGo search, used when no Exa key is configured."""

import asyncio
import logging
from typing import Any, Dict, List

from ddgs import DDGS

from qurse.search.exa import clean_title, deduplicate
from qurse.search.models import SearchResponse, SearchResult

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3


def _ddgs_text(query: str, max_results: int) -> List[Dict[str, Any]]:
    # Force English region to avoid non-English results
    return list(
        DDGS().text(
            query,
            region="us-en",
            safesearch="moderate",
            timelimit=None,
            max_results=max_results,
        )
    )


async def search_duckduckgo(query: str, max_results: int = 10) -> SearchResponse:
    """
    Search DuckDuckGo and return the top N results.

    Args:
        query: Search query string
        max_results: Maximum number of results to return

    Returns:
        SearchResponse; its result list is empty on failure
    """
    logger.info(f"Searching DuckDuckGo for: {query}")
    loop = asyncio.get_running_loop()

    try:
        # DuckDuckGo rate-limits aggressively, retry with exponential backoff
        for attempt in range(MAX_ATTEMPTS):
            try:
                raw = await loop.run_in_executor(None, _ddgs_text, query, max_results)
                break
            except Exception as e:
                if attempt < MAX_ATTEMPTS - 1:
                    wait_time = 2**attempt  # 1s, 2s
                    logger.warning(
                        f"DuckDuckGo search failed (attempt {attempt + 1}), "
                        f"retrying in {wait_time}s: {e}"
                    )
                    await asyncio.sleep(wait_time)
                else:
                    raise
    except Exception as e:
        logger.error(f"DuckDuckGo search failed after retries: {e}")
        return SearchResponse(query=query, backend="duckduckgo")

    results = [
        SearchResult(
            url=r.get("href", r.get("link", "")),
            title=clean_title(r.get("title", "")) or "Untitled",
            content=r.get("body", r.get("snippet", "")),
        )
        for r in raw
    ]
    results = deduplicate(r for r in results if r.url)
    logger.info(f"Found {len(results)} search results")
    return SearchResponse(query=query, results=results, backend="duckduckgo")
