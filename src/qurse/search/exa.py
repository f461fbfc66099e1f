"""Exa web search over its REST API."""

import asyncio
import logging
import re
from typing import Any, Dict, Iterable, List, Literal, Optional, TypeVar

import aiohttp

from qurse.core.constants import EXA_CONTENT_CHARS, EXA_SEARCH_URL
from qurse.errors import SearchError
from qurse.search.models import SearchResponse, SearchResult

logger = logging.getLogger(__name__)

Topic = Literal["general", "news", "finance"]
Quality = Literal["default", "best"]

# Exa needs a reasonably large pool to de-duplicate from
MIN_EXA_RESULTS = 10

_HOST = re.compile(r"^https?://([^/?#]+)(?:[/?#]|$)", re.IGNORECASE)
_BRACKETED = re.compile(r"\[.*?\]")
_PARENTHESIZED = re.compile(r"\(.*?\)")
_WHITESPACE = re.compile(r"\s+")

T = TypeVar("T", bound=SearchResult)


def extract_domain(url: str) -> str:
    """Return the host part of a URL, or the input if it has none."""
    match = _HOST.match(url or "")
    return match.group(1) if match else url


def clean_title(title: str) -> str:
    """Strip bracketed and parenthesised fragments and collapse whitespace.

    >>> clean_title("Paper [PDF]  (2024) Results")
    'Paper Results'
    """
    title = _BRACKETED.sub("", title or "")
    title = _PARENTHESIZED.sub("", title)
    return _WHITESPACE.sub(" ", title).strip()


def deduplicate(results: Iterable[T]) -> List[T]:
    """Keep the first result per URL and per domain."""
    seen_urls = set()
    seen_domains = set()
    unique = []
    for result in results:
        domain = extract_domain(result.url)
        if result.url in seen_urls or domain in seen_domains:
            continue
        seen_urls.add(result.url)
        seen_domains.add(domain)
        unique.append(result)
    return unique


def _process_domains(domains: Optional[Iterable[str]]) -> Optional[List[str]]:
    if not domains:
        return None
    processed = [extract_domain(d) for d in domains]
    if all(not d.strip() for d in processed):
        return None
    return processed


def build_payload(
    query: str,
    max_results: int,
    topic: Topic = "general",
    quality: Quality = "default",
    include_domains: Optional[Iterable[str]] = None,
    exclude_domains: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    """Build the JSON body of an Exa ``/search`` request."""
    payload: Dict[str, Any] = {
        "query": query,
        "type": "auto" if quality == "best" else "hybrid",
        "numResults": max(max_results, MIN_EXA_RESULTS),
        "useAutoprompt": True,
        "contents": {"text": True, "livecrawl": "preferred"},
    }
    if topic == "finance":
        payload["category"] = "financial report"
    elif topic == "news":
        payload["category"] = "news"

    included = _process_domains(include_domains)
    if included:
        payload["includeDomains"] = included
    excluded = _process_domains(exclude_domains)
    if excluded:
        payload["excludeDomains"] = excluded
    return payload


def parse_result(item: Dict[str, Any], topic: Topic = "general") -> SearchResult:
    published = item.get("publishedDate") if topic == "news" else None
    return SearchResult(
        url=item.get("url", ""),
        title=clean_title(item.get("title") or ""),
        content=(item.get("text") or "")[:EXA_CONTENT_CHARS],
        published_date=published or None,
        author=item.get("author") or None,
        image=item.get("image") or None,
        favicon=item.get("favicon") or None,
    )


async def search_exa(
    query: str,
    api_key: str,
    max_results: int = 10,
    topic: Topic = "general",
    quality: Quality = "default",
    include_domains: Optional[Iterable[str]] = None,
    exclude_domains: Optional[Iterable[str]] = None,
    timeout: float = 30,
) -> SearchResponse:
    """Search the web with Exa.

    Args:
        query: Search query.
        api_key: Exa API key.
        max_results: Number of results to return after de-duplication.
        topic: "news" restricts to news and keeps publication dates,
            "finance" restricts to financial reports.
        quality: "best" lets Exa pick the search type.
        include_domains: Only return results from these domains.
        exclude_domains: Never return results from these domains.
        timeout: Request timeout in seconds.

    Returns:
        SearchResponse with cleaned, de-duplicated results.

    Raises:
        SearchError: The key is missing or the request failed.
    """
    if not api_key:
        raise SearchError("EXA_API_KEY is not configured")

    payload = build_payload(
        query, max_results, topic, quality, include_domains, exclude_domains
    )
    logger.info(
        f"Exa search: {query!r} (max_results={max_results}, topic={topic}, "
        f"quality={quality})"
    )

    headers = {"x-api-key": api_key, "Content-Type": "application/json"}
    try:
        async with aiohttp.ClientSession() as session:
            async with session.post(
                EXA_SEARCH_URL,
                json=payload,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as response:
                if response.status != 200:
                    body = await response.text()
                    raise SearchError(f"Exa returned HTTP {response.status}: {body}")
                data = await response.json()
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        raise SearchError(f"Exa request failed: {e}") from e

    if not isinstance(data, dict):
        raise SearchError(f"Unexpected Exa response: {type(data).__name__}")

    results = [parse_result(item, topic) for item in data.get("results", [])]
    unique = deduplicate(results)[:max_results]
    logger.info(f"Exa returned {len(results)} results, {len(unique)} after de-duplication")
    return SearchResponse(query=query, results=unique, backend="exa")
