"""FunctionTool wrappers for the search tools offered to the agent.

Each factory returns a FunctionTool via the closure pattern: the search
service and the request's result collector are captured at construction time,
so results never leak between requests.
"""

import json
import logging
from typing import List, Literal, Optional

from llama_index.core.tools import FunctionTool
from pydantic import BaseModel, Field

from qurse.errors import SearchError
from qurse.search.formatting import results_to_sources, time_period_to_topic
from qurse.search.models import SearchResult, Source
from qurse.services.search_service import SearchService

logger = logging.getLogger(__name__)

# Limits applied to token-limited models regardless of what they ask for
TOKEN_LIMITED_MAX_QUERIES = 2


class SearchResultCollector:
    """Accumulates the search results produced while answering one request."""

    def __init__(self):
        self._results: List[SearchResult] = []

    def add(self, results: List[SearchResult]) -> None:
        self._results.extend(results)

    @property
    def results(self) -> List[SearchResult]:
        return list(self._results)

    def sources(self) -> List[Source]:
        return results_to_sources(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def __bool__(self) -> bool:
        return bool(self._results)


# --- Pydantic schemas for FunctionTool parameter validation ---


class WebSearchInput(BaseModel):
    """Input schema for the web_search tool."""

    queries: List[str] = Field(
        description="Search queries to run. Prefer one or two focused queries."
    )
    max_results: int = Field(
        default=5, ge=1, le=10, description="Maximum number of results per query."
    )
    topic: Literal["general", "news", "finance"] = Field(
        default="general", description="Topic type: general, news, or finance."
    )
    quality: Literal["default", "best"] = Field(
        default="default", description="Search quality: default=faster, best=better."
    )
    time_period: Optional[Literal["1h", "1d", "1w", "1m", "recent"]] = Field(
        default=None, description="Recency of results; recent periods search news."
    )


class ArxivSearchInput(BaseModel):
    """Input schema for the arxiv_search tool."""

    query: str = Field(description="The research topic or question to search for.")
    max_results: int = Field(
        default=5, ge=1, le=15, description="Maximum number of papers to return."
    )
    search_type: Literal[
        "all", "title", "author", "abstract", "comments", "journal_ref", "paper_id"
    ] = Field(default="all", description="Field of the paper to search in.")
    sort: Literal[
        "relevance",
        "-submitted_date",
        "submitted_date",
        "-announced_date_first",
        "announced_date_first",
        "-last_updated",
    ] = Field(default="-announced_date_first", description="Sort order for results.")


def _results_payload(results: List[SearchResult]) -> str:
    return json.dumps([r.to_dict() for r in results], indent=2)


def create_web_search_tool(
    search_service: SearchService,
    collector: SearchResultCollector,
    token_limited: bool = False,
    max_queries: int = 3,
    token_limited_max_results: int = 3,
) -> FunctionTool:
    """Create the web_search tool for one request.

    Args:
        search_service: Backend used for each query.
        collector: Receives every result returned to the model.
        token_limited: Cap queries and results for small-context models.
        max_queries: Maximum number of queries executed per call.
        token_limited_max_results: Per-query result cap when token limited.
    """
    if token_limited:
        max_queries = min(max_queries, TOKEN_LIMITED_MAX_QUERIES)

    async def web_search(
        queries: List[str],
        max_results: int = 5,
        topic: str = "general",
        quality: str = "default",
        time_period: Optional[str] = None,
    ) -> str:
        if token_limited:
            max_results = min(max_results, token_limited_max_results)
        effective_topic = time_period_to_topic(time_period, topic)

        found: List[SearchResult] = []
        for query in queries[:max_queries]:
            try:
                response = await search_service.web_search(
                    query, max_results=max_results, topic=effective_topic, quality=quality
                )
            except SearchError as e:
                logger.error(f"Web search failed for {query!r}: {e}")
                continue
            found.extend(response.results)

        collector.add(found)
        logger.info(
            f"web_search ran {min(len(queries), max_queries)} queries, "
            f"{len(found)} results"
        )
        if not found:
            return "No search results found."
        return _results_payload(found)

    return FunctionTool.from_defaults(
        async_fn=web_search,
        name="web_search",
        description=(
            "Search the web for current information. Use this tool to find "
            "recent news, facts, or updates needed to answer the question "
            "accurately. Returns a JSON array of results with title, URL and "
            "a content excerpt."
        ),
        fn_schema=WebSearchInput,
    )


def create_arxiv_search_tool(
    search_service: SearchService, collector: SearchResultCollector
) -> FunctionTool:
    """Create the arxiv_search tool for one request."""

    async def arxiv_search(
        query: str,
        max_results: int = 5,
        search_type: str = "all",
        sort: str = "-announced_date_first",
    ) -> str:
        try:
            response = await search_service.arxiv_search(
                query, max_results=max_results, search_type=search_type, sort=sort
            )
        except SearchError as e:
            logger.error(f"arXiv search failed for {query!r}: {e}")
            return f"arXiv search failed: {e}"

        collector.add(response.results)
        if not response.results:
            return "No papers found."
        return _results_payload(response.results)

    return FunctionTool.from_defaults(
        async_fn=arxiv_search,
        name="arxiv_search",
        description=(
            "Search arXiv for research papers on a topic. After finding papers "
            "you MUST answer the user's question using their abstracts; do not "
            "just list the papers."
        ),
        fn_schema=ArxivSearchInput,
    )
