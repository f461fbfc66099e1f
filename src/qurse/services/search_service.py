"""Search backend selection for web and arXiv queries."""

import logging
import os
from typing import Optional

from qurse.config_schema import SearchConfig
from qurse.errors import SearchError
from qurse.search import search_arxiv, search_duckduckgo, search_exa
from qurse.search.models import SearchResponse

logger = logging.getLogger(__name__)


class SearchService:
    """Routes web queries to Exa or DuckDuckGo and paper queries to arXiv.

    With ``backend="auto"`` Exa is used when an API key is available, and a
    failed Exa request is retried on DuckDuckGo.
    """

    def __init__(self, config: SearchConfig, exa_api_key: Optional[str] = None):
        self.config = config
        self.exa_api_key = exa_api_key

    @classmethod
    def from_env(cls, config: SearchConfig) -> "SearchService":
        return cls(config, exa_api_key=os.environ.get("EXA_API_KEY") or None)

    @property
    def backend(self) -> str:
        if self.config.backend == "auto":
            return "exa" if self.exa_api_key else "duckduckgo"
        return self.config.backend

    async def web_search(
        self,
        query: str,
        max_results: Optional[int] = None,
        topic: str = "general",
        quality: str = "default",
    ) -> SearchResponse:
        """Search the web with the configured backend.

        Raises:
            SearchError: Exa was explicitly selected and failed.
        """
        max_results = max_results or self.config.max_results

        if self.backend == "exa":
            try:
                return await search_exa(
                    query,
                    self.exa_api_key or "",
                    max_results=max_results,
                    topic=topic,
                    quality=quality,
                    timeout=self.config.timeout,
                )
            except SearchError as e:
                if self.config.backend == "exa":
                    raise
                logger.warning(f"Exa search failed, falling back to DuckDuckGo: {e}")

        return await search_duckduckgo(query, max_results=max_results)

    async def arxiv_search(
        self,
        query: str,
        max_results: Optional[int] = None,
        search_type: str = "all",
        sort: str = "-announced_date_first",
    ) -> SearchResponse:
        return await search_arxiv(
            query,
            max_results=max_results or self.config.arxiv_max_results,
            search_type=search_type,
            sort=sort,
            timeout=self.config.timeout,
        )
