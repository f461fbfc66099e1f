"""Search passthrough endpoints."""

import logging

from fastapi import APIRouter, HTTPException

from qurse.api.deps import SearchServiceDep
from qurse.api.schemas import (
    ArxivSearchRequest,
    ArxivSearchResponse,
    WebSearchRequest,
    WebSearchResponse,
)
from qurse.errors import SearchError
from qurse.search.formatting import format_results_for_prompt, results_to_sources

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/web-search", response_model=WebSearchResponse)
async def web_search(
    request: WebSearchRequest, search_service: SearchServiceDep
) -> WebSearchResponse:
    """Run one web search and return the results with their prompt block."""
    try:
        response = await search_service.web_search(
            request.query, max_results=request.max_results
        )
    except SearchError as e:
        logger.error(f"Web search failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return WebSearchResponse(
        query=request.query,
        backend=response.backend,
        results=[r.to_dict() for r in response.results],
        formatted=format_results_for_prompt(
            request.query,
            response.results,
            reasoning_model=request.is_reasoning_model,
        ),
    )


@router.post("/arxiv", response_model=ArxivSearchResponse)
async def arxiv_search(
    request: ArxivSearchRequest, search_service: SearchServiceDep
) -> ArxivSearchResponse:
    """Search arXiv papers."""
    try:
        response = await search_service.arxiv_search(
            request.query,
            max_results=request.max_results,
            search_type=request.search_type,
            sort=request.sort,
        )
    except SearchError as e:
        logger.error(f"arXiv search failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return ArxivSearchResponse(
        query=request.query,
        results=[r.to_dict() for r in response.results],
        sources=[s.to_dict() for s in results_to_sources(response.results)],
    )
