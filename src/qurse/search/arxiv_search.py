"""arXiv paper search through the arXiv API."""

import asyncio
import logging
from typing import Any, Dict, List, Literal

import arxiv

from qurse.errors import SearchError
from qurse.search.models import SearchResponse, SearchResult

logger = logging.getLogger(__name__)

ABSTRACT_CHARS = 300
SHORT_ABSTRACT_CHARS = 200
SHORT_ABSTRACT_THRESHOLD = 5
AUTHORS_CHARS = 150
MAX_PAPERS = 15

SearchType = Literal[
    "all", "title", "author", "abstract", "comments", "journal_ref", "paper_id"
]

_FIELD_PREFIXES: Dict[str, str] = {
    "all": "all",
    "title": "ti",
    "author": "au",
    "abstract": "abs",
    "comments": "co",
    "journal_ref": "jr",
}

SORT_OPTIONS: Dict[str, tuple] = {
    "relevance": (arxiv.SortCriterion.Relevance, arxiv.SortOrder.Descending),
    "-submitted_date": (arxiv.SortCriterion.SubmittedDate, arxiv.SortOrder.Descending),
    "submitted_date": (arxiv.SortCriterion.SubmittedDate, arxiv.SortOrder.Ascending),
    # The API has no announcement date; submission date is the closest match
    "-announced_date_first": (
        arxiv.SortCriterion.SubmittedDate,
        arxiv.SortOrder.Descending,
    ),
    "announced_date_first": (
        arxiv.SortCriterion.SubmittedDate,
        arxiv.SortOrder.Ascending,
    ),
    "-last_updated": (
        arxiv.SortCriterion.LastUpdatedDate,
        arxiv.SortOrder.Descending,
    ),
}
DEFAULT_SORT = "-announced_date_first"


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def build_search(
    query: str,
    max_results: int = 5,
    search_type: SearchType = "all",
    sort: str = DEFAULT_SORT,
) -> arxiv.Search:
    """Translate tool arguments into an ``arxiv.Search``."""
    sort_by, sort_order = SORT_OPTIONS.get(sort, SORT_OPTIONS[DEFAULT_SORT])
    max_results = max(1, min(max_results, MAX_PAPERS))

    if search_type == "paper_id":
        return arxiv.Search(
            id_list=[query.strip()],
            max_results=max_results,
        )

    prefix = _FIELD_PREFIXES.get(search_type, "all")
    return arxiv.Search(
        query=f"{prefix}:{query}",
        max_results=max_results,
        sort_by=sort_by,
        sort_order=sort_order,
    )


def paper_to_result(paper: Any) -> SearchResult:
    """Convert an ``arxiv.Result`` into a SearchResult."""
    arxiv_id = paper.get_short_id()
    published = paper.published.strftime("%Y-%m-%d") if paper.published else None
    return SearchResult(
        url=f"https://arxiv.org/abs/{arxiv_id}",
        title=" ".join(paper.title.split()),
        content=" ".join((paper.summary or "").split()),
        author=", ".join(a.name for a in paper.authors),
        published_date=published,
        arxiv_id=arxiv_id,
        pdf_url=paper.pdf_url or f"https://arxiv.org/pdf/{arxiv_id}.pdf",
        categories=", ".join(paper.categories),
        comments=paper.comment or None,
        journal_ref=paper.journal_ref or None,
    )


def trim_papers(papers: List[SearchResult]) -> List[SearchResult]:
    """Shorten abstracts and author lists to keep prompts small.

    Abstracts are cut to 300 characters, or 200 when there are more than five
    papers. Author lists are cut to 150 characters.
    """
    many = len(papers) > SHORT_ABSTRACT_THRESHOLD
    for paper in papers:
        paper.content = _truncate(paper.content, ABSTRACT_CHARS)
        if many:
            paper.content = _truncate(paper.content, SHORT_ABSTRACT_CHARS)
        if paper.author:
            paper.author = _truncate(paper.author, AUTHORS_CHARS)
    return papers


async def search_arxiv(
    query: str,
    max_results: int = 5,
    search_type: SearchType = "all",
    sort: str = DEFAULT_SORT,
    timeout: float = 30,
) -> SearchResponse:
    """Search arXiv for papers.

    Args:
        query: Topic, title words, author name or paper id.
        max_results: Number of papers (1-15).
        search_type: Field to search in.
        sort: One of SORT_OPTIONS.
        timeout: Seconds before the API call is abandoned.

    Returns:
        SearchResponse with trimmed paper results.

    Raises:
        SearchError: The arXiv API call failed or timed out.
    """
    search = build_search(query, max_results, search_type, sort)
    client = arxiv.Client()

    def fetch() -> List[Any]:
        return list(client.results(search))

    logger.info(f"Searching arXiv for: {query!r} ({search_type}, sort={sort})")
    loop = asyncio.get_running_loop()
    try:
        papers = await asyncio.wait_for(
            loop.run_in_executor(None, fetch), timeout=timeout
        )
    except asyncio.TimeoutError as e:
        raise SearchError(f"arXiv search timed out after {timeout}s") from e
    except arxiv.ArxivError as e:
        raise SearchError(f"Failed to search arXiv: {e}") from e

    results = trim_papers([paper_to_result(p) for p in papers])
    logger.info(f"arXiv search completed: {len(results)} papers found")
    return SearchResponse(query=query, results=results, backend="arxiv")
