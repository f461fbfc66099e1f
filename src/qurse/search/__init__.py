"""Web and paper search backends."""

from .arxiv_search import search_arxiv
from .duckduckgo import search_duckduckgo
from .exa import clean_title, deduplicate, search_exa
from .formatting import format_results_for_prompt, results_to_sources
from .models import SearchResponse, SearchResult, Source

__all__ = [
    "SearchResponse",
    "SearchResult",
    "Source",
    "clean_title",
    "deduplicate",
    "format_results_for_prompt",
    "results_to_sources",
    "search_arxiv",
    "search_duckduckgo",
    "search_exa",
]
