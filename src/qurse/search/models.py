"""Dataclasses shared by the search backends."""

import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class SearchResult:
    """One hit from a web or paper search."""

    url: str
    title: str
    content: str = ""
    published_date: Optional[str] = None
    author: Optional[str] = None
    image: Optional[str] = None
    favicon: Optional[str] = None

    # arXiv papers only
    arxiv_id: Optional[str] = None
    pdf_url: Optional[str] = None
    categories: Optional[str] = None
    comments: Optional[str] = None
    journal_ref: Optional[str] = None

    @property
    def is_arxiv(self) -> bool:
        return self.arxiv_id is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, dropping unset optional fields."""
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass
class SearchResponse:
    """Results of one query against one backend."""

    query: str
    results: List[SearchResult] = field(default_factory=list)
    backend: str = "exa"
    search_time: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "backend": self.backend,
            "search_time": self.search_time,
            "results": [r.to_dict() for r in self.results],
        }


@dataclass
class Source:
    """A citation shown next to an answer in the UI."""

    title: str
    url: str
    domain: str
    relevance_score: float
    favicon: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None
    published_date: Optional[str] = None
    arxiv_id: Optional[str] = None
    pdf_url: Optional[str] = None
    categories: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}
