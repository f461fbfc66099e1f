"""Schemas for the search passthrough endpoints."""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class WebSearchRequest(BaseModel):
    """Request body for a single web search."""

    query: str = Field(..., min_length=1)
    max_results: int = Field(default=5, ge=1, le=20)
    is_reasoning_model: bool = False


class WebSearchResponse(BaseModel):
    """Raw results plus the block that would be appended to a prompt."""

    query: str
    backend: str
    results: List[Dict[str, Any]] = Field(default_factory=list)
    formatted: str


class ArxivSearchRequest(BaseModel):
    """Request body for an arXiv paper search."""

    query: str = Field(..., min_length=1)
    max_results: int = Field(default=5, ge=1, le=15)
    search_type: Literal[
        "all", "title", "author", "abstract", "comments", "journal_ref", "paper_id"
    ] = "all"
    sort: str = "-announced_date_first"


class ArxivSearchResponse(BaseModel):
    query: str
    results: List[Dict[str, Any]] = Field(default_factory=list)
    sources: List[Dict[str, Any]] = Field(default_factory=list)
