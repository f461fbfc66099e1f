"""
Qurse: multi-provider conversational AI service

Routes chat requests to hosted LLM providers, optionally grounds answers in
web or arXiv search results, and returns markdown with renderer-ready LaTeX.
"""

from qurse.llm.unifier import extract_text, extract_tool_steps, search_was_performed
from qurse.rendering.latex import normalize

__version__ = "0.1.0"

__all__ = [
    # Rendering
    "normalize",
    # Response unification
    "extract_text",
    "extract_tool_steps",
    "search_was_performed",
]
