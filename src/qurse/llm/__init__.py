"""LLM provider integration: client construction and output handling."""

from .reasoning import parse_reasoning_response
from .types import ChatCompletionOutput, ContentOutput, ParsedResponse, ToolStep
from .unifier import (
    UnifiedResponse,
    as_model_output,
    extract_text,
    extract_tool_steps,
    search_was_performed,
    unify,
)

__all__ = [
    "ChatCompletionOutput",
    "ContentOutput",
    "ParsedResponse",
    "ToolStep",
    "UnifiedResponse",
    "as_model_output",
    "extract_text",
    "extract_tool_steps",
    "parse_reasoning_response",
    "search_was_performed",
    "unify",
]
