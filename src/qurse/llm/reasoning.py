"""Split model output into reasoning and the final answer."""

import logging
import re
from typing import Any, Optional

from qurse.core.constants import EMPTY_REASONING_ANSWER
from qurse.llm.types import ParsedResponse, get_field

logger = logging.getLogger(__name__)

_THINK = re.compile(r"<think>([\s\S]*?)</think>", re.IGNORECASE)
_THINKING = re.compile(r"<thinking>([\s\S]*?)</thinking>", re.IGNORECASE)
_STEPS = re.compile(
    r"(?:^|\n)(?:\d+\.|\*\*[^*]+\*\*|Step\s+\d+)[\s\S]*?"
    r"(?=\n\n|\n\*\*Final Answer\*\*|\n\*\*Answer\*\*|$)",
    re.IGNORECASE,
)


def _normalize_newlines(content: str) -> str:
    return content.strip().replace("\r\n", "\n").replace("\r", "\n")


def _non_empty(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _first(seq: Any) -> Any:
    if isinstance(seq, (list, tuple)) and seq:
        return seq[0]
    return None


def _xai_reasoning(raw: Any) -> Optional[str]:
    """Look for reasoning in the places XAI responses put it."""
    reasoning = _non_empty(get_field(raw, "reasoning"))
    if reasoning:
        return reasoning

    reasoning = _non_empty(get_field(_first(get_field(raw, "steps")), "reasoning"))
    if reasoning:
        return reasoning

    raw_result = get_field(raw, "raw_result")
    message = get_field(_first(get_field(raw_result, "choices")), "message")
    reasoning = _non_empty(get_field(message, "reasoning_content"))
    if reasoning:
        return reasoning

    step = _first(get_field(raw_result, "steps"))
    reasoning = _non_empty(get_field(step, "reasoning"))
    if reasoning:
        return reasoning

    details = get_field(step, "reasoning_details")
    if isinstance(details, (list, tuple)) and details:
        texts = [get_field(d, "text") or "" for d in details]
        return _non_empty("\n\n".join(texts))
    return None


def _tagged(pattern: re.Pattern, content: str) -> Optional[ParsedResponse]:
    match = pattern.search(content)
    if not match or not match.group(1).strip():
        return None
    answer = pattern.sub("", content, count=1).strip()
    return ParsedResponse(
        final_answer=answer or EMPTY_REASONING_ANSWER,
        reasoning=match.group(1).strip(),
    )


def _is_xai(model_name: Optional[str]) -> bool:
    if not model_name:
        return False
    lowered = model_name.lower()
    return "grok" in lowered or "xai" in lowered


def parse_reasoning_response(
    content: Any,
    model_name: Optional[str] = None,
    raw_response: Any = None,
    reasoning_model: bool = False,
) -> ParsedResponse:
    """Extract reasoning from a model response.

    Patterns are tried in order: XAI reasoning fields, ``<think>`` tags,
    ``<thinking>`` tags, numbered or bold step blocks (reasoning models only),
    and finally reasoning captured from agent events.

    Args:
        content: Response text.
        model_name: Model display name or id, used to detect XAI models.
        raw_response: Provider payload or generation result with extra fields.
        reasoning_model: Whether the model is flagged as a reasoning model.

    Returns:
        ParsedResponse. ``reasoning`` is None when no pattern matched.
    """
    if not isinstance(content, str) or not content:
        return ParsedResponse(final_answer=content if isinstance(content, str) else "")

    normalized = _normalize_newlines(content)

    if raw_response is not None and _is_xai(model_name):
        reasoning = _xai_reasoning(raw_response)
        if reasoning:
            return ParsedResponse(final_answer=normalized, reasoning=reasoning)
        logger.debug(f"No reasoning fields found in XAI response for {model_name}")

    for pattern in (_THINK, _THINKING):
        parsed = _tagged(pattern, normalized)
        if parsed:
            return parsed

    if reasoning_model:
        match = _STEPS.search(normalized)
        if match and match.group(0).strip():
            answer = _STEPS.sub("", normalized, count=1).strip()
            return ParsedResponse(
                final_answer=answer or EMPTY_REASONING_ANSWER,
                reasoning=match.group(0).strip(),
            )

    captured = get_field(get_field(raw_response, "reasoning"), "combined_reasoning")
    if _non_empty(captured):
        return ParsedResponse(final_answer=normalized, reasoning=captured.strip())

    return ParsedResponse(final_answer=normalized)
