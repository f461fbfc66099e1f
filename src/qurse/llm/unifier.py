"""Extract canonical text and tool steps from provider output.

Every function here is total: malformed shapes degrade to ``""`` or an empty
step list instead of raising.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, List, Optional

from qurse.core.constants import SEARCH_MARKER
from qurse.llm.types import (
    ChatCompletionOutput,
    ContentOutput,
    ModelOutput,
    RawModelOutput,
    ToolStep,
    get_field,
)

logger = logging.getLogger(__name__)


def _coerce_text(value: Any) -> Optional[str]:
    """Return message content as a string.

    Multi-part content (a list of ``{"type": "text", "text": ...}`` parts or
    plain strings) is joined from its text parts.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        parts = []
        for part in value:
            if isinstance(part, str):
                parts.append(part)
                continue
            text = get_field(part, "text")
            if isinstance(text, str):
                parts.append(text)
        return "".join(parts) if parts else None
    return None


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _choice_content(raw: Any) -> Optional[str]:
    choices = get_field(raw, "choices")
    if not _is_sequence(choices) or not choices:
        return None
    message = get_field(choices[0], "message")
    return _coerce_text(get_field(message, "content"))


def _raw_steps(raw: Any) -> List[ToolStep]:
    steps = get_field(raw, "steps")
    if not _is_sequence(steps) or not steps:
        # Chat-completion wrappers keep the SDK result alongside the choices
        steps = get_field(get_field(raw, "raw_result"), "steps")
    if not _is_sequence(steps) or not steps:
        return []
    return [ToolStep.from_raw(step) for step in steps]


def as_model_output(raw: RawModelOutput) -> ModelOutput:
    """Coerce an arbitrary provider result into a tagged variant.

    Args:
        raw: A mapping, an SDK object exposing attributes, an existing
            variant, or None.

    Returns:
        ChatCompletionOutput when ``choices[0].message.content`` holds text,
        otherwise ContentOutput (with ``""`` when no content exists).
    """
    if isinstance(raw, (ChatCompletionOutput, ContentOutput)):
        return raw

    try:
        steps = tuple(_raw_steps(raw))
        content = _choice_content(raw)
        if content is not None:
            return ChatCompletionOutput(content=content, steps=steps)
        content = _coerce_text(get_field(raw, "content"))
        return ContentOutput(content=content or "", steps=steps)
    except Exception as e:
        logger.warning(f"Unrecognized provider output shape {type(raw).__name__}: {e}")
        return ContentOutput(content="")


def extract_text(raw: RawModelOutput) -> str:
    """Prefer ``choices[0].message.content``, then ``content``, else ``""``."""
    return as_model_output(raw).content


def extract_tool_steps(raw: RawModelOutput) -> List[ToolStep]:
    """Return the ordered tool steps, or an empty list."""
    return list(as_model_output(raw).steps)


def search_was_performed(text: str, steps: Sequence) -> bool:
    """True iff the text carries the search marker or any tool step exists."""
    if isinstance(text, str) and SEARCH_MARKER in text:
        return True
    return bool(steps)


@dataclass
class UnifiedResponse:
    """Text, tool steps and the derived search signal of one response."""

    text: str
    tool_steps: List[ToolStep] = field(default_factory=list)
    search_performed: bool = False

    @property
    def tool_step_count(self) -> int:
        return len(self.tool_steps)


def unify(raw: RawModelOutput) -> UnifiedResponse:
    output = as_model_output(raw)
    steps = list(output.steps)
    return UnifiedResponse(
        text=output.content,
        tool_steps=steps,
        search_performed=search_was_performed(output.content, steps),
    )
