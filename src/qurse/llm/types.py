"""Normalized shapes of provider output.

Provider SDKs return either chat-completion style payloads
(``choices[0].message.content``) or a plain ``content`` field, optionally with
a list of tool-call steps. At the SDK boundary these are coerced once into one
of the two tagged variants below, so downstream code never inspects optional
fields itself.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Mapping, Optional, Tuple, Union

_TOOL_NAME_KEYS = ("tool", "tool_name", "toolName", "name")
_RESULT_KEYS = ("result", "output", "tool_output")
_ARGS_KEYS = ("args", "params", "tool_kwargs", "arguments")


def get_field(obj: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a mapping key or an attribute."""
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _first_field(obj: Any, names: Tuple[str, ...]) -> Any:
    for name in names:
        value = get_field(obj, name)
        if value is not None:
            return value
    return None


@dataclass(frozen=True)
class ToolStep:
    """A record that the model invoked a tool while generating."""

    tool: str
    result: Any = None
    args: Dict[str, Any] = field(default_factory=dict)
    is_error: bool = False

    @classmethod
    def from_raw(cls, raw: Any) -> "ToolStep":
        """Build a step from an SDK step object or dict.

        A bare string is taken as the tool name.
        """
        if isinstance(raw, ToolStep):
            return raw
        if isinstance(raw, str):
            return cls(tool=raw)

        name = _first_field(raw, _TOOL_NAME_KEYS)
        args = _first_field(raw, _ARGS_KEYS)
        return cls(
            tool=str(name) if name is not None else "unknown",
            result=_first_field(raw, _RESULT_KEYS),
            args=dict(args) if isinstance(args, Mapping) else {},
            is_error=bool(get_field(raw, "is_error", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tool": self.tool,
            "args": self.args,
            "result": self.result,
            "is_error": self.is_error,
        }


@dataclass(frozen=True)
class ChatCompletionOutput:
    """Output carried as ``choices[0].message.content``."""

    content: str
    steps: Tuple[ToolStep, ...] = ()
    kind: Literal["chat_completion"] = "chat_completion"


@dataclass(frozen=True)
class ContentOutput:
    """Output carried as a top-level ``content`` field (possibly empty)."""

    content: str
    steps: Tuple[ToolStep, ...] = ()
    kind: Literal["content"] = "content"


ModelOutput = Union[ChatCompletionOutput, ContentOutput]

RawModelOutput = Union[ModelOutput, Mapping[str, Any], Any, None]
"""Anything a provider SDK may hand back."""


@dataclass
class ParsedResponse:
    """Model output split into reasoning and the user-facing answer."""

    final_answer: str
    reasoning: Optional[str] = None

    @property
    def has_reasoning(self) -> bool:
        return bool(self.reasoning)
