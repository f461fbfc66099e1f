"""Dataclasses for service layer models.

These models carry data between the generation service and the API layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from qurse.llm.types import ToolStep
from qurse.search.models import Source

Role = Literal["user", "assistant", "system"]


@dataclass
class Message:
    """One chat turn."""

    role: Role
    content: str


@dataclass
class GenerationOptions:
    """Everything needed to answer one chat request."""

    model: str
    messages: List[Message]
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    web_search_enabled: bool = False
    arxiv_mode: bool = False
    custom_instructions: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def search_enabled(self) -> bool:
        return self.web_search_enabled or self.arxiv_mode

    def last_user_message(self) -> str:
        for message in reversed(self.messages):
            if message.role == "user":
                return message.content
        return ""


@dataclass
class GenerationResult:
    """Unified answer returned to the API layer.

    ``content`` has already been through reasoning extraction and LaTeX
    normalization.
    """

    content: str
    model: str
    reasoning: Optional[str] = None
    sources: List[Source] = field(default_factory=list)
    tool_steps: List[ToolStep] = field(default_factory=list)
    usage: Dict[str, int] = field(default_factory=dict)
    search_performed: bool = False
    raw_result: Any = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the chat-completion shaped JSON payload."""
        return {
            "choices": [{"message": {"content": self.content, "role": "assistant"}}],
            "model": self.model,
            "usage": self.usage,
            "reasoning": self.reasoning,
            "sources": [s.to_dict() for s in self.sources],
            "search_performed": self.search_performed,
            "tool_steps": [
                {"tool": s.tool, "args": s.args, "is_error": s.is_error}
                for s in self.tool_steps
            ],
        }
