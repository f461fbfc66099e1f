"""Schemas for the /api/ai generation endpoint."""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class ChatMessageSchema(BaseModel):
    """One chat turn sent by the client."""

    role: Literal["user", "assistant", "system"]
    content: str = Field(..., min_length=1)


class AIRequest(BaseModel):
    """Request body for generation."""

    model: str = Field(..., min_length=1)
    messages: List[ChatMessageSchema] = Field(..., min_length=1)
    max_tokens: Optional[int] = Field(default=None, ge=1, le=32000)
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    stream: bool = False
    web_search_enabled: bool = False
    arxiv_mode: bool = False
    custom_instructions: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)


class ChoiceMessage(BaseModel):
    content: str
    role: Literal["assistant"] = "assistant"


class Choice(BaseModel):
    message: ChoiceMessage


class UsageSchema(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ToolStepSchema(BaseModel):
    """A tool invocation made while answering."""

    tool: str
    args: Dict[str, Any] = Field(default_factory=dict)
    is_error: bool = False


class SourceSchema(BaseModel):
    """A search result shown under the answer."""

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


class AIResponse(BaseModel):
    """Chat-completion shaped response for non-streaming generation."""

    choices: List[Choice]
    model: str
    usage: UsageSchema = Field(default_factory=UsageSchema)
    reasoning: Optional[str] = None
    sources: List[SourceSchema] = Field(default_factory=list)
    search_performed: bool = False
    tool_steps: List[ToolStepSchema] = Field(default_factory=list)
