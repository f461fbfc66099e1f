"""Pydantic schemas for API request/response models."""

from .ai import (
    AIRequest,
    AIResponse,
    ChatMessageSchema,
    Choice,
    ChoiceMessage,
    SourceSchema,
    ToolStepSchema,
    UsageSchema,
)
from .common import ErrorResponse, HealthResponse
from .models import ModelGroupSchema, ModelInfoSchema, ModelsResponse
from .search import (
    ArxivSearchRequest,
    ArxivSearchResponse,
    WebSearchRequest,
    WebSearchResponse,
)
from .text import NormalizeRequest, NormalizeResponse
