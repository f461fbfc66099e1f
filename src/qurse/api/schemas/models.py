"""Schemas for the model catalog endpoint."""

from typing import Dict, List

from pydantic import BaseModel, Field


class ModelInfoSchema(BaseModel):
    """One selectable model."""

    id: str
    name: str
    provider: str
    max_tokens: int
    temperature: float
    image_support: bool = False
    reasoning_model: bool = False
    supports_tools: bool = True


class ModelGroupSchema(BaseModel):
    provider: str
    enabled: bool
    models: List[ModelInfoSchema] = Field(default_factory=list)


class ModelsResponse(BaseModel):
    """Enabled model groups keyed by provider."""

    groups: Dict[str, ModelGroupSchema]
    default_model: str
