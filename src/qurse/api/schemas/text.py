"""Schemas for the text normalization endpoint."""

from pydantic import BaseModel


class NormalizeRequest(BaseModel):
    text: str


class NormalizeResponse(BaseModel):
    text: str
    changed: bool
