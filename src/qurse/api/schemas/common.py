"""Common schemas shared across API endpoints."""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error body for invalid requests and failed generations."""

    error: str
    details: Any = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
