"""Core configuration data and local-server utilities for Qurse."""

from .models import DEFAULT_MODEL_GROUPS, ModelCatalog, ModelGroup, ModelInfo
from .ollama import get_available_models, get_ollama_url

__all__ = [
    "DEFAULT_MODEL_GROUPS",
    "ModelCatalog",
    "ModelGroup",
    "ModelInfo",
    "get_available_models",
    "get_ollama_url",
]
