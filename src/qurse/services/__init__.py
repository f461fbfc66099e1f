"""Service layer for Qurse.

Services hold the request handling logic behind the API routes. They are
created once and injected through qurse.api.deps.
"""

from .config_service import ConfigService
from .generation_service import GenerationService
from .models import GenerationOptions, GenerationResult, Message
from .search_service import SearchService
from .tools import SearchResultCollector

__all__ = [
    "ConfigService",
    "GenerationOptions",
    "GenerationResult",
    "GenerationService",
    "Message",
    "SearchResultCollector",
    "SearchService",
]
