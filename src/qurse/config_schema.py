"""Configuration schema and default values for Qurse."""

from dataclasses import asdict, dataclass, field, fields
from typing import List

from qurse.core.constants import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_OLLAMA_BASE_URL,
    DEFAULT_TEMPERATURE,
)

SEARCH_BACKENDS = ("auto", "exa", "duckduckgo")


@dataclass
class ServerConfig:
    """HTTP server settings."""

    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


@dataclass
class LLMConfig:
    """LLM generation defaults."""

    default_model: str = DEFAULT_MODEL
    default_temperature: float = DEFAULT_TEMPERATURE
    default_max_tokens: int = DEFAULT_MAX_TOKENS
    request_timeout: float = 120.0


@dataclass
class SearchConfig:
    """Web and arXiv search settings."""

    # "auto" uses Exa when EXA_API_KEY is set, DuckDuckGo otherwise
    backend: str = "auto"
    max_results: int = 5
    # Per-query result cap for token-limited models
    token_limited_max_results: int = 3
    max_queries: int = 3
    arxiv_max_results: int = 5
    timeout: float = 30.0

    def __post_init__(self):
        """Validate configuration values."""
        if self.backend not in SEARCH_BACKENDS:
            raise ValueError(
                f"backend must be one of {SEARCH_BACKENDS}, got {self.backend!r}"
            )
        if self.max_results < 1:
            raise ValueError(f"max_results must be at least 1, got {self.max_results}")


@dataclass
class OllamaConfig:
    """Ollama service configuration."""

    # Local models are listed in the catalog only when enabled
    enabled: bool = False
    base_url: str = DEFAULT_OLLAMA_BASE_URL
    timeout: int = 300


@dataclass
class QurseConfig:
    """Main configuration for Qurse."""

    server: ServerConfig
    llm: LLMConfig
    search: SearchConfig
    ollama: OllamaConfig

    def to_dict(self) -> dict:
        """Convert config to dictionary for YAML serialization."""
        return {
            "server": asdict(self.server),
            "llm": asdict(self.llm),
            "search": asdict(self.search),
            "ollama": asdict(self.ollama),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "QurseConfig":
        """Create config from dictionary (loaded from YAML)."""

        def _filter(cls_, data_):
            """Filter dict to only include known dataclass fields."""
            known = {f.name for f in fields(cls_)}
            return {k: v for k, v in (data_ or {}).items() if k in known}

        return cls(
            server=ServerConfig(**_filter(ServerConfig, data.get("server"))),
            llm=LLMConfig(**_filter(LLMConfig, data.get("llm"))),
            search=SearchConfig(**_filter(SearchConfig, data.get("search"))),
            ollama=OllamaConfig(**_filter(OllamaConfig, data.get("ollama"))),
        )

    @classmethod
    def create_default(cls) -> "QurseConfig":
        return cls(
            server=ServerConfig(),
            llm=LLMConfig(),
            search=SearchConfig(),
            ollama=OllamaConfig(),
        )
