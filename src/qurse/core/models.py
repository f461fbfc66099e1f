"""Model catalog: provider groups and per-model capabilities.

The catalog is plain static configuration. Consumers receive a
``ModelCatalog`` instance explicitly instead of reading module globals, so
tests and deployments can swap in their own groups.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from qurse.core.constants import TOKEN_LIMITED_MODEL_IDS
from qurse.errors import ModelNotFoundError


@dataclass(frozen=True)
class ModelInfo:
    """Capabilities of a single hosted model."""

    id: str
    name: str
    provider: str
    max_tokens: int = 8192
    temperature: float = 0.7
    image_support: bool = False
    reasoning_model: bool = False
    supports_tools: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ModelGroup:
    """Models served by one provider, toggled as a unit."""

    provider: str
    enabled: bool
    models: Tuple[ModelInfo, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider,
            "enabled": self.enabled,
            "models": [m.to_dict() for m in self.models],
        }


def _groq(model_id: str, name: str, max_tokens: int = 8192, **kwargs) -> ModelInfo:
    return ModelInfo(
        id=model_id, name=name, provider="groq", max_tokens=max_tokens, **kwargs
    )


def _xai(model_id: str, name: str, **kwargs) -> ModelInfo:
    return ModelInfo(id=model_id, name=name, provider="xai", **kwargs)


DEFAULT_MODEL_GROUPS: Dict[str, ModelGroup] = {
    "groq": ModelGroup(
        provider="GROQ",
        enabled=True,
        models=(
            _groq(
                "deepseek-r1-distill-llama-70b",
                "Deepseek R1 Distill 70B",
                reasoning_model=True,
            ),
            _groq("qwen/qwen3-32b", "Qwen3 32B", 32768, reasoning_model=True),
            _groq("gemma2-9b-it", "Gemma2 9B"),
            _groq("moonshotai/kimi-k2-instruct", "Kimi K2 Instruct"),
            _groq("mistral-saba-24b", "Mistral Saba 24B"),
            _groq("llama-3.3-70b-versatile", "Llama 3.3 70B Versatile", 32768),
            _groq(
                "meta-llama/llama-4-scout-17b-16e-instruct",
                "Llama 4 Scout 17B",
                image_support=True,
            ),
            _groq(
                "meta-llama/llama-4-maverick-17b-128e-instruct",
                "Llama 4 Maverick 17B",
                image_support=True,
            ),
            _groq("llama-3.1-8b-instant", "Llama 3.1 8B Instant"),
            _groq("openai/gpt-oss-120b", "GPT-OSS 120B", reasoning_model=True),
            _groq("openai/gpt-oss-20b", "GPT-OSS 20B", reasoning_model=True),
        ),
    ),
    "xai": ModelGroup(
        provider="XAI",
        enabled=True,
        models=(
            _xai("grok-3-mini", "Grok 3 Mini", reasoning_model=True),
            _xai("grok-2-vision-1212", "Grok 2 Vision", image_support=True),
            _xai("grok-3", "Grok 3"),
            _xai("grok-4-0709", "Grok 4", reasoning_model=True),
        ),
    ),
    "openai": ModelGroup(
        provider="OpenAI",
        enabled=True,
        models=(
            ModelInfo(
                id="o4-mini-2025-04-16",
                name="O4 Mini",
                provider="openai",
                max_tokens=4096,
                image_support=True,
                reasoning_model=True,
            ),
            ModelInfo(
                id="gpt-4.1-2025-04-14",
                name="GPT-4.1",
                provider="openai",
                max_tokens=4096,
                image_support=True,
            ),
        ),
    ),
    "anthropic": ModelGroup(
        provider="Anthropic",
        enabled=True,
        models=(
            ModelInfo(
                id="claude-sonnet-4-20250514",
                name="Claude Sonnet 4",
                provider="anthropic",
                max_tokens=4096,
                reasoning_model=True,
            ),
            ModelInfo(
                id="claude-3-haiku-20240307",
                name="Claude 3 Haiku",
                provider="anthropic",
                max_tokens=4096,
            ),
        ),
    ),
    "google": ModelGroup(
        provider="Google",
        enabled=True,
        models=(
            ModelInfo(
                id="gemini-2.5-flash",
                name="Gemini 2.5 Flash",
                provider="google",
                image_support=True,
            ),
            ModelInfo(
                id="gemini-2.5-pro",
                name="Gemini 2.5 Pro",
                provider="google",
                image_support=True,
                reasoning_model=True,
            ),
        ),
    ),
    # Local models are discovered at runtime; see ModelCatalog.with_ollama_models
    "ollama": ModelGroup(provider="Ollama", enabled=False, models=()),
}


class ModelCatalog:
    """Immutable lookup over the enabled model groups.

    Models are keyed by display name, which is what clients send. Lookups
    also accept the provider model id.
    """

    def __init__(
        self,
        groups: Optional[Dict[str, ModelGroup]] = None,
        token_limited_ids: Iterable[str] = TOKEN_LIMITED_MODEL_IDS,
    ):
        self._groups = dict(DEFAULT_MODEL_GROUPS if groups is None else groups)
        self.token_limited_ids = frozenset(token_limited_ids)

        self._by_name: Dict[str, ModelInfo] = {}
        self._by_id: Dict[str, ModelInfo] = {}
        for group in self._groups.values():
            if not group.enabled:
                continue
            for model in group.models:
                self._by_name[model.name] = model
                self._by_id.setdefault(model.id, model)

    @property
    def groups(self) -> Dict[str, ModelGroup]:
        return dict(self._groups)

    def enabled_groups(self) -> Dict[str, ModelGroup]:
        return {key: g for key, g in self._groups.items() if g.enabled}

    def get_model_info(self, key: str) -> Optional[ModelInfo]:
        """Look up a model by display name, then by id.

        Args:
            key: Display name (e.g. "Grok 3") or provider id (e.g. "grok-3").

        Returns:
            ModelInfo, or None if the model is unknown or its group disabled.
        """
        if not key:
            return None
        return self._by_name.get(key) or self._by_id.get(key)

    def require(self, key: str) -> ModelInfo:
        """Like get_model_info but raises ModelNotFoundError."""
        model = self.get_model_info(key)
        if model is None:
            raise ModelNotFoundError(key)
        return model

    def is_reasoning_model(self, key: str) -> bool:
        model = self.get_model_info(key)
        return model is not None and model.reasoning_model

    def is_token_limited(self, model: ModelInfo) -> bool:
        """Whether tool-enabled requests for this model need history trimming."""
        return model.provider == "groq"

    def is_reasoning_token_limited(self, model: ModelInfo) -> bool:
        return model.id in self.token_limited_ids

    def list_models(self) -> List[ModelInfo]:
        return list(self._by_name.values())

    def with_ollama_models(self, model_names: Iterable[str]) -> "ModelCatalog":
        """Return a new catalog with an enabled Ollama group.

        Args:
            model_names: Local model tags as reported by the Ollama server.
        """
        names = list(model_names)
        groups = dict(self._groups)
        groups["ollama"] = ModelGroup(
            provider="Ollama",
            enabled=bool(names),
            models=tuple(
                ModelInfo(id=name, name=name, provider="ollama") for name in names
            ),
        )
        return ModelCatalog(groups, self.token_limited_ids)

    def __contains__(self, key: str) -> bool:
        return self.get_model_info(key) is not None

    def __len__(self) -> int:
        return len(self._by_name)
