"""Construct llama-index LLM clients for catalog entries."""

import logging
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, Optional

from qurse.core.models import ModelInfo
from qurse.errors import ProviderUnavailableError, UnknownProviderError

if TYPE_CHECKING:
    from llama_index.core.llms import LLM

logger = logging.getLogger(__name__)

XAI_API_BASE = "https://api.x.ai/v1"

API_KEY_ENV_VARS: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "google": "GOOGLE_API_KEY",
    "groq": "GROQ_API_KEY",
    "xai": "XAI_API_KEY",
}


@dataclass
class ProviderSettings:
    """Credentials and endpoints for the hosted providers."""

    api_keys: Dict[str, str] = field(default_factory=dict)
    ollama_base_url: str = "http://localhost:11434"
    request_timeout: float = 120.0
    xai_api_base: str = XAI_API_BASE

    @classmethod
    def from_env(
        cls, ollama_base_url: Optional[str] = None, request_timeout: float = 120.0
    ) -> "ProviderSettings":
        """Read API keys from the environment.

        Providers whose variable is unset or empty are simply absent.
        """
        keys = {}
        for provider, var in API_KEY_ENV_VARS.items():
            value = os.environ.get(var, "").strip()
            if value:
                keys[provider] = value
        settings = cls(api_keys=keys, request_timeout=request_timeout)
        if ollama_base_url:
            settings.ollama_base_url = ollama_base_url
        return settings

    def has_key(self, provider: str) -> bool:
        return bool(self.api_keys.get(provider))

    def require_key(self, provider: str) -> str:
        key = self.api_keys.get(provider)
        if not key:
            raise ProviderUnavailableError(
                provider, f"{API_KEY_ENV_VARS.get(provider, 'API key')} is not set"
            )
        return key


def _build_openai(model: ModelInfo, settings: ProviderSettings, **kwargs) -> "LLM":
    from llama_index.llms.openai import OpenAI

    return OpenAI(
        model=model.id,
        api_key=settings.require_key("openai"),
        timeout=settings.request_timeout,
        **kwargs,
    )


def _build_anthropic(model: ModelInfo, settings: ProviderSettings, **kwargs) -> "LLM":
    from llama_index.llms.anthropic import Anthropic

    return Anthropic(
        model=model.id,
        api_key=settings.require_key("anthropic"),
        timeout=settings.request_timeout,
        **kwargs,
    )


def _build_google(model: ModelInfo, settings: ProviderSettings, **kwargs) -> "LLM":
    from llama_index.llms.google_genai import GoogleGenAI

    return GoogleGenAI(model=model.id, api_key=settings.require_key("google"), **kwargs)


def _build_groq(model: ModelInfo, settings: ProviderSettings, **kwargs) -> "LLM":
    from llama_index.llms.groq import Groq

    return Groq(
        model=model.id,
        api_key=settings.require_key("groq"),
        timeout=settings.request_timeout,
        **kwargs,
    )


def _build_xai(model: ModelInfo, settings: ProviderSettings, **kwargs) -> "LLM":
    # XAI exposes an OpenAI-compatible endpoint
    from llama_index.llms.openai_like import OpenAILike

    return OpenAILike(
        model=model.id,
        api_base=settings.xai_api_base,
        api_key=settings.require_key("xai"),
        is_chat_model=True,
        is_function_calling_model=model.supports_tools,
        context_window=model.max_tokens * 4,
        timeout=settings.request_timeout,
        **kwargs,
    )


def _build_ollama(model: ModelInfo, settings: ProviderSettings, **kwargs) -> "LLM":
    from llama_index.llms.ollama import Ollama

    kwargs.pop("max_tokens", None)
    return Ollama(
        model=model.id,
        base_url=settings.ollama_base_url,
        request_timeout=settings.request_timeout,
        **kwargs,
    )


LLM_BUILDERS: Dict[str, Callable[..., "LLM"]] = {
    "openai": _build_openai,
    "anthropic": _build_anthropic,
    "google": _build_google,
    "groq": _build_groq,
    "xai": _build_xai,
    "ollama": _build_ollama,
}


def build_llm(
    model: ModelInfo,
    settings: ProviderSettings,
    max_tokens: Optional[int] = None,
    temperature: Optional[float] = None,
) -> "LLM":
    """Create an LLM client for a catalog entry.

    Args:
        model: Catalog entry to instantiate.
        settings: Provider credentials and endpoints.
        max_tokens: Output token cap, defaults to the model's own limit.
        temperature: Sampling temperature, defaults to the model's default.

    Returns:
        A llama-index LLM.

    Raises:
        UnknownProviderError: No builder exists for ``model.provider``.
        ProviderUnavailableError: The provider's API key is missing.
    """
    builder = LLM_BUILDERS.get(model.provider)
    if builder is None:
        raise UnknownProviderError(model.provider)

    logger.debug(f"Building {model.provider} LLM for {model.id}")
    return builder(
        model,
        settings,
        max_tokens=max_tokens or model.max_tokens,
        temperature=model.temperature if temperature is None else temperature,
    )
