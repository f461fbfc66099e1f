"""Dependency injection for FastAPI routes.

Provides singleton services built from the YAML config and the environment.
"""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from qurse.config_schema import QurseConfig
from qurse.core.models import ModelCatalog
from qurse.core.ollama import get_available_models, get_ollama_url
from qurse.llm.providers import ProviderSettings
from qurse.services import ConfigService, GenerationService, SearchService

logger = logging.getLogger(__name__)


@lru_cache
def get_config_service() -> ConfigService:
    """Get the singleton ConfigService instance."""
    return ConfigService()


@lru_cache
def get_config() -> QurseConfig:
    """Get the configuration loaded at first use."""
    return get_config_service().load()


@lru_cache
def get_model_catalog() -> ModelCatalog:
    """Get the singleton ModelCatalog.

    Local Ollama models are added only when enabled in the config; an
    unreachable server leaves the Ollama group disabled.
    """
    catalog = ModelCatalog()
    config = get_config()
    if config.ollama.enabled:
        names = get_available_models(get_ollama_url(config.ollama.base_url))
        logger.info(f"Found {len(names)} local Ollama models")
        catalog = catalog.with_ollama_models(names)
    return catalog


@lru_cache
def get_provider_settings() -> ProviderSettings:
    """Get provider credentials read from the environment."""
    config = get_config()
    return ProviderSettings.from_env(
        ollama_base_url=get_ollama_url(config.ollama.base_url),
        request_timeout=config.llm.request_timeout,
    )


@lru_cache
def get_search_service() -> SearchService:
    """Get the singleton SearchService instance."""
    return SearchService.from_env(get_config().search)


@lru_cache
def get_generation_service() -> GenerationService:
    """Get the singleton GenerationService instance.

    The service is stateless across requests, so one instance is shared.
    """
    return GenerationService(
        catalog=get_model_catalog(),
        provider_settings=get_provider_settings(),
        search_service=get_search_service(),
        config=get_config(),
    )


def clear_caches() -> None:
    """Drop all cached singletons (used on shutdown and by tests)."""
    for getter in (
        get_generation_service,
        get_search_service,
        get_provider_settings,
        get_model_catalog,
        get_config,
        get_config_service,
    ):
        getter.cache_clear()


# Type aliases for dependency injection
ConfigDep = Annotated[QurseConfig, Depends(get_config)]
ModelCatalogDep = Annotated[ModelCatalog, Depends(get_model_catalog)]
SearchServiceDep = Annotated[SearchService, Depends(get_search_service)]
GenerationServiceDep = Annotated[GenerationService, Depends(get_generation_service)]
