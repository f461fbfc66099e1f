"""Ollama API interaction utilities."""

import logging
import os
from typing import List, Optional

import requests

from qurse.core.constants import DEFAULT_OLLAMA_BASE_URL

logger = logging.getLogger(__name__)


def get_ollama_url(configured: Optional[str] = None) -> str:
    """
    Get the effective Ollama URL.
    Priority:
    1. Explicit value (from config.yaml)
    2. OLLAMA_HOST environment variable
    3. Default (http://localhost:11434)
    """
    if configured:
        return configured.rstrip("/")

    env_host = os.environ.get("OLLAMA_HOST")
    if env_host:
        # OLLAMA_HOST may be a bare "host:port"
        if not env_host.startswith("http"):
            return f"http://{env_host}".rstrip("/")
        return env_host.rstrip("/")

    return DEFAULT_OLLAMA_BASE_URL


def get_available_models(base_url: Optional[str] = None, timeout: float = 2) -> List[str]:
    """
    Get list of locally pulled Ollama models.
    Returns a sorted list of model names, or an empty list if the server is down.
    """
    try:
        response = requests.get(f"{get_ollama_url(base_url)}/api/tags", timeout=timeout)
        if response.status_code == 200:
            data = response.json()
            return sorted(m["name"] for m in data.get("models", []))
        logger.warning(f"Ollama returned status {response.status_code} for /api/tags")
    except requests.RequestException as e:
        logger.debug(f"Ollama not reachable: {e}")
    except (ValueError, KeyError) as e:
        logger.warning(f"Unexpected Ollama /api/tags payload: {e}")
    return []
