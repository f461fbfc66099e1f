"""Core constants for Qurse.

Shared values used across the search, generation and API layers.
"""

SEARCH_MARKER = "SEARCH RESULTS FOR:"
"""Marker prefixed to search results injected into a prompt.

Its presence in a response text is one of the two signals that a search
was performed for the request.
"""

# Default Ollama configuration
DEFAULT_OLLAMA_BASE_URL = "http://localhost:11434"

DEFAULT_MODEL = "Llama 3.3 70B Versatile"
"""Default model display name used when a request does not name one."""

DEFAULT_MAX_TOKENS = 4096
DEFAULT_TEMPERATURE = 0.7

# Groq-hosted reasoning models run out of context quickly once tool results
# are appended, so tool-enabled requests for them get a trimmed history.
TOKEN_LIMITED_MODEL_IDS = (
    "deepseek-r1-distill-llama-70b",
    "qwen/qwen3-32b",
    "openai/gpt-oss-120b",
    "openai/gpt-oss-20b",
)
TOKEN_LIMITED_MAX_TOKENS = 2048
REASONING_HISTORY_MESSAGES = 2
STANDARD_HISTORY_MESSAGES = 3

# Agent step budgets for tool-enabled generation
REASONING_MAX_STEPS = 5
STANDARD_MAX_STEPS = 3
GPT_OSS_MAX_STEPS = 6

FALLBACK_RESPONSE = (
    "I searched for information but encountered an issue generating a "
    "response. Please try rephrasing your question."
)
"""Returned when tool-enabled generation produced neither text nor sources."""

ARXIV_FALLBACK_RESPONSE = (
    "I searched for relevant research papers but encountered an issue "
    "generating a response. Please try rephrasing your question."
)

EMPTY_REASONING_ANSWER = "Response complete."
"""Answer used when a response consists only of a reasoning block."""

# Search backends
EXA_SEARCH_URL = "https://api.exa.ai/search"
EXA_CONTENT_CHARS = 500
FAVICON_URL_TEMPLATE = "https://www.google.com/s2/favicons?domain={url}&sz=32"
ARXIV_DOMAIN = "arxiv.org"
