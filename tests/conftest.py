"""
Pytest configuration and shared fixtures.
"""

import os
import tempfile
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

# Keep the app factory from touching the real ~/.qurse during collection
os.environ.setdefault("QURSE_HOME", tempfile.mkdtemp(prefix="qurse-tests-"))

from qurse.config_schema import QurseConfig  # noqa: E402
from qurse.core.models import ModelCatalog, ModelGroup, ModelInfo  # noqa: E402
from qurse.llm.providers import ProviderSettings  # noqa: E402
from qurse.search.models import SearchResponse, SearchResult  # noqa: E402

# ============================================================================
# Catalog Fixtures
# ============================================================================


GPT = ModelInfo(id="gpt-4o", name="GPT 4o", provider="openai")
GROQ_REASONING = ModelInfo(
    id="deepseek-r1-distill-llama-70b",
    name="DeepSeek R1 Distill 70B",
    provider="groq",
    reasoning_model=True,
)
GROQ_STANDARD = ModelInfo(
    id="llama-3.3-70b-versatile", name="Llama 3.3 70B Versatile", provider="groq"
)
NO_TOOLS = ModelInfo(
    id="gemma2-9b-it", name="Gemma 2 9B", provider="groq", supports_tools=False
)
GROK = ModelInfo(
    id="grok-3-mini", name="Grok 3 Mini", provider="xai", reasoning_model=True
)


@pytest.fixture
def catalog():
    """Small catalog covering each capability combination."""
    return ModelCatalog(
        groups={
            "openai": ModelGroup(provider="OpenAI", enabled=True, models=(GPT,)),
            "groq": ModelGroup(
                provider="Groq",
                enabled=True,
                models=(GROQ_REASONING, GROQ_STANDARD, NO_TOOLS),
            ),
            "xai": ModelGroup(provider="XAI", enabled=True, models=(GROK,)),
            "anthropic": ModelGroup(
                provider="Anthropic",
                enabled=False,
                models=(
                    ModelInfo(id="claude-x", name="Claude X", provider="anthropic"),
                ),
            ),
        },
        token_limited_ids=[GROQ_REASONING.id],
    )


@pytest.fixture
def provider_settings():
    return ProviderSettings(
        api_keys={"openai": "sk-test", "groq": "gsk-test", "xai": "xai-test"}
    )


@pytest.fixture
def default_config():
    return QurseConfig.create_default()


# ============================================================================
# Search Fixtures
# ============================================================================


@pytest.fixture
def sample_results():
    """Three web results from distinct domains."""
    return [
        SearchResult(
            url="https://www.example.com/a",
            title="Example A",
            content="Alpha content",
            published_date="2025-01-02",
        ),
        SearchResult(
            url="https://news.site.org/b", title="Site B", content="Beta content"
        ),
        SearchResult(url="https://blog.dev/c", title="Blog C", content=""),
    ]


@pytest.fixture
def sample_paper():
    return SearchResult(
        url="https://arxiv.org/abs/1706.03762v7",
        title="Attention Is All You Need",
        content="The dominant sequence transduction models...",
        author="Ashish Vaswani, Noam Shazeer",
        published_date="2017-06-12",
        arxiv_id="1706.03762v7",
        pdf_url="https://arxiv.org/pdf/1706.03762v7",
        categories="cs.CL, cs.LG",
    )


@pytest.fixture
def mock_search_service(sample_results, sample_paper):
    """SearchService stand-in returning canned responses."""
    service = MagicMock()
    service.web_search = AsyncMock(
        return_value=SearchResponse(
            query="q", results=list(sample_results), backend="exa"
        )
    )
    service.arxiv_search = AsyncMock(
        return_value=SearchResponse(query="q", results=[sample_paper], backend="arxiv")
    )
    return service


# ============================================================================
# LLM Fixtures
# ============================================================================


def make_chat_response(content, usage=None):
    """Build an object shaped like a llama-index ChatResponse."""
    raw = {"usage": usage} if usage is not None else {}
    return SimpleNamespace(message=SimpleNamespace(content=content), raw=raw)


@pytest.fixture
def mock_llm():
    """LLM whose achat returns a fixed answer."""
    llm = MagicMock()
    llm.achat = AsyncMock(
        return_value=make_chat_response(
            "Plain answer",
            usage={"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
        )
    )
    return llm


@pytest.fixture
def llm_factory(mock_llm):
    """Drop-in for build_llm that records its calls."""
    return MagicMock(return_value=mock_llm)


@pytest.fixture
def chat_response():
    """Factory for ChatResponse-shaped objects."""
    return make_chat_response
