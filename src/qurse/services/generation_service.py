"""Generation service: plain, streaming and search-augmented chat.

Search-enabled requests take one of two routes:

- Models that support tool calling run a llama-index ``FunctionAgent`` with a
  single search tool (``web_search`` or ``arxiv_search``).
- Other models get the search results appended to the last user message and
  are called once without tools.

Every non-streaming answer passes through the response unifier, the
reasoning parser and the LaTeX normalizer before it is returned.
"""

import logging
from datetime import datetime
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Tuple

from llama_index.core.agent.workflow import AgentStream, ToolCallResult
from llama_index.core.agent.workflow.function_agent import FunctionAgent
from llama_index.core.base.llms.types import ChatMessage, MessageRole
from llama_index.core.workflow.errors import WorkflowRuntimeError

from qurse.config_schema import QurseConfig
from qurse.core.constants import (
    ARXIV_FALLBACK_RESPONSE,
    FALLBACK_RESPONSE,
    GPT_OSS_MAX_STEPS,
    REASONING_HISTORY_MESSAGES,
    REASONING_MAX_STEPS,
    STANDARD_HISTORY_MESSAGES,
    STANDARD_MAX_STEPS,
    TOKEN_LIMITED_MAX_TOKENS,
)
from qurse.core.models import ModelCatalog, ModelInfo
from qurse.errors import SearchError
from qurse.llm.providers import ProviderSettings, build_llm
from qurse.llm.reasoning import parse_reasoning_response
from qurse.llm.types import ToolStep, get_field
from qurse.llm.unifier import unify
from qurse.rendering.latex import normalize
from qurse.search.formatting import format_results_for_prompt, results_to_sources
from qurse.search.models import Source
from qurse.services.models import GenerationOptions, GenerationResult, Message
from qurse.services.prompts import build_system_prompt
from qurse.services.search_service import SearchService
from qurse.services.tools import (
    SearchResultCollector,
    create_arxiv_search_tool,
    create_web_search_tool,
)

logger = logging.getLogger(__name__)

# Tool output kept per step
TOOL_OUTPUT_CHARS = 2000
SUMMARY_EXCERPT_CHARS = 150

LLMFactory = Callable[..., Any]

_ROLE_MAP = {
    "user": MessageRole.USER,
    "assistant": MessageRole.ASSISTANT,
    "system": MessageRole.SYSTEM,
}


def to_chat_messages(messages: List[Message]) -> List[ChatMessage]:
    """Convert service messages to LlamaIndex ChatMessage objects."""
    return [
        ChatMessage(role=_ROLE_MAP.get(m.role, MessageRole.USER), content=m.content)
        for m in messages
    ]


def _usage_from_raw(raw: Any) -> Dict[str, int]:
    usage = get_field(raw, "usage")
    if usage is None:
        return {"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0}
    prompt = get_field(usage, "prompt_tokens") or get_field(usage, "input_tokens") or 0
    completion = (
        get_field(usage, "completion_tokens") or get_field(usage, "output_tokens") or 0
    )
    total = get_field(usage, "total_tokens") or prompt + completion
    return {
        "prompt_tokens": int(prompt),
        "completion_tokens": int(completion),
        "total_tokens": int(total),
    }


async def _text_deltas(stream: AsyncIterator[Any]) -> AsyncIterator[str]:
    async for chunk in stream:
        if chunk.delta:
            yield chunk.delta


def split_at_last_user(messages: List[Message]) -> Tuple[List[Message], str]:
    """Split a conversation at its last user message.

    Returns:
        Tuple of (messages before the last user message, its content). Turns
        after it are dropped. Without a user message the whole list is
        history and the content is empty.
    """
    for index in range(len(messages) - 1, -1, -1):
        if messages[index].role == "user":
            return messages[:index], messages[index].content
    return list(messages), ""


def summarize_sources(sources: List[Source], arxiv_mode: bool = False) -> str:
    """Markdown answer built from sources when the model produced no text."""
    if arxiv_mode:
        lines = [
            "## Research Papers Found",
            "",
            f"I found {len(sources)} relevant papers on arXiv for your query:",
        ]
        for index, source in enumerate(sources, start=1):
            lines.append("")
            lines.append(f"**{index}. {source.title}**")
            if source.arxiv_id:
                lines.append(f"- arXiv ID: {source.arxiv_id}")
            if source.content:
                lines.append(f"- Abstract: {source.content[:SUMMARY_EXCERPT_CHARS]}...")
            if source.pdf_url:
                lines.append(f"- PDF: [View Paper]({source.pdf_url})")
        return "\n".join(lines)

    lines = [
        "## Search Results Summary",
        "",
        f"I found {len(sources)} relevant sources for your query:",
    ]
    for index, source in enumerate(sources, start=1):
        summary = (
            f"{source.content[:SUMMARY_EXCERPT_CHARS]}..."
            if source.content
            else "Content available at source"
        )
        lines.extend(
            [
                "",
                f"**{index}. {source.title}**",
                f"- Source: {source.domain}",
                f"- Summary: {summary}",
                f"- [Read More]({source.url})",
            ]
        )
    lines.extend(["", "*All sources are available below for detailed information.*"])
    return "\n".join(lines)


class GenerationService:
    """Answers chat requests against the hosted model providers.

    Holds no per-request state; search results for a request live in a
    SearchResultCollector created for that request.
    """

    def __init__(
        self,
        catalog: ModelCatalog,
        provider_settings: ProviderSettings,
        search_service: SearchService,
        config: Optional[QurseConfig] = None,
        llm_factory: LLMFactory = build_llm,
    ):
        self.catalog = catalog
        self.provider_settings = provider_settings
        self.search_service = search_service
        self.config = config or QurseConfig.create_default()
        self._llm_factory = llm_factory

    # --- helpers ---

    def _llm(
        self,
        model: ModelInfo,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> Any:
        return self._llm_factory(
            model,
            self.provider_settings,
            max_tokens=max_tokens,
            temperature=temperature,
        )

    def budget_messages(
        self, model: ModelInfo, messages: List[Message], max_tokens: Optional[int]
    ) -> Tuple[List[Message], Optional[int]]:
        """Trim history and output budget for token-limited models.

        Groq-hosted reasoning models keep the last two messages, other Groq
        models the last three; both are capped at 2048 output tokens.
        """
        if not self.catalog.is_token_limited(model):
            return messages, max_tokens
        if self.catalog.is_reasoning_token_limited(model):
            keep = REASONING_HISTORY_MESSAGES
        else:
            keep = STANDARD_HISTORY_MESSAGES
        logger.info(
            f"Token management for {model.id}: {len(messages)} -> "
            f"{min(len(messages), keep)} messages, max_tokens={TOKEN_LIMITED_MAX_TOKENS}"
        )
        return messages[-keep:], TOKEN_LIMITED_MAX_TOKENS

    @staticmethod
    def max_steps(model: ModelInfo) -> int:
        if "gpt-oss" in model.id:
            return GPT_OSS_MAX_STEPS
        if model.reasoning_model:
            return REASONING_MAX_STEPS
        return STANDARD_MAX_STEPS

    def _finalize(
        self, raw: Any, model: ModelInfo, sources: Optional[List[Source]] = None
    ) -> GenerationResult:
        unified = unify(raw)
        parsed = parse_reasoning_response(
            unified.text,
            model_name=model.id,
            raw_response=raw,
            reasoning_model=model.reasoning_model,
        )
        return GenerationResult(
            content=normalize(parsed.final_answer),
            model=model.name,
            reasoning=parsed.reasoning,
            sources=list(sources or []),
            tool_steps=unified.tool_steps,
            usage=_usage_from_raw(raw),
            search_performed=unified.search_performed,
            raw_result=raw,
        )

    # --- plain generation ---

    async def generate_text(
        self,
        model: str,
        messages: List[Message],
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Generate a completion without tools.

        Returns:
            Chat-completion shaped dict with ``choices``, ``model``, ``usage``
            and the provider's ``raw_result``.

        Raises:
            ModelNotFoundError: Unknown or disabled model.
            ProviderUnavailableError: Missing API key.
        """
        info = self.catalog.require(model)
        llm = self._llm(info, max_tokens, temperature)
        logger.info(f"Generating with {info.name} ({info.provider}), {len(messages)} messages")

        response = await llm.achat(to_chat_messages(messages))
        raw = getattr(response, "raw", None)
        return {
            "choices": [
                {"message": {"content": response.message.content or "", "role": "assistant"}}
            ],
            "model": info.name,
            "usage": _usage_from_raw(raw),
            "raw_result": raw,
        }

    async def stream_text(
        self,
        model: str,
        messages: List[Message],
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> AsyncIterator[str]:
        """Start a completion without tools and return its text deltas.

        The model is resolved and the provider request opened before this
        returns, so configuration and upstream errors are raised here rather
        than from the iterator.

        Raises:
            ModelNotFoundError: Unknown or disabled model.
            ProviderUnavailableError: Missing API key.
        """
        info = self.catalog.require(model)
        llm = self._llm(info, max_tokens, temperature)
        logger.info(f"Streaming with {info.name} ({info.provider})")

        stream = await llm.astream_chat(to_chat_messages(messages))
        return _text_deltas(stream)

    # --- search-enabled generation ---

    async def generate_with_tools(self, options: GenerationOptions) -> GenerationResult:
        """Answer a chat request, searching first when enabled.

        Args:
            options: Request options.

        Returns:
            GenerationResult with normalized content and any sources.

        Raises:
            ModelNotFoundError: Unknown or disabled model.
        """
        info = self.catalog.require(options.model)
        query = options.last_user_message().strip()

        if not options.search_enabled or not query:
            raw = await self.generate_text(
                options.model, options.messages, options.max_tokens, options.temperature
            )
            return self._finalize(raw, info)

        if info.supports_tools:
            return await self._generate_with_agent(info, options)
        return await self._generate_with_search_prompt(info, options, query)

    async def _generate_with_agent(
        self, info: ModelInfo, options: GenerationOptions
    ) -> GenerationResult:
        # The agent answers the last user turn; turns after it are dropped
        history, user_msg = split_at_last_user(options.messages)
        messages, max_tokens = self.budget_messages(
            info, history + [Message(role="user", content=user_msg)], options.max_tokens
        )
        collector = SearchResultCollector()
        search_config = self.config.search

        if options.arxiv_mode:
            tool = create_arxiv_search_tool(self.search_service, collector)
        else:
            tool = create_web_search_tool(
                self.search_service,
                collector,
                token_limited=self.catalog.is_reasoning_token_limited(info),
                max_queries=search_config.max_queries,
                token_limited_max_results=search_config.token_limited_max_results,
            )

        system_prompt = build_system_prompt(
            arxiv_mode=options.arxiv_mode,
            now=datetime.now(),
            latitude=options.latitude,
            longitude=options.longitude,
            custom_instructions=options.custom_instructions,
        )

        steps: List[ToolStep] = []
        reasoning_parts: List[str] = []
        content = ""

        try:
            llm = self._llm(info, max_tokens, options.temperature)
            agent = FunctionAgent(tools=[tool], llm=llm, system_prompt=system_prompt)
            chat_history = to_chat_messages(messages[:-1])
            handler = agent.run(
                user_msg=user_msg,
                chat_history=chat_history if chat_history else None,
                max_iterations=self.max_steps(info),
            )

            try:
                async for event in handler.stream_events():
                    if isinstance(event, ToolCallResult):
                        output = event.tool_output
                        steps.append(
                            ToolStep(
                                tool=event.tool_name,
                                args=dict(event.tool_kwargs or {}),
                                result=str(output.content)[:TOOL_OUTPUT_CHARS],
                                is_error=bool(getattr(output, "is_error", False)),
                            )
                        )
                    elif isinstance(event, AgentStream):
                        if event.delta:
                            content += event.delta
                        thinking = getattr(event, "thinking_delta", None)
                        if thinking:
                            reasoning_parts.append(thinking)

                response = await handler
                if not content.strip():
                    content = str(response)
            except WorkflowRuntimeError:
                # Step budget exhausted; whatever the tools found is still usable
                if not collector:
                    raise
                logger.warning(
                    f"Agent hit the step limit after {len(steps)} tool calls, "
                    "answering from collected sources"
                )

        except Exception as e:
            logger.error(f"Tool calling failed for {info.name}: {e}", exc_info=True)
            raw = await self.generate_text(
                options.model, messages, max_tokens, options.temperature
            )
            # Keep the sources found before the failure
            raw["steps"] = steps
            return self._finalize(raw, info, collector.sources())

        sources = collector.sources()
        if not content.strip():
            if sources:
                content = summarize_sources(sources, options.arxiv_mode)
            else:
                content = (
                    ARXIV_FALLBACK_RESPONSE if options.arxiv_mode else FALLBACK_RESPONSE
                )

        raw: Dict[str, Any] = {"content": content, "steps": steps}
        if reasoning_parts:
            raw["reasoning"] = {"combined_reasoning": "".join(reasoning_parts)}
        logger.info(
            f"Agent answered with {len(steps)} tool calls and {len(sources)} sources"
        )
        return self._finalize(raw, info, sources)

    async def _generate_with_search_prompt(
        self, info: ModelInfo, options: GenerationOptions, query: str
    ) -> GenerationResult:
        """Search for the last user message and append results to it."""
        try:
            if options.arxiv_mode:
                response = await self.search_service.arxiv_search(query)
            else:
                response = await self.search_service.web_search(query)
        except SearchError as e:
            logger.error(f"Search failed for {info.name}, answering without it: {e}")
            raw = await self.generate_text(
                options.model, options.messages, options.max_tokens, options.temperature
            )
            return self._finalize(raw, info)

        formatted = format_results_for_prompt(
            query, response.results, reasoning_model=info.reasoning_model
        )
        # Replace the last user message with the augmented one
        last_user = max(
            i for i, m in enumerate(options.messages) if m.role == "user"
        )
        messages = list(options.messages)
        messages[last_user] = Message(role="user", content=f"{query}\n\n{formatted}")

        raw = await self.generate_text(
            options.model, messages, options.max_tokens, options.temperature
        )
        raw["steps"] = [
            ToolStep(
                tool="arxiv_search" if options.arxiv_mode else "web_search",
                args={"query": query},
                result=f"{len(response.results)} results from {response.backend}",
            )
        ]
        return self._finalize(raw, info, results_to_sources(response.results))
