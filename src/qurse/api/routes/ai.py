"""Generation endpoint."""

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse, StreamingResponse

from qurse.api.deps import ConfigDep, GenerationServiceDep
from qurse.api.schemas import AIRequest, AIResponse, ErrorResponse
from qurse.errors import ModelNotFoundError
from qurse.services import GenerationOptions, Message

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_options(request: AIRequest, default_max_tokens: int) -> GenerationOptions:
    return GenerationOptions(
        model=request.model,
        messages=[Message(role=m.role, content=m.content) for m in request.messages],
        max_tokens=request.max_tokens or default_max_tokens,
        temperature=request.temperature,
        web_search_enabled=request.web_search_enabled,
        arxiv_mode=request.arxiv_mode,
        custom_instructions=request.custom_instructions,
        latitude=request.latitude,
        longitude=request.longitude,
    )


@router.post(
    "/ai",
    response_model=AIResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate(
    request: AIRequest,
    generation_service: GenerationServiceDep,
    config: ConfigDep,
):
    """Answer a chat request.

    With ``stream`` set, the answer is returned as plain-text chunks without
    searching. Otherwise the JSON body carries the normalized answer, its
    sources and the tool steps taken.
    """
    options = _to_options(request, config.llm.default_max_tokens)

    try:
        if request.stream:
            # The provider stream is opened here, so failures still get a status code
            chunks = await generation_service.stream_text(
                options.model, options.messages, options.max_tokens, options.temperature
            )
            return StreamingResponse(chunks, media_type="text/plain; charset=utf-8")

        result = await generation_service.generate_with_tools(options)
    except ModelNotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Generation failed for {options.model}: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="Failed to generate response", details=str(e)
            ).model_dump(),
        )

    logger.info(
        f"Answered with {result.model}: {len(result.sources)} sources, "
        f"search_performed={result.search_performed}"
    )
    return AIResponse(**result.to_dict())
