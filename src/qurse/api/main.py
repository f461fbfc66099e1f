"""FastAPI application factory and entry point."""

import argparse
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from qurse import __version__
from qurse.api.routes import ai, models, search, text
from qurse.api.schemas import ErrorResponse, HealthResponse
from qurse.paths import load_env_file

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    from qurse.api.deps import clear_caches, get_model_catalog, get_provider_settings

    logger.info("Initializing Qurse API...")

    catalog = get_model_catalog()
    settings = get_provider_settings()
    configured = sorted(settings.api_keys)
    logger.info(f"✓ {len(catalog)} models available, API keys for: {configured or 'none'}")

    yield

    logger.info("Shutting down Qurse API...")
    clear_caches()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    load_env_file()

    from qurse.api.deps import get_config

    config = get_config()

    app = FastAPI(
        title="Qurse API",
        description="Conversational search API with math-aware answers",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report malformed request bodies as 400."""
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(
                error="Invalid request data", details=jsonable_encoder(exc.errors())
            ).model_dump(),
        )

    app.include_router(ai.router, prefix="/api", tags=["ai"])
    app.include_router(search.router, prefix="/api", tags=["search"])
    app.include_router(models.router, prefix="/api", tags=["models"])
    app.include_router(text.router, prefix="/api", tags=["text"])

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="ok", version=__version__)

    return app


# Create default app instance
app = create_app()


def run() -> None:
    """Run the API server (CLI entry point)."""
    import qurse.logging_config  # noqa: F401
    from qurse.api.deps import get_config

    server = get_config().server

    parser = argparse.ArgumentParser(description="Qurse API Server")
    parser.add_argument(
        "--host",
        default=server.host,
        help=f"Host to bind to (default: {server.host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=server.port,
        help=f"Port to bind to (default: {server.port})",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    args = parser.parse_args()

    host = "localhost" if args.host in ("0.0.0.0", "::") else args.host
    print(f"\n  Qurse v{__version__}")
    print(f"  API listening at: http://{host}:{args.port}\n")

    uvicorn.run(
        "qurse.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    run()
