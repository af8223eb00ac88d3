"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
error mapping (400 for invalid requests, 500 with a JSON body for any
failure before streaming starts), and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api_explainer.api.chat import router as chat_router
from api_explainer.models.schemas import ErrorResponse
from api_explainer.relay.config import get_relay_config
from api_explainer.relay.ollama_relay import RelayError, close_relay

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    logger.info("Starting API Explainer relay...")
    yield
    await close_relay()
    logger.info("Shutting down API Explainer relay...")


def describe_validation_error(exc: RequestValidationError) -> str:
    """Turn FastAPI's validation details into a single error message."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    loc = tuple(first.get("loc", ()))
    if first.get("type") == "json_invalid":
        return "Invalid JSON body"
    if loc == ("body", "messages"):
        return "messages array is required"

    field = ".".join(str(part) for part in loc[1:]) or "body"
    return f"Invalid request: {field}: {first.get('msg', 'invalid value')}"


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="API Explainer",
        description=(
            "Explains JSON API responses in plain language. Relays the latest "
            "user message to a local Ollama model and streams the explanation "
            "back as plain text."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    @application.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        message = describe_validation_error(exc)
        logger.warning(f"Rejected {request.method} {request.url.path}: {message}")
        return _error_response(status.HTTP_400_BAD_REQUEST, message)

    @application.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))

    @application.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "Internal server error"
        )

    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {
            "status": "healthy",
            "service": "api-explainer",
            "model": get_relay_config().model,
        }

    return application


app = create_app()
