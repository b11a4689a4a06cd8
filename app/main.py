from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_completion_settings, load_env_files, validate_settings
from app.errors import (
    CompletionConfigurationError,
    CompletionTransportError,
    CompletionUpstreamError,
    ReportValidationError,
)

logger = logging.getLogger(__name__)


def _validate_env() -> None:
    """
    Validate all environment-derived settings at startup.

    Raises RuntimeError listing every invalid variable so the operator can
    fix all problems in one restart cycle. A missing completion credential
    is only a warning: report requests then fail with a configuration error
    without calling out.
    """

    load_env_files()

    errors = validate_settings()
    if errors:
        raise RuntimeError(
            "Startup validation failed: invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    completion = get_completion_settings()
    if completion.adapter != "mock" and not completion.api_key:
        logger.warning(
            "LLM API key is not set. Provide LLM_API_KEY or OPENAI_API_KEY; "
            "report requests will fail until it is configured."
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _register_exception_handlers(application: FastAPI) -> None:
    """
    Map the pipeline exception taxonomy onto HTTP responses.

    Every error body carries an ``error`` key. Unexpected exceptions are
    logged with their traceback and answered with a generic message.
    """

    @application.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request body.", "details": jsonable_encoder(exc.errors())},
        )

    @application.exception_handler(ReportValidationError)
    async def _report_validation(request: Request, exc: ReportValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": str(exc)},
        )

    @application.exception_handler(CompletionConfigurationError)
    async def _completion_configuration(
        request: Request, exc: CompletionConfigurationError
    ) -> JSONResponse:
        logger.error("Completion gateway not configured path=%s error=%s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc)},
        )

    @application.exception_handler(CompletionUpstreamError)
    async def _completion_upstream(request: Request, exc: CompletionUpstreamError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "error": "Completion service returned an error.",
                "status": exc.status_code,
                "details": exc.body,
            },
        )

    @application.exception_handler(CompletionTransportError)
    async def _completion_transport(request: Request, exc: CompletionTransportError) -> JSONResponse:
        logger.exception("Completion transport failure path=%s", request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )

    @application.exception_handler(StarletteHTTPException)
    async def _http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @application.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error path=%s", request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Census Insight AI",
        version="1.0.0",
    )
    _register_exception_handlers(application)

    from app.api.routers import (
        chatbot_router,
        internet_report_router,
        population_report_router,
        urban_rural_report_router,
    )

    application.include_router(population_report_router)
    application.include_router(urban_rural_report_router)
    application.include_router(internet_report_router)
    application.include_router(chatbot_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
