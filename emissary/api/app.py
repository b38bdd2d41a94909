"""FastAPI application factory.

The HTTP surface is a thin inbound channel over the runtime: messages,
agent-to-agent calls, provider webhooks, health and metrics. Every error
leaves as ``{"error": {"code", "message", "details"?}}``.
"""

from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from emissary import __version__
from emissary.a2a.errors import DelegationError
from emissary.api.dependencies import get_settings
from emissary.api.exceptions import EmissaryAPIError, from_delegation_error
from emissary.api.models.errors import ErrorBody, ErrorCode, ErrorDetail, ErrorResponse
from emissary.api.routes import register_routes
from emissary.observability.logging import get_logger, setup_logging

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """Build the application from the current settings.

    Logging is configured here so that uvicorn workers and tests share one
    setup path.
    """
    settings = get_settings()
    setup_logging(
        level=settings.log_level,
        format=settings.observability.log_format,
        redact_pii=settings.observability.redact_pii,
    )

    app = FastAPI(
        title="Emissary API",
        description="Agent runtime: screening, recall, completion and app actions",
        version=__version__,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=settings.api.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)
    register_routes(app, metrics_enabled=settings.observability.metrics_enabled)

    logger.info("app_created", debug=settings.debug, cors_origins=settings.api.cors_origins)
    return app


def _error_response(
    status_code: int,
    code: ErrorCode,
    message: str,
    details: list[ErrorDetail] | None = None,
) -> JSONResponse:
    body = ErrorBody(code=code, message=message, details=details)
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=body).model_dump(mode="json"),
    )


def _field_details(errors: Sequence[Any]) -> list[ErrorDetail]:
    return [
        ErrorDetail(field=".".join(str(part) for part in error["loc"]), message=error["msg"])
        for error in errors
    ]


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(EmissaryAPIError)
    async def api_error_handler(request: Request, exc: EmissaryAPIError) -> JSONResponse:
        logger.warning(
            "api_error",
            error_code=exc.error_code.value,
            message=exc.message,
            path=request.url.path,
        )
        return _error_response(exc.status_code, exc.error_code, exc.message)

    @app.exception_handler(DelegationError)
    async def delegation_error_handler(request: Request, exc: DelegationError) -> JSONResponse:
        """A2A errors escaping a route or a delegated pipeline run."""
        return await api_error_handler(request, from_delegation_error(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning("validation_error", errors=exc.errors(), path=request.url.path)
        return _error_response(
            400,
            ErrorCode.INVALID_REQUEST,
            "Request validation failed",
            _field_details(exc.errors()),
        )

    @app.exception_handler(ValidationError)
    async def model_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
        logger.warning("pydantic_validation_error", errors=exc.errors(), path=request.url.path)
        return _error_response(
            400,
            ErrorCode.INVALID_REQUEST,
            "Data validation failed",
            _field_details(exc.errors()),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "unexpected_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        return _error_response(500, ErrorCode.INTERNAL_ERROR, "An unexpected error occurred")


app = create_app()
