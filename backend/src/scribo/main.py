"""FastAPI application entry point."""
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from scribo import __version__
from scribo.api.routes import billing, conversation, health, image, usage, video
from scribo.api.webhooks import stripe as stripe_webhooks
from scribo.config import settings
from scribo.exceptions import InvalidInput, ScriboError
from scribo.middleware.logging import LoggingMiddleware, setup_logging
from scribo.middleware.metrics import MetricsMiddleware
from scribo.schemas.error import ErrorCode, ErrorDetail, ErrorResponse

# Setup structured logging
setup_logging(settings)
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    logger.info(
        "application_starting",
        env=settings.app_env,
        openai_configured=bool(settings.openai_api_key),
        replicate_configured=bool(settings.replicate_api_token),
        stripe_configured=bool(settings.stripe_secret_key),
    )
    yield
    logger.info("application_shutting_down")


app = FastAPI(
    title="Scribo API",
    description="Generative AI endpoints with a free tier and Stripe subscriptions",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(LoggingMiddleware)

# Mount Prometheus metrics endpoint
app.mount("/metrics", make_asgi_app())

if settings.otel_enabled:
    from scribo.tracing import setup_tracing

    setup_tracing(app, settings)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or f"req_{uuid.uuid4().hex[:12]}"


def _error_response(request: Request, status_code: int, body: ErrorResponse) -> JSONResponse:
    body.request_id = _request_id(request)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))


# Exception handlers with structured error responses
@app.exception_handler(ScriboError)
async def scribo_exception_handler(request: Request, exc: ScriboError) -> JSONResponse:
    """Render a taxonomy error with its status code and user-safe message."""
    if exc.status_code >= 500:
        logger.error("request_error", path=request.url.path, error=exc.error, cause=repr(exc.__cause__))
    else:
        logger.info("request_rejected", path=request.url.path, error=exc.error, status_code=exc.status_code)

    details = None
    if getattr(exc, "field", None):
        details = [ErrorDetail(code=exc.code, message=exc.message, field=exc.field)]

    return _error_response(
        request,
        exc.status_code,
        ErrorResponse(error=exc.error, message=exc.message, details=details),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle Pydantic validation errors as InvalidInput.

    Returns 400 with field-level validation errors.
    """
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error["loc"] if part != "body"]
        code = ErrorCode.MISSING_REQUIRED_FIELD if error["type"] == "missing" else ErrorCode.INVALID_INPUT
        details.append(ErrorDetail(code=code, message=error["msg"], field=".".join(loc) or None))

    logger.info(
        "validation_error",
        path=request.url.path,
        method=request.method,
        error_count=len(details),
    )

    return _error_response(
        request,
        InvalidInput.status_code,
        ErrorResponse(error=InvalidInput.error, message="Request validation failed", details=details),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle all other uncaught exceptions.

    Logs the full stack trace but never returns exception text to the caller.
    """
    logger.exception(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        exception_type=type(exc).__name__,
    )

    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorResponse(error="InternalError", message="Internal Error"),
    )


# Root endpoint
@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint with API information."""
    return {
        "service": "Scribo API",
        "version": __version__,
        "status": "operational",
        "docs": "/docs",
    }


app.include_router(health.router)
app.include_router(conversation.router, prefix="/api")
app.include_router(image.router, prefix="/api")
app.include_router(video.router, prefix="/api")
app.include_router(billing.router, prefix="/api")
app.include_router(usage.router, prefix="/api")
app.include_router(stripe_webhooks.router, prefix="/api")
