"""Liveness and readiness probes."""
from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from scribo import __version__, database
from scribo.config import Settings, get_settings

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> dict[str, str]:
    """Liveness probe; answers as long as the process serves requests."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
    }


@router.get("/health/ready")
async def readiness_check(settings: Settings = Depends(get_settings)) -> JSONResponse:
    """
    Readiness probe.

    Ready means the record store answers. Provider credentials are reported
    but do not affect readiness: a missing key only disables the endpoints
    that need it.
    """
    try:
        await database.ping()
        store = "connected"
    except Exception as exc:
        logger.error("database_health_check_failed", error=str(exc))
        store = "disconnected"

    ready = store == "connected"
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "ready": ready,
            "checks": {"database": store},
            "providers": {
                "openai": bool(settings.openai_api_key),
                "replicate": bool(settings.replicate_api_token),
                "stripe": bool(settings.stripe_secret_key and settings.stripe_webhook_secret),
            },
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )
