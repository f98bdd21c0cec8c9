"""Health check endpoints for liveness and readiness."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, status
from loguru import logger
from redis.exceptions import RedisError

router = APIRouter()


@router.get("/health/live", status_code=status.HTTP_200_OK)
async def live() -> dict[str, str]:
    """Liveness probe that always succeeds."""
    return {"status": "ok"}


@router.get("/health/ready")
async def ready(request: Request) -> dict[str, str]:
    """Readiness probe that verifies Redis answers."""
    client = getattr(request.app.state, "redis_client", None)
    try:
        if client is not None and client.ping():
            return {"status": "ok"}
    except (RedisError, OSError) as e:
        logger.warning("Readiness check failed: {}", e)
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="not ready"
    )
