"""Application entry point wiring the navigator service."""

from __future__ import annotations

import json
import os
import sys
from contextlib import asynccontextmanager, suppress
from pathlib import Path
from typing import Any

from loguru import logger

# allow imports relative to this directory without hardcoding its name
if str(Path(__file__).resolve().parent) not in sys.path:
    sys.path.insert(0, str(Path(__file__).resolve().parent))

import logging_config  # noqa: E402

logger = logger.bind(module="app")

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from redis import Redis
from redis.exceptions import RedisError
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import config as shared_config
from config import set_config
from core.config import load_config
from modules.navigator_session import NavigatorSession
from modules.state_store import RedisStateStore
from modules.tab_gateway import RedisTabGateway
from routers import blueprints
from utils.redis import get_client, get_sync_client

BASE_DIR = Path(__file__).parent


# Global exception handler for unexpected errors
async def handle_unexpected_error(request: Request, exc: Exception):
    """Catch-all handler that logs the error and returns a JSON 500."""
    if isinstance(exc, StarletteHTTPException):
        return await http_exception_handler(request, exc)

    logger.exception("Unhandled application error: {}", exc)
    return JSONResponse(
        {"ok": False, "code": "internal_error", "message": "Internal Server Error"},
        status_code=500,
    )


def _read_initial_config(path: str) -> dict:
    """Load minimal configuration required for bootstrap."""
    logger.info("Loading config from {}", path)
    try:
        return load_config(path, None, minimal=True)
    except (OSError, json.JSONDecodeError, KeyError) as e:
        logger.exception("Failed to read config: {}", e)
        raise SystemExit(1)


def _connect_redis(url: str) -> Redis:
    """Connect to Redis and return client or exit on failure."""
    try:
        client = get_sync_client(url)
        logger.info("Connected to Redis at {}", url)
        return client
    except (RedisError, OSError) as e:
        logger.exception("Redis connection failed: {}", e)
        raise SystemExit(1)


# Initialize configuration and synchronous services
def init_app(app: FastAPI, config_path: str = "config.json") -> dict[str, Any]:
    """Load configuration, connect Redis and restore the navigator store."""
    config_path_local = (
        config_path if os.path.isabs(config_path) else str(BASE_DIR / config_path)
    )
    info = _read_initial_config(config_path_local)
    redis_client_local = _connect_redis(info["redis_url"])

    try:
        cfg: dict[str, Any] = load_config(
            config_path_local, redis_client_local, data=info["data"]
        )
    except (OSError, json.JSONDecodeError, RedisError) as e:
        logger.exception("Configuration load failed: {}", e)
        raise SystemExit(1)

    logging_config.set_log_level(cfg["log_level"], cfg.get("log_file"))
    set_config(cfg)

    app.state.config = cfg
    app.state.config_path = config_path_local
    app.state.redis_client = redis_client_local
    app.state.state_store = RedisStateStore(redis_client_local, cfg["state_key"])
    return cfg


def attach_navigator(app: FastAPI, async_client) -> NavigatorSession:
    """Create the session handle once the async Redis client is available."""
    cfg = app.state.config
    gateway = RedisTabGateway(
        async_client,
        active_url_key=cfg["active_url_key"],
        navigate_channel=cfg["navigate_channel"],
    )
    session = NavigatorSession(app.state.state_store, gateway)
    app.state.tab_gateway = gateway
    app.state.navigator = session
    return session


# Lifespan handler consolidating startup and shutdown logic
@asynccontextmanager
async def lifespan(app: FastAPI):
    config_path = os.getenv("CONFIG_PATH", "config.json")
    cfg = init_app(app, config_path=config_path)
    async_client = await get_client(cfg["redis_url"])
    session = attach_navigator(app, async_client)
    logger.info("Navigator ready (active window: {})", session.state.active)
    try:
        yield
    finally:
        with suppress(RedisError, OSError):
            await async_client.aclose()
        logger.info("Navigator stopped")


app = FastAPI(lifespan=lifespan)
app.add_exception_handler(Exception, handle_unexpected_error)
blueprints.register_blueprints(app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", shared_config.get("port", 8000))),
    )
