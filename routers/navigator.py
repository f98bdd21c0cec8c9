"""Time-range navigator endpoints used by the popup UI."""

from __future__ import annotations

from functools import wraps
from typing import Awaitable, Callable

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from loguru import logger
from redis.exceptions import RedisError

from core.result import Err, Result
from modules.navigator_session import NavigatorSession, SessionView
from modules.tab_gateway import RedisTabGateway
from schemas.navigator import InputChange, RangeSettings, ShiftRequest, TargetUrl
from utils.api_errors import error_response, navigator_error_response
from utils.deps import get_session, get_tab_gateway

router = APIRouter(prefix="/api")

logger = logger.bind(module="navigator")


def _view_payload(view: SessionView) -> dict:
    data = view.as_dict()
    return {
        "ok": True,
        "state": data,
        "window": data["window"],
        "navigated_to": view.navigated_to,
    }


def _respond(result: Result[SessionView]) -> dict | JSONResponse:
    if isinstance(result, Err):
        return navigator_error_response(result.error)
    return _view_payload(result.value)


def _storage_guard(fn: Callable[..., Awaitable]):
    """Answer Redis failures with a 503 instead of a 500."""

    @wraps(fn)
    async def wrapper(*args, **kwargs):
        try:
            return await fn(*args, **kwargs)
        except RedisError as e:
            logger.error("Navigator storage unavailable: {}", e)
            return error_response(
                "storage_unavailable", "State storage unavailable", status_code=503
            )

    return wrapper


@router.get("/range/state")
async def range_state(session: NavigatorSession = Depends(get_session)) -> dict:
    """Return the current window and input values."""
    return _view_payload(session.view())


@router.post("/range/initialize")
@_storage_guard
async def range_initialize(
    body: RangeSettings, session: NavigatorSession = Depends(get_session)
):
    """Anchor a new window without navigating."""
    return _respond(session.initialize(body.start, body.interval))


@router.post("/range/apply")
@_storage_guard
async def range_apply(body: RangeSettings, session: NavigatorSession = Depends(get_session)):
    """Anchor a new window and navigate the active tab to it."""
    return _respond(await session.apply_current_settings(body.start, body.interval))


@router.post("/range/back")
@_storage_guard
async def range_back(body: ShiftRequest, session: NavigatorSession = Depends(get_session)):
    return _respond(await session.shift_backward(body.interval))


@router.post("/range/forward")
@_storage_guard
async def range_forward(body: ShiftRequest, session: NavigatorSession = Depends(get_session)):
    return _respond(await session.shift_forward(body.interval))


@router.post("/range/reset")
@_storage_guard
async def range_reset(session: NavigatorSession = Depends(get_session)):
    return _view_payload(session.reset())


@router.post("/range/inputs/start")
@_storage_guard
async def start_input_changed(
    body: InputChange, session: NavigatorSession = Depends(get_session)
):
    """Live update while the start field is edited; bad text is ignored."""
    return _view_payload(session.on_start_input_changed(body.text))


@router.post("/range/inputs/interval")
@_storage_guard
async def interval_input_changed(
    body: InputChange, session: NavigatorSession = Depends(get_session)
):
    """Live update while the interval field is edited; bad text is ignored."""
    return _view_payload(session.on_interval_input_changed(body.text))


@router.post("/range/project")
async def range_project(body: TargetUrl, session: NavigatorSession = Depends(get_session)):
    """Return ``url`` rewritten for the current window without navigating."""
    res = session.project_url(body.url)
    if isinstance(res, Err):
        return navigator_error_response(res.error)
    return {"ok": True, "url": res.value}


@router.put("/tab/active")
async def report_active_tab(
    body: TargetUrl, gateway: RedisTabGateway = Depends(get_tab_gateway)
):
    """Browser companion reports the URL of its active tab."""
    try:
        await gateway.set_active_target_url(body.url)
    except RedisError as e:
        logger.error("Failed to store active tab URL: {}", e)
        return error_response(
            "storage_unavailable", "State storage unavailable", status_code=503
        )
    return {"ok": True, "url": body.url}
