"""Dependency providers for shared application state."""

from __future__ import annotations

from fastapi import Request

from modules.navigator_session import NavigatorSession
from modules.tab_gateway import RedisTabGateway


def get_session(request: Request) -> NavigatorSession:
    return request.app.state.navigator


def get_tab_gateway(request: Request) -> RedisTabGateway:
    return request.app.state.tab_gateway
