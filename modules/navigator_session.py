"""Session handle tying the window state to storage and the browser tab.

Every user action runs as one unit: transition, persist, project, navigate.
A state change is saved before any URL is computed, and a URL is computed
before navigation is requested.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Optional

from loguru import logger
from redis.exceptions import RedisError

from core.errors import HostUnavailableError, NavigationInProgressError
from core.result import Err, Ok, Result
from modules import range_projector
from modules import window_state as ws
from modules.state_store import StateStore
from modules.tab_gateway import TabGateway


@dataclass(frozen=True)
class SessionView:
    """Snapshot returned to the UI after every action."""

    state: ws.NavigatorState
    navigated_to: Optional[str] = None

    @property
    def window(self) -> Optional[ws.TimeWindow]:
        return self.state.window

    def as_dict(self) -> dict:
        st = self.state
        return {
            "active": st.active,
            "anchor": st.anchor_ms,
            "interval_ms": st.interval_ms,
            "start_input": st.raw_start_input,
            "interval_input": st.raw_interval_input,
            "window": st.window.as_dict() if st.window else None,
            "navigated_to": self.navigated_to,
        }


class NavigatorSession:
    """Owns one :class:`~modules.window_state.NavigatorState`."""

    def __init__(self, store: StateStore, gateway: TabGateway):
        self.store = store
        self.gateway = gateway
        self.state = store.load() or ws.NavigatorState()
        self._navigating = False
        logger.debug("Navigator session loaded (active={})", self.state.active)

    @property
    def navigating(self) -> bool:
        return self._navigating

    def view(self, navigated_to: Optional[str] = None) -> SessionView:
        return SessionView(copy.deepcopy(self.state), navigated_to)

    def _commit(self, before: ws.NavigatorState) -> None:
        if self.state == before:
            return
        window = self.state.window
        if window is not None and window.length_ms <= 0:
            logger.warning("Window has non-positive length: {}", window)
        try:
            self.store.save(self.state)
        except RedisError:
            self.state = before
            raise

    async def _navigate(self, window: Optional[ws.TimeWindow]) -> Result[str]:
        self._navigating = True
        try:
            url = await self.gateway.get_active_target_url()
            projected = range_projector.project(url, window)
            if isinstance(projected, Err):
                logger.warning("Projection failed: {}", projected.message)
                return projected
            await self.gateway.navigate(projected.value)
            return projected
        except HostUnavailableError as e:
            logger.warning("Apply error: {}", e.message)
            return Err(e)
        finally:
            self._navigating = False

    def _busy(self) -> Optional[Err]:
        if self._navigating:
            return Err(NavigationInProgressError("Navigation already in progress"))
        return None

    async def _run_navigating(self, transition, *args) -> Result[SessionView]:
        busy = self._busy()
        if busy:
            return busy
        before = copy.deepcopy(self.state)
        res = transition(self.state, *args)
        self._commit(before)
        if isinstance(res, Err):
            logger.info("Transition {} rejected: {}", transition.__name__, res.message)
            return res
        if not res.value.navigate:
            return Ok(self.view())
        nav = await self._navigate(res.value.window)
        if isinstance(nav, Err):
            return nav
        return Ok(self.view(nav.value))

    # Public operations -------------------------------------------------

    def initialize(self, start_text: str, interval_text: str) -> Result[SessionView]:
        before = copy.deepcopy(self.state)
        res = ws.initialize(self.state, start_text, interval_text)
        if isinstance(res, Err):
            return res
        self._commit(before)
        return Ok(self.view())

    async def shift_backward(self, interval_text: str) -> Result[SessionView]:
        return await self._run_navigating(ws.shift_backward, interval_text)

    async def shift_forward(self, interval_text: str) -> Result[SessionView]:
        return await self._run_navigating(ws.shift_forward, interval_text)

    async def apply_current_settings(self, start_text: str, interval_text: str) -> Result[SessionView]:
        busy = self._busy()
        if busy:
            return busy
        res = self.initialize(start_text, interval_text)
        if isinstance(res, Err):
            return res
        nav = await self._navigate(self.state.window)
        if isinstance(nav, Err):
            return nav
        return Ok(self.view(nav.value))

    def reset(self) -> SessionView:
        before = copy.deepcopy(self.state)
        ws.reset(self.state)
        try:
            self.store.clear()
        except RedisError:
            self.state = before
            raise
        logger.info("Navigator state reset")
        return self.view()

    def on_start_input_changed(self, text: str) -> SessionView:
        before = copy.deepcopy(self.state)
        if ws.on_start_input_changed(self.state, text):
            self._commit(before)
        return self.view()

    def on_interval_input_changed(self, text: str) -> SessionView:
        before = copy.deepcopy(self.state)
        if ws.on_interval_input_changed(self.state, text):
            self._commit(before)
        return self.view()

    def project_url(self, url: str) -> Result[str]:
        """Project the current window onto ``url`` without navigating."""
        return range_projector.project(url, self.state.window)


__all__ = ["SessionView", "NavigatorSession"]
