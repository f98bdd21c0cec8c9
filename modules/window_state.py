"""Sliding time-window state and its transitions.

A :class:`NavigatorState` is either *uninitialized* (``window is None``) or
*active*.  The transition functions below mutate the state in place only on
success and report the outcome as :class:`~core.result.Ok` or
:class:`~core.result.Err`; persistence and navigation are left to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from core.result import Err, Ok, Result
from utils.duration import DEFAULT_INTERVAL, DEFAULT_INTERVAL_MS, parse_interval
from utils.time import decode_instant, encode_instant, start_of_current_hour


@dataclass(frozen=True)
class TimeWindow:
    """Half-open ``[start_ms, end_ms)`` interval in epoch milliseconds."""

    start_ms: int
    end_ms: int

    @property
    def length_ms(self) -> int:
        return self.end_ms - self.start_ms

    def as_dict(self) -> dict:
        return {
            "from": self.start_ms,
            "to": self.end_ms,
            "from_text": encode_instant(self.start_ms),
            "to_text": encode_instant(self.end_ms),
        }


def _default_start_input() -> str:
    return encode_instant(start_of_current_hour())


@dataclass
class NavigatorState:
    """Everything one navigator session remembers between actions."""

    anchor_ms: Optional[int] = None
    interval_ms: int = DEFAULT_INTERVAL_MS
    window: Optional[TimeWindow] = None
    raw_start_input: str = field(default_factory=_default_start_input)
    raw_interval_input: str = DEFAULT_INTERVAL

    @property
    def active(self) -> bool:
        return self.window is not None


@dataclass(frozen=True)
class TransitionOutcome:
    """Window produced by a transition and whether it should be navigated to."""

    window: Optional[TimeWindow]
    navigate: bool = False


def initialize(state: NavigatorState, start_text: str, interval_text: str) -> Result[TransitionOutcome]:
    """Anchor a new window at ``start_text`` lasting ``interval_text``."""
    start = decode_instant(start_text)
    if isinstance(start, Err):
        return start
    interval = parse_interval(interval_text)
    if isinstance(interval, Err):
        return interval

    state.anchor_ms = start.value
    state.interval_ms = interval.value
    state.window = TimeWindow(start.value, start.value + interval.value)
    state.raw_start_input = start_text
    state.raw_interval_input = interval_text
    return Ok(TransitionOutcome(state.window))


def shift_backward(state: NavigatorState, interval_text: str) -> Result[TransitionOutcome]:
    """Move the window back so that it ends where it used to start."""
    if state.window is None:
        res = initialize(state, state.raw_start_input, interval_text)
        if isinstance(res, Err):
            return res

    interval = parse_interval(interval_text)
    if isinstance(interval, Err):
        return interval

    current = state.window
    state.interval_ms = interval.value
    state.raw_interval_input = interval_text
    state.window = TimeWindow(current.start_ms - interval.value, current.start_ms)
    return Ok(TransitionOutcome(state.window, navigate=True))


def shift_forward(state: NavigatorState, interval_text: str) -> Result[TransitionOutcome]:
    """Move the window forward so that it starts where it used to end.

    The first forward action on an uninitialized state only initializes from
    the held start input and ``interval_text``; the fresh window is navigated
    to without shifting.
    """
    if state.window is None:
        res = initialize(state, state.raw_start_input, interval_text)
        if isinstance(res, Err):
            return res
        return Ok(TransitionOutcome(state.window, navigate=True))

    interval = parse_interval(interval_text)
    if isinstance(interval, Err):
        return interval

    current = state.window
    state.interval_ms = interval.value
    state.raw_interval_input = interval_text
    state.window = TimeWindow(current.end_ms, current.end_ms + interval.value)
    return Ok(TransitionOutcome(state.window, navigate=True))


def reset(state: NavigatorState) -> TransitionOutcome:
    """Return ``state`` to the uninitialized defaults."""
    state.anchor_ms = None
    state.interval_ms = DEFAULT_INTERVAL_MS
    state.window = None
    state.raw_start_input = _default_start_input()
    state.raw_interval_input = DEFAULT_INTERVAL
    return TransitionOutcome(None)


def on_start_input_changed(state: NavigatorState, text: str) -> bool:
    """Re-anchor while the user types; returns ``True`` if state changed.

    Undecodable text is ignored so typing is never interrupted.
    """
    if not text:
        return False
    start = decode_instant(text)
    if isinstance(start, Err):
        return False
    state.anchor_ms = start.value
    state.window = TimeWindow(start.value, start.value + state.interval_ms)
    state.raw_start_input = text
    return True


def on_interval_input_changed(state: NavigatorState, text: str) -> bool:
    """Resize the active window while the user types; returns ``True`` if state changed."""
    interval = parse_interval(text)
    if isinstance(interval, Err):
        return False
    state.interval_ms = interval.value
    state.raw_interval_input = text
    if state.window is not None:
        state.window = TimeWindow(state.window.start_ms, state.window.start_ms + interval.value)
    return True


__all__ = [
    "TimeWindow",
    "NavigatorState",
    "TransitionOutcome",
    "initialize",
    "shift_backward",
    "shift_forward",
    "reset",
    "on_start_input_changed",
    "on_interval_input_changed",
]
