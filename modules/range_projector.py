"""Embed a time window into a dashboard URL.

Two URL shapes are understood:

``ClassicRange``
    root-level ``from``/``to`` query parameters.
``MultiPaneRange``
    a ``panes`` parameter holding a JSON object; every pane with a ``range``
    object gets its ``range.from``/``range.to`` rewritten.

Only the range-bearing parameters are rewritten; every other query segment is
kept byte for byte and in its original position.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import quote_plus, unquote_plus, urlsplit, urlunsplit

from loguru import logger

from core.errors import MalformedPaneDataError, PreconditionError
from core.result import Err, Ok, Result
from modules.window_state import TimeWindow

PANES_PARAM = "panes"


@dataclass(frozen=True)
class ClassicRange:
    segments: list[str]


@dataclass(frozen=True)
class MultiPaneRange:
    segments: list[str]
    raw_panes: str


RangeShape = Union[ClassicRange, MultiPaneRange]


def _split_query(query: str) -> list[str]:
    return [seg for seg in query.split("&") if seg] if query else []


def _segment_key(segment: str) -> str:
    return unquote_plus(segment.split("=", 1)[0])


def _segment_value(segment: str) -> str:
    parts = segment.split("=", 1)
    return unquote_plus(parts[1]) if len(parts) == 2 else ""


def _encode(key: str, value: str) -> str:
    return f"{quote_plus(key, safe='')}={quote_plus(value, safe='')}"


def classify(url: str) -> RangeShape:
    """Return the range shape of ``url`` based on its query string."""
    segments = _split_query(urlsplit(url).query)
    for seg in segments:
        if _segment_key(seg) == PANES_PARAM:
            return MultiPaneRange(segments, _segment_value(seg))
    return ClassicRange(segments)


def _set_param(segments: list[str], key: str, value: str) -> list[str]:
    """Replace the first ``key`` segment in place, dropping duplicates."""
    out: list[str] = []
    placed = False
    for seg in segments:
        if _segment_key(seg) == key:
            if not placed:
                out.append(_encode(key, value))
                placed = True
            continue
        out.append(seg)
    if not placed:
        out.append(_encode(key, value))
    return out


def _project_panes(shape: MultiPaneRange, window: TimeWindow) -> Result[list[str]]:
    try:
        panes = json.loads(shape.raw_panes)
    except ValueError as e:
        return Err(MalformedPaneDataError(f"Invalid panes data: {e}"))
    if not isinstance(panes, dict):
        return Err(MalformedPaneDataError("Invalid panes data: expected a JSON object"))

    updated = 0
    for pane in panes.values():
        if isinstance(pane, dict) and isinstance(pane.get("range"), dict):
            pane["range"]["from"] = str(window.start_ms)
            pane["range"]["to"] = str(window.end_ms)
            updated += 1
    logger.debug("Updated range in {} of {} panes", updated, len(panes))

    return Ok(_set_param(shape.segments, PANES_PARAM, json.dumps(panes, separators=(",", ":"), ensure_ascii=False)))


def project(url: str, window: Optional[TimeWindow]) -> Result[str]:
    """Return ``url`` rewritten so the dashboard shows ``window``."""
    if window is None:
        return Err(PreconditionError("Set a range first"))

    parts = urlsplit(url)
    shape = classify(url)
    if isinstance(shape, MultiPaneRange):
        res = _project_panes(shape, window)
        if isinstance(res, Err):
            return res
        segments = res.value
    elif isinstance(shape, ClassicRange):
        segments = _set_param(shape.segments, "from", str(window.start_ms))
        segments = _set_param(segments, "to", str(window.end_ms))
    else:  # pragma: no cover - exhaustive over RangeShape
        raise TypeError(f"unknown range shape: {shape!r}")

    return Ok(urlunsplit(parts._replace(query="&".join(segments))))


__all__ = ["ClassicRange", "MultiPaneRange", "RangeShape", "classify", "project"]
