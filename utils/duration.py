"""Compact duration strings such as ``30m``, ``2h`` or ``1.5d``."""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal

from core.errors import FormatError
from core.result import Err, Ok, Result

_INTERVAL_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*([smhdw])$", re.IGNORECASE)

UNIT_MS = {
    "s": 1000,
    "m": 60 * 1000,
    "h": 60 * 60 * 1000,
    "d": 24 * 60 * 60 * 1000,
    "w": 7 * 24 * 60 * 60 * 1000,
}

DEFAULT_INTERVAL = "2h"
DEFAULT_INTERVAL_MS = 2 * UNIT_MS["h"]

INTERVAL_FORMAT_MESSAGE = "Invalid interval format. Use: 30m, 1h, 2h, 1d, etc."


def parse_interval(text: str) -> Result[int]:
    """Return the duration in whole milliseconds for ``text``.

    A value of zero is accepted and yields an empty window. Sub-millisecond
    fractions round half up, so ``0.0005s`` is 1 ms.
    """
    m = _INTERVAL_RE.match(text.strip()) if isinstance(text, str) else None
    if not m:
        return Err(FormatError(INTERVAL_FORMAT_MESSAGE))
    ms = Decimal(m.group(1)) * UNIT_MS[m.group(2).lower()]
    return Ok(int(ms.to_integral_value(rounding=ROUND_HALF_UP)))


__all__ = [
    "UNIT_MS",
    "DEFAULT_INTERVAL",
    "DEFAULT_INTERVAL_MS",
    "parse_interval",
]
