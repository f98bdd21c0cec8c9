from __future__ import annotations

"""Time-related helper functions.

Instants are integer epoch milliseconds interpreted as local wall-clock time.
"""

import re
from datetime import datetime, timezone
from typing import Optional

from core.errors import FormatError
from core.result import Err, Ok, Result

DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT_MESSAGE = "Invalid date format. Use: YYYY-MM-DD HH:MM:SS"

_INSTANT_RE = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}(?:\.\d{1,6})?$")


def _to_ms(value: datetime) -> int:
    whole = value.replace(microsecond=0).timestamp()
    return int(whole) * 1000 + value.microsecond // 1000


def decode_instant(text: str) -> Result[int]:
    """Parse ``YYYY-MM-DD HH:MM:SS`` local wall-clock text into epoch ms."""
    s = text.strip() if isinstance(text, str) else ""
    if not _INSTANT_RE.match(s):
        return Err(FormatError(DATE_FORMAT_MESSAGE))
    try:
        parsed = datetime.fromisoformat(s.replace(" ", "T", 1))
    except ValueError:
        return Err(FormatError(DATE_FORMAT_MESSAGE))
    return Ok(_to_ms(parsed))


def encode_instant(ms: int) -> str:
    """Render ``ms`` as local ``YYYY-MM-DD HH:MM:SS``.

    Instants that are not whole seconds get a ``.mmm`` suffix so the text
    decodes back to the same value.
    """
    secs, rem = divmod(int(ms), 1000)
    text = datetime.fromtimestamp(secs).strftime(DISPLAY_FORMAT)
    if rem:
        text += f".{rem:03d}"
    return text


def start_of_current_hour(now: Optional[datetime] = None) -> int:
    """Return epoch ms for the start of the current local clock hour."""
    now = now or datetime.now()
    return _to_ms(now.replace(minute=0, second=0, microsecond=0))


def to_iso_utc(ms: int) -> str:
    """Return ``ms`` as an ISO-8601 UTC string with millisecond precision."""
    secs, rem = divmod(int(ms), 1000)
    base = datetime.fromtimestamp(secs, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")
    return f"{base}.{rem:03d}Z"


def from_iso_utc(text: str) -> int:
    """Inverse of :func:`to_iso_utc`; also accepts explicit offsets.

    Raises ``ValueError`` for unparsable text.
    """
    s = text.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    parsed = datetime.fromisoformat(s)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return _to_ms(parsed)
