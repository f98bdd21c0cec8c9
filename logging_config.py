"""Central loguru configuration for the application.

Importing this module installs a stderr sink and a rotating file sink.
:func:`set_log_level` swaps the sinks at runtime and is safe to call from
several threads.
"""

from __future__ import annotations

import os
import sys
import threading
from pathlib import Path

from loguru import logger

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEFAULT_LOG_FILE = Path(os.getenv("LOG_FILE", Path(__file__).resolve().parent / "app.log"))
LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} [{level}] {name}: {message}"

_lock = threading.Lock()
_handler_ids: list[int] = []


def setup_logging(level: str = LOG_LEVEL, log_file: str | Path | None = None) -> None:
    """(Re)configure loguru sinks at ``level``."""
    path = Path(log_file) if log_file else DEFAULT_LOG_FILE
    with _lock:
        for handler_id in _handler_ids:
            try:
                logger.remove(handler_id)
            except ValueError:
                pass
        _handler_ids.clear()
        _handler_ids.append(logger.add(sys.stderr, level=level, format=LOG_FORMAT))
        _handler_ids.append(
            logger.add(
                str(path),
                level=level,
                format=LOG_FORMAT,
                rotation="1 MB",
                retention=5,
                enqueue=True,
                delay=True,
            )
        )


def set_log_level(level: str, log_file: str | Path | None = None) -> None:
    """Change the level of the application sinks."""
    global LOG_LEVEL
    LOG_LEVEL = str(level).upper()
    setup_logging(LOG_LEVEL, log_file)


logger.remove()
setup_logging()
