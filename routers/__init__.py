"""Expose router modules and blueprint helpers."""

__all__ = [
    "navigator",
    "health",
    "blueprints",
]
