"""Pydantic models for navigator endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field


class RangeSettings(BaseModel):
    """Start time and interval as typed by the user."""

    start: str = Field(..., examples=["2024-01-01 00:00:00"])
    interval: str = Field(..., examples=["2h"])


class ShiftRequest(BaseModel):
    """Interval used for a backward/forward step."""

    interval: str = Field(..., examples=["1h"])


class InputChange(BaseModel):
    """Live value of an input field while the user types."""

    text: str = ""


class TargetUrl(BaseModel):
    url: str = Field(..., min_length=1)
