"""Discriminated success/failure results.

Parsing, transition and projection helpers return either :class:`Ok` or
:class:`Err` instead of raising, so callers branch with ``isinstance``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from core.errors import NavigatorError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    ok = True


@dataclass(frozen=True)
class Err:
    error: NavigatorError

    ok = False

    @property
    def message(self) -> str:
        return self.error.message


Result = Union[Ok[T], Err]


__all__ = ["Ok", "Err", "Result"]
