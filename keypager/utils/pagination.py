from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class ContinuationPage(Generic[T]):
    """One computed page plus the token resuming right after it."""

    items: list[T]
    size: int
    next_token: str | None
    has_next: bool
