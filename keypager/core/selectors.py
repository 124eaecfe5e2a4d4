from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from keypager.utils.exceptions import InvalidArgument

if TYPE_CHECKING:
    from keypager.core.token import PageToken


def _parse_int(value: str | int | None) -> int | None:
    """Parse a request value as an integer, returning None when not numeric."""
    if value is None or value == "":
        return None
    if isinstance(value, int):
        return value
    try:
        return int(value.strip())
    except ValueError:
        return None


@dataclass(frozen=True)
class PageNumber:
    """1-based page number. Offers no drift protection."""

    number: int

    def __post_init__(self) -> None:
        if self.number < 1:
            raise InvalidArgument("Page number cannot be less than 1")

    def __str__(self) -> str:
        return str(self.number)

    @classmethod
    def from_string(cls, value: str | int | None) -> PageNumber | None:
        """Build from a raw request value; empty or non-numeric input yields None."""
        number = _parse_int(value)
        if not number:
            return None
        return cls(number)

    def offset(self, page_size: int) -> int:
        return (self.number - 1) * page_size


@dataclass(frozen=True)
class PageOffset:
    """0-based record offset where the page starts. Offers no drift protection."""

    offset: int

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise InvalidArgument("Offset cannot be less than 0")

    def __str__(self) -> str:
        return str(self.offset)

    @classmethod
    def from_string(cls, value: str | int | None) -> PageOffset | None:
        """Build from a raw request value; empty or non-numeric input yields None."""
        offset = _parse_int(value)
        if offset is None:
            return None
        return cls(offset)


PageSelector = Union["PageToken", PageNumber, PageOffset, None]
