from __future__ import annotations

import re
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from keypager.utils.exceptions import ConfigurationError, InvalidArgument
from keypager.utils.types import OrderingPair

SORT_ASC = "asc"
SORT_DESC = "desc"

_DIRECTION_PATTERN = re.compile(f"{SORT_ASC}|{SORT_DESC}", re.IGNORECASE)


class Orderings(Sequence[OrderingPair]):
    """Immutable, normalized list of (field, direction) pairs.

    Accepts any of:
        Orderings("created_at")                                  # ascending
        Orderings({"created_at": "DESC", "id": "asc"})
        Orderings(["created_at", ("id", "desc")])

    The first entry is the primary (range) field, the second the tie-break
    field used for continuation checksums.
    """

    __slots__ = ("_orderings",)

    def __init__(self, orderings: Any = ()) -> None:
        self._orderings: tuple[OrderingPair, ...] = self._normalize(orderings)

    @classmethod
    def coerce(cls, orderings: Any) -> Orderings:
        """Return orderings unchanged if already normalized, else build them."""
        if isinstance(orderings, cls):
            return orderings
        return cls(orderings)

    def __getitem__(self, index):  # type: ignore[override]
        return self._orderings[index]

    def __len__(self) -> int:
        return len(self._orderings)

    def __iter__(self) -> Iterator[OrderingPair]:
        return iter(self._orderings)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Orderings):
            return self._orderings == other._orderings
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._orderings)

    def __repr__(self) -> str:
        return f"Orderings({list(self._orderings)!r})"

    @property
    def primary(self) -> OrderingPair:
        """The reference field compared against a token's order value."""
        self.require_token_support()
        return self._orderings[0]

    @property
    def tie_break(self) -> OrderingPair:
        """The field whose values feed the continuation checksum."""
        self.require_token_support()
        return self._orderings[1]

    def require_token_support(self) -> None:
        if len(self._orderings) < 2:
            raise ConfigurationError(
                'orderings must have at least 2 "field" => "direction(asc|desc)" entries. '
                "The first is the reference value, the second is the checksum field."
            )

    # --- Internal ---

    @classmethod
    def _normalize(cls, orderings: Any) -> tuple[OrderingPair, ...]:
        if isinstance(orderings, str):
            return ((orderings, SORT_ASC),)

        if isinstance(orderings, Mapping):
            return tuple(
                (field, cls._normalize_direction(direction))
                for field, direction in orderings.items()
            )

        normalized: list[OrderingPair] = []
        for entry in orderings:
            if isinstance(entry, str):
                normalized.append((entry, SORT_ASC))
            elif isinstance(entry, Sequence) and len(entry) == 2:
                field, direction = entry
                normalized.append((field, cls._normalize_direction(direction)))
            else:
                raise InvalidArgument(f"Invalid ordering entry {entry!r}")
        return tuple(normalized)

    @staticmethod
    def _normalize_direction(direction: Any) -> str:
        """Match direction case-insensitively, substring matches included."""
        if not isinstance(direction, str) or not _DIRECTION_PATTERN.search(direction):
            raise InvalidArgument(f'Invalid ordering direction "{direction}"')
        return SORT_DESC if SORT_DESC in direction.lower() else SORT_ASC
