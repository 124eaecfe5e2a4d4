from __future__ import annotations

from typing import Any, Iterable

from keypager.accessors.base import ValueAccessorInterface
from keypager.core.ordering import SORT_ASC, SORT_DESC, Orderings


def compare_key(value: Any) -> tuple[int, Any]:
    """Total-order key for a normalized field value.

    Numbers compare numerically, everything else by its string form; numbers
    sort before strings. None compares as the empty string.
    """
    if isinstance(value, (int, float)):
        return (0, value)
    if value is None:
        return (1, "")
    return (1, str(value))


def sort_records(records: Iterable[Any], orderings: Orderings, accessor: ValueAccessorInterface) -> list[Any]:
    """Stable multi-key sort; earlier orderings dominate, ties keep input order."""
    result = list(records)
    # Successive stable passes, least significant key first.
    for field, direction in reversed(orderings):
        result.sort(
            key=lambda record: compare_key(accessor.get_value(record, field)),
            reverse=direction == SORT_DESC,
        )
    return result


def is_eligible(value: Any, reference: Any, direction: str) -> bool:
    """Range predicate: at or past ``reference`` in ``direction`` order."""
    if direction == SORT_ASC:
        return compare_key(value) >= compare_key(reference)
    return compare_key(value) <= compare_key(reference)


def same_value(a: Any, b: Any) -> bool:
    return compare_key(a) == compare_key(b)
