from __future__ import annotations

from typing import Any, Iterable

from keypager.accessors import ValueAccessorInterface, default_accessor
from keypager.backends.base import start_offset
from keypager.core.ordering import Orderings
from keypager.core.selectors import PageSelector
from keypager.core.sorting import is_eligible, sort_records
from keypager.core.token import PageToken


class SequenceBackend:
    """In-memory backend owning the full record collection.

    Records are stable-sorted once per ``apply_ordering`` call; ranges are
    plain list slices.
    """

    def __init__(self, records: Iterable[Any], accessor: ValueAccessorInterface | None = None) -> None:
        self.accessor = accessor or default_accessor()
        self._records: list[Any] = list(records)
        self._orderings = Orderings()

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> list[Any]:
        return list(self._records)

    def apply_ordering(self, orderings: Orderings) -> None:
        self._orderings = orderings
        self._records = sort_records(self._records, orderings, self.accessor)

    def fetch_range(self, selector: PageSelector, required_count: int) -> list[Any]:
        if isinstance(selector, PageToken):
            # The whole eligible tail; the pager only needs the head of it.
            field, direction = self._orderings.primary
            return [
                record
                for record in self._records
                if is_eligible(self.accessor.get_value(record, field), selector.order_value, direction)
            ]

        offset = start_offset(selector, required_count)
        return self._records[offset:offset + required_count]
