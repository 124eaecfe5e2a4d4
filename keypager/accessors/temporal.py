from __future__ import annotations

import math
from datetime import date, datetime, timezone
from typing import Any

from keypager.accessors.base import ValueAccessorInterface


def to_timestamp(value: date) -> int:
    """Normalize a date or datetime to integer epoch seconds.

    Naive datetimes are taken as UTC, which is how MongoDB returns them.
    """
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    elif value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return math.floor(value.timestamp())


class DateTimeValueAccessor:
    """Decorates an accessor so temporal values come back as epoch seconds.

    Applied before any comparison, sort, token serialization or checksum so
    behaviour does not depend on whether the store returned native dates.
    """

    def __init__(self, decorated: ValueAccessorInterface) -> None:
        self._decorated = decorated

    def get_value(self, record: Any, path: str) -> Any:
        value = self._decorated.get_value(record, path)
        if isinstance(value, date):
            return to_timestamp(value)
        return value
