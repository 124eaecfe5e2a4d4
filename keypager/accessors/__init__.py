from keypager.accessors.base import (
    ValueAccessorInterface,
    ValueAccessor,
    AttributeAccessor,
    MappingAccessor,
)
from keypager.accessors.temporal import DateTimeValueAccessor, to_timestamp


def default_accessor() -> ValueAccessorInterface:
    """Accessor used when a pager is built without one."""
    return DateTimeValueAccessor(ValueAccessor())


__all__ = [
    "ValueAccessorInterface",
    "ValueAccessor",
    "AttributeAccessor",
    "MappingAccessor",
    "DateTimeValueAccessor",
    "to_timestamp",
    "default_accessor",
]
