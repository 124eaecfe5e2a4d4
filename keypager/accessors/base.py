from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from keypager.utils.exceptions import FieldNotFound

_MISSING = object()


@runtime_checkable
class ValueAccessorInterface(Protocol):
    """Reads a (possibly dotted) field path from a record."""

    def get_value(self, record: Any, path: str) -> Any: ...


def _split(path: str) -> list[str]:
    if not path:
        raise FieldNotFound("Field path cannot be empty")
    return path.split(".")


class ValueAccessor:
    """Resolves each path segment as a mapping key or, failing that, an attribute.

    Works uniformly for dicts, raw MongoDB documents, dataclasses, plain objects
    and pydantic models.
    """

    def get_value(self, record: Any, path: str) -> Any:
        value = record
        for segment in _split(path):
            if isinstance(value, Mapping):
                found = value.get(segment, _MISSING)
            else:
                found = getattr(value, segment, _MISSING)
            if found is _MISSING:
                raise FieldNotFound(f"Cannot read '{segment}' of path '{path}' from {type(record).__name__}")
            value = found
        return value


class AttributeAccessor:
    """Attribute-only resolution, for object records."""

    def get_value(self, record: Any, path: str) -> Any:
        value = record
        for segment in _split(path):
            try:
                value = getattr(value, segment)
            except AttributeError as e:
                raise FieldNotFound(f"Cannot read '{segment}' of path '{path}' from {type(record).__name__}") from e
        return value


class MappingAccessor:
    """Key-only resolution, for dict-shaped records."""

    def get_value(self, record: Any, path: str) -> Any:
        value = record
        for segment in _split(path):
            try:
                value = value[segment]
            except (KeyError, TypeError) as e:
                raise FieldNotFound(f"Cannot read '{segment}' of path '{path}' from {type(record).__name__}") from e
        return value
