from __future__ import annotations

from typing import Any

from pymongo import DESCENDING

_MISSING = object()


def _lookup(document: dict[str, Any], path: str) -> Any:
    value: Any = document
    for segment in path.split("."):
        if not isinstance(value, dict) or segment not in value:
            return _MISSING
        value = value[segment]
    return value


def _matches(document: dict[str, Any], filter_spec: dict[str, Any]) -> bool:
    for key, condition in filter_spec.items():
        if key == "$and":
            if not all(_matches(document, sub) for sub in condition):
                return False
            continue

        value = _lookup(document, key)
        if isinstance(condition, dict) and any(op.startswith("$") for op in condition):
            if value is _MISSING:
                return False
            for op, operand in condition.items():
                if op == "$gte" and not value >= operand:
                    return False
                if op == "$lte" and not value <= operand:
                    return False
                if op == "$lt" and not value < operand:
                    return False
        elif value != condition:
            return False
    return True


class FakeCursor:
    """Subset of pymongo's AsyncCursor: sort, skip, limit, async iteration."""

    def __init__(self, documents: list[dict[str, Any]]) -> None:
        self._documents = documents
        self._sort: list[tuple[str, int]] = []
        self._skip = 0
        self._limit = 0

    def sort(self, spec: list[tuple[str, int]]) -> FakeCursor:
        self._sort = list(spec)
        return self

    def skip(self, n: int) -> FakeCursor:
        self._skip = n
        return self

    def limit(self, n: int) -> FakeCursor:
        self._limit = n
        return self

    def _results(self) -> list[dict[str, Any]]:
        documents = list(self._documents)
        for field, direction in reversed(self._sort):
            documents.sort(key=lambda doc: _lookup(doc, field), reverse=direction == DESCENDING)
        documents = documents[self._skip:]
        if self._limit:
            documents = documents[:self._limit]
        return documents

    async def __aiter__(self):
        for document in self._results():
            yield dict(document)


class FakeCollection:
    """In-process stand-in for an AsyncCollection, recording each find() call."""

    def __init__(self, name: str, documents: list[dict[str, Any]] | None = None) -> None:
        self.name = name
        self.documents: list[dict[str, Any]] = list(documents or [])
        self.calls: list[dict[str, Any]] = []
        self.cursors: list[FakeCursor] = []

    def find(self, filter_spec: dict[str, Any] | None = None, projection: dict[str, int] | None = None) -> FakeCursor:
        filter_spec = filter_spec or {}
        self.calls.append({"filter": filter_spec, "projection": projection})
        cursor = FakeCursor([doc for doc in self.documents if _matches(doc, filter_spec)])
        self.cursors.append(cursor)
        return cursor


class FakeDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection(name))
