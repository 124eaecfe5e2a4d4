from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING
from pymongo.asynchronous.collection import AsyncCollection

from keypager.accessors import DateTimeValueAccessor, ValueAccessor, ValueAccessorInterface
from keypager.backends.base import start_offset
from keypager.backends.connection import get_collection
from keypager.core.ordering import SORT_ASC, Orderings
from keypager.core.selectors import PageSelector
from keypager.core.token import PageToken
from keypager.lifecycle.observability import track_fetch
from keypager.utils.types import FilterSpec, SortSpec

logger = logging.getLogger(__name__)


class ObjectIdValueAccessor:
    """Decorates an accessor so ObjectIds come back as their hex string.

    Hex strings order like the ObjectIds themselves, so in-memory comparison
    and token encoding agree with the server-side sort.
    """

    def __init__(self, decorated: ValueAccessorInterface) -> None:
        self._decorated = decorated

    def get_value(self, record: Any, path: str) -> Any:
        value = self._decorated.get_value(record, path)
        if isinstance(value, ObjectId):
            return str(value)
        return value


class MongoBackend:
    """Range backend over a MongoDB collection (pymongo async API).

    Ordering is pushed down as a sort spec and token ranges as ``$gte``/``$lte``
    filters on the primary field (``$lt`` the next second for descending
    datetimes), so only ``page_size + offset`` documents are read per page.

    Args:
        collection: AsyncCollection, or a collection name resolved through the
            connection registry at fetch time
        filter: Base filter every page is restricted to
        alias: Connection alias used to resolve a collection name
        datetime_fields: Stored fields holding dates; token values for them are
            epoch seconds and are converted back to datetimes for the query
        object_id_fields: Stored fields holding ObjectIds
        field_map: Ordering path -> stored field name, when records are
            transformed into a shape whose paths differ from the documents
        projection: Optional projection
        transform: Called on each raw document (e.g. ``Model.model_validate``)

    Example:
        backend = MongoBackend("events", {"tenant": "acme"}, datetime_fields=["created_at"])
        pager = AsyncPager(backend, {"created_at": "desc", "_id": "desc"})
    """

    def __init__(
        self,
        collection: AsyncCollection | str,
        filter: FilterSpec | None = None,
        *,
        alias: str = "default",
        datetime_fields: Iterable[str] = (),
        object_id_fields: Iterable[str] = ("_id",),
        field_map: Mapping[str, str] | None = None,
        projection: dict[str, int] | None = None,
        transform: Callable[[dict[str, Any]], Any] | None = None,
    ) -> None:
        self._collection = collection
        self._filter: FilterSpec = filter or {}
        self._alias = alias
        self._datetime_fields = set(datetime_fields)
        self._object_id_fields = set(object_id_fields)
        self._field_map = dict(field_map or {})
        self._projection = projection
        self._transform = transform
        self._orderings = Orderings()
        self._sort: SortSpec = []
        self.accessor: ValueAccessorInterface = DateTimeValueAccessor(ObjectIdValueAccessor(ValueAccessor()))

    @property
    def sort_spec(self) -> SortSpec:
        return list(self._sort)

    def get_collection(self) -> AsyncCollection:
        if isinstance(self._collection, str):
            return get_collection(self._collection, self._alias)
        return self._collection

    def apply_ordering(self, orderings: Orderings) -> None:
        """Translate orderings into a pymongo sort spec."""
        self._orderings = orderings
        self._sort = [
            (self._stored_field(field), ASCENDING if direction == SORT_ASC else DESCENDING)
            for field, direction in orderings
        ]

    def build_filter(self, selector: PageSelector) -> FilterSpec:
        """Base filter, narrowed to the token range when resuming from a token."""
        if not isinstance(selector, PageToken):
            return self._filter.copy()

        path, direction = self._orderings.primary
        field = self._stored_field(path)
        range_filter = {field: self._range_condition(field, direction, selector.order_value)}
        if not self._filter:
            return range_filter
        return {"$and": [self._filter.copy(), range_filter]}

    async def fetch_range(self, selector: PageSelector, required_count: int) -> list[Any]:
        collection = self.get_collection()
        filter_spec = self.build_filter(selector)
        skip = start_offset(selector, required_count)

        async with track_fetch("fetch_range", collection.name, selector, required_count) as ctx:
            cursor = collection.find(filter_spec, self._projection)
            if self._sort:
                cursor = cursor.sort(self._sort)
            if skip:
                cursor = cursor.skip(skip)
            cursor = cursor.limit(required_count)

            results = []
            async for raw in cursor:
                results.append(self._transform(raw) if self._transform else raw)
            ctx["result_count"] = len(results)

        logger.debug("Fetched %d documents from %s (skip=%d, limit=%d)", len(results), collection.name, skip, required_count)
        return results

    # --- Internal ---

    def _stored_field(self, path: str) -> str:
        return self._field_map.get(path, path)

    def _to_query_value(self, field: str, value: Any) -> Any:
        """Undo accessor normalization so the value compares natively in MongoDB."""
        if field in self._datetime_fields and isinstance(value, int):
            return datetime.fromtimestamp(value, tz=timezone.utc)
        if field in self._object_id_fields and isinstance(value, str) and ObjectId.is_valid(value):
            return ObjectId(value)
        return value

    def _range_condition(self, field: str, direction: str, value: Any) -> dict[str, Any]:
        """Condition keeping documents at or past ``value`` in sort direction.

        Datetime token values are whole epoch seconds while MongoDB stores
        milliseconds, so a descending range has to keep the entire second.
        """
        if direction == SORT_ASC:
            return {"$gte": self._to_query_value(field, value)}
        if field in self._datetime_fields and isinstance(value, int):
            return {"$lt": self._to_query_value(field, value + 1)}
        return {"$lte": self._to_query_value(field, value)}
