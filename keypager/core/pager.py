from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Generic, Iterable, Iterator, Sequence, TypeVar

from keypager.accessors import ValueAccessorInterface, default_accessor
from keypager.backends.base import AsyncRangeBackend, RangeBackend, required_count
from keypager.backends.memory import SequenceBackend
from keypager.core.ordering import Orderings
from keypager.core.selectors import PageNumber, PageOffset, PageSelector
from keypager.core.sorting import is_eligible, same_value
from keypager.core.token import PageToken, compute_checksum
from keypager.lifecycle.observability import track_page
from keypager.utils.exceptions import InvalidArgument
from keypager.utils.pagination import ContinuationPage
from keypager.utils.settings import SettingsResolver

T = TypeVar("T")

logger = logging.getLogger(__name__)

_SELECTOR_TYPES = (PageToken, PageNumber, PageOffset)


class _PagerBase(Generic[T]):
    """Page selection shared by the sync and async pagers.

    Holds the selector, page size and memoized page. The page is computed
    lazily and cached until set_current_page() or set_page_size() is called.
    """

    def __init__(
        self,
        orderings: Any = None,
        *,
        accessor: ValueAccessorInterface | None = None,
        page_size: int | None = None,
    ) -> None:
        cls = type(self)
        if orderings is None:
            orderings = SettingsResolver.get_orderings(cls)
        self._orderings = Orderings.coerce(orderings)
        self._accessor = accessor or default_accessor()
        self._page_size = 0
        self.set_page_size(SettingsResolver.get_page_size(cls) if page_size is None else page_size)
        self.max_page_size = SettingsResolver.get_max_page_size(cls)
        self._current_page: PageSelector = None
        self._page: tuple[T, ...] | None = None
        # Eligible records from the start of the range up to the end of the page.
        self._run: Sequence[T] = ()
        self._drifted = False

    # --- Configuration ---

    @property
    def orderings(self) -> Orderings:
        return self._orderings

    @property
    def accessor(self) -> ValueAccessorInterface:
        return self._accessor

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def current_page(self) -> PageSelector:
        return self._current_page

    @property
    def drifted(self) -> bool:
        """Whether the last computed page fell back because the token was stale."""
        return self._drifted

    def set_page_size(self, page_size: int):
        """Set the page size and invalidate the computed page."""
        if page_size < 0:
            raise InvalidArgument("Page size cannot be less than 0")
        self._page_size = page_size
        self._page = None
        return self

    def set_current_page(self, selector: PageSelector):
        """Set the page token/number/offset and invalidate the computed page."""
        if selector is not None and not isinstance(selector, _SELECTOR_TYPES):
            raise InvalidArgument(f"Unsupported page selector {type(selector).__name__}")
        self._current_page = selector
        self._page = None
        return self

    # --- Selection ---

    def _needs_fetch(self) -> bool:
        if isinstance(self._current_page, PageToken):
            self._orderings.require_token_support()
        return self._page_size > 0

    def _required_count(self) -> int:
        return required_count(self._current_page, self._page_size)

    def _select(self, records: Sequence[T]) -> tuple[T, ...]:
        """Cut the page out of the records returned for the current selector.

        - no selector, page number, offset: the records already start at the
          right position, so the page is their head;
        - token: keep the records at or past the token order value. If the
          first of them no longer carries that value, or the checksum over the
          first ``offset`` of them changed, the data drifted since the token
          was issued and the first page of eligible records is returned.
          Otherwise resume ``offset`` records in.

        The next token's trailing group is measured over the eligible records
        up to the end of the page, so a tie group running across several pages
        keeps counting from where it started.
        """
        self._drifted = False
        self._run = ()
        selector = self._current_page
        if not records:
            return ()

        if not isinstance(selector, PageToken):
            self._run = page = tuple(records[:self._page_size])
            return page

        field, direction = self._orderings.primary
        eligible = [
            record
            for record in records
            if is_eligible(self._primary_value(record), selector.order_value, direction)
        ]
        if not eligible:
            return ()

        if self._order_value_differs(eligible, selector) or self._checksum_differs(eligible, selector):
            self._drifted = True
            logger.info(
                "Continuation token %s is stale for field '%s', falling back to the first eligible page",
                selector,
                field,
            )
            self._run = page = tuple(eligible[:self._page_size])
            return page

        end = selector.offset + self._page_size
        self._run = eligible[:end]
        return tuple(eligible[selector.offset:end])

    def _order_value_differs(self, eligible: Sequence[T], token: PageToken) -> bool:
        return not same_value(self._primary_value(eligible[0]), token.order_value)

    def _checksum_differs(self, eligible: Sequence[T], token: PageToken) -> bool:
        head = eligible[:token.offset]
        return self._checksum(self._trailing_group(head)) != token.checksum

    def _next_token(self, page: tuple[T, ...]) -> PageToken | None:
        if not page:
            return None
        if isinstance(self._current_page, (PageNumber, PageOffset)):
            return None

        group = self._trailing_group(self._run)
        return PageToken(self._primary_value(group[0]), len(group), self._checksum(group))

    def _trailing_group(self, records: Sequence[T]) -> list[T]:
        """Records at the tail sharing the last record's primary value, in page order."""
        reference = self._primary_value(records[-1])
        start = len(records) - 1
        while start > 0 and same_value(self._primary_value(records[start - 1]), reference):
            start -= 1
        return list(records[start:])

    def _primary_value(self, record: T) -> Any:
        return self._accessor.get_value(record, self._orderings.primary[0])

    def _checksum(self, records: Iterable[T]) -> int:
        field = self._orderings.tie_break[0]
        return compute_checksum(self._accessor.get_value(record, field) for record in records)

    def _build_result(self, page: tuple[T, ...], token: PageToken | None) -> ContinuationPage[T]:
        return ContinuationPage(
            items=list(page),
            size=self._page_size,
            next_token=str(token) if token is not None else None,
            has_next=token is not None,
        )


class Pager(_PagerBase[T]):
    """Keyset pager over an in-memory collection or a synchronous backend.

    Example:
        pager = Pager(events, {"created_at": "asc", "id": "asc"})
        pager.set_page_size(20).set_current_page(PageToken.from_string(raw))
        for event in pager:
            ...
        token = pager.get_next_page_token()
    """

    def __init__(
        self,
        source: Iterable[T] | RangeBackend = (),
        orderings: Any = None,
        *,
        accessor: ValueAccessorInterface | None = None,
        page_size: int | None = None,
    ) -> None:
        if not isinstance(source, RangeBackend):
            source = SequenceBackend(source, accessor)
        super().__init__(orderings, accessor=accessor or getattr(source, "accessor", None), page_size=page_size)
        self._backend = source
        self._backend.apply_ordering(self._orderings)

    @property
    def backend(self) -> RangeBackend:
        return self._backend

    def compute_page(self) -> tuple[T, ...]:
        """Return the current page, computing it on first access."""
        if self._page is None:
            with track_page("compute_page", type(self._backend).__name__, self._current_page, self._page_size) as ctx:
                if self._needs_fetch():
                    records = self._backend.fetch_range(self._current_page, self._required_count())
                    self._page = self._select(records)
                else:
                    self._drifted = False
                    self._page = ()
                ctx["result_count"] = len(self._page)
                ctx["drift"] = self._drifted
        return self._page

    def get_next_page_token(self) -> PageToken | None:
        """Token resuming right after the current page, or None."""
        return self._next_token(self.compute_page())

    def paginate(self) -> ContinuationPage[T]:
        """Compute the page and bundle it with its continuation token."""
        return self._build_result(self.compute_page(), self.get_next_page_token())

    def __iter__(self) -> Iterator[T]:
        return iter(self.compute_page())

    def __len__(self) -> int:
        return len(self.compute_page())


class AsyncPager(_PagerBase[T]):
    """Keyset pager over an asynchronous backend such as MongoBackend.

    Example:
        pager = AsyncPager(MongoBackend("events"), {"created_at": "desc", "_id": "desc"})
        pager.set_current_page(PageToken.from_string(raw))
        page = await pager.paginate()
    """

    def __init__(
        self,
        backend: AsyncRangeBackend,
        orderings: Any = None,
        *,
        accessor: ValueAccessorInterface | None = None,
        page_size: int | None = None,
    ) -> None:
        super().__init__(orderings, accessor=accessor or getattr(backend, "accessor", None), page_size=page_size)
        self._backend = backend
        self._backend.apply_ordering(self._orderings)

    @property
    def backend(self) -> AsyncRangeBackend:
        return self._backend

    async def compute_page(self) -> tuple[T, ...]:
        """Return the current page, fetching it from the backend on first access."""
        if self._page is None:
            with track_page("compute_page", type(self._backend).__name__, self._current_page, self._page_size) as ctx:
                if self._needs_fetch():
                    records = await self._backend.fetch_range(self._current_page, self._required_count())
                    self._page = self._select(records)
                else:
                    self._drifted = False
                    self._page = ()
                ctx["result_count"] = len(self._page)
                ctx["drift"] = self._drifted
        return self._page

    async def get_next_page_token(self) -> PageToken | None:
        """Token resuming right after the current page, or None."""
        return self._next_token(await self.compute_page())

    async def paginate(self) -> ContinuationPage[T]:
        """Compute the page and bundle it with its continuation token."""
        page = await self.compute_page()
        return self._build_result(page, self._next_token(page))

    async def __aiter__(self) -> AsyncIterator[T]:
        for record in await self.compute_page():
            yield record
