from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from keypager.core.ordering import Orderings
from keypager.core.selectors import PageNumber, PageOffset, PageSelector
from keypager.core.token import PageToken


@runtime_checkable
class RangeBackend(Protocol):
    """Storage collaborator able to push ordering and range filters down.

    ``fetch_range`` must return records ordered as installed by
    ``apply_ordering``:

    - ``None``: the first ``required_count`` records;
    - ``PageNumber`` / ``PageOffset``: ``required_count`` records starting at
      ``start_offset(selector, required_count)``;
    - ``PageToken``: at least ``required_count`` records whose primary field is
      at or past the token order value.
    """

    def apply_ordering(self, orderings: Orderings) -> None: ...

    def fetch_range(self, selector: PageSelector, required_count: int) -> Sequence[Any]: ...


@runtime_checkable
class AsyncRangeBackend(Protocol):
    """Same contract as RangeBackend with an awaitable fetch."""

    def apply_ordering(self, orderings: Orderings) -> None: ...

    async def fetch_range(self, selector: PageSelector, required_count: int) -> Sequence[Any]: ...


def required_count(selector: PageSelector, page_size: int) -> int:
    """Number of records a backend must return for one page computation.

    A token needs ``page_size + offset`` records so the trailing group of the
    previous page can be re-derived for the drift check.
    """
    if isinstance(selector, PageToken):
        return page_size + selector.offset
    return page_size


def start_offset(selector: PageSelector, page_size: int) -> int:
    """Positional offset for page-number and offset selectors, 0 otherwise."""
    if isinstance(selector, PageNumber):
        return selector.offset(page_size)
    if isinstance(selector, PageOffset):
        return selector.offset
    return 0
