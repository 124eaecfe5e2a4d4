from keypager.core.ordering import Orderings, SORT_ASC, SORT_DESC
from keypager.core.selectors import PageNumber, PageOffset, PageSelector
from keypager.core.token import PageToken, compute_checksum
from keypager.core.pager import Pager, AsyncPager

__all__ = [
    "Orderings",
    "SORT_ASC",
    "SORT_DESC",
    "PageNumber",
    "PageOffset",
    "PageSelector",
    "PageToken",
    "compute_checksum",
    "Pager",
    "AsyncPager",
]
