from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Generic, Optional, TypeVar

from fastapi import Query
from pydantic import BaseModel

from keypager.backends.connection import connect, disconnect
from keypager.core.selectors import PageNumber, PageOffset, PageSelector
from keypager.core.token import PageToken
from keypager.utils.exceptions import (
    ConfigurationError,
    FieldNotFound,
    InvalidArgument,
    InvalidToken,
    KeypagerError,
)
from keypager.utils.pagination import ContinuationPage
from keypager.utils.types import DEFAULT_MAX_PAGE_SIZE, DEFAULT_PAGE_SIZE

T = TypeVar("T")

logger = logging.getLogger(__name__)


def init_app(app: Any, uri: str, alias: str = "default") -> Any:
    """Initialize a FastAPI app with a MongoDB connection for MongoBackend.

    Sets up:
    - MongoDB connection/disconnection in app lifespan
    - Exception handlers for Keypager exceptions

    Args:
        app: FastAPI application instance
        uri: MongoDB connection URI
        alias: Connection alias the backends resolve (default: "default")
    """
    original_lifespan = getattr(app, "router", app).lifespan_context

    @asynccontextmanager
    async def lifespan(a: Any):
        await connect(uri, alias=alias)
        try:
            if original_lifespan is not None:
                async with original_lifespan(a) as state:
                    yield state
            else:
                yield
        finally:
            await disconnect(alias)

    app.router.lifespan_context = lifespan
    register_exception_handlers(app)
    return app


def register_exception_handlers(app: Any) -> None:
    """Register keypager exception handlers on a FastAPI app."""
    from starlette.responses import JSONResponse

    @app.exception_handler(InvalidArgument)
    @app.exception_handler(InvalidToken)
    @app.exception_handler(FieldNotFound)
    async def bad_request_handler(request: Any, exc: KeypagerError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ConfigurationError)
    @app.exception_handler(KeypagerError)
    async def keypager_error_handler(request: Any, exc: KeypagerError):
        return JSONResponse(status_code=500, content={"detail": str(exc)})


def parse_token(raw: str | None) -> PageToken | None:
    """Parse a ``continue`` value, treating anything malformed as absent."""
    try:
        return PageToken.from_string(raw)
    except InvalidToken as e:
        logger.info("Ignoring malformed continuation token %r: %s", raw, e)
        return None


class PageSelectorParams:
    """FastAPI dependency reading the page selector and size from the query string.

    ``continue`` wins over ``page``, which wins over ``offset``. A malformed
    token falls back to the first page; a page below 1 or a negative offset
    raises InvalidArgument.
    """

    max_page_size: int = DEFAULT_MAX_PAGE_SIZE

    def __init__(
        self,
        continue_: Optional[str] = Query(default=None, alias="continue"),
        page: Optional[str] = Query(default=None),
        offset: Optional[str] = Query(default=None),
        size: int = Query(default=DEFAULT_PAGE_SIZE),
    ):
        self.size = min(max(0, size), self.max_page_size)
        self.selector: PageSelector = (
            parse_token(continue_)
            or PageNumber.from_string(page)
            or PageOffset.from_string(offset)
        )

    def apply(self, pager: Any) -> Any:
        """Set this request's size and selector on a pager.

        The size is capped again by the pager's own ``max_page_size``.
        """
        size = min(self.size, getattr(pager, "max_page_size", self.size))
        return pager.set_page_size(size).set_current_page(self.selector)


class ContinuationPageResponse(BaseModel, Generic[T]):
    """Continuation-paginated response model for API endpoints."""

    items: list[T]
    size: int
    next_token: Optional[str] = None
    has_next: bool

    @classmethod
    def from_page(cls, page_obj: ContinuationPage) -> ContinuationPageResponse:
        return cls(
            items=page_obj.items,
            size=page_obj.size,
            next_token=page_obj.next_token,
            has_next=page_obj.has_next,
        )
