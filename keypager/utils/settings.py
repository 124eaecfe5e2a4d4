"""Settings resolution utilities for Pager configuration."""

from __future__ import annotations

from typing import Any

from keypager.utils.types import DEFAULT_MAX_PAGE_SIZE, DEFAULT_PAGE_SIZE


class SettingsResolver:
    """Resolves pager settings from an inner Settings class.

    Example:
        class EventPager(Pager):
            class Settings:
                orderings = {"created_at": "desc", "_id": "desc"}
                page_size = 25
    """

    @staticmethod
    def get_orderings(cls: type) -> Any:
        """Get the ordering declaration from Settings.

        Args:
            cls: Pager class

        Returns:
            Raw ordering declaration, or an empty list
        """
        settings = getattr(cls, "Settings", None)
        if settings and hasattr(settings, "orderings"):
            return settings.orderings
        return []

    @staticmethod
    def get_page_size(cls: type) -> int:
        """Get the default page size from Settings.

        Args:
            cls: Pager class

        Returns:
            Page size used until set_page_size() is called
        """
        settings = getattr(cls, "Settings", None)
        if settings and hasattr(settings, "page_size"):
            return int(settings.page_size)
        return DEFAULT_PAGE_SIZE

    @staticmethod
    def get_max_page_size(cls: type) -> int:
        """Get the largest page size a request may ask for.

        Args:
            cls: Pager class

        Returns:
            Upper bound PageSelectorParams.apply() enforces on request sizes
        """
        settings = getattr(cls, "Settings", None)
        if settings and hasattr(settings, "max_page_size"):
            return int(settings.max_page_size)
        return DEFAULT_MAX_PAGE_SIZE
