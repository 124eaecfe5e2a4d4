from keypager.utils.exceptions import (
    KeypagerError,
    InvalidArgument,
    InvalidToken,
    ConfigurationError,
    FieldNotFound,
    NotConnected,
)
from keypager.utils.pagination import ContinuationPage
from keypager.utils.settings import SettingsResolver
from keypager.utils.types import (
    Record,
    FilterSpec,
    SortSpec,
    OrderingInput,
    DEFAULT_PAGE_SIZE,
    DEFAULT_MAX_PAGE_SIZE,
)

__all__ = [
    "KeypagerError",
    "InvalidArgument",
    "InvalidToken",
    "ConfigurationError",
    "FieldNotFound",
    "NotConnected",
    "ContinuationPage",
    "SettingsResolver",
    "Record",
    "FilterSpec",
    "SortSpec",
    "OrderingInput",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_MAX_PAGE_SIZE",
]
