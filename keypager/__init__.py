from keypager.core import (
    Orderings,
    PageToken,
    PageNumber,
    PageOffset,
    PageSelector,
    Pager,
    AsyncPager,
    compute_checksum,
)
from keypager.accessors import (
    ValueAccessorInterface,
    ValueAccessor,
    AttributeAccessor,
    MappingAccessor,
    DateTimeValueAccessor,
    default_accessor,
)
from keypager.backends import (
    RangeBackend,
    AsyncRangeBackend,
    SequenceBackend,
    MongoBackend,
    ObjectIdValueAccessor,
    connect,
    disconnect,
    get_database,
)
from keypager.lifecycle import (
    enable_tracing,
    disable_tracing,
    PageEvent,
    add_listener,
)
from keypager.utils import (
    KeypagerError,
    InvalidArgument,
    InvalidToken,
    ConfigurationError,
    FieldNotFound,
    NotConnected,
    ContinuationPage,
)

__all__ = [
    # Core
    "Orderings",
    "PageToken",
    "PageNumber",
    "PageOffset",
    "PageSelector",
    "Pager",
    "AsyncPager",
    "compute_checksum",
    # Accessors
    "ValueAccessorInterface",
    "ValueAccessor",
    "AttributeAccessor",
    "MappingAccessor",
    "DateTimeValueAccessor",
    "default_accessor",
    # Backends
    "RangeBackend",
    "AsyncRangeBackend",
    "SequenceBackend",
    "MongoBackend",
    "ObjectIdValueAccessor",
    "connect",
    "disconnect",
    "get_database",
    # Lifecycle
    "enable_tracing",
    "disable_tracing",
    "PageEvent",
    "add_listener",
    # Utils
    "KeypagerError",
    "InvalidArgument",
    "InvalidToken",
    "ConfigurationError",
    "FieldNotFound",
    "NotConnected",
    "ContinuationPage",
]
