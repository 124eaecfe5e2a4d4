from keypager.backends.base import RangeBackend, AsyncRangeBackend, required_count, start_offset
from keypager.backends.memory import SequenceBackend
from keypager.backends.mongo import MongoBackend, ObjectIdValueAccessor
from keypager.backends.connection import (
    connect,
    disconnect,
    get_database,
    get_collection,
    register_database,
)

__all__ = [
    "RangeBackend",
    "AsyncRangeBackend",
    "required_count",
    "start_offset",
    "SequenceBackend",
    "MongoBackend",
    "ObjectIdValueAccessor",
    "connect",
    "disconnect",
    "get_database",
    "get_collection",
    "register_database",
]
