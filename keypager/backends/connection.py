"""Registry of MongoDB connections used by MongoBackend.

Backends built from a collection name resolve it lazily through an alias, so
the connection can be opened after the pager classes are declared (for
example in an application lifespan).
"""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase

from keypager.utils.exceptions import NotConnected

logger = logging.getLogger(__name__)

_clients: dict[str, AsyncMongoClient] = {}
_databases: dict[str, AsyncDatabase] = {}


async def connect(uri: str, *, alias: str = "default", **client_options) -> AsyncDatabase:
    """Open a client for ``uri`` and register its database under ``alias``.

    Args:
        uri: MongoDB connection URI, database name included
        alias: Name the backends use to find this connection
        **client_options: Passed to AsyncMongoClient (timeouts, pool size...)

    Returns:
        The AsyncDatabase named in the URI.

    Raises:
        ValueError: If the URI names no database
    """
    db_name = database_name_from_uri(uri)
    if alias in _clients:
        logger.info("Replacing MongoDB connection registered as '%s'", alias)
        await disconnect(alias)

    client = AsyncMongoClient(uri, **client_options)
    _clients[alias] = client
    _databases[alias] = client[db_name]
    logger.info("Registered MongoDB database '%s' as '%s'", db_name, alias)
    return _databases[alias]


async def disconnect(alias: str = "default") -> None:
    """Close and forget the connection registered under ``alias``."""
    client = _clients.pop(alias, None)
    _databases.pop(alias, None)
    if client is not None:
        await client.close()
        logger.info("Closed MongoDB connection '%s'", alias)


def register_database(database: AsyncDatabase, *, alias: str = "default") -> None:
    """Register an already opened database, bypassing connect()."""
    _databases[alias] = database


def get_database(alias: str = "default") -> AsyncDatabase:
    """Return the database registered under ``alias``.

    Raises:
        NotConnected: If nothing is registered for the alias
    """
    try:
        return _databases[alias]
    except KeyError:
        raise NotConnected(
            f"No database registered for alias '{alias}'. Call connect() first."
        )


def get_collection(name: str, alias: str = "default") -> AsyncCollection:
    """Return collection ``name`` of the database registered under ``alias``."""
    return get_database(alias)[name]


def database_name_from_uri(uri: str) -> str:
    """Extract the database name from a MongoDB URI.

    Raises:
        ValueError: If the URI is empty or has no database path
    """
    if not uri:
        raise ValueError("MongoDB URI cannot be empty")

    db_name = urlsplit(uri).path.lstrip("/")
    if not db_name or "/" in db_name:
        raise ValueError(
            "Cannot extract database name from URI. "
            "Expected format: mongodb://host:port/database"
        )
    return db_name
