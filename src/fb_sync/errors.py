"""Error taxonomy for the sync engine.

Every engine failure maps onto one of these kinds.  Public operations
never let them escape; they are converted into result records carrying
``error`` (the message) and ``error_kind`` (the ``kind`` attribute below).

Usage:
    from fb_sync.errors import TableSyncError

    try:
        ...
    except TableSyncError as e:
        print(e.kind, e)
"""

from sqlalchemy.exc import DBAPIError


class SyncEngineError(Exception):
    """Base class for all engine errors."""

    kind: str = "engine"


class ConfigError(SyncEngineError):
    """Raised when a server configuration cannot be resolved."""

    kind = "config"


class ServerConnectionError(SyncEngineError):
    """Raised when a connection to a server cannot be opened (auth/network)."""

    kind = "connection"


class CatalogQueryError(SyncEngineError):
    """Raised when a system catalog query fails during introspection."""

    kind = "catalog_query"


class TableSyncError(SyncEngineError):
    """Raised for a failure at any step of one table's extract/replace/load."""

    kind = "table_sync"


class OrchestrationError(SyncEngineError):
    """Raised when a sync run cannot continue (no table list, lost connection)."""

    kind = "orchestration"


def error_kind(exc: BaseException, default: str) -> str:
    """Return the tagged kind for *exc*, or *default* for driver exceptions."""
    if isinstance(exc, SyncEngineError):
        return exc.kind
    return default


def error_message(exc: BaseException) -> str:
    """Return the underlying error's own message.

    SQLAlchemy wraps driver errors in ``DBAPIError``, whose ``str()`` appends
    the statement, its bound parameters and a help link.  Only the driver's
    message is reported.
    """
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc)
