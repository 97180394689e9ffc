"""Schema introspection and table sync.

Provides catalog introspection (``SchemaIntrospector``, ``list_tables``),
the canonical type mapping (``map_firebird_type``), and full-replace table
sync (``sync_table``, ``sync_data``).

Usage:
    from fb_sync.schema import list_tables, map_firebird_type
    from fb_sync.schema import sync_data, sync_table
"""

from fb_sync.schema.introspector import SchemaIntrospector, list_tables, map_firebird_type
from fb_sync.schema.models import (
    ColumnInfo,
    ServerStatus,
    ServerStatusResponse,
    SyncRequest,
    SyncResponse,
    SyncResult,
    TableInfo,
    TablesResult,
)
from fb_sync.schema.sync import SyncGate, run_sync, sync_data, sync_table
from fb_sync.schema.values import TaggedValue, ValueKind, tag_row, tag_value

__all__ = [
    "SchemaIntrospector",
    "list_tables",
    "map_firebird_type",
    "ColumnInfo",
    "TableInfo",
    "TablesResult",
    "ServerStatus",
    "ServerStatusResponse",
    "SyncRequest",
    "SyncResult",
    "SyncResponse",
    "SyncGate",
    "sync_data",
    "sync_table",
    "run_sync",
    "TaggedValue",
    "ValueKind",
    "tag_value",
    "tag_row",
]
