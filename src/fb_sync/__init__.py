"""fb-sync: Firebird schema introspection and full-replace table sync.

Mirrors table contents from a source Firebird server to a target server and
reports schema and liveness information about each.

Usage:
    from fb_sync import ServerConfig, check_servers, list_tables, sync_data
    from fb_sync import load_sync_config, resolve_server
"""

__version__ = "0.1.0"

# Config
from fb_sync.config.loader import load_sync_config, resolve_server, server_from_env
from fb_sync.config.models import ServerConfig, SyncConfig

# Errors
from fb_sync.errors import (
    CatalogQueryError,
    ConfigError,
    OrchestrationError,
    ServerConnectionError,
    SyncEngineError,
    TableSyncError,
)

# Factory
from fb_sync.factory import open_connection, resolve_url

# Schema
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
from fb_sync.schema.sync import run_sync, sync_data, sync_table

# Status
from fb_sync.status import check_server_status, check_servers

__all__ = [
    # Config
    "load_sync_config",
    "resolve_server",
    "server_from_env",
    "ServerConfig",
    "SyncConfig",
    # Errors
    "SyncEngineError",
    "ConfigError",
    "ServerConnectionError",
    "CatalogQueryError",
    "TableSyncError",
    "OrchestrationError",
    # Factory
    "open_connection",
    "resolve_url",
    # Schema
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
    "sync_data",
    "sync_table",
    "run_sync",
    # Status
    "check_server_status",
    "check_servers",
]
