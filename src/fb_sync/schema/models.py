"""Pydantic models for introspection, status, and sync results.

This module contains the engine's result records:
- Introspection models: ColumnInfo, TableInfo, TablesResult
- Liveness models: ServerStatus, ServerStatusResponse
- Sync models: SyncRequest, SyncResult, SyncResponse

Records serialize with camelCase names (``model_dump(by_alias=True)``) and
accept either spelling on input.  Server settings (ServerConfig) live in
fb_sync.config.models.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from fb_sync.config.models import ServerConfig


class _Record(BaseModel):
    """Base for records exchanged with callers."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict:
        """Serialize with the camelCase field names callers expect."""
        return self.model_dump(by_alias=True, mode="json")


# ============================================================================
# Schema Introspection Models
# ============================================================================


class ColumnInfo(_Record):
    """A column as reported by the system catalog.

    Example:
        >>> col = ColumnInfo(name="ID", type="INTEGER", nullable=False)
        >>> col.to_dict()
        {'name': 'ID', 'type': 'INTEGER', 'nullable': False, 'scale': 0}
    """

    name: str
    type: str
    nullable: bool = True
    scale: int = 0


class TableInfo(_Record):
    """A user table; columns are in catalog field-position order."""

    name: str
    columns: list[ColumnInfo] = Field(default_factory=list)

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]


class TablesResult(_Record):
    """Result of list_tables().  Never holds a partial table list."""

    success: bool
    tables: list[TableInfo] = Field(default_factory=list)
    error: str | None = None
    error_kind: str | None = None


# ============================================================================
# Liveness Models
# ============================================================================


class ServerStatus(_Record):
    """Result of one liveness check.

    Example:
        >>> ServerStatus(host="db1:3050", online=True, response_time=12).to_dict()
        {'host': 'db1:3050', 'online': True, 'responseTime': 12, 'error': None, 'errorKind': None}
    """

    host: str
    online: bool = False
    response_time: int = Field(default=0, ge=0)
    error: str | None = None
    error_kind: str | None = None


class ServerStatusResponse(_Record):
    """Status of a server pair, checked concurrently."""

    server_a: ServerStatus
    server_b: ServerStatus
    success: bool = True
    message: str | None = None

    @property
    def all_online(self) -> bool:
        return self.server_a.online and self.server_b.online


# ============================================================================
# Sync Models
# ============================================================================


class SyncRequest(_Record):
    """Input record for one sync run.

    ``table_names`` empty or ``None`` means "every user table on the source".
    """

    source_config: ServerConfig
    target_config: ServerConfig
    table_names: list[str] | None = None


class SyncResult(_Record):
    """Outcome of syncing one table.

    ``records_synced`` counts rows actually inserted into the target.
    """

    table_name: str
    success: bool = False
    records_synced: int = Field(default=0, ge=0)
    error: str | None = None
    error_kind: str | None = None


class SyncResponse(_Record):
    """Outcome of a sync run; ``success`` is the AND of all table results."""

    success: bool
    message: str
    results: list[SyncResult] = Field(default_factory=list)
    error_kind: str | None = None

    @property
    def records_synced(self) -> int:
        """Total rows inserted across all tables."""
        return sum(r.records_synced for r in self.results)

    @property
    def failed_tables(self) -> list[str]:
        return [r.table_name for r in self.results if not r.success]
