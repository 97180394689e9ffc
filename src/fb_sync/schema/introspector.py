"""Firebird schema introspection via the RDB$ system catalog.

This module queries a live server to extract:
- User tables (system flag unset, relation type 0 = ordinary table)
- Columns per table with canonical type name, nullability and scale

Field type codes from ``RDB$FIELDS`` are mapped to canonical type names by
``map_firebird_type``.  Those strings are displayed and compared by callers,
so the mapping table must not change.

Usage:
    from fb_sync.schema.introspector import SchemaIntrospector, list_tables

    # Over a connection you already own
    tables = SchemaIntrospector(conn).introspect()

    # Or with its own scoped connection, errors captured in the result
    result = list_tables(config)
"""

import logging

from sqlalchemy import text
from sqlalchemy.engine import Connection

from fb_sync.config.models import ServerConfig
from fb_sync.errors import CatalogQueryError, error_kind, error_message
from fb_sync.factory import open_connection
from fb_sync.schema.models import ColumnInfo, TableInfo, TablesResult

logger = logging.getLogger(__name__)

# RDB$FIELDS.RDB$FIELD_TYPE codes with a fixed canonical name
FIELD_TYPE_NAMES = {
    7: "SMALLINT",
    8: "INTEGER",
    16: "BIGINT",
    10: "FLOAT",
    27: "DOUBLE",
    12: "DATE",
    13: "TIME",
    35: "TIMESTAMP",
    261: "BLOB",
}

# TEXT and VARYING; sub-type 1 is reported as CHAR
CHARACTER_FIELD_TYPES = {14, 37}

TABLES_QUERY = """
    SELECT r.RDB$RELATION_NAME
    FROM RDB$RELATIONS r
    WHERE (r.RDB$SYSTEM_FLAG = 0 OR r.RDB$SYSTEM_FLAG IS NULL)
      AND r.RDB$RELATION_TYPE = 0
    ORDER BY r.RDB$RELATION_NAME
"""

COLUMNS_QUERY = """
    SELECT
        rf.RDB$FIELD_NAME,
        f.RDB$FIELD_TYPE,
        f.RDB$FIELD_LENGTH,
        f.RDB$FIELD_SCALE,
        rf.RDB$NULL_FLAG,
        f.RDB$FIELD_SUB_TYPE
    FROM RDB$RELATION_FIELDS rf
    JOIN RDB$FIELDS f ON rf.RDB$FIELD_SOURCE = f.RDB$FIELD_NAME
    WHERE rf.RDB$RELATION_NAME = :table_name
    ORDER BY rf.RDB$FIELD_POSITION
"""


def map_firebird_type(field_type: int, field_length: int, sub_type: int) -> str:
    """Map a catalog field type code to its canonical type name.

    Args:
        field_type: ``RDB$FIELD_TYPE`` code.
        field_length: ``RDB$FIELD_LENGTH`` (0 when NULL).
        sub_type: ``RDB$FIELD_SUB_TYPE`` (0 when NULL).

    Returns:
        Canonical type name.

    Examples:
        >>> map_firebird_type(8, 4, 0)
        'INTEGER'
        >>> map_firebird_type(14, 10, 1)
        'CHAR'
        >>> map_firebird_type(37, 50, 0)
        'VARCHAR(50)'
        >>> map_firebird_type(999, 10, 0)
        'TYPE_999(10)'
        >>> map_firebird_type(999, 0, 0)
        'TYPE_999'
    """
    if field_type in FIELD_TYPE_NAMES:
        return FIELD_TYPE_NAMES[field_type]
    if field_type in CHARACTER_FIELD_TYPES:
        return "CHAR" if sub_type == 1 else f"VARCHAR({field_length})"
    suffix = f"({field_length})" if field_length > 0 else ""
    return f"TYPE_{field_type}{suffix}"


def _as_int(value: object) -> int:
    """Catalog integers come back as ``None`` when unset."""
    return int(value) if value is not None else 0


class SchemaIntrospector:
    """Reads table and column metadata from a Firebird catalog.

    The introspector does not own the connection; callers open and close it.

    Usage:
        with open_connection(config) as conn:
            introspector = SchemaIntrospector(conn)
            names = introspector.get_table_names()
            tables = introspector.introspect()
    """

    def __init__(self, conn: Connection):
        self._conn = conn

    def introspect(self) -> list[TableInfo]:
        """Read every user table with its columns.

        Returns:
            TableInfo list sorted by table name.

        Raises:
            CatalogQueryError: If any catalog query fails.
        """
        tables = []
        for table_name in self.get_table_names():
            tables.append(
                TableInfo(name=table_name, columns=self.get_columns(table_name))
            )
        return tables

    def get_table_names(self) -> list[str]:
        """Get names of user tables (no views, no system relations), sorted."""
        try:
            rows = self._conn.execute(text(TABLES_QUERY)).fetchall()
        except Exception as e:
            raise CatalogQueryError(error_message(e)) from e

        # Relation names are CHAR columns padded with blanks
        names = {str(row[0]).strip() for row in rows if row[0] is not None}
        names.discard("")
        return sorted(names)

    def get_columns(self, table_name: str) -> list[ColumnInfo]:
        """Get columns for a table in field-position order."""
        try:
            rows = self._conn.execute(
                text(COLUMNS_QUERY), {"table_name": table_name}
            ).fetchall()
        except Exception as e:
            raise CatalogQueryError(error_message(e)) from e

        columns = []
        for row in rows:
            (
                raw_name,
                field_type,
                field_length,
                field_scale,
                null_flag,
                sub_type,
            ) = row

            name = str(raw_name).strip() if raw_name is not None else ""
            if not name:
                continue

            length = _as_int(field_length)
            columns.append(
                ColumnInfo(
                    name=name,
                    type=map_firebird_type(_as_int(field_type), length, _as_int(sub_type)),
                    # Column-level flag only; a NOT NULL domain is not consulted
                    nullable=null_flag is None,
                    scale=_as_int(field_scale),
                )
            )
        return columns


def list_tables(config: ServerConfig) -> TablesResult:
    """List user tables and columns of a server.

    Opens its own connection.  Any failure (connect or catalog query) yields
    ``success=False`` with an empty table list -- partial lists are never
    returned.

    Args:
        config: Server to introspect.

    Returns:
        ``TablesResult`` with tables sorted by name.

    Example:
        >>> result = list_tables(config)
        >>> if result.success:
        ...     print([t.name for t in result.tables])
    """
    logger.info("Getting tables from %s", config.label)
    try:
        with open_connection(config) as conn:
            tables = SchemaIntrospector(conn).introspect()
    except Exception as e:
        message = error_message(e)
        logger.error("Failed to get tables from %s: %s", config.label, message)
        return TablesResult(
            success=False,
            error=message,
            error_kind=error_kind(e, CatalogQueryError.kind),
        )

    logger.info("Retrieved %d tables from %s", len(tables), config.label)
    return TablesResult(success=True, tables=tables)
