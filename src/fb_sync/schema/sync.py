"""Full-replace table sync between two servers.

Copies table contents from a source server to a target server.  Each table
is cleared on the target and reloaded from the source; there is no diffing,
no FK ordering, and nothing flows from target back to source.

Two levels:

1. ``sync_table()`` moves one table over two open connections and always
   returns a ``SyncResult`` -- a failing table never raises.
2. ``sync_data()`` opens both connections, discovers the table list when none
   is given, runs ``sync_table()`` per table, and aggregates the outcome.

Without ``atomic`` the target is written at statement granularity: the
DELETE and every INSERT are committed individually, so a table that fails
mid-load stays cleared and partly reloaded (its ``SyncResult`` says so).
With ``atomic=True`` each table's DELETE and INSERTs share one transaction
that is rolled back on failure.

Usage:
    from fb_sync.schema.sync import sync_data

    response = sync_data(source_config, target_config, ["ORDERS", "CUSTOMERS"])
    for result in response.results:
        print(result.table_name, result.success, result.records_synced)

    # Every user table on the source, one transaction per table
    response = sync_data(source_config, target_config, atomic=True)
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from sqlalchemy import text
from sqlalchemy.engine import Connection

from fb_sync.config.models import ServerConfig
from fb_sync.errors import (
    OrchestrationError,
    TableSyncError,
    error_kind,
    error_message,
)
from fb_sync.factory import open_connection
from fb_sync.schema.introspector import list_tables
from fb_sync.schema.models import SyncRequest, SyncResponse, SyncResult
from fb_sync.schema.values import bind_params, tag_row

logger = logging.getLogger(__name__)

MESSAGE_SUCCESS = "Sync completed successfully"
MESSAGE_ERRORS = "Sync completed with errors"


# ---------------------------------------------------------------------------
# Single-table sync
# ---------------------------------------------------------------------------


def build_insert_sql(table_name: str, columns: Sequence[str]) -> tuple[str, list[str]]:
    """Build a parameterized INSERT with one named placeholder per column.

    Returns:
        Tuple of (SQL text, parameter names in column order).

    Example:
        >>> build_insert_sql("ORDERS", ["ID", "AMOUNT"])
        ('INSERT INTO ORDERS (ID, AMOUNT) VALUES (:p_0, :p_1)', ['p_0', 'p_1'])
    """
    param_names = [f"p_{i}" for i in range(len(columns))]
    placeholders = ", ".join(f":{p}" for p in param_names)
    sql = f"INSERT INTO {table_name} ({', '.join(columns)}) VALUES ({placeholders})"
    return sql, param_names


def sync_table(
    source: Connection,
    target: Connection,
    table_name: str,
    atomic: bool = False,
) -> SyncResult:
    """Replace the contents of one target table with the source's rows.

    Steps: SELECT * on source, DELETE on target, then one parameterized
    INSERT per source row.  Values are moved as-is; type compatibility
    between the two tables is the caller's concern.

    Args:
        source: Open connection to the source server.
        target: Open connection to the target server.
        table_name: Table to copy (interpolated into SQL, not bound).
        atomic: Run DELETE and INSERTs in one transaction, rolled back on
            failure.

    Returns:
        ``SyncResult``.  On failure ``records_synced`` is the number of rows
        left inserted on the target: the partial count without ``atomic``,
        0 with it.
    """
    result = SyncResult(table_name=table_name)
    logger.info("Syncing table: %s", table_name)

    source_rows = None
    try:
        source_rows = source.execute(text(f"SELECT * FROM {table_name}"))
        columns = list(source_rows.keys())
        insert_sql, param_names = build_insert_sql(table_name, columns)
        insert_stmt = text(insert_sql)

        target.execute(text(f"DELETE FROM {table_name}"))
        if not atomic:
            target.commit()

        for row in source_rows:
            target.execute(insert_stmt, bind_params(param_names, tag_row(row)))
            if not atomic:
                target.commit()
            result.records_synced += 1

        if atomic:
            target.commit()

        result.success = True
        logger.info(
            "Synced %d records for table %s", result.records_synced, table_name
        )

    except Exception as e:
        _rollback(target, table_name)
        if atomic:
            result.records_synced = 0
        result.success = False
        result.error = error_message(e)
        result.error_kind = error_kind(e, TableSyncError.kind)
        logger.error("Failed to sync table %s: %s", table_name, result.error)

    finally:
        if source_rows is not None:
            source_rows.close()
        # End the read transaction so the next table sees a fresh snapshot
        _rollback(source, table_name)

    return result


def _rollback(conn: Connection, table_name: str) -> None:
    """Roll back the open transaction, logging (not raising) on failure.

    A connection that cannot roll back is broken; the next statement on it
    fails and is reported there.
    """
    try:
        conn.rollback()
    except Exception as e:
        logger.warning("Rollback after %s failed: %s", table_name, e)


# ---------------------------------------------------------------------------
# Overlapping-run guard
# ---------------------------------------------------------------------------


class SyncGate:
    """Rejects a sync run while another run for the same server pair is active.

    Keys are ``(source.identity, target.identity)``; runs for different
    pairs proceed independently.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._active: set[tuple] = set()

    @contextmanager
    def hold(self, source: ServerConfig, target: ServerConfig) -> Iterator[None]:
        """Hold the gate for a pair for the duration of the block.

        Raises:
            OrchestrationError: If a run for the pair is already active.
        """
        key = (source.identity, target.identity)
        with self._lock:
            if key in self._active:
                raise OrchestrationError(
                    f"A sync from {source.label} to {target.label} is already in progress"
                )
            self._active.add(key)
        try:
            yield
        finally:
            with self._lock:
                self._active.discard(key)

    def is_active(self, source: ServerConfig, target: ServerConfig) -> bool:
        with self._lock:
            return (source.identity, target.identity) in self._active


default_gate = SyncGate()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def sync_data(
    source_config: ServerConfig,
    target_config: ServerConfig,
    table_names: Sequence[str] | None = None,
    atomic: bool = False,
    gate: SyncGate | None = None,
) -> SyncResponse:
    """Sync tables from source to target, one full replace per table.

    When ``table_names`` is empty or ``None`` the source is introspected and
    every user table is synced in name order.  If that introspection fails
    nothing is synced and the introspector's error becomes the message.

    A failing table is recorded and the run moves on.  A failure outside the
    per-table step (connection loss, overlapping run) stops the run; the
    results collected so far are returned with ``success=False``.

    Args:
        source_config: Server to read from.
        target_config: Server to write to.
        table_names: Tables to sync, in order.
        atomic: Wrap each table's DELETE+INSERTs in one transaction.
        gate: Overlap guard (default: the process-wide gate).

    Returns:
        ``SyncResponse`` with ``success`` = AND of the per-table results.

    Example:
        >>> response = sync_data(server_a, server_b)
        >>> response.message
        'Sync completed successfully'
    """
    gate = gate or default_gate
    results: list[SyncResult] = []

    logger.info("Starting sync from %s to %s", source_config.label, target_config.label)

    try:
        with (
            gate.hold(source_config, target_config),
            open_connection(source_config) as source,
            open_connection(target_config) as target,
        ):
            tables = list(table_names or [])
            if not tables:
                listing = list_tables(source_config)
                if not listing.success:
                    raise OrchestrationError(listing.error or "Failed to get tables list")
                tables = [t.name for t in listing.tables]

            for table_name in tables:
                results.append(sync_table(source, target, table_name, atomic=atomic))

    except Exception as e:
        logger.error("Sync failed: %s", error_message(e))
        return SyncResponse(
            success=False,
            message=error_message(e),
            results=results,
            error_kind=error_kind(e, OrchestrationError.kind),
        )

    success = all(r.success for r in results)
    logger.info("Sync completed. Success: %s, Tables: %d", success, len(results))
    return SyncResponse(
        success=success,
        message=MESSAGE_SUCCESS if success else MESSAGE_ERRORS,
        results=results,
    )


def run_sync(request: SyncRequest, atomic: bool = False) -> SyncResponse:
    """Run ``sync_data()`` for a ``SyncRequest`` record."""
    return sync_data(
        request.source_config,
        request.target_config,
        request.table_names,
        atomic=atomic,
    )
