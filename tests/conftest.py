"""Shared fixtures: in-memory SQLite connections standing in for servers."""

from contextlib import contextmanager
from typing import Any

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection

from fb_sync.config.models import ServerConfig


def _sqlite_connection():
    engine = create_engine("sqlite://")
    conn = engine.connect()
    return engine, conn


@pytest.fixture
def source_conn():
    engine, conn = _sqlite_connection()
    yield conn
    conn.close()
    engine.dispose()


@pytest.fixture
def target_conn():
    engine, conn = _sqlite_connection()
    yield conn
    conn.close()
    engine.dispose()


@pytest.fixture
def source_config() -> ServerConfig:
    return ServerConfig(host="source", database="/dbs/src.fdb", user="SYSDBA", password="pw")


@pytest.fixture
def target_config() -> ServerConfig:
    return ServerConfig(host="target", database="/dbs/dst.fdb", user="SYSDBA", password="pw")


def create_table(conn: Connection, ddl: str, rows: list[tuple[Any, ...]] = ()) -> None:
    """Create a table from *ddl* and fill it with positional *rows*."""
    conn.execute(text(ddl))
    name = ddl.split()[2]
    for row in rows:
        placeholders = ", ".join(f":v{i}" for i in range(len(row)))
        conn.execute(
            text(f"INSERT INTO {name} VALUES ({placeholders})"),
            {f"v{i}": v for i, v in enumerate(row)},
        )
    conn.commit()


def fetch_rows(conn: Connection, table: str, order_by: str = "ID") -> list[tuple]:
    rows = conn.execute(text(f"SELECT * FROM {table} ORDER BY {order_by}")).fetchall()
    conn.rollback()
    return [tuple(r) for r in rows]


def fake_open_connection(connections: dict[str, Any]):
    """Build an ``open_connection`` replacement keyed by ``config.host``."""

    @contextmanager
    def _open(config: ServerConfig):
        yield connections[config.host]

    return _open
