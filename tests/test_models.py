"""Tests for result record serialization."""

from fb_sync.schema.models import (
    ColumnInfo,
    ServerStatus,
    SyncResponse,
    SyncResult,
    TableInfo,
    TablesResult,
)


class TestFieldNames:
    """Records serialize with the camelCase names callers read."""

    def test_server_status(self) -> None:
        data = ServerStatus(host="db1:3050", online=True, response_time=5).to_dict()
        assert data == {
            "host": "db1:3050",
            "online": True,
            "responseTime": 5,
            "error": None,
            "errorKind": None,
        }

    def test_tables_result(self) -> None:
        result = TablesResult(
            success=True,
            tables=[TableInfo(name="ORDERS", columns=[ColumnInfo(name="ID", type="INTEGER", nullable=False)])],
        )
        data = result.to_dict()
        assert set(data) == {"success", "tables", "error", "errorKind"}
        assert data["tables"][0]["name"] == "ORDERS"
        assert data["tables"][0]["columns"][0] == {
            "name": "ID",
            "type": "INTEGER",
            "nullable": False,
            "scale": 0,
        }

    def test_sync_response(self) -> None:
        response = SyncResponse(
            success=False,
            message="Sync completed with errors",
            results=[
                SyncResult(table_name="A", success=True, records_synced=3),
                SyncResult(table_name="B", success=False, error="boom", error_kind="table_sync"),
            ],
        )
        data = response.to_dict()
        assert set(data) == {"success", "message", "results", "errorKind"}
        assert data["results"][1] == {
            "tableName": "B",
            "success": False,
            "recordsSynced": 0,
            "error": "boom",
            "errorKind": "table_sync",
        }

    def test_accepts_camel_case_input(self) -> None:
        result = SyncResult.model_validate({"tableName": "A", "success": True, "recordsSynced": 2})
        assert result.table_name == "A"
        assert result.records_synced == 2


class TestSyncResponseHelpers:

    def test_totals_and_failed_tables(self) -> None:
        response = SyncResponse(
            success=False,
            message="Sync completed with errors",
            results=[
                SyncResult(table_name="A", success=True, records_synced=3),
                SyncResult(table_name="B", success=False, records_synced=1),
            ],
        )
        assert response.records_synced == 4
        assert response.failed_tables == ["B"]
