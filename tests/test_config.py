"""Tests for TOML and environment configuration loading."""

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from fb_sync.config.loader import (
    DEFAULT_DATABASE,
    load_sync_config,
    resolve_server,
    server_from_env,
)
from fb_sync.config.models import ServerConfig, SyncConfig
from fb_sync.errors import ConfigError

FIREBIRD_VARS = ("HOST", "PORT", "DATABASE", "USER", "PASSWORD")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for prefix in ("", "APP_"):
        for name in ("A", "B", "REPLICA"):
            for var in FIREBIRD_VARS:
                monkeypatch.delenv(f"{prefix}FIREBIRD_{name}_{var}", raising=False)


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "fbsync.toml"
    path.write_text(textwrap.dedent(content))
    return path


class TestLoadSyncConfig:

    def test_load_valid_toml(self, tmp_path: Path) -> None:
        path = _write(tmp_path, """\
            [servers.a]
            host = "10.0.0.5"
            database = "/dbs/fdb/bell.fdb"
            user = "SYSDBA"
            password = "masterkey"
            description = "primary"

            [servers.b]
            host = "10.0.0.6"
            port = 3051
            database = "/dbs/fdb/bell.fdb"
            user = "SYSDBA"
            password = "masterkey"

            [sync]
            source = "a"
            target = "b"
            tables = ["ORDERS"]
            atomic = true
            """)
        config = load_sync_config(path)

        assert isinstance(config, SyncConfig)
        assert config.servers["a"].port == 3050
        assert config.servers["a"].description == "primary"
        assert config.servers["b"].label == "10.0.0.6:3051"
        assert config.sync.tables == ["ORDERS"]
        assert config.sync.atomic is True

    def test_sync_table_optional(self, tmp_path: Path) -> None:
        path = _write(tmp_path, """\
            [servers.a]
            host = "h"
            database = "/x.fdb"
            user = "u"
            """)
        config = load_sync_config(path)
        assert config.sync.source == "a"
        assert config.sync.target == "b"
        assert config.sync.tables == []
        assert config.sync.atomic is False

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Sync config not found"):
            load_sync_config(tmp_path / "nope.toml")

    def test_default_path_is_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write(tmp_path, """\
            [servers.a]
            host = "h"
            database = "/x.fdb"
            user = "u"
            """)
        monkeypatch.chdir(tmp_path)
        assert "a" in load_sync_config().servers

    def test_invalid_profile(self, tmp_path: Path) -> None:
        path = _write(tmp_path, """\
            [servers.a]
            host = "h"
            """)
        with pytest.raises(ConfigError, match="Invalid server profile 'a'"):
            load_sync_config(path)

    def test_invalid_sync_table(self, tmp_path: Path) -> None:
        path = _write(tmp_path, """\
            [servers.a]
            host = "h"
            database = "/d.fdb"
            user = "u"

            [sync]
            tables = "ORDERS"
            """)
        with pytest.raises(ConfigError, match=r"Invalid \[sync\] table"):
            load_sync_config(path)


class TestServerFromEnv:

    def test_reads_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FIREBIRD_A_HOST", "fb-a")
        monkeypatch.setenv("FIREBIRD_A_PORT", "3055")
        monkeypatch.setenv("FIREBIRD_A_DATABASE", "/data/a.fdb")
        monkeypatch.setenv("FIREBIRD_A_USER", "SYSDBA")
        monkeypatch.setenv("FIREBIRD_A_PASSWORD", "secret")

        config = server_from_env("a")
        assert config == ServerConfig(
            host="fb-a", port=3055, database="/data/a.fdb", user="SYSDBA", password="secret"
        )

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FIREBIRD_B_HOST", "fb-b")
        config = server_from_env("b")
        assert config.port == 3050
        assert config.database == DEFAULT_DATABASE
        assert config.user == ""

    def test_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_FIREBIRD_REPLICA_HOST", "replica")
        assert server_from_env("replica", env_prefix="APP_").host == "replica"
        with pytest.raises(ConfigError):
            server_from_env("replica")

    def test_missing_host(self) -> None:
        with pytest.raises(ConfigError, match="FIREBIRD_A_HOST"):
            server_from_env("a")

    def test_bad_port(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FIREBIRD_A_HOST", "fb-a")
        monkeypatch.setenv("FIREBIRD_A_PORT", "abc")
        with pytest.raises(ConfigError, match="must be an integer"):
            server_from_env("a")


class TestResolveServer:

    def test_profile_wins_over_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FIREBIRD_A_HOST", "from-env")
        config = SyncConfig(
            servers={"a": ServerConfig(host="from-toml", database="/x.fdb", user="u")}
        )
        assert resolve_server("a", config).host == "from-toml"

    def test_falls_back_to_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FIREBIRD_B_HOST", "from-env")
        assert resolve_server("b", SyncConfig()).host == "from-env"
        assert resolve_server("b", None).host == "from-env"


class TestServerConfig:

    def test_frozen(self) -> None:
        config = ServerConfig(host="h", database="/x.fdb", user="u")
        with pytest.raises(ValidationError):
            config.host = "other"

    def test_password_not_in_repr(self) -> None:
        config = ServerConfig(host="h", database="/x.fdb", user="u", password="hunter2")
        assert "hunter2" not in repr(config)

    def test_identity_ignores_host_case(self) -> None:
        a = ServerConfig(host="DB1", database="/x.fdb", user="u")
        b = ServerConfig(host="db1", database="/x.fdb", user="other")
        assert a.identity == b.identity
