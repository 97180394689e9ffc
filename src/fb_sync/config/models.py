"""Pydantic models for server and sync configuration."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ============================================================================
# Configuration Models
# ============================================================================


class ServerConfig(BaseModel):
    """Connection settings for one Firebird server.

    Treated as opaque credentials: the engine never validates or stores them.

    Example:
        >>> config = ServerConfig(host="10.0.0.5", database="/dbs/fdb/bell.fdb",
        ...                       user="SYSDBA", password="masterkey")
        >>> config.port
        3050
        >>> config.label
        '10.0.0.5:3050'
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    host: str
    port: int = 3050
    database: str
    user: str
    password: str = Field(default="", repr=False)
    description: str = ""

    @property
    def label(self) -> str:
        """Host label used in status reports and log lines."""
        return f"{self.host}:{self.port}"

    @property
    def identity(self) -> tuple[str, int, str]:
        """Key identifying the physical database (host, port, path)."""
        return (self.host.lower(), self.port, self.database)


class SyncSettings(BaseModel):
    """Defaults for the ``sync`` command from the ``[sync]`` TOML table."""

    source: str = "a"
    target: str = "b"
    tables: list[str] = Field(default_factory=list)
    atomic: bool = False


class SyncConfig(BaseModel):
    """Complete configuration from fbsync.toml."""

    servers: dict[str, ServerConfig] = Field(default_factory=dict)
    sync: SyncSettings = Field(default_factory=SyncSettings)
