"""Configuration loading: fbsync.toml profiles and environment variables.

Server settings come from two places:

1. ``fbsync.toml`` in the working directory (or an explicit path), with one
   ``[servers.<name>]`` table per server and an optional ``[sync]`` table.
2. Environment variables ``{prefix}FIREBIRD_{NAME}_HOST``, ``_PORT``,
   ``_DATABASE``, ``_USER`` and ``_PASSWORD``.

TOML profiles take precedence over environment variables.
"""

import os
import tomllib
from pathlib import Path

from fb_sync.config.models import ServerConfig, SyncConfig, SyncSettings
from fb_sync.errors import ConfigError

DEFAULT_CONFIG_FILE = "fbsync.toml"
DEFAULT_PORT = 3050
DEFAULT_DATABASE = "/dbs/fdb/bell.fdb"


def load_sync_config(config_path: Path | None = None) -> SyncConfig:
    """Load server profiles and sync defaults from a TOML file.

    Args:
        config_path: Path to the TOML file (default: ``./fbsync.toml``).

    Returns:
        SyncConfig with all server profiles.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ConfigError: If a server profile or the [sync] table is malformed.
    """
    if config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_FILE

    if not config_path.exists():
        raise FileNotFoundError(
            f"Sync config not found: {config_path}\n"
            f"Create {DEFAULT_CONFIG_FILE} with [servers.a] and [servers.b] tables."
        )

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    servers = {}
    for name, server_data in data.get("servers", {}).items():
        try:
            servers[name] = ServerConfig(**server_data)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid server profile '{name}': {e}") from e

    try:
        sync = SyncSettings(**data.get("sync", {}))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid [sync] table: {e}") from e

    return SyncConfig(servers=servers, sync=sync)


def server_from_env(name: str, env_prefix: str = "") -> ServerConfig:
    """Build a ServerConfig from ``{prefix}FIREBIRD_{NAME}_*`` variables.

    Args:
        name: Server name (e.g. ``"a"`` reads ``FIREBIRD_A_HOST``).
        env_prefix: Prefix for environment variable lookup.

    Raises:
        ConfigError: If the host variable is unset or the port is not a number.
    """
    base = f"{env_prefix}FIREBIRD_{name.upper()}_"
    host = os.environ.get(f"{base}HOST", "")
    if not host:
        raise ConfigError(
            f"Server '{name}' is not configured: set {base}HOST "
            f"or add [servers.{name}] to {DEFAULT_CONFIG_FILE}"
        )

    raw_port = os.environ.get(f"{base}PORT", str(DEFAULT_PORT))
    try:
        port = int(raw_port)
    except ValueError as e:
        raise ConfigError(f"{base}PORT must be an integer, got '{raw_port}'") from e

    return ServerConfig(
        host=host,
        port=port,
        database=os.environ.get(f"{base}DATABASE", DEFAULT_DATABASE),
        user=os.environ.get(f"{base}USER", ""),
        password=os.environ.get(f"{base}PASSWORD", ""),
    )


def resolve_server(
    name: str,
    config: SyncConfig | None = None,
    env_prefix: str = "",
) -> ServerConfig:
    """Resolve a server by name: TOML profile first, then environment.

    Args:
        name: Server name.
        config: Loaded configuration, or ``None`` to use the environment only.
        env_prefix: Prefix for environment variable lookup.

    Raises:
        ConfigError: If the server is in neither source.
    """
    if config is not None and name in config.servers:
        return config.servers[name]
    return server_from_env(name, env_prefix=env_prefix)
