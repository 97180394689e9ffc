"""Configuration management: server profiles, TOML loading, and config models.

Usage:
    >>> from fb_sync.config import load_sync_config, resolve_server, ServerConfig
"""

from fb_sync.config.loader import load_sync_config, resolve_server, server_from_env
from fb_sync.config.models import ServerConfig, SyncConfig, SyncSettings

__all__ = [
    "load_sync_config",
    "resolve_server",
    "server_from_env",
    "ServerConfig",
    "SyncConfig",
    "SyncSettings",
]
