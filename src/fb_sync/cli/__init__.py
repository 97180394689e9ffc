"""CLI for server status, schema listing, and table sync.

Usage:
    fb-sync profiles
    fb-sync status
    fb-sync status --a primary --b replica
    fb-sync tables a
    fb-sync sync --tables ORDERS,CUSTOMERS
    fb-sync sync --from a --to b --confirm
    fb-sync sync --confirm --atomic --json

Commands:
    profiles  - List configured servers
    status    - Check both servers concurrently
    tables    - List tables and columns of one server
    sync      - Replace target tables with source contents

Servers are looked up in fbsync.toml (``--config``) first, then in
``FIREBIRD_<NAME>_*`` environment variables (``--env-prefix`` prepends a
prefix to those names).
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from fb_sync.config.loader import DEFAULT_CONFIG_FILE, load_sync_config, resolve_server
from fb_sync.config.models import SyncConfig
from fb_sync.errors import ConfigError
from fb_sync.schema.introspector import list_tables
from fb_sync.schema.models import ServerStatus
from fb_sync.schema.sync import sync_data
from fb_sync.status import check_servers

console = Console()
# Plan and progress lines go here when stdout carries JSON
err_console = Console(stderr=True)


# ============================================================================
# Helpers
# ============================================================================


def _setup_logging(verbose: bool) -> None:
    """Route log records through rich; DEBUG with --verbose, else INFO."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def _load_config(args: argparse.Namespace) -> SyncConfig | None:
    """Load fbsync.toml if one is given or present; ``None`` means env only.

    Raises:
        FileNotFoundError: If an explicit ``--config`` path does not exist.
    """
    config_path = getattr(args, "config", None)
    if config_path:
        return load_sync_config(Path(config_path))

    default_path = Path.cwd() / DEFAULT_CONFIG_FILE
    if default_path.exists():
        return load_sync_config(default_path)
    return None


def _status_row(table: Table, name: str, status: ServerStatus) -> None:
    state = "[green]ONLINE[/green]" if status.online else "[red]OFFLINE[/red]"
    table.add_row(
        name,
        status.host,
        state,
        f"{status.response_time} ms",
        status.error or "",
    )


# ============================================================================
# Async command implementations
# ============================================================================


async def _async_status(args: argparse.Namespace) -> int:
    """Async implementation for status command.

    Returns:
        0 when both servers are online, 1 otherwise.
    """
    try:
        config = _load_config(args)
        server_a = resolve_server(args.server_a, config, env_prefix=args.env_prefix)
        server_b = resolve_server(args.server_b, config, env_prefix=args.env_prefix)
    except (FileNotFoundError, ConfigError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    console.print("Checking servers...", style="dim")
    response = await check_servers(server_a, server_b)

    table = Table(title="Server Status", show_header=True, header_style="bold")
    table.add_column("Server", style="dim")
    table.add_column("Host")
    table.add_column("State")
    table.add_column("Response", justify="right")
    table.add_column("Error")

    _status_row(table, args.server_a, response.server_a)
    _status_row(table, args.server_b, response.server_b)
    console.print(table)

    return 0 if response.all_online else 1


# ============================================================================
# Command wrappers
# ============================================================================


def cmd_profiles(args: argparse.Namespace) -> int:
    """List configured servers from fbsync.toml.

    Reads only local TOML config -- no database calls.

    Returns:
        0 on success, 1 if no config file is found.
    """
    try:
        config = _load_config(args)
    except (FileNotFoundError, ConfigError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    if config is None:
        console.print(f"[yellow]No {DEFAULT_CONFIG_FILE} found.[/yellow]")
        console.print(
            "[dim]Servers can also be set via[/dim] "
            "[cyan]FIREBIRD_<NAME>_HOST[/cyan] [dim]etc.[/dim]"
        )
        return 1

    table = Table(title="Servers", show_header=True, header_style="bold")
    table.add_column("", width=2)
    table.add_column("Name")
    table.add_column("Host")
    table.add_column("Database")
    table.add_column("Description")

    for name, server in config.servers.items():
        if name == config.sync.source:
            marker = "[bold green]S[/bold green]"
        elif name == config.sync.target:
            marker = "[bold cyan]T[/bold cyan]"
        else:
            marker = " "
        table.add_row(marker, name, server.label, server.database, server.description)

    console.print(table)
    console.print("\n[bold green]S[/bold green] = sync source, [bold cyan]T[/bold cyan] = sync target")
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    """Check both servers concurrently.

    Wraps the async implementation with ``asyncio.run()``.
    """
    return asyncio.run(_async_status(args))


def cmd_tables(args: argparse.Namespace) -> int:
    """List tables and columns of one server.

    Returns:
        0 on success, 1 on failure.
    """
    try:
        config = _load_config(args)
        server = resolve_server(args.server, config, env_prefix=args.env_prefix)
    except (FileNotFoundError, ConfigError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    result = list_tables(server)

    if args.json:
        console.print_json(json.dumps(result.to_dict()))
        return 0 if result.success else 1

    if not result.success:
        console.print(f"[bold red]x[/bold red] {result.error}")
        return 1

    console.print(
        f"[bold cyan]{server.label}[/bold cyan] [dim]{server.database}[/dim] "
        f"- {len(result.tables)} tables"
    )
    for info in result.tables:
        table = Table(title=info.name, show_header=True, header_style="bold")
        table.add_column("Column")
        table.add_column("Type")
        table.add_column("Nullable")
        for column in info.columns:
            table.add_row(column.name, column.type, "yes" if column.nullable else "no")
        console.print(table)
    return 0


def cmd_sync(args: argparse.Namespace) -> int:
    """Replace target tables with the source's contents.

    Without ``--confirm`` only the plan is shown.

    Returns:
        0 on success, 1 on failure.
    """
    try:
        config = _load_config(args)
    except (FileNotFoundError, ConfigError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    settings = config.sync if config is not None else None
    source_name = args.source or (settings.source if settings else "a")
    target_name = args.target or (settings.target if settings else "b")

    if source_name == target_name:
        console.print(
            f"[red]Error: Source and target are the same server: {source_name}[/red]"
        )
        return 1

    try:
        source = resolve_server(source_name, config, env_prefix=args.env_prefix)
        target = resolve_server(target_name, config, env_prefix=args.env_prefix)
    except ConfigError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    if args.tables:
        tables = [t.strip() for t in args.tables.split(",") if t.strip()]
    else:
        tables = list(settings.tables) if settings else []
    atomic = args.atomic or (settings.atomic if settings else False)

    out = err_console if args.json else console
    out.print(f"  Source: [bold]{source_name}[/bold] [dim]{source.label}[/dim]")
    out.print(f"  Target: [bold cyan]{target_name}[/bold cyan] [dim]{target.label}[/dim]")
    out.print(
        f"  Tables: [dim]{', '.join(tables) if tables else 'all user tables'}[/dim]"
    )
    out.print(f"  Mode: [dim]{'one transaction per table' if atomic else 'per statement'}[/dim]")

    if not args.confirm:
        out.print()
        out.print(
            "[dim]Target tables are cleared before reload. To sync, add[/dim] "
            "[cyan]--confirm[/cyan] [dim]flag.[/dim]"
        )
        return 0

    out.print()
    out.print("Syncing data...", style="dim")
    response = sync_data(source, target, tables, atomic=atomic)

    if args.json:
        console.print_json(json.dumps(response.to_dict()))
        return 0 if response.success else 1

    if response.results:
        table = Table(title="Sync Results", show_header=True, header_style="bold")
        table.add_column("Table", style="dim")
        table.add_column("Records", justify="right")
        table.add_column("Result")
        for result in response.results:
            outcome = "[green]OK[/green]" if result.success else f"[red]{result.error}[/red]"
            table.add_row(result.table_name, str(result.records_synced), outcome)
        console.print(table)

    if response.success:
        console.print(f"[bold green]v[/bold green] {response.message}.")
        return 0
    console.print(f"[bold red]x[/bold red] {response.message}")
    return 1


# ============================================================================
# Main entry point
# ============================================================================


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Parses command line arguments and dispatches to appropriate handler.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        prog="fb-sync",
        description="Firebird server status, schema listing, and table sync",
    )

    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to config file (default: ./{DEFAULT_CONFIG_FILE} if present)",
    )
    parser.add_argument(
        "--env-prefix",
        default="",
        help=(
            "Prefix for environment variable lookup "
            "(e.g., --env-prefix APP_ reads APP_FIREBIRD_A_HOST)"
        ),
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # profiles command
    p_profiles = subparsers.add_parser(
        "profiles",
        help="List configured servers",
    )
    p_profiles.set_defaults(func=cmd_profiles)

    # status command
    p_status = subparsers.add_parser(
        "status",
        help="Check both servers concurrently",
    )
    p_status.add_argument("--a", dest="server_a", default="a", help="First server (default: a)")
    p_status.add_argument("--b", dest="server_b", default="b", help="Second server (default: b)")
    p_status.set_defaults(func=cmd_status)

    # tables command
    p_tables = subparsers.add_parser(
        "tables",
        help="List tables and columns of one server",
    )
    p_tables.add_argument("server", help="Server name")
    p_tables.add_argument("--json", action="store_true", help="Print the raw result as JSON")
    p_tables.set_defaults(func=cmd_tables)

    # sync command
    p_sync = subparsers.add_parser(
        "sync",
        help="Replace target tables with source contents",
    )
    p_sync.add_argument(
        "--from",
        "-f",
        dest="source",
        default=None,
        help="Source server (default: [sync].source or 'a')",
    )
    p_sync.add_argument(
        "--to",
        "-t",
        dest="target",
        default=None,
        help="Target server (default: [sync].target or 'b')",
    )
    p_sync.add_argument(
        "--tables",
        default=None,
        help="Comma-separated list of tables (default: every user table on source)",
    )
    p_sync.add_argument(
        "--atomic",
        action="store_true",
        help="Roll back a table's changes if any of its rows fails",
    )
    p_sync.add_argument(
        "--confirm",
        action="store_true",
        help="Actually perform the sync",
    )
    p_sync.add_argument("--json", action="store_true", help="Print the raw result as JSON")
    p_sync.set_defaults(func=cmd_sync)

    args = parser.parse_args(argv)
    _setup_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
