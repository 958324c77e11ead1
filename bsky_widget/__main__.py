"""Entry point: python -m bsky_widget."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from bsky_widget.auth.store import SessionStore
from bsky_widget.config import WidgetConfig, load_config, normalize_base_url
from bsky_widget.errors import ConfigError
from bsky_widget.logging_config import setup_logging
from bsky_widget.paths import resolve_paths

logger = logging.getLogger(__name__)

_console = Console()


def _load_config_or_exit() -> WidgetConfig:
    try:
        return load_config()
    except ConfigError as exc:
        _console.print(f"[bold red]{exc}[/bold red]")
        sys.exit(1)


def _serve(verbose: bool) -> None:
    """Configure logging and run the widget server until interrupted."""
    from bsky_widget.app import run_server

    config = _load_config_or_exit()
    paths = resolve_paths(config)
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    setup_logging(level=level, verbose=verbose, log_dir=paths.logs_dir)
    if not config.bluesky.identifier or not config.bluesky.password:
        logger.warning("BLUESKY_USERNAME/BLUESKY_PASSWORD not set; only a saved session can be used")
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(run_server(config))
    logger.info("Shutting down")


def _cmd_status() -> None:
    """Show configuration and persisted session state."""
    config = _load_config_or_exit()
    paths = resolve_paths(config)
    session = SessionStore(paths.session_path).load()

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold", min_width=16)
    table.add_column()
    table.add_row("API", normalize_base_url(config.bluesky.base_url))
    has_creds = bool(config.bluesky.identifier and config.bluesky.password)
    table.add_row(
        "Credentials",
        f"[green]{config.bluesky.identifier}[/green]" if has_creds else "[yellow]not set[/yellow]",
    )
    table.add_row("Listen", f"{config.server.host}:{config.server.port}")
    table.add_row("Session file", str(paths.session_path))
    table.add_row(
        "Session",
        f"[green]saved[/green] did={session.did}" if session else "[dim]none[/dim]",
    )
    table.add_row("Logs", str(paths.logs_dir))

    _console.print()
    _console.print(Panel(table, title="[bold]Status[/bold]", border_style="blue", padding=(1, 1)))
    _console.print()


def _cmd_logout() -> None:
    """Forget the persisted session; the next request logs in again."""
    config = _load_config_or_exit()
    store = SessionStore(resolve_paths(config).session_path)
    if store.clear():
        _console.print("[green]Saved session removed.[/green]")
    else:
        _console.print("[dim]No saved session.[/dim]")


def _print_usage() -> None:
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold green", min_width=22)
    table.add_column()
    table.add_row("bsky-widget", "Start the widget server")
    table.add_row("bsky-widget status", "Show config and saved session")
    table.add_row("bsky-widget logout", "Delete the saved session")
    table.add_row("bsky-widget help", "Show this message")
    table.add_row("-v, --verbose", "Verbose logging output")
    _console.print()
    _console.print(
        Panel(table, title="[bold]Commands[/bold]", border_style="blue", padding=(1, 0)),
    )
    _console.print()


_COMMANDS: dict[str, str] = {
    "serve": "serve",
    "status": "status",
    "logout": "logout",
    "help": "help",
}


def main() -> None:
    """CLI entry point."""
    args = sys.argv[1:]
    commands = [a for a in args if not a.startswith("-")]
    verbose = "--verbose" in args or "-v" in args
    if "--help" in args or "-h" in args:
        commands.insert(0, "help")

    action = next((_COMMANDS[c] for c in commands if c in _COMMANDS), "serve")
    if action == "serve" and any(c not in _COMMANDS for c in commands):
        action = "help"

    dispatch: dict[str, object] = {
        "serve": lambda: _serve(verbose),
        "status": _cmd_status,
        "logout": _cmd_logout,
        "help": _print_usage,
    }
    dispatch[action]()  # type: ignore[operator]


if __name__ == "__main__":
    main()
