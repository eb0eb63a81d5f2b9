"""
CLI for cachecore.

Commands:
    cachecore config - Show current configuration
    cachecore decode-key RAW - Show the plain key and tags of a tagged key
    cachecore version - Print version
"""

from __future__ import annotations

from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from cachecore import __version__
from cachecore.cache.item import CacheItem
from cachecore.config import Settings, clear_settings_cache, get_settings
from cachecore.exceptions import CacheError
from cachecore.logging import setup_logging

app = typer.Typer(
    name="cachecore",
    help="cachecore - cache items with lazy hydration, expiration and tags",
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)


def _get_settings_safe() -> Settings | None:
    """Get settings, returning None if configuration is invalid."""
    try:
        clear_settings_cache()
        return get_settings()
    except ValidationError:
        return None


@app.callback()
def _configure() -> None:
    """Apply logging settings before any command runs."""
    settings = _get_settings_safe()
    if settings is not None:
        setup_logging(log_level=settings.LOG_LEVEL, log_file=settings.LOG_FILE)


@app.command()
def config() -> None:
    """Show current configuration."""
    settings = _get_settings_safe()

    if settings is None:
        error_console.print("[red]Configuration is invalid.[/red]")
        error_console.print("Check the CACHECORE_* environment variables or your .env file.")
        raise typer.Exit(1)

    table = Table(title="Settings", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key, value in settings.redacted_display().items():
        display_value = str(value) if value is not None else "[dim]not set[/dim]"
        table.add_row(key, display_value)

    console.print(table)


@app.command("decode-key")
def decode_key(
    raw: Annotated[str, typer.Argument(help="Raw key, e.g. 'user:1(users,admins)'")],
) -> None:
    """Show the plain key and tags encoded in a raw key."""
    try:
        item = CacheItem(raw)
    except CacheError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[bold]Key:[/bold] {item.get_key()}")
    tags = item.get_tags()
    console.print(f"[bold]Tags:[/bold] {', '.join(tags) if tags else '[dim]none[/dim]'}")


@app.command()
def version() -> None:
    """Print the version number."""
    console.print(f"cachecore version {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
