"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler

from melody_fetcher import __version__
from melody_fetcher.core.fetcher import MediaFetcher
from melody_fetcher.exceptions import MelodyFetcherError
from melody_fetcher.media.downloader import close_connection_pool
from melody_fetcher.storage.config_manager import ConfigManager

from .formatters import print_config, print_search_results, print_track_metadata

console = Console()

logging.basicConfig(
    level="WARNING",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("melody_fetcher")

app = typer.Typer(
    name="melody-fetcher",
    help=(
        "Search, inspect and download tracks through media-get. Use"
        " 'melody-fetcher <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "melody-fetcher"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


def _run_with_fetcher(operation) -> Any:
    """
    Builds a MediaFetcher from the current configuration, awaits
    `operation(fetcher)` and closes the shared download pool afterwards.
    """
    config_manager = ConfigManager(CONFIG_FILE)

    async def _run():
        try:
            config = config_manager.get_global_config()
            fetcher = MediaFetcher.from_config(config, config_manager)
            return await operation(fetcher)
        finally:
            await close_connection_pool()

    try:
        return asyncio.run(_run())
    except MelodyFetcherError as e:
        log.debug("Full traceback:", exc_info=True)
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1) from e


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-v for info, -vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
):
    """melody-fetcher CLI"""
    if version:
        console.print(f"[bold]melody-fetcher[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "WARNING"
    if verbose == 1:
        log_level = "INFO"
    elif verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("melody_fetcher").setLevel(log_level)

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    sources: str | None = typer.Option(
        None,
        "--sources",
        help="Comma-separated platform identifiers to search.",
    ),
    resolver_path: str | None = typer.Option(
        None, "--resolver", help="Path or command name of the media-get binary."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration."
    ),
):
    """Write a configuration file with default values."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    settings: dict[str, Any] = {}
    if sources:
        settings["sources"] = [s.strip() for s in sources.split(",") if s.strip()]
    if resolver_path:
        settings["resolver_path"] = resolver_path

    try:
        ConfigManager(CONFIG_FILE).save_new_config(settings)
    except MelodyFetcherError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print(f"\n[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]")


@app.command(name="show-config")
def show_config():
    """Display the effective configuration."""
    try:
        config = ConfigManager(CONFIG_FILE).get_global_config()
    except MelodyFetcherError as e:
        console.print(f"[red]✗ Configuration is invalid: {e}[/red]")
        raise typer.Exit(code=1) from e
    if not CONFIG_FILE.is_file():
        console.print("[dim]No configuration file found, showing defaults.[/dim]")
    print_config(CONFIG_FILE, config)


@app.command()
def download(url: str = typer.Argument(..., help="A direct link to an audio file.")):
    """Download a URL as-is into the scratch directory."""
    path = _run_with_fetcher(lambda f: f.download_via_source_url(url))
    if path is None:
        console.print("[red]✗ Download failed.[/red] Run with -v for details.")
        raise typer.Exit(code=1)
    console.print(f"[green]✓[/green] {path}")


@app.command()
def fetch(
    url: str = typer.Argument(..., help="A track page URL media-get understands."),
    name: str = typer.Option("", "--name", "-n", help="File name for the track."),
    tag: bool = typer.Option(
        False, "--tag", help="Ask media-get to embed tags (if enabled in config)."
    ),
):
    """Let media-get locate and download the audio behind a URL."""
    path = _run_with_fetcher(
        lambda f: f.fetch_with_url(url, song_name=name, add_media_tag=tag)
    )
    if path is None:
        console.print("[red]✗ Fetch failed.[/red] Run with -v for details.")
        raise typer.Exit(code=1)
    console.print(f"[green]✓[/green] {path}")


@app.command()
def meta(url: str = typer.Argument(..., help="A track page URL.")):
    """Show the metadata media-get reports for a URL."""
    track = _run_with_fetcher(lambda f: f.get_meta_with_url(url))
    if track is None:
        console.print("[red]✗ Could not read metadata.[/red] Run with -v for details.")
        raise typer.Exit(code=1)
    print_track_metadata(track)


@app.command()
def search(
    keyword: str | None = typer.Argument(None, help="Free-text search keyword."),
    song: str | None = typer.Option(None, "--song", help="Song name to match."),
    artist: str | None = typer.Option(None, "--artist", help="Artist to match."),
    album: str | None = typer.Option(None, "--album", help="Album to match."),
):
    """Search all enabled platforms by keyword or by song/artist/album."""
    if not keyword and not (song or artist or album):
        console.print(
            "[red]✗ Nothing to search for.[/red] "
            "Give a keyword or at least one of --song/--artist/--album."
        )
        raise typer.Exit(code=1)

    results = _run_with_fetcher(
        lambda f: f.search_song_from_all_platforms(
            keyword=keyword, song_name=song, artist=artist, album=album
        )
    )
    if results is None:
        console.print("[red]✗ Search failed.[/red] Run with -v for details.")
        raise typer.Exit(code=1)
    print_search_results(results)
