"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from melody_fetcher.models.config import FetcherConfig
from melody_fetcher.models.track import SearchResult, TrackMetadata
from melody_fetcher.utils.formatting import format_duration, format_flag, format_text


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "ConfigurationError": [
            "• Check the values in your configuration file.",
            "• Run `melody-fetcher init --force` to write a fresh one.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -v for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(Text("\n".join(suggestions)))

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config: FetcherConfig):
    """Displays the effective configuration."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("Sources:", ", ".join(config.sources))
    table.add_row("Resolver:", f"[dim]{config.resolver_path}[/dim]")
    table.add_row("Scratch Dir:", f"[dim]{config.scratch_dir}[/dim]")
    table.add_row(
        "Media Tagging:", "✓ Enabled" if config.allow_media_tag else "✗ Disabled"
    )
    table.add_row(
        "Reuse Artifacts:", "✓ Enabled" if config.reuse_artifacts else "✗ Disabled"
    )
    table.add_row("Max Connections:", str(config.max_connections))

    console.print(
        Panel(
            table,
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_track_metadata(meta: TrackMetadata):
    """Displays the metadata of a single track."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("Title:", escape(meta.song_name or "-"))
    table.add_row("Artist:", escape(meta.artist or "-"))
    table.add_row("Album:", escape(meta.album or "-"))
    table.add_row("Duration:", format_duration(meta.duration))
    table.add_row("Released:", escape(format_text(meta.public_time)))
    table.add_row("Source:", escape(meta.source or "-"))
    table.add_row("Platform:", escape(format_text(meta.from_music_platform)))
    table.add_row("Resource Type:", escape(format_text(meta.resource_type)))
    table.add_row("Trial:", format_flag(meta.is_trial))
    table.add_row("Forbidden:", format_flag(meta.resource_forbidden))
    audio_count = len(meta.audios) if isinstance(meta.audios, list) else 0
    table.add_row("Audio Variants:", str(audio_count))
    if meta.cover_url:
        table.add_row("Cover:", f"[dim]{escape(str(meta.cover_url))}[/dim]")

    console.print(Panel(table, title="[bold green]Track[/bold green]", expand=False))


def print_search_results(results: list[SearchResult]):
    """Displays search hits in the resolver's ranking order."""
    console = Console()
    if not results:
        console.print("[yellow]No results.[/yellow]")
        return

    table = Table(title=f"{len(results)} results")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Artist")
    table.add_column("Album")
    table.add_column("Duration", justify="right")
    table.add_column("Source", style="magenta")
    table.add_column("Score", justify="right", style="green")
    table.add_column("URL", style="dim", overflow="fold")

    for i, item in enumerate(results, 1):
        title = escape(item.song_name or "-")
        if item.resource_forbidden:
            title = f"[strike]{title}[/strike]"
        table.add_row(
            str(i),
            title,
            escape(item.artist or "-"),
            escape(item.album or "-"),
            format_duration(item.duration),
            item.source or "-",
            format_text(item.score),
            item.url or "-",
        )
    console.print(table)
