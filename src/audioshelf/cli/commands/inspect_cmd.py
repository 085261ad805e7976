# ABOUTME: The `audioshelf inspect` command for viewing an audio file's tags.
# ABOUTME: Shows the title, duration, and raw tags a chapter would be hydrated with.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from audioshelf.cli.session import format_duration
from audioshelf.formats.audio import AudioReadError, probe_duration, read_audio_tags

console = Console()


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def inspect(path: Path) -> None:
    """Show tags and duration read from an audio file."""
    try:
        tags = read_audio_tags(path)
        seconds = probe_duration(path)
    except AudioReadError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc

    table = Table(title=str(path.name), show_header=False, pad_edge=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Title", tags.title or f"[dim]{path.name}[/dim]")
    table.add_row("Artist", tags.artist or "[dim]unknown[/dim]")
    table.add_row("Album", tags.album or "[dim]unknown[/dim]")
    table.add_row("Track", tags.track or "[dim]none[/dim]")
    table.add_row("Duration", format_duration(seconds))
    for key, value in sorted(tags.raw.items()):
        table.add_row(f"[dim]{key}[/dim]", value)

    console.print(table)
