# ABOUTME: The `audioshelf add` command for adding a book from a directory of audio files.
# ABOUTME: Creates the book, waits for chapter hydration, and reports readiness.

from pathlib import Path

import click
from rich.console import Console

from audioshelf.cli.options import db_option
from audioshelf.cli.session import HYDRATION_TIMEOUT, format_duration, open_store, run_session
from audioshelf.core.library import Book
from audioshelf.formats.audio import AudioFile, list_audio_files

console = Console()


async def _add(db_path: Path | None, title: str, files: list[AudioFile]) -> tuple[Book, int, bool]:
    async with open_store(db_path) as store:
        book = store.add_book(title, files)
        finished = await store.wait_until_hydrated(HYDRATION_TIMEOUT)
        return book, len(store.books) - 1, finished


@click.command("add")
@click.argument(
    "directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@db_option
@click.option("-t", "--title", default=None, help="Book title (default: directory name).")
def add(directory: Path, db_path: Path | None, title: str | None) -> None:
    """Add the audio files in DIRECTORY as one book, one chapter per file."""
    files = list_audio_files(directory)

    if not files:
        console.print(f"[yellow]No audio files found in {directory}[/yellow]")
        return

    console.print(f"Found [bold]{len(files)}[/bold] audio file(s)\n")

    book, index, finished = run_session(_add(db_path, title or directory.name, files))

    for chapter in book.chapters:
        if chapter.ready:
            console.print(f"  {chapter.title} [dim]{format_duration(chapter.duration)}[/dim]")
        else:
            console.print(f"  [red]{chapter.file.name}: not readable[/red]")

    ready = sum(1 for chapter in book.chapters if chapter.ready)
    parts = [f"[green]{ready} ready[/green]"]
    if ready < len(book.chapters):
        parts.append(f"[red]{len(book.chapters) - ready} failed[/red]")
    if not finished:
        parts.append("[yellow]timed out waiting for hydration[/yellow]")

    console.print(f"\nAdded [bold]{book.title}[/bold] as book {index}: " + ", ".join(parts))
    if book.ready:
        console.print(f"Total duration: {format_duration(book.total_duration)}")
