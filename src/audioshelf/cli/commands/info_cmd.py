# ABOUTME: The `audioshelf info` command for showing a book's chapters.
# ABOUTME: Lists chapter titles, durations, and the current chapter for one book.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from audioshelf.cli.options import book_index_argument, db_option
from audioshelf.cli.session import HYDRATION_TIMEOUT, format_duration, open_store, run_session
from audioshelf.core.library import Book

console = Console()


async def _load(db_path: Path | None, book_index: int) -> Book | None:
    async with open_store(db_path) as store:
        if not 0 <= book_index < len(store.books):
            return None
        await store.wait_until_hydrated(HYDRATION_TIMEOUT)
        return store.books[book_index]


@click.command("info")
@book_index_argument
@db_option
def info(book_index: int, db_path: Path | None) -> None:
    """Show the chapters of a book by its index."""
    book = run_session(_load(db_path, book_index))

    if book is None:
        console.print(f"[red]Book {book_index} not found.[/red]")
        raise SystemExit(1)

    table = Table(title=book.title)
    table.add_column("#", style="dim", width=4)
    table.add_column("", width=2)
    table.add_column("Chapter")
    table.add_column("Duration", justify="right")
    table.add_column("File", style="dim")

    for i, chapter in enumerate(book.chapters):
        table.add_row(
            str(i),
            "->" if chapter is book.current_chapter else "",
            chapter.title if chapter.ready else f"[red]{chapter.title}[/red]",
            format_duration(chapter.duration),
            chapter.file.name if chapter.file is not None else "[dim]missing[/dim]",
        )

    console.print(table)
    position = format_duration(book.current_chapter_time)
    console.print(f"\n[dim]Position: chapter {book.current_chapter_index} at {position}[/dim]")
    if book.ready:
        console.print(f"[dim]Total duration: {format_duration(book.total_duration)}[/dim]")
