# ABOUTME: The `audioshelf select` command for choosing the current book.
# ABOUTME: Updates the persisted current book index.

from pathlib import Path

import click
from rich.console import Console

from audioshelf.cli.options import book_index_argument, db_option
from audioshelf.cli.session import open_store, run_session

console = Console()


async def _select(db_path: Path | None, book_index: int) -> str | None:
    async with open_store(db_path) as store:
        if not 0 <= book_index < len(store.books):
            return None
        store.set_current_book_index(book_index)
        return store.current_book.title


@click.command("select")
@book_index_argument
@db_option
def select(book_index: int, db_path: Path | None) -> None:
    """Make the book at BOOK_INDEX the current book."""
    title = run_session(_select(db_path, book_index))

    if title is None:
        console.print(f"[red]Book {book_index} not found.[/red]")
        raise SystemExit(1)

    console.print(f"Current book: [bold]{title}[/bold]")
