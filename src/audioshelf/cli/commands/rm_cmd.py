# ABOUTME: The `audioshelf rm` and `audioshelf clear` commands for removing books.
# ABOUTME: Removing a book keeps the current selection pointing at a valid book.

from pathlib import Path

import click
from rich.console import Console

from audioshelf.cli.options import book_index_argument, db_option
from audioshelf.cli.session import open_store, run_session

console = Console()


async def _remove(db_path: Path | None, book_index: int) -> str | None:
    async with open_store(db_path) as store:
        book = store.remove_book(book_index)
        return book.title if book is not None else None


async def _clear(db_path: Path | None) -> int:
    async with open_store(db_path) as store:
        count = len(store.books)
        store.clear()
        return count


@click.command("rm")
@book_index_argument
@db_option
def rm(book_index: int, db_path: Path | None) -> None:
    """Remove the book at BOOK_INDEX from the library."""
    title = run_session(_remove(db_path, book_index))

    if title is None:
        console.print(f"[red]Book {book_index} not found.[/red]")
        raise SystemExit(1)

    console.print(f"Removed [bold]{title}[/bold]")


@click.command("clear")
@db_option
@click.confirmation_option(prompt="Remove every book from the library?")
def clear(db_path: Path | None) -> None:
    """Remove every book from the library."""
    count = run_session(_clear(db_path))
    console.print(f"Removed {count} book(s)")
