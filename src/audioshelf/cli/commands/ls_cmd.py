# ABOUTME: The `audioshelf ls` command for listing books in the library.
# ABOUTME: Displays a Rich table with readiness and total duration per book.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from audioshelf.cli.options import db_option
from audioshelf.cli.session import HYDRATION_TIMEOUT, format_duration, open_store, run_session

console = Console()


async def _rows(db_path: Path | None) -> list[tuple[str, ...]]:
    async with open_store(db_path) as store:
        await store.wait_until_hydrated(HYDRATION_TIMEOUT)
        rows = []
        for i, book in enumerate(store.books):
            rows.append((
                str(i),
                "->" if i == store.current_book_index else "",
                book.title,
                str(len(book.chapters)),
                "yes" if book.ready else "[red]no[/red]",
                format_duration(book.total_duration) if book.ready else "?",
            ))
        return rows


@click.command("ls")
@db_option
def ls(db_path: Path | None) -> None:
    """List all books in the library."""
    rows = run_session(_rows(db_path))

    if not rows:
        console.print("[yellow]No books in the library.[/yellow]")
        return

    table = Table()
    table.add_column("#", style="dim", width=4)
    table.add_column("", width=2)
    table.add_column("Title", style="bold")
    table.add_column("Chapters", justify="right")
    table.add_column("Ready")
    table.add_column("Duration", justify="right")

    for row in rows:
        table.add_row(*row)

    console.print(table)
    console.print(f"\n[dim]{len(rows)} book(s)[/dim]")
