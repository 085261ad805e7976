# ABOUTME: The `audioshelf rate` command for showing or changing the playback rate.
# ABOUTME: Sets an absolute rate or adjusts the current one by a delta.

from pathlib import Path

import click
from rich.console import Console

from audioshelf.cli.options import db_option
from audioshelf.cli.session import open_store, run_session

console = Console()


async def _rate(db_path: Path | None, value: float | None, adjust: float | None) -> float:
    async with open_store(db_path) as store:
        if value is not None:
            store.set_playback_rate(value)
        if adjust is not None:
            store.adjust_playback_rate(adjust)
        return store.playback_rate


@click.command("rate")
@click.argument("value", type=float, required=False)
@db_option
@click.option(
    "-a", "--adjust",
    type=float,
    default=None,
    help="Add DELTA to the current rate (may be negative).",
)
def rate(value: float | None, db_path: Path | None, adjust: float | None) -> None:
    """Show the playback rate, or set it to VALUE."""
    current = run_session(_rate(db_path, value, adjust))
    console.print(f"Playback rate: [bold]{current:g}[/bold]")
