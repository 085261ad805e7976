# ABOUTME: Shared Click options for audioshelf CLI commands.
# ABOUTME: Provides reusable decorators for common flags like --db.

from pathlib import Path

import click

from audioshelf.db.connection import DEFAULT_DB_PATH

db_option = click.option(
    "--db",
    "db_path",
    type=click.Path(path_type=Path),
    envvar="AUDIOSHELF_DB",
    default=None,
    help=f"Path to library database (default: {DEFAULT_DB_PATH}, env: AUDIOSHELF_DB)",
)

book_index_argument = click.argument("book_index", type=int)
