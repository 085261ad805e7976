# ABOUTME: Opens a LibraryStore over the SQLite state database for one CLI invocation.
# ABOUTME: Runs init() on entry and shutdown() plus connection close on exit.

import asyncio
from collections.abc import AsyncIterator, Coroutine
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, TypeVar

from rich.console import Console

from audioshelf.core.store import LibraryStore
from audioshelf.db.connection import DEFAULT_DB_PATH, open_library
from audioshelf.db.storage import SqliteStorage, StorageError

T = TypeVar("T")

err_console = Console(stderr=True)

# Seconds to wait for chapter hydration before reporting what is known
HYDRATION_TIMEOUT = 30.0


@asynccontextmanager
async def open_store(db_path: Path | None) -> AsyncIterator[LibraryStore]:
    """Yield an initialized store; pending changes are flushed on exit."""
    storage = SqliteStorage(open_library(db_path or DEFAULT_DB_PATH))
    store = LibraryStore(storage)
    try:
        await store.init()
        yield store
    finally:
        await store.shutdown()
        storage.close()


def format_duration(seconds: int | float | None) -> str:
    """Render seconds as H:MM:SS, or '?' when unknown."""
    if seconds is None:
        return "?"
    total = int(seconds)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours}:{minutes:02d}:{secs:02d}"


def run_session(coro: Coroutine[Any, Any, T]) -> T:
    """Run a command's store session, turning storage failures into exit code 1."""
    try:
        return asyncio.run(coro)
    except StorageError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc
