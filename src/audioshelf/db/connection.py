# ABOUTME: SQLite database connection management for the audioshelf state store.
# ABOUTME: Opens or creates the database, checks its schema version, and configures the connection.

import logging
import sqlite3
from pathlib import Path

from audioshelf.db.schema import SCHEMA_V1, SCHEMA_VERSION
from audioshelf.db.storage import StorageError

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".audioshelf" / "library.db"


def _schema_exists(conn: sqlite3.Connection) -> bool:
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_version'"
    )
    return cursor.fetchone() is not None


def _get_schema_version(conn: sqlite3.Connection) -> int:
    cursor = conn.execute("SELECT MAX(version) FROM schema_version")
    row = cursor.fetchone()
    return row[0] or 0


def open_library(path: Path | None = None) -> sqlite3.Connection:
    """Open or create the audioshelf state database.

    Creates the database file and parent directories if they don't exist and
    applies the schema on first creation. Sets WAL journal mode and the
    sqlite3.Row factory.

    The connection may be used from worker threads (storage calls run via
    asyncio.to_thread); callers must not use it from two threads at once.

    Args:
        path: Path to the database file. Defaults to ~/.audioshelf/library.db.

    Returns:
        A configured sqlite3.Connection.

    Raises:
        StorageError: If the file is not a usable database, or was written
            by a newer audioshelf with a schema this version can't read.
    """
    db_path = path or DEFAULT_DB_PATH
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    try:
        conn.execute("PRAGMA journal_mode=WAL")
        if not _schema_exists(conn):
            logger.info("Creating state database at %s", db_path)
            conn.executescript(SCHEMA_V1)
        version = _get_schema_version(conn)
    except sqlite3.Error as exc:
        conn.close()
        raise StorageError(f"Cannot open {db_path}: {exc}") from exc

    if version > SCHEMA_VERSION:
        conn.close()
        raise StorageError(
            f"{db_path} uses schema version {version}; "
            f"this audioshelf supports up to {SCHEMA_VERSION}"
        )
    return conn
