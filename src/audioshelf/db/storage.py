# ABOUTME: Durable key-value storage for library snapshots.
# ABOUTME: StorageBackend protocol plus a SQLite implementation that round-trips audio file handles.

import asyncio
import json
import sqlite3
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from audioshelf.formats.audio import AudioFile

# JSON marker for an encoded AudioFile handle
_AUDIO_FILE_KEY = "__audio_file__"


class StorageError(Exception):
    """Raised when the storage backend cannot read or write a value."""


@runtime_checkable
class StorageBackend(Protocol):
    """Protocol for asynchronous, eventually-durable key-value storage."""

    async def get(self, key: str) -> dict[str, Any] | None: ...

    async def set(self, key: str, value: dict[str, Any]) -> None: ...


def _encode_default(value: Any) -> Any:
    if isinstance(value, AudioFile):
        return {_AUDIO_FILE_KEY: str(value.path)}
    raise TypeError(f"Cannot store value of type {type(value).__name__}")


def _decode_hook(obj: dict[str, Any]) -> Any:
    if len(obj) == 1 and _AUDIO_FILE_KEY in obj:
        return AudioFile(Path(obj[_AUDIO_FILE_KEY]))
    return obj


def encode_value(value: dict[str, Any]) -> str:
    """Serialize a snapshot to JSON, encoding AudioFile handles by path.

    Raises:
        StorageError: If the value holds something JSON can't represent.
    """
    try:
        return json.dumps(value, default=_encode_default)
    except (TypeError, ValueError) as exc:
        raise StorageError(f"Cannot encode value: {exc}") from exc


def decode_value(text: str) -> dict[str, Any]:
    """Inverse of encode_value."""
    try:
        return json.loads(text, object_hook=_decode_hook)
    except ValueError as exc:
        raise StorageError(f"Cannot decode stored value: {exc}") from exc


class SqliteStorage:
    """StorageBackend over the kv_store table.

    Values are encoded on the calling thread, so a snapshot is frozen at
    the moment ``set`` is called; the blocking database work runs in a
    worker thread.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    async def get(self, key: str) -> dict[str, Any] | None:
        text = await asyncio.to_thread(self._read, key)
        return decode_value(text) if text is not None else None

    async def set(self, key: str, value: dict[str, Any]) -> None:
        text = encode_value(value)
        await asyncio.to_thread(self._write, key, text)

    def close(self) -> None:
        self._conn.close()

    def _read(self, key: str) -> str | None:
        try:
            cursor = self._conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = cursor.fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot read {key!r}: {exc}") from exc
        return row["value"] if row else None

    def _write(self, key: str, text: str) -> None:
        try:
            self._conn.execute(
                "INSERT INTO kv_store (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
                "date_modified = strftime('%Y-%m-%dT%H:%M:%S', 'now')",
                (key, text),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot write {key!r}: {exc}") from exc
