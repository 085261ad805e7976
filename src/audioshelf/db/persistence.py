# ABOUTME: PersistenceGateway: restores a LibraryStore from storage and saves it on change.
# ABOUTME: Writes are debounced with a loop timer and never overlap.

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from audioshelf.db.mapping import record_files, store_to_snapshot
from audioshelf.db.storage import StorageBackend, StorageError
from audioshelf.formats.audio import AudioFile

if TYPE_CHECKING:
    from audioshelf.core.store import LibraryStore

logger = logging.getLogger(__name__)

STATE_KEY = "state"
DEFAULT_DEBOUNCE = 0.5


class PersistenceGateway:
    """Moves library state between a LibraryStore and a StorageBackend.

    Saving: every change marks the state dirty and (re)starts a debounce
    timer. When the timer fires, a snapshot of the state at that moment is
    written. While a write is in flight, further changes only mark the state
    dirty; the timer is re-armed once the write completes. A failed write is
    logged and not retried; the next change schedules a fresh one.
    """

    def __init__(
        self,
        storage: StorageBackend,
        *,
        key: str = STATE_KEY,
        debounce: float = DEFAULT_DEBOUNCE,
    ) -> None:
        self._storage = storage
        self._key = key
        self._debounce = debounce
        self._store: LibraryStore | None = None
        self._unsubscribe = None
        self._timer: asyncio.TimerHandle | None = None
        self._write_task: asyncio.Task[None] | None = None
        self._writing = False
        self._dirty = False
        self._closed = False

    @property
    def dirty(self) -> bool:
        return self._dirty

    def snapshot(self, store: LibraryStore) -> dict[str, Any]:
        return store_to_snapshot(store)

    # --- Load path ---

    async def restore(self, store: LibraryStore) -> bool:
        """Load the last snapshot into an empty store.

        Books are rebuilt from their stored file handles and hydrated from
        scratch; stored tags and durations are ignored. The cursor positions
        and playback rate are restored verbatim, except that a book index
        past the end of the library clears the selection. Nothing here schedules a
        write: the subscription is installed afterwards by ``attach``.

        Returns:
            True if a snapshot was found and applied.
        """
        try:
            snapshot = await self._storage.get(self._key)
        except StorageError as exc:
            logger.error("Could not load library state: %s", exc)
            return False
        if not snapshot:
            logger.info("No saved library state; starting empty")
            return False

        for record in snapshot.get("books") or []:
            files = [self._restored_file(file) for file in record_files(record)]
            book = store.create_book(
                record.get("title") or "",
                files,
                current_chapter_index=record.get("current_chapter_index"),
                current_chapter_time=record.get("current_chapter_time") or 0.0,
            )
            store.books.append(book)
        index = int(snapshot.get("current_book_index", -1))
        if index != -1 and not 0 <= index < len(store.books):
            logger.warning("Saved book index %d is out of range; clearing selection", index)
            index = -1
        store.current_book_index = index
        store.playback_rate = float(snapshot.get("playback_rate", 1.0))
        logger.info("Restored %d book(s)", len(store.books))
        return True

    @staticmethod
    def _restored_file(file: Any) -> AudioFile | None:
        if isinstance(file, AudioFile):
            return file
        logger.warning("Stored file handle could not be restored: %r", file)
        return None

    # --- Save path ---

    def attach(self, store: LibraryStore) -> None:
        """Start persisting every change reported by the store's reactor."""
        self._store = store
        self._unsubscribe = store.reactor.subscribe(self.mark_dirty)

    def mark_dirty(self) -> None:
        """Record that state changed and schedule a write."""
        self._dirty = True
        if self._closed or self._in_flight():
            return
        self._arm()

    def _in_flight(self) -> bool:
        return self._writing or (self._write_task is not None and not self._write_task.done())

    def _arm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._debounce, self._fire)
        logger.debug("Write scheduled in %.3fs", self._debounce)

    def _fire(self) -> None:
        self._timer = None
        if self._in_flight():
            return
        self._writing = True
        self._write_task = asyncio.get_running_loop().create_task(self._write())

    async def _write(self) -> None:
        self._writing = True
        self._dirty = False
        try:
            await self._storage.set(self._key, store_to_snapshot(self._store))
        except StorageError as exc:
            logger.error("Failed to save library state: %s", exc)
        finally:
            self._writing = False
        if self._dirty and not self._closed:
            self._arm()

    async def close(self) -> None:
        """Stop listening and write any pending change immediately."""
        self._closed = True
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._write_task is not None and not self._write_task.done():
            await self._write_task
        if self._dirty and self._store is not None:
            await self._write()
