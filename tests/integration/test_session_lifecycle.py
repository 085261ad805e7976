# ABOUTME: Integration tests for a full library session over SQLite and real audio files.
# ABOUTME: Add, play, and quit, then restart and resume where playback left off.

import asyncio
from pathlib import Path

from audioshelf.core.playback import PlaybackState
from audioshelf.core.store import LibraryStore
from audioshelf.db import SqliteStorage, open_library
from audioshelf.formats.audio import list_audio_files
from tests.fixtures.fakes import FakeDevice


def _store(db_path: Path) -> tuple[LibraryStore, SqliteStorage]:
    storage = SqliteStorage(open_library(db_path))
    return LibraryStore(storage, debounce=0.01), storage


class TestSaveAndRestore:
    """A library written by one session is rebuilt by the next."""

    def test_restart_restores_library_and_position(self, tmp_path: Path, book_dir: Path) -> None:
        db_path = tmp_path / "library.db"

        async def first_session() -> None:
            store, storage = _store(db_path)
            await store.init()
            store.add_book("The Hobbit", list_audio_files(book_dir))
            assert await store.wait_until_hydrated(5.0)

            device = FakeDevice()
            store.set_audio_element(device)
            store.play_chapter(store.current_book.chapters[1])
            device.emit("timeupdate", 1.5)
            store.set_playback_rate(1.25)
            await store.shutdown()
            storage.close()

        async def second_session() -> tuple[LibraryStore, FakeDevice]:
            store, storage = _store(db_path)
            await store.init()
            assert await store.wait_until_hydrated(5.0)
            device = FakeDevice()
            store.set_audio_element(device)
            device.emit("canplay")
            await store.shutdown()
            storage.close()
            return store, device

        asyncio.run(first_session())
        store, device = asyncio.run(second_session())

        assert [book.title for book in store.books] == ["The Hobbit"]
        assert store.current_book_index == 0
        assert store.playback_rate == 1.25

        book = store.current_book
        assert book.ready
        assert book.current_chapter_index == 1
        assert book.current_chapter_time == 1.5
        assert [chapter.duration for chapter in book.chapters] == [2, 3]
        assert [chapter.title for chapter in book.chapters] == [
            "01 - An Unexpected Party.wav",
            "02 - Roast Mutton.wav",
        ]

        assert device.commands == [
            ("src", (book_dir / "02 - Roast Mutton.wav").resolve().as_uri()),
            ("playback_rate", 1.25),
            ("seek", 1.5),
        ]

    def test_unreadable_chapter_survives_restart(self, tmp_path: Path, book_dir: Path) -> None:
        db_path = tmp_path / "library.db"
        (book_dir / "03 - Broken.mp3").write_text("not audio")

        async def session() -> LibraryStore:
            store, storage = _store(db_path)
            await store.init()
            if not store.books:
                store.add_book("The Hobbit", list_audio_files(book_dir))
            await store.wait_until_hydrated(5.0)
            await store.shutdown()
            storage.close()
            return store

        asyncio.run(session())
        store = asyncio.run(session())

        book = store.current_book
        assert len(book.chapters) == 3
        assert [chapter.ready for chapter in book.chapters] == [True, True, False]
        assert not book.ready
        assert book.total_duration == 5

    def test_resume_waits_for_device(self, tmp_path: Path, book_dir: Path) -> None:
        db_path = tmp_path / "library.db"

        async def seed() -> None:
            store, storage = _store(db_path)
            await store.init()
            store.add_book("The Hobbit", list_audio_files(book_dir))
            await store.wait_until_hydrated(5.0)
            await store.shutdown()
            storage.close()

        async def restart() -> PlaybackState:
            store, storage = _store(db_path)
            await store.init()
            await store.wait_until_hydrated(5.0)
            state = store.playback.state
            await store.shutdown()
            storage.close()
            return state

        asyncio.run(seed())
        assert asyncio.run(restart()) is PlaybackState.AWAITING_DEVICE
