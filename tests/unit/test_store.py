# ABOUTME: Unit tests for LibraryStore actions and derived views.
# ABOUTME: Book creation, auto-selection, selection bounds, removal, and lifecycle.

import asyncio

from audioshelf.core.store import LibraryStore
from tests.fixtures.fakes import MemoryStorage, make_files, make_store


async def _store(**kwargs) -> LibraryStore:
    store = make_store(**kwargs)
    await store.init()
    return store


class TestInit:
    """Tests for the empty-storage load path."""

    def test_empty_storage_starts_empty(self) -> None:
        async def scenario() -> tuple[LibraryStore, MemoryStorage]:
            storage = MemoryStorage()
            store = await _store(storage=storage)
            await store.shutdown()
            return store, storage

        store, storage = asyncio.run(scenario())
        assert store.books == []
        assert store.current_book_index == -1
        assert store.current_book is None
        assert store.current_chapter is None
        assert store.playback_rate == 1.0
        assert storage.writes == []

    def test_init_runs_once(self) -> None:
        async def scenario() -> int:
            store = await _store()
            store.add_book("Dune", make_files("a.mp3"))
            await store.init()
            return len(store.books)

        assert asyncio.run(scenario()) == 1


class TestAddBook:
    """Tests for create_book / add_book."""

    def test_add_book_returns_before_hydration(self) -> None:
        async def scenario() -> tuple[bool, bool, int]:
            store = await _store(durations={"a.mp3": 180, "b.mp3": 240})
            book = store.add_book("Dune", make_files("a.mp3", "b.mp3"))
            before = book.ready
            await store.wait_until_hydrated()
            return before, book.ready, book.total_duration

        before, after, total = asyncio.run(scenario())
        assert before is False
        assert after is True
        assert total == 420

    def test_first_book_is_auto_selected(self) -> None:
        async def scenario() -> tuple[int, int]:
            store = await _store()
            store.add_book("Dune", make_files("a.mp3"))
            first = store.current_book_index
            store.add_book("Emma", make_files("b.mp3"))
            return first, store.current_book_index

        assert asyncio.run(scenario()) == (0, 0)

    def test_books_keep_insertion_order(self) -> None:
        async def scenario() -> list[str]:
            store = await _store()
            for title in ("Dune", "Emma", "Ulysses"):
                store.add_book(title, make_files(f"{title}.mp3"))
            return [book.title for book in store.books]

        assert asyncio.run(scenario()) == ["Dune", "Emma", "Ulysses"]

    def test_create_book_does_not_add(self) -> None:
        async def scenario() -> tuple[int, int]:
            store = await _store()
            book = store.create_book("Loose", make_files("a.mp3", "b.mp3"))
            return len(store.books), len(book.chapters)

        assert asyncio.run(scenario()) == (0, 2)


class TestSelection:
    """Tests for set_current_book_index."""

    def test_select_valid_index(self) -> None:
        async def scenario() -> str:
            store = await _store()
            store.add_book("Dune", make_files("a.mp3"))
            store.add_book("Emma", make_files("b.mp3"))
            store.set_current_book_index(1)
            return store.current_book.title

        assert asyncio.run(scenario()) == "Emma"

    def test_out_of_range_selection_is_ignored(self, caplog) -> None:
        async def scenario() -> int:
            store = await _store()
            store.add_book("Dune", make_files("a.mp3"))
            store.set_current_book_index(5)
            store.set_current_book_index(-2)
            return store.current_book_index

        assert asyncio.run(scenario()) == 0
        assert "Ignoring selection of missing book 5" in caplog.text

    def test_deselect(self) -> None:
        async def scenario() -> object:
            store = await _store()
            store.add_book("Dune", make_files("a.mp3"))
            store.set_current_book_index(-1)
            return store.current_book

        assert asyncio.run(scenario()) is None


class TestRemoval:
    """Tests for remove_book and clear."""

    def test_remove_earlier_book_keeps_selection(self) -> None:
        async def scenario() -> tuple[str, int]:
            store = await _store()
            for title in ("Dune", "Emma", "Ulysses"):
                store.add_book(title, make_files(f"{title}.mp3"))
            store.set_current_book_index(2)
            store.remove_book(0)
            return store.current_book.title, store.current_book_index

        assert asyncio.run(scenario()) == ("Ulysses", 1)

    def test_remove_current_book_selects_first(self) -> None:
        async def scenario() -> str:
            store = await _store()
            for title in ("Dune", "Emma"):
                store.add_book(title, make_files(f"{title}.mp3"))
            store.set_current_book_index(1)
            store.remove_book(1)
            return store.current_book.title

        assert asyncio.run(scenario()) == "Dune"

    def test_remove_last_book_clears_selection(self) -> None:
        async def scenario() -> tuple[int, int]:
            store = await _store()
            store.add_book("Dune", make_files("a.mp3"))
            removed = store.remove_book(0)
            assert removed is not None
            return len(store.books), store.current_book_index

        assert asyncio.run(scenario()) == (0, -1)

    def test_remove_missing_book_returns_none(self) -> None:
        async def scenario() -> object:
            store = await _store()
            return store.remove_book(0)

        assert asyncio.run(scenario()) is None

    def test_clear(self) -> None:
        async def scenario() -> tuple[int, int]:
            store = await _store()
            store.add_book("Dune", make_files("a.mp3"))
            store.add_book("Emma", make_files("b.mp3"))
            store.clear()
            return len(store.books), store.current_book_index

        assert asyncio.run(scenario()) == (0, -1)

    def test_add_after_clear_auto_selects(self) -> None:
        async def scenario() -> int:
            store = await _store()
            store.add_book("Dune", make_files("a.mp3"))
            store.clear()
            store.add_book("Emma", make_files("b.mp3"))
            return store.current_book_index

        assert asyncio.run(scenario()) == 0


class TestSnapshot:
    """Tests for the store's snapshot view."""

    def test_snapshot_shape(self) -> None:
        async def scenario() -> dict:
            store = await _store(titles={"a.mp3": "A"}, durations={"a.mp3": 12})
            store.add_book("Dune", make_files("a.mp3"))
            await store.wait_until_hydrated()
            store.set_playback_rate(1.25)
            return store.snapshot()

        snapshot = asyncio.run(scenario())
        assert snapshot["playback_rate"] == 1.25
        assert snapshot["current_book_index"] == 0
        (book,) = snapshot["books"]
        assert book["title"] == "Dune"
        assert book["current_chapter_index"] == 0
        assert book["current_chapter_time"] == 0.0
        (chapter,) = book["chapters"]
        assert chapter["file"] == make_files("a.mp3")[0]
        assert chapter["tags"]["title"] == "A"
        assert chapter["duration"] == 12
