# ABOUTME: LibraryStore, the controller that owns books, selection, rate, and playback.
# ABOUTME: Restores from storage on init(), persists continuously, flushes on shutdown().

import logging
from collections.abc import Callable, Iterable

from audioshelf.core.hydration import Hydrator
from audioshelf.core.library import Book, Chapter
from audioshelf.core.playback import AudioDevice, PlaybackCoordinator
from audioshelf.core.reactive import Reactor
from audioshelf.db.persistence import DEFAULT_DEBOUNCE, STATE_KEY, PersistenceGateway
from audioshelf.db.storage import StorageBackend
from audioshelf.formats.audio import AudioFile
from audioshelf.metadata.provider import DurationProbe, MetadataExtractor

logger = logging.getLogger(__name__)


class LibraryStore:
    """The library state engine.

    Constructed once by the entry point and passed to whoever needs it.
    ``await init()`` restores the last saved state and then starts saving
    every change; ``await shutdown()`` writes anything still pending.

    Every public method is an action: it mutates state and reports the
    change so that pending watches and persistence react to it.
    """

    def __init__(
        self,
        storage: StorageBackend,
        *,
        extractor: MetadataExtractor | None = None,
        probe: DurationProbe | None = None,
        debounce: float = DEFAULT_DEBOUNCE,
        state_key: str = STATE_KEY,
        on_title: Callable[[str], None] | None = None,
    ) -> None:
        self.books: list[Book] = []
        self.current_book_index = -1
        self.playback_rate = 1.0
        self.reactor = Reactor()
        self.hydrator = Hydrator(extractor, probe)
        self.playback = PlaybackCoordinator(self, on_title=on_title)
        self._persistence = PersistenceGateway(storage, key=state_key, debounce=debounce)
        self._initialized = False

    # --- Lifecycle ---

    async def init(self) -> None:
        """Restore the saved library, then start persisting changes.

        Runs once; later calls do nothing. If a current book was restored,
        its current chapter is loaded (without autoplay) as soon as the book
        is ready and a device is attached.
        """
        if self._initialized:
            return
        self._initialized = True
        restored = await self._persistence.restore(self)
        self._persistence.attach(self)
        book = self.current_book
        if restored and book is not None:
            logger.info("Resuming %s at chapter %d", book.title, book.current_chapter_index)
            self.playback.resume(book)

    async def shutdown(self) -> None:
        """Flush pending writes, stop hydration, and detach the device."""
        await self._persistence.close()
        self.hydrator.cancel()
        self.playback.set_audio_element(None)

    async def wait_until_hydrated(self, timeout: float | None = None) -> bool:
        """Wait for every in-flight hydration task. See Hydrator.drain."""
        return await self.hydrator.drain(timeout)

    def snapshot(self) -> dict:
        """The current persisted state, in storage shape."""
        return self._persistence.snapshot(self)

    # --- Derived views ---

    @property
    def current_book(self) -> Book | None:
        if 0 <= self.current_book_index < len(self.books):
            return self.books[self.current_book_index]
        return None

    @property
    def current_chapter(self) -> Chapter | None:
        book = self.current_book
        return book.current_chapter if book is not None else None

    @property
    def display_title(self) -> str | None:
        return self.playback.display_title

    # --- Construction ---

    def create_chapter(self, file: AudioFile | None) -> Chapter:
        """Create a chapter and start hydrating it. Returns before hydration ends."""
        chapter = Chapter(file, self.reactor)
        self.hydrator.hydrate(chapter)
        return chapter

    def create_book(
        self,
        title: str,
        files: Iterable[AudioFile | None],
        *,
        current_chapter_index: int | None = None,
        current_chapter_time: float = 0.0,
    ) -> Book:
        """Build a book with one chapter per file, in order. Not added to the library."""
        chapters = [self.create_chapter(file) for file in files]
        return Book(
            title,
            chapters,
            self.reactor,
            current_chapter_index=current_chapter_index,
            current_chapter_time=current_chapter_time,
        )

    # --- Actions ---

    def add_book(self, title: str, files: Iterable[AudioFile]) -> Book:
        """Create a book from a batch of files and append it to the library.

        The first book added to a library with nothing selected becomes
        the current book.
        """
        book = self.create_book(title, files)
        self.books.append(book)
        if self.current_book_index == -1 and len(self.books) == 1:
            self.current_book_index = 0
        self.reactor.changed()
        return book

    def remove_book(self, index: int) -> Book | None:
        """Drop a book from the library. Returns it, or None for a bad index."""
        if not 0 <= index < len(self.books):
            logger.warning("No book at index %d", index)
            return None
        book = self.books.pop(index)
        if index == self.current_book_index:
            self.playback.stop()
            self.current_book_index = 0 if self.books else -1
        elif index < self.current_book_index:
            self.current_book_index -= 1
        self.reactor.changed()
        return book

    def clear(self) -> None:
        """Drop every book and the selection."""
        self.playback.stop()
        self.books.clear()
        self.current_book_index = -1
        self.reactor.changed()

    def set_current_book_index(self, index: int) -> None:
        """Select a book by position, or -1 for none. Bad indexes are ignored.

        Changing the selection stops playback and drops any play request
        still waiting on the previous book.
        """
        if index != -1 and not 0 <= index < len(self.books):
            logger.warning("Ignoring selection of missing book %d", index)
            return
        if index == self.current_book_index:
            return
        self.playback.stop()
        self.current_book_index = index
        self.reactor.changed()

    def play_chapter(self, chapter: Chapter | None, autoplay: bool = True) -> None:
        self.playback.play_chapter(chapter, autoplay)

    def pause(self) -> None:
        self.playback.pause()

    def set_audio_element(self, device: AudioDevice | None) -> None:
        self.playback.set_audio_element(device)

    def set_playback_rate(self, rate: float) -> None:
        self.playback.set_playback_rate(rate)

    def adjust_playback_rate(self, delta: float) -> None:
        self.playback.adjust_playback_rate(delta)
