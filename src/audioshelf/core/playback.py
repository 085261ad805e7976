# ABOUTME: Playback coordination between library state and an external audio device.
# ABOUTME: Waits for "device attached" and "chapter ready" before issuing device commands.

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from audioshelf.core.library import Book, Chapter

if TYPE_CHECKING:
    from audioshelf.core.store import LibraryStore

logger = logging.getLogger(__name__)

PLAYBACK_WATCH_KEY = "playback"

# Playback rates are stored rounded to shed float noise from repeated adjustments
_RATE_PRECISION = 6

DeviceListener = Callable[..., None]


@runtime_checkable
class AudioDevice(Protocol):
    """Protocol for the audio output element.

    Events: ``ended`` (no arguments), ``timeupdate`` (current position in
    seconds), ``canplay`` (no arguments, once per load).
    """

    src: str | None
    playback_rate: float
    current_time: float

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def add_listener(self, event: str, callback: DeviceListener, *, once: bool = False) -> None: ...

    def remove_listener(self, event: str, callback: DeviceListener) -> None: ...


class PlaybackState(enum.Enum):
    IDLE = "idle"
    AWAITING_DEVICE = "awaiting_device"
    AWAITING_CHAPTER_READY = "awaiting_chapter_ready"
    PLAYING = "playing"


class PlaybackCoordinator:
    """Turns play requests into device commands once they can be honored.

    A request is satisfied the instant a device is attached and the chapter
    is ready, in either order. Only the newest request is ever honored: each
    one is registered under the same watch key, so an older request that
    becomes satisfiable later is discarded instead of clobbering the device.
    """

    def __init__(
        self,
        store: LibraryStore,
        *,
        on_title: Callable[[str], None] | None = None,
    ) -> None:
        self._store = store
        self._reactor = store.reactor
        self._on_title = on_title
        self._device: AudioDevice | None = None
        self._state = PlaybackState.IDLE
        self._pending_ready: Callable[[], bool] | None = None
        self.display_title: str | None = None

    @property
    def device(self) -> AudioDevice | None:
        return self._device

    @property
    def state(self) -> PlaybackState:
        """Where the newest request stands.

        A waiting request reports the readiness it still lacks first: the
        chapter for a play request, the whole book for the startup resume.
        Only once that holds does it wait on the device.
        """
        if not self._reactor.has_pending(PLAYBACK_WATCH_KEY):
            return self._state
        if self._pending_ready is not None and not self._pending_ready():
            return PlaybackState.AWAITING_CHAPTER_READY
        return PlaybackState.AWAITING_DEVICE

    # --- Requests ---

    def play_chapter(self, chapter: Chapter | None, autoplay: bool = True) -> None:
        """Make ``chapter`` current and load it on the device when possible.

        The book's cursor moves immediately. Moving to a different chapter
        also resets the scrub position. Chapters outside the current book
        are ignored.

        Args:
            chapter: A chapter of the current book.
            autoplay: Start playback once loaded. False only loads the
                chapter, which is how a restored session resumes.
        """
        book = self._store.current_book
        index = book.index_of(chapter) if book is not None and chapter is not None else -1
        if index < 0:
            logger.warning("Ignoring play request for a chapter outside the current book")
            return

        if index != book.current_chapter_index:
            book.set_current_chapter_index(index)
            book.set_current_chapter_time(0.0)

        self._pending_ready = lambda: chapter.ready
        self._reactor.when(
            lambda: self._device is not None and chapter.ready,
            lambda: self._load(chapter, autoplay),
            key=PLAYBACK_WATCH_KEY,
        )

    def play_chapter_at(self, index: int) -> None:
        """Play the chapter at ``index`` of the current book.

        An index past the last chapter is end-of-book: the cursor still
        moves there, leaving no current chapter, and nothing is played.
        """
        book = self._store.current_book
        if book is None:
            return
        chapter = book.chapter_at(index)
        if chapter is None:
            book.set_current_chapter_index(index)
            self._reactor.cancel(PLAYBACK_WATCH_KEY)
            self._state = PlaybackState.IDLE
            logger.info("Reached the end of %s", book.title)
            return
        self.play_chapter(chapter)

    def resume(self, book: Book) -> None:
        """Load the book's current chapter, without playing, once the book is ready."""
        self._pending_ready = lambda: book.ready
        self._reactor.when(
            lambda: book.ready,
            lambda: self.play_chapter(book.current_chapter, autoplay=False),
            key=PLAYBACK_WATCH_KEY,
        )

    def pause(self) -> None:
        if self._device is not None:
            self._device.pause()

    def stop(self) -> None:
        """Drop any pending request and pause the device."""
        self._reactor.cancel(PLAYBACK_WATCH_KEY)
        self.pause()
        self._state = PlaybackState.IDLE

    # --- Playback rate ---

    def set_playback_rate(self, rate: float) -> None:
        """Store a new rate and apply it to the device if one is attached.

        No clamping is applied; zero or negative rates go to the device as-is.
        """
        self._store.playback_rate = round(float(rate), _RATE_PRECISION)
        self._reactor.changed()
        if self._device is not None:
            self._device.playback_rate = self._store.playback_rate

    def adjust_playback_rate(self, delta: float) -> None:
        self.set_playback_rate(self._store.playback_rate + delta)

    # --- Device binding ---

    def set_audio_element(self, device: AudioDevice | None) -> None:
        """Attach a device, replacing any previous one. None detaches.

        Re-attaching the device that is already bound changes nothing, so
        listeners are never doubled up.
        """
        if device is self._device:
            return
        if self._device is not None:
            self._unbind(self._device)
        self._device = device
        if device is not None:
            self._bind(device)
        self._reactor.evaluate()

    def _bind(self, device: AudioDevice) -> None:
        device.add_listener("ended", self._on_ended)
        device.add_listener("timeupdate", self._on_time_update)
        device.add_listener("canplay", self._on_can_play, once=True)

    def _unbind(self, device: AudioDevice) -> None:
        device.remove_listener("ended", self._on_ended)
        device.remove_listener("timeupdate", self._on_time_update)
        device.remove_listener("canplay", self._on_can_play)

    def _on_ended(self) -> None:
        book = self._store.current_book
        if book is not None:
            self.play_chapter_at(book.current_chapter_index + 1)

    def _on_time_update(self, current_time: float) -> None:
        book = self._store.current_book
        if book is not None:
            book.set_current_chapter_time(current_time)

    def _on_can_play(self) -> None:
        book = self._store.current_book
        if book is not None and book.current_chapter_time > 0 and self._device is not None:
            self._device.current_time = book.current_chapter_time

    def _load(self, chapter: Chapter, autoplay: bool) -> None:
        book = self._store.current_book
        if book is None or book.index_of(chapter) < 0:
            logger.debug("Dropping load of %s; its book is no longer current", chapter.title)
            self._state = PlaybackState.IDLE
            return
        device = self._device
        device.src = chapter.url
        device.playback_rate = self._store.playback_rate
        self.display_title = chapter.title
        if self._on_title is not None:
            self._on_title(chapter.title)
        if autoplay:
            device.play()
        self._state = PlaybackState.PLAYING
        logger.debug("Loaded %s (autoplay=%s)", chapter.title, autoplay)
