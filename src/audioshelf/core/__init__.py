# ABOUTME: The reactive library state engine: models, hydration, playback, and the store.
# ABOUTME: Exports the LibraryStore controller and the types its consumers handle.

from audioshelf.core.library import Book, Chapter
from audioshelf.core.playback import AudioDevice, PlaybackState
from audioshelf.core.store import LibraryStore

__all__ = [
    "AudioDevice",
    "Book",
    "Chapter",
    "LibraryStore",
    "PlaybackState",
]
