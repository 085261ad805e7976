# ABOUTME: Chapter and Book models for the audiobook library.
# ABOUTME: Readiness, total duration, and the current chapter are derived on every read.

import logging

from audioshelf.core.reactive import Reactor
from audioshelf.formats.audio import AudioFile
from audioshelf.metadata.types import ChapterTags

logger = logging.getLogger(__name__)


class Chapter:
    """One playable audio unit backed by a single file.

    A chapter starts with only its file. Hydration fills in ``tags`` and
    ``duration`` once each; after both have arrived the chapter is ready
    and stays ready for the rest of its life.
    """

    def __init__(self, file: AudioFile | None, reactor: Reactor | None = None) -> None:
        self.file = file
        self.tags: ChapterTags | None = None
        self.duration: int | None = None
        self._reactor = reactor or Reactor()

    def __repr__(self) -> str:
        name = self.file.name if self.file is not None else None
        return f"Chapter(file={name!r}, ready={self.ready})"

    @property
    def ready(self) -> bool:
        return self.file is not None and self.tags is not None and self.duration is not None

    @property
    def title(self) -> str:
        """Tag title, falling back to the file name."""
        if self.tags is not None and self.tags.title:
            return self.tags.title
        return self.file.name if self.file is not None else ""

    @property
    def url(self) -> str | None:
        return self.file.url if self.file is not None else None

    def set_tags(self, tags: ChapterTags) -> None:
        if self.tags is not None:
            logger.debug("Ignoring second tag assignment for %r", self)
            return
        self.tags = tags
        self._reactor.changed()

    def set_duration(self, seconds: float) -> None:
        """Record the duration, truncated to whole seconds."""
        if self.duration is not None:
            logger.debug("Ignoring second duration assignment for %r", self)
            return
        self.duration = int(seconds)
        self._reactor.changed()


class Book:
    """An ordered collection of chapters with a play cursor.

    The chapter list is fixed at construction, in the order the files were
    selected.
    """

    def __init__(
        self,
        title: str,
        chapters: list[Chapter],
        reactor: Reactor | None = None,
        *,
        current_chapter_index: int | None = None,
        current_chapter_time: float = 0.0,
    ) -> None:
        self.title = title
        self.chapters: tuple[Chapter, ...] = tuple(chapters)
        if current_chapter_index is None:
            current_chapter_index = 0 if self.chapters else -1
        self.current_chapter_index = current_chapter_index
        self.current_chapter_time = max(0.0, float(current_chapter_time))
        self._reactor = reactor or Reactor()

    def __repr__(self) -> str:
        return f"Book(title={self.title!r}, chapters={len(self.chapters)}, ready={self.ready})"

    @property
    def ready(self) -> bool:
        """True once every chapter is ready."""
        return all(chapter.ready for chapter in self.chapters)

    @property
    def total_duration(self) -> int:
        """Sum of chapter durations. Only meaningful once the book is ready."""
        return sum(chapter.duration or 0 for chapter in self.chapters)

    @property
    def current_chapter(self) -> Chapter | None:
        return self.chapter_at(self.current_chapter_index)

    def chapter_at(self, index: int) -> Chapter | None:
        """Chapter at ``index``, or None when out of range (no negative indexing)."""
        if 0 <= index < len(self.chapters):
            return self.chapters[index]
        return None

    def index_of(self, chapter: Chapter) -> int:
        """Position of ``chapter`` in this book, or -1 if it belongs elsewhere."""
        for index, candidate in enumerate(self.chapters):
            if candidate is chapter:
                return index
        return -1

    def set_current_chapter_index(self, index: int) -> None:
        if index == self.current_chapter_index:
            return
        self.current_chapter_index = index
        self._reactor.changed()

    def set_current_chapter_time(self, seconds: float) -> None:
        seconds = max(0.0, float(seconds))
        if seconds == self.current_chapter_time:
            return
        self.current_chapter_time = seconds
        self._reactor.changed()
