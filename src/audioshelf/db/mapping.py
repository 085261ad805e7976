# ABOUTME: Converts between live library objects and snapshot dictionaries.
# ABOUTME: Snapshots mirror the data model; AudioFile handles are passed through for the backend to encode.

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from audioshelf.metadata.types import ChapterTags

if TYPE_CHECKING:
    from audioshelf.core.library import Book, Chapter
    from audioshelf.core.store import LibraryStore


def tags_to_dict(tags: ChapterTags) -> dict[str, Any]:
    return {
        "title": tags.title,
        "artist": tags.artist,
        "album": tags.album,
        "track": tags.track,
        "raw": dict(tags.raw),
    }


def chapter_to_record(chapter: Chapter) -> dict[str, Any]:
    """Serialize a chapter. The file handle is included untouched."""
    return {
        "file": chapter.file,
        "tags": tags_to_dict(chapter.tags) if chapter.tags is not None else None,
        "duration": chapter.duration,
    }


def book_to_record(book: Book) -> dict[str, Any]:
    return {
        "title": book.title,
        "current_chapter_index": book.current_chapter_index,
        "current_chapter_time": book.current_chapter_time,
        "chapters": [chapter_to_record(chapter) for chapter in book.chapters],
    }


def store_to_snapshot(store: LibraryStore) -> dict[str, Any]:
    """Build the persisted snapshot of a store.

    Only persisted attributes are included; the device binding and display
    title are volatile.
    """
    return {
        "playback_rate": store.playback_rate,
        "current_book_index": store.current_book_index,
        "books": [book_to_record(book) for book in store.books],
    }


def record_files(record: dict[str, Any]) -> list[Any]:
    """File handles of a stored book record, in chapter order."""
    return [chapter.get("file") for chapter in record.get("chapters") or []]
