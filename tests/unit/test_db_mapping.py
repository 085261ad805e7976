# ABOUTME: Unit tests for snapshot mapping between library objects and dictionaries.
# ABOUTME: Covers tags, chapters, books, and whole-store snapshots.

from pathlib import Path

from audioshelf.core.library import Book, Chapter
from audioshelf.db.mapping import book_to_record, chapter_to_record, record_files, tags_to_dict
from audioshelf.formats.audio import AudioFile
from audioshelf.metadata.types import ChapterTags


def _file(name: str) -> AudioFile:
    return AudioFile(Path("/books") / name)


class TestTagsToDict:
    def test_all_fields(self) -> None:
        tags = ChapterTags(title="One", artist="A", album="B", track="1/9", raw={"genre": "x"})
        assert tags_to_dict(tags) == {
            "title": "One",
            "artist": "A",
            "album": "B",
            "track": "1/9",
            "raw": {"genre": "x"},
        }


class TestChapterToRecord:
    def test_unhydrated_chapter(self) -> None:
        handle = _file("01.mp3")
        record = chapter_to_record(Chapter(handle))
        assert record == {"file": handle, "tags": None, "duration": None}

    def test_file_handle_passed_through(self) -> None:
        handle = _file("01.mp3")
        chapter = Chapter(handle)
        chapter.set_tags(ChapterTags(title="One"))
        chapter.set_duration(61.8)
        record = chapter_to_record(chapter)
        assert record["file"] is handle
        assert record["tags"]["title"] == "One"
        assert record["duration"] == 61


class TestBookToRecord:
    def test_cursor_and_chapter_order(self) -> None:
        book = Book(
            "Dune",
            [Chapter(_file("01.mp3")), Chapter(_file("02.mp3"))],
            current_chapter_index=1,
            current_chapter_time=12.5,
        )
        record = book_to_record(book)
        assert record["title"] == "Dune"
        assert record["current_chapter_index"] == 1
        assert record["current_chapter_time"] == 12.5
        assert record_files(record) == [_file("01.mp3"), _file("02.mp3")]


class TestRecordFiles:
    def test_missing_chapters(self) -> None:
        assert record_files({"title": "Empty"}) == []
        assert record_files({"title": "Empty", "chapters": None}) == []
