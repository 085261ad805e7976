# ABOUTME: Protocols for the asynchronous collaborators that hydrate a chapter.
# ABOUTME: A tag extractor yields ChapterTags, a duration probe yields seconds of playable audio.

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from audioshelf.formats.audio import AudioFile
    from audioshelf.metadata.types import ChapterTags


@runtime_checkable
class MetadataExtractor(Protocol):
    """Protocol for tag readers.

    Implementations make a single attempt and raise AudioReadError when the
    file cannot be read. An empty title is allowed; the caller substitutes
    the file name.
    """

    async def extract(self, file: AudioFile) -> ChapterTags: ...


@runtime_checkable
class DurationProbe(Protocol):
    """Protocol for measuring the length of an audio file in seconds."""

    async def probe(self, file: AudioFile) -> float: ...
