# ABOUTME: Core metadata data structure for audio chapter tags.
# ABOUTME: ChapterTags is the interchange format between tag extraction, the library model, and storage.

from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class ChapterTags:
    """Structured tags extracted from a single audio file.

    Only the title is required, since every chapter needs something we can
    display. Anything else the tag reader found that has no dedicated field
    lands in ``raw`` as plain strings.
    """

    title: str
    artist: str | None = None
    album: str | None = None
    track: str | None = None
    raw: dict[str, str] = field(default_factory=dict)

    def with_title(self, title: str) -> "ChapterTags":
        """Return a copy with the title replaced."""
        return replace(self, title=title)
