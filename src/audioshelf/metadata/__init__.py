# ABOUTME: Metadata package for audio chapter tags and the collaborators that produce them.
# ABOUTME: Exports the ChapterTags dataclass and the extractor/probe protocols.

from audioshelf.metadata.provider import DurationProbe, MetadataExtractor
from audioshelf.metadata.types import ChapterTags

__all__ = [
    "ChapterTags",
    "DurationProbe",
    "MetadataExtractor",
]
