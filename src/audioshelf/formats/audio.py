# ABOUTME: Audio file handles plus tag and duration reading using mutagen.
# ABOUTME: Defensive wrapper that turns unreadable files into AudioReadError.

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import mutagen

from audioshelf.metadata.types import ChapterTags

logger = logging.getLogger(__name__)

AUDIO_EXTENSIONS: frozenset[str] = frozenset(
    {".mp3", ".m4a", ".m4b", ".mp4", ".ogg", ".opus", ".flac", ".wav", ".aac"}
)

# Tag keys that hold binary payloads (cover art, private frames)
_BINARY_KEY_PREFIXES = ("APIC", "covr", "metadata_block_picture", "PRIV", "GEOB")

_TITLE_KEYS = ("title", "TIT2", "\xa9nam", "TITLE")
_ARTIST_KEYS = ("artist", "TPE1", "\xa9ART", "ARTIST")
_ALBUM_KEYS = ("album", "TALB", "\xa9alb", "ALBUM")
_TRACK_KEYS = ("tracknumber", "TRCK", "trkn", "TRACKNUMBER")


class AudioReadError(Exception):
    """Raised when an audio file cannot be read or parsed."""


@dataclass(frozen=True)
class AudioFile:
    """Opaque handle to a local audio resource.

    Two handles are the same file when they point at the same path.
    """

    path: Path

    @property
    def name(self) -> str:
        """The file's own name, used as the fallback chapter title."""
        return self.path.name

    @property
    def url(self) -> str:
        """Playable URL for an audio device."""
        return self.path.resolve().as_uri()

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


def list_audio_files(directory: Path) -> list[AudioFile]:
    """List the audio files directly inside a directory, sorted by name.

    Subdirectories are not descended into: one directory is one book.
    """
    return [
        AudioFile(path)
        for path in sorted(directory.iterdir())
        if path.is_file() and path.suffix.lower() in AUDIO_EXTENSIONS
    ]


def _open(path: Path, *, easy: bool) -> Any:
    """Open a file with mutagen, or raise AudioReadError."""
    if not path.exists():
        raise AudioReadError(f"File not found: {path}")

    try:
        audio = mutagen.File(str(path), easy=easy)
    except Exception as exc:
        raise AudioReadError(f"Cannot read {path.name}: {exc}") from exc
    if audio is None:
        raise AudioReadError(f"Unrecognized audio format: {path.name}")
    return audio


def _stringify(value: Any) -> str | None:
    """Flatten a tag value to text. Binary values yield None."""
    if isinstance(value, (bytes, bytearray)):
        return None
    if isinstance(value, (list, tuple)):
        parts = [str(v).strip() for v in value if not isinstance(v, (bytes, bytearray))]
        text = ", ".join(p for p in parts if p)
    else:
        text = str(value).strip()
    return text or None


def _collect_raw(tags: Any) -> dict[str, str]:
    """Turn a mutagen tag container into a flat string dictionary."""
    if tags is None:
        return {}
    raw: dict[str, str] = {}
    for key in tags.keys():
        if str(key).startswith(_BINARY_KEY_PREFIXES):
            continue
        text = _stringify(tags[key])
        if text is not None:
            raw[str(key)] = text
    return raw


def _first(raw: dict[str, str], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        if raw.get(key):
            return raw[key]
    return None


def read_audio_tags(path: Path) -> ChapterTags:
    """Extract tags from an audio file.

    Uses mutagen's "easy" interface where the format has one, so common
    fields come back under friendly names. Files without any tags yield an
    empty title rather than an error.

    Args:
        path: Path to the audio file.

    Returns:
        ChapterTags with whatever fields could be found.

    Raises:
        AudioReadError: If the file is missing, corrupt, or not audio.
    """
    audio = _open(path, easy=True)
    raw = _collect_raw(audio.tags)
    return ChapterTags(
        title=_first(raw, _TITLE_KEYS) or "",
        artist=_first(raw, _ARTIST_KEYS),
        album=_first(raw, _ALBUM_KEYS),
        track=_first(raw, _TRACK_KEYS),
        raw=raw,
    )


def probe_duration(path: Path) -> float:
    """Return the playable length of an audio file in seconds.

    Raises:
        AudioReadError: If the file cannot be read or reports no length.
    """
    audio = _open(path, easy=False)
    length = getattr(audio.info, "length", None)
    if length is None or length < 0:
        raise AudioReadError(f"No duration available for {path.name}")
    return float(length)


class MutagenTagExtractor:
    """MetadataExtractor backed by mutagen, run off the event loop."""

    async def extract(self, file: AudioFile) -> ChapterTags:
        return await asyncio.to_thread(read_audio_tags, file.path)


class MutagenDurationProbe:
    """DurationProbe backed by mutagen stream info, run off the event loop."""

    async def probe(self, file: AudioFile) -> float:
        seconds = await asyncio.to_thread(probe_duration, file.path)
        logger.debug("Probed %s: %.3fs", file.name, seconds)
        return seconds
