# ABOUTME: Shared pytest fixtures for audioshelf tests.
# ABOUTME: Provides generated WAV files and book directories for the mutagen-backed paths.

import wave
from collections.abc import Callable
from pathlib import Path

import pytest

_SAMPLE_RATE = 8000


def write_wav(path: Path, seconds: float) -> Path:
    """Write a silent mono 16-bit WAV file of the given length."""
    frames = int(_SAMPLE_RATE * seconds)
    with wave.open(str(path), "wb") as out:
        out.setnchannels(1)
        out.setsampwidth(2)
        out.setframerate(_SAMPLE_RATE)
        out.writeframes(b"\x00\x00" * frames)
    return path


@pytest.fixture
def make_wav(tmp_path: Path) -> Callable[..., Path]:
    """Factory creating silent WAV files under tmp_path."""

    def _make(name: str, seconds: float = 1.0, directory: Path | None = None) -> Path:
        target = directory or tmp_path
        target.mkdir(parents=True, exist_ok=True)
        return write_wav(target / name, seconds)

    return _make


@pytest.fixture
def book_dir(tmp_path: Path) -> Path:
    """A directory laid out like a ripped audiobook.

    Layout:
        The Hobbit/
            01 - An Unexpected Party.wav   (2 s)
            02 - Roast Mutton.wav          (3 s)
            cover.jpg
            notes.txt
    """
    root = tmp_path / "The Hobbit"
    root.mkdir()
    write_wav(root / "01 - An Unexpected Party.wav", 2.0)
    write_wav(root / "02 - Roast Mutton.wav", 3.0)
    (root / "cover.jpg").write_bytes(b"fake jpg")
    (root / "notes.txt").write_text("not audio")
    return root


@pytest.fixture
def corrupt_audio(tmp_path: Path) -> Path:
    """A file with an audio extension that is not audio."""
    path = tmp_path / "broken.mp3"
    path.write_text("this is not an mp3 file")
    return path
