# ABOUTME: Asynchronous hydration of chapters: tag extraction and duration probing.
# ABOUTME: Each chapter gets two fire-and-forget tasks; failures are logged and leave it not-ready.

import asyncio
import logging
import math
from collections.abc import Coroutine
from typing import Any

from audioshelf.core.library import Chapter
from audioshelf.formats.audio import MutagenDurationProbe, MutagenTagExtractor
from audioshelf.metadata.provider import DurationProbe, MetadataExtractor

logger = logging.getLogger(__name__)


class Hydrator:
    """Starts and tracks hydration tasks for chapters.

    Tag extraction and duration probing run independently and in any order.
    Each makes a single attempt with no timeout: a chapter whose file can't
    be read simply never becomes ready.
    """

    def __init__(
        self,
        extractor: MetadataExtractor | None = None,
        probe: DurationProbe | None = None,
    ) -> None:
        self._extractor = extractor or MutagenTagExtractor()
        self._probe = probe or MutagenDurationProbe()
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        """Number of hydration tasks still running."""
        return len(self._tasks)

    def hydrate(self, chapter: Chapter) -> None:
        """Begin hydrating a chapter. Returns immediately.

        Must be called from inside a running event loop.
        """
        if chapter.file is None:
            logger.warning("Chapter has no file handle; it will never become ready")
            return
        if chapter.tags is None:
            self._spawn(self._extract_tags(chapter))
        if chapter.duration is None:
            self._spawn(self._probe_duration(chapter))

    async def drain(self, timeout: float | None = None) -> bool:
        """Wait for outstanding hydration tasks.

        Tasks started while waiting are waited for as well.

        Args:
            timeout: Seconds to wait before giving up, or None to wait forever.

        Returns:
            True if every task finished, False if the timeout expired first.
        """
        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout
        while self._tasks:
            remaining = None if deadline is None else max(0.0, deadline - loop.time())
            _, still_running = await asyncio.wait(set(self._tasks), timeout=remaining)
            if still_running and deadline is not None and loop.time() >= deadline:
                return False
        return True

    def cancel(self) -> None:
        """Cancel every outstanding hydration task."""
        for task in list(self._tasks):
            task.cancel()

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _extract_tags(self, chapter: Chapter) -> None:
        file = chapter.file
        try:
            tags = await self._extractor.extract(file)
        except Exception as exc:
            logger.warning("Tag extraction failed for %s: %s", file.name, exc)
            return
        if not tags.title:
            tags = tags.with_title(file.name)
        chapter.set_tags(tags)

    async def _probe_duration(self, chapter: Chapter) -> None:
        file = chapter.file
        try:
            seconds = await self._probe.probe(file)
        except Exception as exc:
            logger.warning("Duration probe failed for %s: %s", file.name, exc)
            return
        if not math.isfinite(seconds) or seconds < 0:
            logger.warning("Duration probe for %s returned unusable length %r", file.name, seconds)
            return
        chapter.set_duration(seconds)
