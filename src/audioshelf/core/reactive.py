# ABOUTME: Minimal reactive substrate for the library state engine.
# ABOUTME: Change subscribers plus one-shot predicate watches tagged with generation tokens.

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

Predicate = Callable[[], bool]
Effect = Callable[[], None]


@dataclass(eq=False)
class Watch:
    """A one-shot continuation waiting for its predicate to become true.

    A keyed watch belongs to a logical request. Registering another watch
    under the same key supersedes it, and a superseded watch never fires.
    """

    predicate: Predicate
    effect: Effect
    key: str | None = None
    generation: int = 0
    active: bool = True


class Reactor:
    """Notifies subscribers of state changes and resolves pending watches.

    Every action on the state tree calls ``changed()`` once it has mutated
    persisted state, or ``evaluate()`` when only volatile state moved (such
    as a device being attached). Watches are checked on registration and
    after every change, fire at most once, and are unregistered before
    their effect runs so effects may mutate state themselves.
    """

    def __init__(self) -> None:
        self._subscribers: list[Callable[[], None]] = []
        self._watches: list[Watch] = []
        self._generations: dict[str, int] = {}

    @property
    def pending(self) -> int:
        """Number of watches still waiting."""
        return len(self._watches)

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Call ``callback`` after every change. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def changed(self) -> None:
        """Report a mutation of persisted state."""
        for callback in list(self._subscribers):
            callback()
        self.evaluate()

    def evaluate(self) -> None:
        """Re-check every pending watch against current state."""
        for watch in list(self._watches):
            self._try_fire(watch)

    def when(self, predicate: Predicate, effect: Effect, *, key: str | None = None) -> Watch:
        """Run ``effect`` once, the first time ``predicate`` holds.

        Args:
            predicate: Pure check over current state.
            effect: Continuation to run when the predicate holds.
            key: Optional request key. A new watch under an existing key
                bumps its generation and supersedes the older watch.

        Returns:
            The registered Watch. It may already have fired.
        """
        generation = 0
        if key is not None:
            self.cancel(key)
            generation = self._generations[key]
        watch = Watch(predicate=predicate, effect=effect, key=key, generation=generation)
        self._watches.append(watch)
        self._try_fire(watch)
        return watch

    def cancel(self, key: str) -> None:
        """Supersede every pending watch registered under ``key``."""
        self._generations[key] = self._generations.get(key, 0) + 1
        for watch in [w for w in self._watches if w.key == key]:
            self._discard(watch)

    def has_pending(self, key: str) -> bool:
        """Whether a watch registered under ``key`` is still waiting."""
        return any(watch.key == key for watch in self._watches)

    def is_current(self, watch: Watch) -> bool:
        """Whether a watch still belongs to the latest request for its key."""
        return watch.key is None or self._generations.get(watch.key) == watch.generation

    def wait_for(self, predicate: Predicate) -> "asyncio.Future[None]":
        """Awaitable form of ``when``: resolves the first time predicate holds."""
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()

        def resolve() -> None:
            if not future.done():
                future.set_result(None)

        self.when(predicate, resolve)
        return future

    def _try_fire(self, watch: Watch) -> None:
        if not watch.active:
            return
        if not self.is_current(watch):
            logger.debug("Discarding stale watch %s (generation %d)", watch.key, watch.generation)
            self._discard(watch)
            return
        if not watch.predicate():
            return
        self._discard(watch)
        logger.debug("Watch %s fired", watch.key or "<anonymous>")
        watch.effect()

    def _discard(self, watch: Watch) -> None:
        watch.active = False
        if watch in self._watches:
            self._watches.remove(watch)
