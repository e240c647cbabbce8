"""Debounced lookups — quiescence timer plus generation token, latest input wins."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DebouncedLookup(ABC, Generic[T]):
    """
    Runs a remote lookup once the input has been quiet for `quiescence` seconds.

    Every schedule() or invalidate() bumps the generation and cancels any
    pending timer outright. Lookups already in flight are left to finish but
    their result is dropped unless their generation is still current when
    they complete. Must be driven from inside a running event loop.
    """

    name = "lookup"

    def __init__(self, lookup: Callable[..., Awaitable[T]], quiescence: float):
        self._lookup = lookup
        self.quiescence = quiescence
        self.loading = False
        self.lookups_issued = 0
        self._generation = 0
        self._timer: asyncio.TimerHandle | None = None
        self._inflight: set[asyncio.Task] = set()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def pending(self) -> bool:
        """A timer is armed or a lookup is still running."""
        return self._timer is not None or bool(self._inflight)

    def invalidate(self) -> int:
        """Supersede everything scheduled or in flight. Returns the new generation."""
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self.loading = False
        return self._generation

    def schedule(self, *args: Any) -> int:
        generation = self.invalidate()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.quiescence, self._fire, generation, args)
        return generation

    def _fire(self, generation: int, args: tuple) -> None:
        self._timer = None
        if generation != self._generation:
            return
        self.loading = True
        self.lookups_issued += 1
        task = asyncio.get_running_loop().create_task(self._run(generation, args))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _run(self, generation: int, args: tuple) -> None:
        try:
            value = await self._lookup(*args)
            failed = False
        except Exception as e:
            logger.warning(f"{self.name} failed for {args!r}: {e}")
            value = None
            failed = True

        if generation != self._generation:
            logger.debug(f"Discarding stale {self.name} result (generation {generation}, current {self._generation})")
            return

        self.loading = False
        if failed:
            self._apply_failure()
        else:
            self._apply(value)

    @abstractmethod
    def _apply(self, value: T) -> None:
        """Publish a current result."""

    @abstractmethod
    def _apply_failure(self) -> None:
        """Publish the degraded value after a failed lookup."""

    async def settle(self) -> None:
        """Wait until no timer is armed and no lookup is running."""
        while self.pending:
            if self._inflight:
                await asyncio.gather(*self._inflight, return_exceptions=True)
            else:
                await asyncio.sleep(self.quiescence / 2 or 0.001)
