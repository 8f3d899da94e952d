"""Moving-window request rate limiter."""

from __future__ import annotations

import asyncio
import logging

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage
from limits.strategies import MovingWindowRateLimiter

logger = logging.getLogger(__name__)

DEFAULT_MAX_REQUESTS = 60
DEFAULT_WINDOW = 60  # seconds
DEFAULT_SWEEP_INTERVAL = 300.0  # seconds


class SlidingWindowLimiter:
    """Admits at most ``max_requests`` per client key in any trailing ``window``.

    Admissions are counted by a ``limits`` moving-window strategy over
    in-process memory storage. Rejected calls are not recorded, so a client
    that keeps retrying is admitted again as soon as its oldest admission
    leaves the window.

    Client keys seen since the last sweep are tracked here; a background sweep
    clears the storage of clients with no admission left in the window so
    memory stays bounded by recently active clients.

    Lifecycle:
        limiter = SlidingWindowLimiter()
        await limiter.start()   # begins periodic sweep
        limiter.allow("1.2.3.4")
        await limiter.stop()
    """

    def __init__(
        self,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        window: int = DEFAULT_WINDOW,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL,
    ) -> None:
        self._max = max_requests
        self._window = window
        self._sweep_interval = sweep_interval
        self._item = RateLimitItemPerSecond(max_requests, window)
        self._storage = MemoryStorage()
        self._strategy = MovingWindowRateLimiter(self._storage)
        self._clients: set[str] = set()
        self._task: asyncio.Task | None = None

    def allow(self, key: str) -> bool:
        self._clients.add(key)
        if self._strategy.hit(self._item, key):
            return True
        logger.info("Rate limit exceeded for %s (%d requests in %ds)", key, self._max, self._window)
        return False

    def sweep(self) -> int:
        """Forget clients with an empty window. Returns how many were dropped."""
        idle = [
            key for key in self._clients
            if self._strategy.get_window_stats(self._item, key).remaining >= self._max
        ]
        for key in idle:
            self._storage.clear(self._item.key_for(key))
            self._clients.discard(key)
        if idle:
            logger.debug("Rate limiter sweep evicted %d idle clients", len(idle))
        return len(idle)

    async def start(self) -> None:
        if self._task and not self._task.done():
            return
        self._task = asyncio.create_task(self._sweep_loop(), name="ratelimit-sweeper")
        logger.info("Rate limiter sweeper started: %.0fs interval", self._sweep_interval)

    async def stop(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("Rate limiter sweeper stopped")

    def __len__(self) -> int:
        return len(self._clients)

    def __contains__(self, key: str) -> bool:
        return key in self._clients

    # --- Internal ---

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval)
            try:
                self.sweep()
            except Exception:
                logger.exception("Rate limiter sweep failed")
