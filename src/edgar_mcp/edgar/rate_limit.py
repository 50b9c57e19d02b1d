"""Request pacing for SEC EDGAR."""

import asyncio
import logging

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Allow one upstream request at a time, with a pause after each one.

    SEC documents a ceiling of 10 requests/second. Holding a single slot and
    sleeping ``cooldown`` seconds before handing it on stays below that.
    Waiters are admitted in FIFO order.

    Usage:
        async with limiter:
            response = await client.get(url)
    """

    def __init__(self, cooldown: float = 0.1) -> None:
        self.cooldown = cooldown
        self._lock = asyncio.Lock()

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    async def acquire(self) -> None:
        """Wait until no other request is in flight."""
        await self._lock.acquire()

    async def release(self) -> None:
        """Pause for the cool-down, then admit the next waiter."""
        try:
            await asyncio.sleep(self.cooldown)
        finally:
            # Must run even if the sleep is cancelled, or every later caller hangs
            self._lock.release()

    async def __aenter__(self) -> "RateLimiter":
        await self.acquire()
        return self

    async def __aexit__(self, *args) -> None:
        await self.release()
