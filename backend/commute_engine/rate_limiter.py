from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable

Clock = Callable[[], float]
Sleeper = Callable[[float], Awaitable[None]]


class RateLimiter:
    """Call-to-call spacing shared by every outbound provider request.

    Holds the time of the last outbound call. ``wait(min_interval_s)`` suspends
    for whatever remains of ``min_interval_s`` since that call, then records
    the new call time. Different call kinds pass different floors against the
    same timestamp.
    """

    def __init__(self, *, clock: Clock = time.monotonic, sleep: Sleeper = asyncio.sleep) -> None:
        self._clock = clock
        self._sleep = sleep
        self._last_call: float | None = None
        self._lock = asyncio.Lock()

    @property
    def last_call(self) -> float | None:
        return self._last_call

    async def wait(self, min_interval_s: float) -> float:
        """Returns the number of seconds slept."""
        async with self._lock:
            slept = 0.0
            if self._last_call is not None:
                remaining = float(min_interval_s) - (self._clock() - self._last_call)
                if remaining > 0:
                    await self._sleep(remaining)
                    slept = remaining
            self._last_call = self._clock()
            return slept

    def reset(self) -> None:
        self._last_call = None
