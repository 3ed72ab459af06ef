from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

from .logging_utils import log_event
from .settings import settings

T = TypeVar("T")


class DebouncedCall(Generic[T]):
    """Cancel-and-reschedule wrapper around one async lookup (one input field, one map).

    Every ``trigger`` bumps a sequence token and schedules the call after the
    quiet period, cancelling a call still waiting out its own quiet period.
    A call that already reached the provider is left to finish, but its result
    is only delivered to ``on_result`` if no newer trigger happened meanwhile.
    A superseded call that raises is logged and resolves to None; a failure of
    the latest call propagates to ``wait``.
    """

    def __init__(
        self,
        fn: Callable[..., Awaitable[T]],
        *,
        quiet_period_s: float | None = None,
        on_result: Callable[[T], None] | None = None,
        name: str = "debounced",
    ) -> None:
        self._fn = fn
        self.quiet_period_s = settings.debounce_quiet_period_s if quiet_period_s is None else float(quiet_period_s)
        self._on_result = on_result
        self.name = name
        self._latest_token = 0
        self._pending: asyncio.Task[T | None] | None = None
        self._last_task: asyncio.Task[T | None] | None = None
        # Strong references until done; the loop only keeps weak ones.
        self._tasks: set[asyncio.Task[T | None]] = set()

    @property
    def latest_token(self) -> int:
        return self._latest_token

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def trigger(self, *args: Any, **kwargs: Any) -> int:
        """Schedule a call with these arguments; must run inside an event loop."""
        self.cancel()
        self._latest_token += 1
        token = self._latest_token
        task = asyncio.get_running_loop().create_task(self._run(token, args, kwargs))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._pending = task
        self._last_task = task
        return token

    def cancel(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    def is_current(self, token: int) -> bool:
        return token == self._latest_token

    async def wait(self) -> T | None:
        """Await the most recently scheduled call; None if it was cancelled or stale."""
        task = self._last_task
        if task is None:
            return None
        try:
            return await task
        except asyncio.CancelledError:
            if task.cancelled():
                return None
            raise

    async def _run(self, token: int, args: tuple[Any, ...], kwargs: dict[str, Any]) -> T | None:
        await asyncio.sleep(self.quiet_period_s)
        # Past the quiet period: newer input no longer cancels this call.
        if self._pending is asyncio.current_task():
            self._pending = None

        try:
            result = await self._fn(*args, **kwargs)
        except Exception as exc:
            stale = not self.is_current(token)
            log_event(
                "debounce_failed",
                level=logging.WARNING,
                debounce_name=self.name,
                token=token,
                stale=stale,
                detail=f"{type(exc).__name__}: {exc}",
            )
            if stale:
                # Nobody waits on a superseded call, so its error ends here.
                return None
            raise

        if not self.is_current(token):
            log_event("debounce_dropped_stale", debounce_name=self.name, token=token, latest_token=self._latest_token)
            return None
        if self._on_result is not None:
            self._on_result(result)
        return result
