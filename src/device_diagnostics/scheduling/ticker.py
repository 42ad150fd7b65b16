"""IntervalTicker — fixed-interval cooperative scheduling.

Both the stress-test engine (100 ms) and the monitoring loop (1 s) advance
by awaiting a ticker.  All per-tick work runs synchronously between two
awaits, so ticks never overlap.  Drift between ticks is not compensated.

The sleep coroutine is injectable so tests can run many ticks without real
waits::

    async def no_wait(_seconds: float) -> None:
        await asyncio.sleep(0)

    ticker = IntervalTicker(0.1, sleep=no_wait)
    async for index in ticker:
        ...
"""
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable

SleepFunction = Callable[[float], Awaitable[None]]


class IntervalTicker:
    """Async iterator that yields ``1, 2, 3, ...`` once per interval.

    Parameters
    ----------
    interval_seconds:
        Delay awaited before each tick.  Zero yields control to the event
        loop without waiting.
    sleep:
        Coroutine function used to wait.  Defaults to :func:`asyncio.sleep`.
    limit:
        Optional maximum number of ticks; iteration ends afterwards.

    Raises
    ------
    ValueError
        If ``interval_seconds`` is negative or ``limit`` is below 1.
    """

    def __init__(
        self,
        interval_seconds: float,
        sleep: SleepFunction | None = None,
        limit: int | None = None,
    ) -> None:
        if interval_seconds < 0:
            raise ValueError(f"interval_seconds must be >= 0, got {interval_seconds}.")
        if limit is not None and limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}.")
        self._interval = interval_seconds
        self._sleep: SleepFunction = sleep or asyncio.sleep
        self._limit = limit
        self._ticks = 0

    @property
    def interval_seconds(self) -> float:
        """Configured delay between ticks."""
        return self._interval

    @property
    def ticks(self) -> int:
        """Ticks emitted so far."""
        return self._ticks

    def __aiter__(self) -> AsyncIterator[int]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[int]:
        while self._limit is None or self._ticks < self._limit:
            await self._sleep(self._interval)
            self._ticks += 1
            yield self._ticks

    def __repr__(self) -> str:
        return (
            f"IntervalTicker(interval_seconds={self._interval}, "
            f"limit={self._limit}, ticks={self._ticks})"
        )
