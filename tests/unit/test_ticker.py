"""Unit tests for IntervalTicker."""
from __future__ import annotations

import pytest

from device_diagnostics.scheduling.ticker import IntervalTicker


class TestIntervalTicker:
    async def test_yields_sequential_indices_up_to_limit(self, no_wait) -> None:
        ticker = IntervalTicker(0.5, sleep=no_wait, limit=3)
        assert [index async for index in ticker] == [1, 2, 3]
        assert ticker.ticks == 3

    async def test_sleeps_before_each_tick(self) -> None:
        slept: list[float] = []

        async def record(seconds: float) -> None:
            slept.append(seconds)

        async for _ in IntervalTicker(0.25, sleep=record, limit=4):
            pass
        assert slept == [0.25] * 4

    async def test_unbounded_ticker_can_be_broken(self, no_wait) -> None:
        ticker = IntervalTicker(0.0, sleep=no_wait)
        async for index in ticker:
            if index == 7:
                break
        assert ticker.ticks == 7

    async def test_zero_interval_uses_real_sleep(self) -> None:
        ticker = IntervalTicker(0.0, limit=2)
        assert [i async for i in ticker] == [1, 2]

    def test_negative_interval_raises(self) -> None:
        with pytest.raises(ValueError, match="interval_seconds"):
            IntervalTicker(-1.0)

    def test_zero_limit_raises(self) -> None:
        with pytest.raises(ValueError, match="limit"):
            IntervalTicker(1.0, limit=0)

    def test_properties_and_repr(self) -> None:
        ticker = IntervalTicker(1.0, limit=5)
        assert ticker.interval_seconds == 1.0
        assert ticker.ticks == 0
        assert "limit=5" in repr(ticker)
