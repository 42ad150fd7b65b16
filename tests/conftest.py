"""Shared fixtures for the device-diagnostics test suite."""
from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import pytest

from device_diagnostics.storage.memory import InMemoryRecordStore


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


class CannedRandom:
    """Random source returning a fixed value, or cycling through a sequence."""

    def __init__(self, *values: float) -> None:
        self._values = values or (0.5,)
        self._index = 0
        self.calls: list[tuple[float, float]] = []

    def uniform(self, a: float, b: float) -> float:
        self.calls.append((a, b))
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return value


async def _no_wait(_seconds: float) -> None:
    await asyncio.sleep(0)


@pytest.fixture()
def expected_version() -> str:
    return "0.1.0"


@pytest.fixture()
def store() -> InMemoryRecordStore:
    """Fresh in-memory record store for each test."""
    return InMemoryRecordStore()


@pytest.fixture()
def no_wait() -> Callable[[float], Awaitable[None]]:
    """Sleep replacement that only yields to the event loop."""
    return _no_wait


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def canned_rng() -> type[CannedRandom]:
    """Factory for deterministic random sources: ``canned_rng(40.0, 90.0)``."""
    return CannedRandom
