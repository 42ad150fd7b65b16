"""Convenience API for device-diagnostics — 3-line quickstart.

Example
-------
::

    # Option 1 — synchronous one-call stress test
    from device_diagnostics import quick_stress_test
    result = quick_stress_test("cpu", duration=2, tick_interval=0)
    print(result.status, result.metrics["avg_cpu_usage"])

    # Option 2 — an in-memory session with gating and history
    from device_diagnostics import TestCategory, quick_session
    session = quick_session()
    print(session.gate.can_run(TestCategory.GPU))

"""
from __future__ import annotations

import asyncio
import random
from pathlib import Path

from device_diagnostics.config.settings import DiagnosticsSettings
from device_diagnostics.session import DiagnosticsSession
from device_diagnostics.storage.base import RecordStore
from device_diagnostics.storage.json_file import JsonFileRecordStore
from device_diagnostics.storage.memory import InMemoryRecordStore
from device_diagnostics.stress.engine import ProgressCallback
from device_diagnostics.stress.models import (
    Intensity,
    SafetyLimits,
    StressTestConfig,
    StressTestResult,
    TestCategory,
)
from device_diagnostics.stress.runner import StressTestRunner


def quick_session(
    data_dir: str | Path | None = None,
    settings: DiagnosticsSettings | None = None,
    seed: int | None = None,
) -> DiagnosticsSession:
    """Build a :class:`DiagnosticsSession` with sensible defaults.

    Parameters
    ----------
    data_dir:
        Directory for a JSON record store.  ``None`` keeps everything in
        memory.
    settings:
        Optional settings override.
    seed:
        Seed for reproducible workload jitter.
    """
    store: RecordStore = (
        JsonFileRecordStore(data_dir) if data_dir is not None else InMemoryRecordStore()
    )
    rng = random.Random(seed) if seed is not None else None
    return DiagnosticsSession(store, settings=settings, rng=rng)


def quick_stress_test(
    category: TestCategory | str,
    duration: float = 5.0,
    intensity: Intensity | str = Intensity.HIGH,
    max_temp: float = 80.0,
    tick_interval: float = 0.1,
    seed: int | None = None,
    on_progress: ProgressCallback | None = None,
) -> StressTestResult:
    """Run one ungated stress test synchronously and return its result.

    Must not be called from inside a running event loop.
    """
    if isinstance(category, str):
        category = TestCategory.parse(category)
    config = StressTestConfig(
        duration=duration,
        intensity=Intensity(intensity),
        safety_limits=SafetyLimits(max_temp=max_temp),
    )
    runner = StressTestRunner(tick_interval=tick_interval, seed=seed)
    return asyncio.run(runner.run(category, config, on_progress=on_progress))
