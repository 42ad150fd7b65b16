"""StressTestRunner — timed, single-flight execution of stress-test runs.

The runner owns a run token: while one run is open, opening another raises
:class:`RunInProgressError`.  The token is returned when the run is closed,
which :meth:`StressTestRunner.run` guarantees even if a callback raises.

Usage
-----
::

    runner = StressTestRunner()
    result = await runner.run(
        TestCategory.CPU,
        StressTestConfig(duration=5),
        on_progress=lambda pct, metrics: print(f"{pct:.0f}%"),
    )
"""
from __future__ import annotations

import logging
import random
import time
from typing import Callable

from device_diagnostics.scheduling.ticker import IntervalTicker, SleepFunction
from device_diagnostics.stress.engine import (
    ProgressCallback,
    SafetyStopCallback,
    StressTestRun,
)
from device_diagnostics.stress.models import (
    Intensity,
    StressTestConfig,
    StressTestResult,
    TestCategory,
)
from device_diagnostics.stress.state import RunStateError
from device_diagnostics.stress.workloads import RandomSource, create_workload

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL: float = 0.1


class RunInProgressError(RuntimeError):
    """Raised when a run is requested while another one is still open."""

    def __init__(self, active: StressTestRun) -> None:
        self.active = active
        super().__init__(
            f"A {active.category.value} stress test is already running "
            f"({active.phase.value}); wait for it to finish."
        )


class StressTestRunner:
    """Create and drive :class:`StressTestRun` instances one at a time.

    Parameters
    ----------
    tick_interval:
        Seconds between ticks.  ``0`` runs as fast as the event loop allows.
    sleep:
        Coroutine used between ticks (default :func:`asyncio.sleep`).
    clock:
        Monotonic clock handed to each run.
    rng:
        Random source shared by the workloads this runner creates.
    seed:
        Seed for a private :class:`random.Random` when *rng* is omitted.
    ram_block_bytes:
        Per-intensity RAM block sizes.
    """

    def __init__(
        self,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        sleep: SleepFunction | None = None,
        clock: Callable[[], float] = time.monotonic,
        rng: RandomSource | None = None,
        seed: int | None = None,
        ram_block_bytes: dict[Intensity, int] | None = None,
    ) -> None:
        if tick_interval < 0:
            raise ValueError(f"tick_interval must be >= 0, got {tick_interval}.")
        self._tick_interval = tick_interval
        self._sleep = sleep
        self._clock = clock
        if rng is None and seed is not None:
            rng = random.Random(seed)
        self._rng = rng
        self._ram_block_bytes = ram_block_bytes
        self._active: StressTestRun | None = None

    @property
    def active_run(self) -> StressTestRun | None:
        """The currently open run, if any."""
        return self._active

    @property
    def is_busy(self) -> bool:
        return self._active is not None

    def open_run(
        self,
        category: TestCategory,
        config: StressTestConfig,
        on_progress: ProgressCallback | None = None,
        on_safety_stop: SafetyStopCallback | None = None,
    ) -> StressTestRun:
        """Acquire the run token and return an ``IDLE`` run.

        The caller drives the run with ``start()``/``tick()`` and must
        ``close()`` it if it is abandoned before reaching a terminal state.

        Raises
        ------
        RunInProgressError
            If another run is still open.
        """
        if self._active is not None:
            raise RunInProgressError(self._active)
        workload = create_workload(
            category, rng=self._rng, ram_block_bytes=self._ram_block_bytes
        )
        run = StressTestRun(
            workload,
            config,
            on_progress=on_progress,
            on_safety_stop=on_safety_stop,
            clock=self._clock,
            on_close=self._release,
        )
        self._active = run
        return run

    async def run(
        self,
        category: TestCategory,
        config: StressTestConfig,
        on_progress: ProgressCallback | None = None,
        on_safety_stop: SafetyStopCallback | None = None,
    ) -> StressTestResult:
        """Run one test to completion or safety stop.

        Raises
        ------
        RunInProgressError
            If another run is still open.
        """
        run = self.open_run(category, config, on_progress, on_safety_stop)
        try:
            run.start()
            ticker = IntervalTicker(
                self._tick_interval, sleep=self._sleep, limit=run.max_iterations
            )
            async for _ in ticker:
                result = run.tick()
                if result is not None:
                    return result
            raise RunStateError(f"{run!r} exhausted its ticks without terminating.")
        finally:
            run.close()

    def _release(self, run: StressTestRun) -> None:
        if self._active is run:
            self._active = None

    def __repr__(self) -> str:
        return (
            f"StressTestRunner(tick_interval={self._tick_interval}, "
            f"active={self._active!r})"
        )


_default_runner: StressTestRunner | None = None


def get_default_runner() -> StressTestRunner:
    """Return the process-wide runner used by the ``run_*_stress_test`` helpers."""
    global _default_runner
    if _default_runner is None:
        _default_runner = StressTestRunner()
    return _default_runner


async def run_cpu_stress_test(
    config: StressTestConfig,
    on_progress: ProgressCallback,
    on_safety_stop: SafetyStopCallback,
    runner: StressTestRunner | None = None,
) -> StressTestResult:
    """Run a simulated CPU stress test."""
    return await (runner or get_default_runner()).run(
        TestCategory.CPU, config, on_progress, on_safety_stop
    )


async def run_gpu_stress_test(
    config: StressTestConfig,
    on_progress: ProgressCallback,
    on_safety_stop: SafetyStopCallback,
    runner: StressTestRunner | None = None,
) -> StressTestResult:
    """Run a simulated GPU stress test."""
    return await (runner or get_default_runner()).run(
        TestCategory.GPU, config, on_progress, on_safety_stop
    )


async def run_ram_stress_test(
    config: StressTestConfig,
    on_progress: ProgressCallback,
    runner: StressTestRunner | None = None,
) -> StressTestResult:
    """Run a simulated RAM stress test."""
    return await (runner or get_default_runner()).run(TestCategory.RAM, config, on_progress)


async def run_battery_stress_test(
    config: StressTestConfig,
    on_progress: ProgressCallback,
    runner: StressTestRunner | None = None,
) -> StressTestResult:
    """Run a simulated battery stress test."""
    return await (runner or get_default_runner()).run(
        TestCategory.BATTERY, config, on_progress
    )
