"""StressTestRun — the time-stepped state machine behind one simulated test.

Phases::

    IDLE --start()--> RUNNING --tick()...--> COMPLETED
                                        \\-> SAFETY_STOPPED

Each :meth:`StressTestRun.tick` performs one 100 ms step:

1. advance ``iterations_completed``;
2. let the workload synthesise instantaneous values and update aggregates;
3. for workloads that enforce safety limits, stop immediately when the
   instantaneous temperature exceeds ``safety_limits.max_temp``: the
   safety callback fires and a ``warning`` result with the *measured*
   elapsed time is returned;
4. otherwise fire the progress callback;
5. on the final tick return the graded result with the *nominal* duration.

The state machine never sleeps.  Timing is the job of
:class:`~device_diagnostics.stress.runner.StressTestRunner`, which lets tests
drive runs synchronously by calling :meth:`tick` directly.
"""
from __future__ import annotations

import logging
import time
from typing import Callable

from device_diagnostics.stress.models import (
    MetricValue,
    StressTestConfig,
    StressTestResult,
    TestCategory,
    TestStatus,
)
from device_diagnostics.stress.state import RunPhase, RunState, RunStateError
from device_diagnostics.stress.workloads import Workload

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, dict[str, MetricValue]], None]
"""Called as ``on_progress(progress_percent, instantaneous_metrics)``."""

SafetyStopCallback = Callable[[], None]


class StressTestRun:
    """One cancellable-by-limit simulated workload run.

    Parameters
    ----------
    workload:
        Fresh workload instance; the run owns it and releases it on close.
    config:
        Immutable run configuration.
    on_progress:
        Invoked once per non-terminating-by-safety tick, including the
        final tick.
    on_safety_stop:
        Invoked once when a safety limit ends the run early.
    clock:
        Monotonic clock in seconds, used for the elapsed time of
        safety-stopped runs.
    on_close:
        Invoked with this run once its resources have been released.
    """

    def __init__(
        self,
        workload: Workload,
        config: StressTestConfig,
        on_progress: ProgressCallback | None = None,
        on_safety_stop: SafetyStopCallback | None = None,
        clock: Callable[[], float] = time.monotonic,
        on_close: Callable[[StressTestRun], None] | None = None,
    ) -> None:
        self._workload = workload
        self._config = config
        self._on_progress = on_progress
        self._on_safety_stop = on_safety_stop
        self._clock = clock
        self._on_close = on_close
        self._phase = RunPhase.IDLE
        self._state: RunState | None = None
        self._started_at: float = 0.0
        self._result: StressTestResult | None = None
        self._closed = False

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def category(self) -> TestCategory:
        """Category of the underlying workload."""
        return self._workload.category

    @property
    def config(self) -> StressTestConfig:
        return self._config

    @property
    def phase(self) -> RunPhase:
        """Current lifecycle phase."""
        return self._phase

    @property
    def state(self) -> RunState:
        """Live run state.

        Raises
        ------
        RunStateError
            If the run has not been started.
        """
        if self._state is None:
            raise RunStateError("Run has not been started.")
        return self._state

    @property
    def max_iterations(self) -> int:
        return self._config.max_iterations

    @property
    def result(self) -> StressTestResult | None:
        """The final result once the run is terminal, else ``None``."""
        return self._result

    @property
    def is_finished(self) -> bool:
        return self._phase.is_terminal

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Move from ``IDLE`` to ``RUNNING``.

        Raises
        ------
        RunStateError
            If the run was already started or has been closed.
        """
        if self._phase is not RunPhase.IDLE or self._closed:
            raise RunStateError(f"Cannot start a run in phase {self._phase.value!r}.")
        self._state = RunState(
            max_iterations=self._config.max_iterations,
            metrics=self._workload.initial_metrics(),
        )
        self._started_at = self._clock()
        self._phase = RunPhase.RUNNING
        logger.info(
            "%s stress test started: duration=%ss intensity=%s max_iterations=%d",
            self.category.value,
            self._config.duration,
            self._config.intensity.value,
            self._config.max_iterations,
        )

    def tick(self) -> StressTestResult | None:
        """Process one tick.

        Returns
        -------
        StressTestResult | None
            The final result on the terminating tick, ``None`` otherwise.

        Raises
        ------
        RunStateError
            If the run is not ``RUNNING``.
        """
        if self._phase is not RunPhase.RUNNING:
            raise RunStateError(f"Cannot tick a run in phase {self._phase.value!r}.")

        state = self.state
        state.advance()
        snapshot = self._workload.sample(state, self._config)

        temperature = snapshot.get("temperature")
        if (
            self._workload.enforces_safety_limits
            and temperature is not None
            and temperature > self._config.safety_limits.max_temp
        ):
            return self._safety_stop(float(temperature))

        if self._on_progress is not None:
            self._on_progress(state.progress, dict(snapshot))

        if state.is_exhausted:
            return self._complete()
        return None

    def close(self) -> None:
        """Release workload resources.  Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._workload.release()
        if self._on_close is not None:
            self._on_close(self)

    # ------------------------------------------------------------------
    # Terminal states
    # ------------------------------------------------------------------

    def _safety_stop(self, temperature: float) -> StressTestResult:
        self._phase = RunPhase.SAFETY_STOPPED
        elapsed = self._clock() - self._started_at
        logger.warning(
            "%s stress test safety stop at iteration %d/%d: %.1f°C > %.1f°C",
            self.category.value,
            self.state.iterations_completed,
            self.state.max_iterations,
            temperature,
            self._config.safety_limits.max_temp,
        )
        if self._on_safety_stop is not None:
            self._on_safety_stop()
        return self._finish(TestStatus.WARNING, elapsed)

    def _complete(self) -> StressTestResult:
        self._phase = RunPhase.COMPLETED
        status = self._workload.final_status(self.state)
        logger.info(
            "%s stress test completed with status %s.", self.category.value, status.value
        )
        return self._finish(status, self._config.duration)

    def _finish(self, status: TestStatus, duration: float) -> StressTestResult:
        self._result = StressTestResult(
            test_type=self.category,
            status=status,
            duration=max(0.0, duration),
            metrics=dict(self.state.metrics),
        )
        self.close()
        return self._result

    def __repr__(self) -> str:
        iterations = self._state.iterations_completed if self._state is not None else 0
        return (
            f"StressTestRun(category={self.category.value!r}, phase={self._phase.value!r}, "
            f"iterations={iterations}/{self._config.max_iterations})"
        )
