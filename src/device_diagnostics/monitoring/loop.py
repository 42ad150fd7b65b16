"""MonitoringLoop — periodic sampling of live device metrics.

The loop samples a :class:`~device_diagnostics.device.provider.DeviceDataProvider`
once per interval (1 s by default), hands the snapshot to a callback, keeps
the latest ``window_size`` snapshots in memory (oldest first) and appends
every snapshot to persisted :class:`SnapshotHistory`.

At most one sampling task is active per loop: :meth:`MonitoringLoop.start`
stops any previous task first.  Stopping is idempotent.  No safety limits
apply; the loop runs until stopped.

Example
-------
::

    loop = MonitoringLoop(MockDeviceProvider(), history=SnapshotHistory(store))
    stop = loop.start(lambda snapshot: print(snapshot.cpu_usage))
    await asyncio.sleep(5)
    stop()
"""
from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable

import numpy as np

from device_diagnostics.device.provider import DeviceDataProvider
from device_diagnostics.monitoring.history import SnapshotHistory
from device_diagnostics.monitoring.snapshot import MonitoringSnapshot
from device_diagnostics.scheduling.ticker import IntervalTicker, SleepFunction

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[MonitoringSnapshot], None]
StopHandle = Callable[[], None]

DEFAULT_MONITOR_INTERVAL: float = 1.0
DEFAULT_WINDOW_SIZE: int = 60


@dataclass(frozen=True)
class MonitoringSummary:
    """Aggregates over the in-memory rolling window.

    Attributes
    ----------
    samples:
        Number of snapshots aggregated.
    avg_cpu_usage, max_cpu_usage:
        CPU usage statistics, percent.
    avg_ram_usage, max_ram_usage:
        RAM usage statistics, percent.
    avg_temperature, max_temperature:
        Temperature statistics, degrees Celsius.
    latest_battery_level:
        Battery level of the newest snapshot.
    avg_gpu_usage:
        Mean GPU usage over snapshots that report it, else ``None``.
    """

    samples: int
    avg_cpu_usage: float
    max_cpu_usage: float
    avg_ram_usage: float
    max_ram_usage: float
    avg_temperature: float
    max_temperature: float
    latest_battery_level: float
    avg_gpu_usage: float | None = None


class MonitoringLoop:
    """Sample device metrics on a fixed cadence.

    Parameters
    ----------
    provider:
        Source of instantaneous device data.
    history:
        Persisted snapshot history.  ``None`` keeps snapshots in memory only.
    interval_seconds:
        Delay between samples.
    window_size:
        Capacity of the in-memory rolling window.
    sleep:
        Coroutine used between samples (default :func:`asyncio.sleep`).
    """

    def __init__(
        self,
        provider: DeviceDataProvider,
        history: SnapshotHistory | None = None,
        interval_seconds: float = DEFAULT_MONITOR_INTERVAL,
        window_size: int = DEFAULT_WINDOW_SIZE,
        sleep: SleepFunction | None = None,
    ) -> None:
        if window_size < 1:
            raise ValueError(f"window_size must be >= 1, got {window_size}.")
        self._provider = provider
        self._history = history
        self._interval = interval_seconds
        self._sleep = sleep
        self._window: deque[MonitoringSnapshot] = deque(maxlen=window_size)
        self._task: asyncio.Task[None] | None = None
        self._stop_handle: StopHandle | None = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def window(self) -> list[MonitoringSnapshot]:
        """Rolling window contents, oldest first."""
        return list(self._window)

    @property
    def latest(self) -> MonitoringSnapshot | None:
        return self._window[-1] if self._window else None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------

    def sample(self) -> MonitoringSnapshot:
        """Read the provider once and build a snapshot."""
        cpu = self._provider.cpu_info()
        ram = self._provider.ram_info()
        battery = self._provider.battery_info()
        gpu = self._provider.gpu_info()
        return MonitoringSnapshot(
            cpu_usage=cpu.average_usage,
            ram_usage=ram.usage_percent,
            temperature=battery.temperature,
            battery_level=battery.level,
            gpu_usage=gpu.usage,
        )

    def tick(self, callback: SnapshotCallback | None = None) -> MonitoringSnapshot:
        """Take one sample: notify, append to the window, persist."""
        snapshot = self.sample()
        if callback is not None:
            callback(snapshot)
        self._window.append(snapshot)
        if self._history is not None:
            self._history.append(snapshot)
        return snapshot

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, callback: SnapshotCallback | None = None) -> StopHandle:
        """Begin sampling in a background task of the running event loop.

        Any previous sampling task is stopped and the rolling window is
        cleared.

        Returns
        -------
        StopHandle
            Callable that stops this particular task.  Idempotent.

        Raises
        ------
        RuntimeError
            If called outside a running event loop.
        """
        event_loop = asyncio.get_running_loop()
        self.stop()
        self._window.clear()

        task = event_loop.create_task(self._run(callback))
        self._task = task

        def stop() -> None:
            if not task.done():
                task.cancel()
            if self._task is task:
                self._stop_handle = None
                logger.info("Monitoring stopped after %d samples.", len(self._window))

        self._stop_handle = stop
        logger.info("Monitoring started (interval=%.2fs).", self._interval)
        return stop

    def stop(self) -> None:
        """Stop the active sampling task, if any."""
        if self._stop_handle is not None:
            self._stop_handle()

    async def wait_stopped(self) -> None:
        """Wait until the most recent sampling task has finished."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    async def run_for(
        self, samples: int, callback: SnapshotCallback | None = None
    ) -> list[MonitoringSnapshot]:
        """Sample exactly *samples* times in the foreground and return them."""
        taken: list[MonitoringSnapshot] = []
        ticker = IntervalTicker(self._interval, sleep=self._sleep, limit=samples)
        async for _ in ticker:
            taken.append(self.tick(callback))
        return taken

    async def _run(self, callback: SnapshotCallback | None) -> None:
        try:
            async for _ in IntervalTicker(self._interval, sleep=self._sleep):
                self.tick(callback)
        except Exception:
            logger.exception("Monitoring loop aborted.")
            raise

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def summary(self) -> MonitoringSummary | None:
        """Aggregate the rolling window, or ``None`` when it is empty."""
        if not self._window:
            return None
        cpu = np.array([s.cpu_usage for s in self._window], dtype=np.float64)
        ram = np.array([s.ram_usage for s in self._window], dtype=np.float64)
        temp = np.array([s.temperature for s in self._window], dtype=np.float64)
        gpu_values = [s.gpu_usage for s in self._window if s.gpu_usage is not None]
        return MonitoringSummary(
            samples=len(self._window),
            avg_cpu_usage=float(cpu.mean()),
            max_cpu_usage=float(cpu.max()),
            avg_ram_usage=float(ram.mean()),
            max_ram_usage=float(ram.max()),
            avg_temperature=float(temp.mean()),
            max_temperature=float(temp.max()),
            latest_battery_level=self._window[-1].battery_level,
            avg_gpu_usage=float(np.mean(gpu_values)) if gpu_values else None,
        )

    def __repr__(self) -> str:
        return (
            f"MonitoringLoop(interval_seconds={self._interval}, "
            f"window={len(self._window)}/{self._window.maxlen}, running={self.is_running})"
        )
