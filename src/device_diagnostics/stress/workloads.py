"""Workload — per-category synthesis of simulated instantaneous metrics.

Each workload turns the run's progress fraction into one tick's worth of
instantaneous values and folds them into the run's running aggregates.
Values follow a linear ramp from a category baseline toward its ceiling;
usage figures are additionally jittered within a band by a random source.

Random sources
--------------
Any object exposing ``uniform(a, b) -> float`` works; :class:`random.Random`
is the default.  Tests pass canned sources to pin exact trajectories.

Ranges
------
=========  ====================  ================  ===========================
Category   Usage                 Temperature       Other
=========  ====================  ================  ===========================
CPU        uniform [70, 100)     45 → 75 °C        sticky throttling flag
GPU        uniform [80, 100)     50 → 75 °C
RAM        60 → 90 %             —                 one memory block per tick
Battery    —                     38 → 50 °C        level 85 → 80 %, drain rate
=========  ====================  ================  ===========================
"""
from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from typing import ClassVar, Protocol

import numpy as np
from numpy.typing import NDArray

from device_diagnostics.stress.models import (
    TICK_RATE_HZ,
    Intensity,
    MetricValue,
    StressTestConfig,
    TestCategory,
    TestStatus,
)
from device_diagnostics.stress.state import RunState

logger = logging.getLogger(__name__)

Snapshot = dict[str, MetricValue]

THROTTLE_USAGE_THRESHOLD: float = 50.0
THROTTLE_AFTER_FRACTION: float = 0.3
BATTERY_START_LEVEL: float = 85.0
BATTERY_LEVEL_DROP: float = 5.0

DEFAULT_RAM_BLOCK_BYTES: dict[Intensity, int] = {
    Intensity.LOW: 500_000,
    Intensity.MEDIUM: 500_000,
    Intensity.HIGH: 1_000_000,
}


class RandomSource(Protocol):
    """Anything that can draw a uniform float from ``[a, b)``."""

    def uniform(self, a: float, b: float) -> float: ...


def ramp(start: float, end: float, fraction: float) -> float:
    """Linear interpolation from *start* to *end*."""
    return start + fraction * (end - start)


def running_mean(previous: float, value: float, count: int) -> float:
    """Fold the *count*-th sample into a running mean."""
    return ((previous * (count - 1)) + value) / count


class Workload(ABC):
    """Abstract simulated workload for one :class:`TestCategory`.

    Parameters
    ----------
    rng:
        Random source for jitter.  When omitted a :class:`random.Random`
        seeded with *seed* is used.
    seed:
        Seed for the default random source.
    """

    category: ClassVar[TestCategory]
    enforces_safety_limits: ClassVar[bool] = False

    def __init__(self, rng: RandomSource | None = None, seed: int | None = None) -> None:
        self._rng: RandomSource = rng if rng is not None else random.Random(seed)

    @abstractmethod
    def initial_metrics(self) -> dict[str, MetricValue]:
        """Return the zeroed aggregates a run starts from."""

    @abstractmethod
    def sample(self, state: RunState, config: StressTestConfig) -> Snapshot:
        """Produce this tick's instantaneous values and update ``state.metrics``.

        ``state.iterations_completed`` has already been advanced.
        """

    def final_status(self, state: RunState) -> TestStatus:
        """Grade a run that reached its full tick budget."""
        return TestStatus.PASSED

    def release(self) -> None:
        """Free resources held for the run.  Must be idempotent."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(category={self.category.value!r})"


class CpuWorkload(Workload):
    """Simulated processor saturation with late-run throttling detection."""

    category = TestCategory.CPU
    enforces_safety_limits = True

    def initial_metrics(self) -> dict[str, MetricValue]:
        return {
            "avg_cpu_usage": 0.0,
            "max_temp": 0.0,
            "throttling_detected": False,
            "crashes": 0,
        }

    def sample(self, state: RunState, config: StressTestConfig) -> Snapshot:
        count = state.iterations_completed
        usage = self._rng.uniform(70.0, 100.0)
        temperature = ramp(45.0, 75.0, state.fraction)

        metrics = state.metrics
        metrics["avg_cpu_usage"] = running_mean(float(metrics["avg_cpu_usage"]), usage, count)
        metrics["max_temp"] = max(float(metrics["max_temp"]), temperature)

        # Sticky: once set it stays set for the rest of the run.
        if (
            count > state.max_iterations * THROTTLE_AFTER_FRACTION
            and usage < THROTTLE_USAGE_THRESHOLD
        ):
            if not metrics["throttling_detected"]:
                logger.info("CPU throttling detected at iteration %d.", count)
            metrics["throttling_detected"] = True

        return {
            "cpu_usage": usage,
            "temperature": temperature,
            "throttling": bool(metrics["throttling_detected"]),
        }

    def final_status(self, state: RunState) -> TestStatus:
        if state.metrics.get("throttling_detected"):
            return TestStatus.WARNING
        return TestStatus.PASSED


class GpuWorkload(Workload):
    """Simulated graphics saturation.  Throttling is never evaluated."""

    category = TestCategory.GPU
    enforces_safety_limits = True

    def initial_metrics(self) -> dict[str, MetricValue]:
        return {
            "avg_gpu_usage": 0.0,
            "max_temp": 0.0,
            "throttling_detected": False,
            "crashes": 0,
        }

    def sample(self, state: RunState, config: StressTestConfig) -> Snapshot:
        count = state.iterations_completed
        usage = self._rng.uniform(80.0, 100.0)
        temperature = ramp(50.0, 75.0, state.fraction)

        metrics = state.metrics
        metrics["avg_gpu_usage"] = running_mean(float(metrics["avg_gpu_usage"]), usage, count)
        metrics["max_temp"] = max(float(metrics["max_temp"]), temperature)

        return {"gpu_usage": usage, "temperature": temperature}


class RamWorkload(Workload):
    """Simulated memory pressure backed by real, bounded allocations.

    One block of ``block_bytes[intensity]`` bytes is allocated and retained
    per tick.  :meth:`release` drops every block.

    Parameters
    ----------
    block_bytes:
        Block size per intensity.  Missing intensities fall back to
        :data:`DEFAULT_RAM_BLOCK_BYTES`.
    """

    category = TestCategory.RAM

    def __init__(
        self,
        rng: RandomSource | None = None,
        seed: int | None = None,
        block_bytes: dict[Intensity, int] | None = None,
    ) -> None:
        super().__init__(rng=rng, seed=seed)
        self._block_bytes = {**DEFAULT_RAM_BLOCK_BYTES, **(block_bytes or {})}
        for intensity, size in self._block_bytes.items():
            if size < 1:
                raise ValueError(
                    f"RAM block size for {intensity.value!r} must be >= 1, got {size}."
                )
        self._blocks: list[NDArray[np.uint8]] = []

    @property
    def blocks_allocated(self) -> int:
        """Blocks currently retained."""
        return len(self._blocks)

    @property
    def allocated_bytes(self) -> int:
        """Total bytes currently retained."""
        return sum(block.nbytes for block in self._blocks)

    def initial_metrics(self) -> dict[str, MetricValue]:
        return {"memory_leaks": False, "max_memory_used": 0.0, "blocks_allocated": 0}

    def sample(self, state: RunState, config: StressTestConfig) -> Snapshot:
        size = self._block_bytes[config.intensity]
        self._blocks.append(np.ones(size, dtype=np.uint8))

        usage = ramp(60.0, 90.0, state.fraction)
        metrics = state.metrics
        metrics["max_memory_used"] = max(float(metrics["max_memory_used"]), usage)
        metrics["blocks_allocated"] = len(self._blocks)

        return {"memory_usage": usage, "blocks_allocated": len(self._blocks)}

    def release(self) -> None:
        if self._blocks:
            logger.debug(
                "Releasing %d RAM blocks (%d bytes).",
                len(self._blocks),
                self.allocated_bytes,
            )
        self._blocks.clear()


class BatteryWorkload(Workload):
    """Simulated battery drain with extrapolated hourly drain rate.

    Parameters
    ----------
    start_level:
        Battery percentage at the start of the run.
    """

    category = TestCategory.BATTERY

    def __init__(
        self,
        rng: RandomSource | None = None,
        seed: int | None = None,
        start_level: float = BATTERY_START_LEVEL,
    ) -> None:
        super().__init__(rng=rng, seed=seed)
        self._start_level = start_level

    def initial_metrics(self) -> dict[str, MetricValue]:
        return {"drain_rate": 0.0, "avg_temp": 0.0, "max_temp": 0.0}

    def sample(self, state: RunState, config: StressTestConfig) -> Snapshot:
        count = state.iterations_completed
        level = self._start_level - state.fraction * BATTERY_LEVEL_DROP
        temperature = ramp(38.0, 50.0, state.fraction)
        elapsed_minutes = count / TICK_RATE_HZ / 60.0

        metrics = state.metrics
        metrics["drain_rate"] = (self._start_level - level) / elapsed_minutes * 60.0
        metrics["avg_temp"] = running_mean(float(metrics["avg_temp"]), temperature, count)
        metrics["max_temp"] = max(float(metrics["max_temp"]), temperature)

        return {
            "battery_level": level,
            "temperature": temperature,
            "drain_rate": metrics["drain_rate"],
        }


WORKLOAD_TYPES: dict[TestCategory, type[Workload]] = {
    TestCategory.CPU: CpuWorkload,
    TestCategory.GPU: GpuWorkload,
    TestCategory.RAM: RamWorkload,
    TestCategory.BATTERY: BatteryWorkload,
}


def create_workload(
    category: TestCategory,
    rng: RandomSource | None = None,
    seed: int | None = None,
    ram_block_bytes: dict[Intensity, int] | None = None,
) -> Workload:
    """Instantiate a fresh workload for *category*.

    ``ram_block_bytes`` is only used for :attr:`TestCategory.RAM`.
    """
    if category is TestCategory.RAM:
        return RamWorkload(rng=rng, seed=seed, block_bytes=ram_block_bytes)
    return WORKLOAD_TYPES[category](rng=rng, seed=seed)
