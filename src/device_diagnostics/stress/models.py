"""Value objects for simulated stress tests.

The persisted form of a result uses camelCase keys (``testType``,
``status``, ``duration``, ``metrics``, ``timestamp``) so stored history stays
readable by other clients of the same record store.  In Python the fields
are snake_case.
"""
from __future__ import annotations

import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

TICK_RATE_HZ: int = 10
"""Simulation ticks per second of configured duration."""

MetricValue = bool | int | float


class TestCategory(str, Enum):
    """Simulated subsystem a stress test targets."""

    __test__ = False

    CPU = "CPU"
    GPU = "GPU"
    RAM = "RAM"
    BATTERY = "Battery"

    @property
    def key(self) -> str:
        """Lowercase identifier used for trial counters and the CLI."""
        return self.value.lower()

    @classmethod
    def parse(cls, text: str) -> TestCategory:
        """Look up a category by value or key, ignoring case.

        Raises
        ------
        ValueError
            If *text* names no category.
        """
        lowered = text.strip().lower()
        for category in cls:
            if category.key == lowered:
                return category
        valid = ", ".join(c.key for c in cls)
        raise ValueError(f"Unknown test category {text!r}. Expected one of: {valid}.")


class Intensity(str, Enum):
    """Requested workload intensity.  Only RAM block sizing depends on it."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TestStatus(str, Enum):
    """Final grade of a stress test.

    The engine only ever emits ``PASSED`` or ``WARNING``; ``FAILED`` is
    assigned by callers whose orchestration raised.
    """

    __test__ = False

    PASSED = "passed"
    WARNING = "warning"
    FAILED = "failed"


class SafetyLimits(BaseModel):
    """Thresholds that stop a CPU or GPU run early.

    Attributes
    ----------
    max_temp:
        Simulated temperature (degrees Celsius) that must not be exceeded.
    max_cpu_usage:
        Upper CPU usage bound in percent.  Carried for completeness; no
        workload currently enforces it.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    max_temp: float = 80.0
    max_cpu_usage: float = Field(default=100.0, gt=0.0, le=100.0)


class StressTestConfig(BaseModel):
    """Immutable configuration of one simulated run.

    Attributes
    ----------
    duration:
        Nominal run length in seconds.  Determines the tick budget
        (:attr:`max_iterations`), not a wall-clock deadline.
    intensity:
        Workload intensity.
    safety_limits:
        Early-termination thresholds.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    duration: float = Field(gt=0.0)
    intensity: Intensity = Intensity.HIGH
    safety_limits: SafetyLimits = Field(default_factory=SafetyLimits)

    @model_validator(mode="after")
    def _check_tick_budget(self) -> StressTestConfig:
        if self.max_iterations < 1:
            raise ValueError(
                f"duration {self.duration}s is shorter than one tick "
                f"({1 / TICK_RATE_HZ}s)."
            )
        return self

    @property
    def max_iterations(self) -> int:
        """Number of ticks in a complete run (``duration × 10``)."""
        return round(self.duration * TICK_RATE_HZ)


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class StressTestResult(BaseModel):
    """Immutable outcome of one run.

    Attributes
    ----------
    test_type:
        Category that was exercised.
    status:
        Final grade.
    duration:
        Seconds.  The nominal configured duration for completed runs and
        the measured elapsed time for safety-stopped runs.
    metrics:
        Category-specific aggregates, e.g. ``avg_cpu_usage``.
    timestamp:
        UTC creation time.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    test_type: TestCategory
    status: TestStatus
    duration: float = Field(ge=0.0)
    metrics: dict[str, MetricValue] = Field(default_factory=dict)
    timestamp: datetime.datetime = Field(default_factory=_utcnow)

    def to_record(self) -> dict[str, object]:
        """Return the JSON-compatible persisted form (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_record(cls, record: dict[str, object]) -> StressTestResult:
        """Rebuild a result from :meth:`to_record` output."""
        return cls.model_validate(record)
