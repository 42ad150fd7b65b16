"""Run phases and the mutable per-run state owned by one engine instance."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from device_diagnostics.stress.models import MetricValue


class RunStateError(RuntimeError):
    """Raised on an illegal state-machine transition (e.g. ticking a finished run)."""


class RunPhase(str, Enum):
    """Lifecycle of a :class:`~device_diagnostics.stress.engine.StressTestRun`."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    SAFETY_STOPPED = "safety_stopped"

    @property
    def is_terminal(self) -> bool:
        """True for ``COMPLETED`` and ``SAFETY_STOPPED``."""
        return self in (RunPhase.COMPLETED, RunPhase.SAFETY_STOPPED)


@dataclass
class RunState:
    """Live counters and accumulated metrics of one run.

    Attributes
    ----------
    max_iterations:
        Tick budget of the run.
    iterations_completed:
        Ticks processed so far.  Never exceeds ``max_iterations``.
    metrics:
        Category-specific running aggregates.
    """

    max_iterations: int
    iterations_completed: int = 0
    metrics: dict[str, MetricValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}.")

    def advance(self) -> int:
        """Count one more tick and return the new iteration number.

        Raises
        ------
        RunStateError
            If the tick budget is already exhausted.
        """
        if self.iterations_completed >= self.max_iterations:
            raise RunStateError(
                f"Run already completed {self.max_iterations} iterations."
            )
        self.iterations_completed += 1
        return self.iterations_completed

    @property
    def fraction(self) -> float:
        """Completed share of the tick budget in ``[0, 1]``."""
        return self.iterations_completed / self.max_iterations

    @property
    def progress(self) -> float:
        """Completion percentage in ``[0, 100]``."""
        return self.fraction * 100.0

    @property
    def is_exhausted(self) -> bool:
        """True once the final tick has been processed."""
        return self.iterations_completed == self.max_iterations
