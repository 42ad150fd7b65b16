"""DiagnosticsSettings — tunable policy for runs, trials, history and timing.

Settings are pydantic models and can be persisted as YAML for human
editing::

    trials:
      limits: {cpu: 2, gpu: 2, ram: 2, battery: 2}
    stress:
      free_duration: 30
      premium_duration: 60
      intensity: high
      safety_limits: {max_temp: 80, max_cpu_usage: 100}
    history: {result_cap: 50, snapshot_cap: 1000, window_size: 60}
    scheduling: {stress_tick_seconds: 0.1, monitor_interval_seconds: 1.0}
    data_dir: ~/.device-diagnostics
"""
from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from device_diagnostics.stress.models import (
    Intensity,
    SafetyLimits,
    StressTestConfig,
    TestCategory,
)

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR: Path = Path("~/.device-diagnostics")


class TrialSettings(BaseModel):
    """Free runs per category, keyed by category key (``cpu``, ``gpu``, ...)."""

    limits: dict[str, int] = Field(
        default_factory=lambda: {c.key: 2 for c in TestCategory}
    )

    @field_validator("limits")
    @classmethod
    def _check_limits(cls, value: dict[str, int]) -> dict[str, int]:
        for key, limit in value.items():
            TestCategory.parse(key)
            if limit < 0:
                raise ValueError(f"Trial limit for {key!r} must be >= 0, got {limit}.")
        return value

    def as_category_map(self) -> dict[TestCategory, int]:
        return {TestCategory.parse(key): limit for key, limit in self.limits.items()}


class StressDefaults(BaseModel):
    """Run configuration chosen by the session for each user tier."""

    free_duration: float = Field(default=30.0, gt=0.0)
    premium_duration: float = Field(default=60.0, gt=0.0)
    intensity: Intensity = Intensity.HIGH
    safety_limits: SafetyLimits = Field(default_factory=SafetyLimits)
    ram_block_bytes: dict[Intensity, int] = Field(
        default_factory=lambda: {
            Intensity.LOW: 500_000,
            Intensity.MEDIUM: 500_000,
            Intensity.HIGH: 1_000_000,
        }
    )

    def config_for(self, premium: bool) -> StressTestConfig:
        """Build the run configuration for a free or premium user."""
        return StressTestConfig(
            duration=self.premium_duration if premium else self.free_duration,
            intensity=self.intensity,
            safety_limits=self.safety_limits,
        )


class HistorySettings(BaseModel):
    result_cap: int = Field(default=50, ge=1)
    snapshot_cap: int = Field(default=1000, ge=1)
    window_size: int = Field(default=60, ge=1)


class SchedulingSettings(BaseModel):
    stress_tick_seconds: float = Field(default=0.1, ge=0.0)
    monitor_interval_seconds: float = Field(default=1.0, ge=0.0)


class DiagnosticsSettings(BaseModel):
    """Top-level settings.

    Attributes
    ----------
    trials:
        Free-tier run allowance.
    stress:
        Per-tier run configuration.
    history:
        Retention caps.
    scheduling:
        Tick and sampling intervals.
    data_dir:
        Directory of the JSON record store used by the CLI.
    """

    trials: TrialSettings = Field(default_factory=TrialSettings)
    stress: StressDefaults = Field(default_factory=StressDefaults)
    history: HistorySettings = Field(default_factory=HistorySettings)
    scheduling: SchedulingSettings = Field(default_factory=SchedulingSettings)
    data_dir: Path = DEFAULT_DATA_DIR

    def resolved_data_dir(self) -> Path:
        return self.data_dir.expanduser()


def load_settings(path: str | Path) -> DiagnosticsSettings:
    """Read settings from a YAML file.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    pydantic.ValidationError
        If the content does not describe valid settings.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    settings = DiagnosticsSettings.model_validate(data)
    logger.debug("Loaded settings from %s", path)
    return settings


def save_settings(settings: DiagnosticsSettings, path: str | Path) -> Path:
    """Write *settings* to *path* as YAML and return the path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = settings.model_dump(mode="json")
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, allow_unicode=True)
    logger.info("Saved settings to %s", path)
    return path
