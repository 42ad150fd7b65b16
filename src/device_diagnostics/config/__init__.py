"""Configuration — pydantic settings persisted as YAML."""
from __future__ import annotations

from device_diagnostics.config.settings import (
    DEFAULT_DATA_DIR,
    DiagnosticsSettings,
    HistorySettings,
    SchedulingSettings,
    StressDefaults,
    TrialSettings,
    load_settings,
    save_settings,
)

__all__ = [
    "DiagnosticsSettings",
    "TrialSettings",
    "StressDefaults",
    "HistorySettings",
    "SchedulingSettings",
    "DEFAULT_DATA_DIR",
    "load_settings",
    "save_settings",
]
