"""Monitoring subsystem — live sampling loop, snapshots and their history."""
from __future__ import annotations

from device_diagnostics.monitoring.history import DEFAULT_SNAPSHOT_CAP, SnapshotHistory
from device_diagnostics.monitoring.loop import (
    DEFAULT_MONITOR_INTERVAL,
    DEFAULT_WINDOW_SIZE,
    MonitoringLoop,
    MonitoringSummary,
    SnapshotCallback,
    StopHandle,
)
from device_diagnostics.monitoring.snapshot import MonitoringSnapshot

__all__ = [
    "MonitoringSnapshot",
    "SnapshotHistory",
    "MonitoringLoop",
    "MonitoringSummary",
    "SnapshotCallback",
    "StopHandle",
    "DEFAULT_SNAPSHOT_CAP",
    "DEFAULT_MONITOR_INTERVAL",
    "DEFAULT_WINDOW_SIZE",
]
