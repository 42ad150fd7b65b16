"""device-diagnostics — simulated device stress tests with trial gating.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Quick-start example
-------------------
>>> import device_diagnostics as dd
>>> dd.__version__
'0.1.0'

Subpackages
-----------
stress:
    Simulated CPU/GPU/RAM/battery workloads, the run state machine and the
    single-flight runner.
entitlement:
    Premium flag, per-category trial counters and the run gate.
history:
    Persisted, capped stress-test result history.
monitoring:
    Live 1 Hz sampling loop with a rolling window and persisted snapshots.
device:
    Hardware information records and best-effort data providers.
storage:
    Key/value record store boundary (in-memory and JSON-file).
scheduling:
    Fixed-interval async tickers.
config:
    YAML-backed pydantic settings.
"""
from __future__ import annotations

__version__: str = "0.1.0"

from device_diagnostics.convenience import quick_session, quick_stress_test

# -- Stress ---------------------------------------------------------------
from device_diagnostics.stress import (
    Intensity,
    RunInProgressError,
    RunPhase,
    RunState,
    RunStateError,
    SafetyLimits,
    StressTestConfig,
    StressTestResult,
    StressTestRun,
    StressTestRunner,
    TestCategory,
    TestStatus,
    run_battery_stress_test,
    run_cpu_stress_test,
    run_gpu_stress_test,
    run_ram_stress_test,
)

# -- Entitlement ----------------------------------------------------------
from device_diagnostics.entitlement import (
    PREMIUM_PRICE,
    UNLIMITED,
    EntitlementStore,
    GateDecision,
    TrialGate,
    TrialUsage,
    premium_features,
)

# -- History --------------------------------------------------------------
from device_diagnostics.history import ResultRecorder

# -- Monitoring -----------------------------------------------------------
from device_diagnostics.monitoring import (
    MonitoringLoop,
    MonitoringSnapshot,
    MonitoringSummary,
    SnapshotHistory,
)

# -- Device ---------------------------------------------------------------
from device_diagnostics.device import DeviceDataProvider, MockDeviceProvider

# -- Storage --------------------------------------------------------------
from device_diagnostics.storage import (
    InMemoryRecordStore,
    JsonFileRecordStore,
    RecordStore,
)

# -- Scheduling / config / session -----------------------------------------
from device_diagnostics.scheduling import IntervalTicker
from device_diagnostics.config import DiagnosticsSettings, load_settings
from device_diagnostics.session import DiagnosticsSession, TestOutcome

__all__: list[str] = [
    "__version__",
    # convenience
    "quick_session",
    "quick_stress_test",
    # stress
    "TestCategory",
    "TestStatus",
    "Intensity",
    "SafetyLimits",
    "StressTestConfig",
    "StressTestResult",
    "StressTestRun",
    "StressTestRunner",
    "RunPhase",
    "RunState",
    "RunStateError",
    "RunInProgressError",
    "run_cpu_stress_test",
    "run_gpu_stress_test",
    "run_ram_stress_test",
    "run_battery_stress_test",
    # entitlement
    "EntitlementStore",
    "TrialUsage",
    "TrialGate",
    "GateDecision",
    "UNLIMITED",
    "PREMIUM_PRICE",
    "premium_features",
    # history
    "ResultRecorder",
    # monitoring
    "MonitoringLoop",
    "MonitoringSnapshot",
    "MonitoringSummary",
    "SnapshotHistory",
    # device
    "DeviceDataProvider",
    "MockDeviceProvider",
    # storage
    "RecordStore",
    "InMemoryRecordStore",
    "JsonFileRecordStore",
    # scheduling / config / session
    "IntervalTicker",
    "DiagnosticsSettings",
    "load_settings",
    "DiagnosticsSession",
    "TestOutcome",
]
