"""Stress subsystem — simulated, safety-bounded workloads.

1. **Models** (:mod:`~device_diagnostics.stress.models`) — categories,
   configuration and immutable results.
2. **Workloads** (:mod:`~device_diagnostics.stress.workloads`) — per-category
   metric synthesis.
3. **Engine** (:mod:`~device_diagnostics.stress.engine`) — the tick-driven
   run state machine.
4. **Runner** (:mod:`~device_diagnostics.stress.runner`) — timed,
   single-flight execution.
"""
from __future__ import annotations

from device_diagnostics.stress.engine import (
    ProgressCallback,
    SafetyStopCallback,
    StressTestRun,
)
from device_diagnostics.stress.models import (
    TICK_RATE_HZ,
    Intensity,
    SafetyLimits,
    StressTestConfig,
    StressTestResult,
    TestCategory,
    TestStatus,
)
from device_diagnostics.stress.runner import (
    RunInProgressError,
    StressTestRunner,
    get_default_runner,
    run_battery_stress_test,
    run_cpu_stress_test,
    run_gpu_stress_test,
    run_ram_stress_test,
)
from device_diagnostics.stress.state import RunPhase, RunState, RunStateError
from device_diagnostics.stress.workloads import (
    BatteryWorkload,
    CpuWorkload,
    GpuWorkload,
    RamWorkload,
    RandomSource,
    Workload,
    create_workload,
)

__all__ = [
    "TICK_RATE_HZ",
    "TestCategory",
    "TestStatus",
    "Intensity",
    "SafetyLimits",
    "StressTestConfig",
    "StressTestResult",
    "RunPhase",
    "RunState",
    "RunStateError",
    "Workload",
    "CpuWorkload",
    "GpuWorkload",
    "RamWorkload",
    "BatteryWorkload",
    "RandomSource",
    "create_workload",
    "StressTestRun",
    "ProgressCallback",
    "SafetyStopCallback",
    "StressTestRunner",
    "RunInProgressError",
    "get_default_runner",
    "run_cpu_stress_test",
    "run_gpu_stress_test",
    "run_ram_stress_test",
    "run_battery_stress_test",
]
