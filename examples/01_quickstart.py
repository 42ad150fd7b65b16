#!/usr/bin/env python3
"""Example: Quickstart — device-diagnostics

Minimal working example: run a simulated stress test, go through the
trial gate with an in-memory session, and sample live metrics.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install device-diagnostics
"""
from __future__ import annotations

import asyncio

import device_diagnostics
from device_diagnostics import (
    DiagnosticsSettings,
    TestCategory,
    quick_session,
    quick_stress_test,
)


async def gated_runs() -> None:
    settings = DiagnosticsSettings.model_validate({
        "stress": {"free_duration": 2},
        "scheduling": {"stress_tick_seconds": 0, "monitor_interval_seconds": 0},
    })
    session = quick_session(settings=settings, seed=7)

    for attempt in range(3):
        outcome = await session.run_test(TestCategory.GPU)
        if not outcome.allowed:
            print(f"  Attempt {attempt + 1}: denied, no free GPU runs left")
            continue
        result = outcome.result
        print(f"  Attempt {attempt + 1}: {result.status.value}, "
              f"avg GPU {result.metrics['avg_gpu_usage']:.1f}%")

    session.gate.activate_premium()
    decision = session.gate.can_run(TestCategory.GPU)
    print(f"  After upgrade: allowed={decision.allowed}, unlimited={decision.unlimited}")

    snapshots = await session.monitor.run_for(3)
    print(f"\nMonitoring: {len(snapshots)} samples, "
          f"latest CPU {snapshots[-1].cpu_usage:.1f}%")


def main() -> None:
    print(f"device-diagnostics version: {device_diagnostics.__version__}")

    # Step 1: One ungated CPU test, no waiting between ticks
    result = quick_stress_test("cpu", duration=2, tick_interval=0, seed=1)
    print(f"\nCPU test: {result.status.value} in {result.duration:.1f}s, "
          f"max temp {result.metrics['max_temp']:.1f}°C")

    # Step 2: A safety stop with a low temperature limit
    result = quick_stress_test("cpu", duration=2, max_temp=50, tick_interval=0)
    print(f"Low-limit CPU test: {result.status.value}")

    # Step 3: Trial gating and monitoring in a session
    print("\nGated GPU runs (free tier, 2 trials):")
    asyncio.run(gated_runs())


if __name__ == "__main__":
    main()
