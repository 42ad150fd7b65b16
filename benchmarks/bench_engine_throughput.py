"""Benchmark: Stress-test engine throughput — ticks per second.

Drives CPU runs synchronously through StressTestRun.start()/tick() so the
measurement covers workload sampling, aggregation and the safety check
without any scheduling delay.
"""
from __future__ import annotations

import random
import time

from conftest import drive, save_result

from device_diagnostics.stress.engine import StressTestRun
from device_diagnostics.stress.models import StressTestConfig
from device_diagnostics.stress.workloads import CpuWorkload

_RUNS: int = 200
_DURATION_SECONDS: float = 30.0


def bench_engine_tick_throughput() -> dict[str, object]:
    """Benchmark StressTestRun.tick() throughput.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p99_latency_ms, memory_peak_mb.
    """
    config = StressTestConfig(duration=_DURATION_SECONDS)
    rng = random.Random(42)
    ticks = 0

    start = time.perf_counter()
    for _ in range(_RUNS):
        ticks += drive(StressTestRun(CpuWorkload(rng=rng), config))
    total = time.perf_counter() - start

    result: dict[str, object] = {
        "operation": "engine_tick_throughput",
        "iterations": ticks,
        "total_seconds": round(total, 4),
        "ops_per_second": round(ticks / total, 1),
        "avg_latency_ms": round(total / ticks * 1000, 4),
        "p99_latency_ms": 0.0,
        "memory_peak_mb": 0.0,
    }
    print(
        f"[bench_engine_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ticks/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_engine_tick_throughput()


if __name__ == "__main__":
    save_result(run_benchmark(), "throughput_baseline.json")
