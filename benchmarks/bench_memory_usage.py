"""Benchmark: Memory held by a RAM stress run and released on close.

Uses tracemalloc to measure the memory retained after a full RAM run's
allocations and after the run has been closed.
"""
from __future__ import annotations

import tracemalloc

from conftest import drive, save_result

from device_diagnostics.stress.engine import StressTestRun
from device_diagnostics.stress.models import Intensity, StressTestConfig
from device_diagnostics.stress.workloads import RamWorkload

_DURATION_SECONDS: float = 10.0
_BLOCK_BYTES: int = 100_000


def bench_ram_run_memory() -> dict[str, object]:
    """Benchmark memory retained by RAM workload blocks.

    Returns
    -------
    dict with keys: operation, iterations, peak_memory_kb, current_memory_kb,
    ops_per_second, avg_latency_ms, memory_peak_mb.
    """
    config = StressTestConfig(duration=_DURATION_SECONDS, intensity=Intensity.HIGH)
    workload = RamWorkload(block_bytes={Intensity.HIGH: _BLOCK_BYTES})
    run = StressTestRun(workload, config)

    tracemalloc.start()
    # Stop one tick short of completion so the blocks are still held.
    held_ticks = drive(run, max_ticks=config.max_iterations - 1)
    _, peak_bytes = tracemalloc.get_traced_memory()
    run.close()
    current_bytes, _ = tracemalloc.get_traced_memory()
    tracemalloc.stop()

    peak_kb = round(peak_bytes / 1024, 2)
    current_kb = round(current_bytes / 1024, 2)

    result: dict[str, object] = {
        "operation": "ram_run_memory",
        "iterations": held_ticks,
        "peak_memory_kb": peak_kb,
        "current_memory_kb": current_kb,
        "ops_per_second": 0.0,
        "avg_latency_ms": 0.0,
        "memory_peak_mb": round(peak_kb / 1024, 4),
    }
    print(
        f"[bench_memory_usage] {result['operation']}: "
        f"peak {peak_kb:.2f} KB, after close {current_kb:.2f} KB"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_ram_run_memory()


if __name__ == "__main__":
    save_result(run_benchmark(), "memory_baseline.json")
