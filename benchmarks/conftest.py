"""Helpers shared by the device-diagnostics benchmarks.

Both benchmarks drive :class:`StressTestRun` synchronously, with no ticker
and no sleeping, and write their result dict to ``benchmarks/results/``.
Importing this module also puts ``src/`` on ``sys.path`` so the scripts run
from a plain checkout.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

_SRC = Path(__file__).parent.parent / "src"
RESULTS_DIR: Path = Path(__file__).parent / "results"

if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from device_diagnostics.stress.engine import StressTestRun


def drive(run: StressTestRun, max_ticks: int | None = None) -> int:
    """Start *run* and tick it to its end, or for at most *max_ticks* ticks.

    Returns the number of ticks taken.
    """
    run.start()
    ticks = 0
    while max_ticks is None or ticks < max_ticks:
        ticks += 1
        if run.tick() is not None:
            break
    return ticks


def save_result(result: dict[str, object], filename: str) -> Path:
    """Write *result* as indented JSON under :data:`RESULTS_DIR`."""
    RESULTS_DIR.mkdir(exist_ok=True)
    output_path = RESULTS_DIR / filename
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
    return output_path


__all__ = ["RESULTS_DIR", "drive", "save_result"]
