"""History subsystem — persisted stress-test results."""
from __future__ import annotations

from device_diagnostics.history.recorder import DEFAULT_RESULT_CAP, ResultRecorder

__all__ = ["ResultRecorder", "DEFAULT_RESULT_CAP"]
