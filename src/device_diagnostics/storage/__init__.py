"""Storage subsystem — the key/value persistence boundary.

* :mod:`~device_diagnostics.storage.base` — :class:`RecordStore` ABC, record
  names and JSON helpers.
* :mod:`~device_diagnostics.storage.memory` — in-process store.
* :mod:`~device_diagnostics.storage.json_file` — one-file-per-record store.
"""
from __future__ import annotations

from device_diagnostics.storage.base import (
    MONITORING_HISTORY_RECORD,
    PREMIUM_STATUS_RECORD,
    TEST_RESULTS_RECORD,
    TRIAL_USAGE_RECORD,
    RecordStore,
    read_json,
    write_json,
)
from device_diagnostics.storage.json_file import JsonFileRecordStore
from device_diagnostics.storage.memory import InMemoryRecordStore

__all__ = [
    "RecordStore",
    "InMemoryRecordStore",
    "JsonFileRecordStore",
    "read_json",
    "write_json",
    "PREMIUM_STATUS_RECORD",
    "TRIAL_USAGE_RECORD",
    "TEST_RESULTS_RECORD",
    "MONITORING_HISTORY_RECORD",
]
