"""Unit tests for ResultRecorder.

Covers:
- newest-first ordering
- history cap (default 50) and custom caps
- trial usage charged only for non-premium runs
- a failed charge rolls the new result back out of history
- premium flag read from the gate when not supplied
- malformed persisted entries are skipped
- filtering by category, clear(), len()
"""
from __future__ import annotations

import json

import pytest

from device_diagnostics.entitlement.gate import TrialGate
from device_diagnostics.entitlement.store import EntitlementStore
from device_diagnostics.history.recorder import DEFAULT_RESULT_CAP, ResultRecorder
from device_diagnostics.storage.base import TEST_RESULTS_RECORD, TRIAL_USAGE_RECORD
from device_diagnostics.storage.memory import InMemoryRecordStore
from device_diagnostics.stress.models import StressTestResult, TestCategory, TestStatus


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _result(
    category: TestCategory = TestCategory.CPU,
    duration: float = 30.0,
    status: TestStatus = TestStatus.PASSED,
) -> StressTestResult:
    return StressTestResult(test_type=category, status=status, duration=duration)


class _UsageWriteFailsStore(InMemoryRecordStore):
    def set(self, name: str, value: str) -> None:
        if name == TRIAL_USAGE_RECORD:
            raise OSError("disk full")
        super().set(name, value)


def _recorder(store: InMemoryRecordStore, cap: int = DEFAULT_RESULT_CAP) -> tuple[ResultRecorder, TrialGate]:
    gate = TrialGate(EntitlementStore(store))
    return ResultRecorder(store, gate=gate, cap=cap), gate


# ---------------------------------------------------------------------------
# Ordering and cap
# ---------------------------------------------------------------------------


class TestResultOrdering:
    def test_empty_history(self, store: InMemoryRecordStore) -> None:
        recorder, _ = _recorder(store)
        assert recorder.list_results() == []
        assert len(recorder) == 0

    def test_newest_first(self, store: InMemoryRecordStore) -> None:
        recorder, _ = _recorder(store)
        recorder.record(_result(duration=1.0), premium=True)
        recorder.record(_result(duration=2.0), premium=True)
        assert [r.duration for r in recorder.list_results()] == [2.0, 1.0]

    def test_record_returns_stored_history(self, store: InMemoryRecordStore) -> None:
        recorder, _ = _recorder(store)
        history = recorder.record(_result(), premium=True)
        assert history == recorder.list_results()

    def test_cap_keeps_fifty_most_recent(self, store: InMemoryRecordStore) -> None:
        recorder, _ = _recorder(store)
        for index in range(51):
            recorder.record(_result(duration=float(index)), premium=True)
        results = recorder.list_results()
        assert len(results) == 50
        assert results[0].duration == 50.0
        assert results[-1].duration == 1.0

    def test_custom_cap(self, store: InMemoryRecordStore) -> None:
        recorder, _ = _recorder(store, cap=3)
        for index in range(5):
            recorder.record(_result(duration=float(index)), premium=True)
        assert [r.duration for r in recorder.list_results()] == [4.0, 3.0, 2.0]

    def test_invalid_cap_raises(self, store: InMemoryRecordStore) -> None:
        with pytest.raises(ValueError):
            ResultRecorder(store, cap=0)

    def test_persisted_form_is_camel_case(self, store: InMemoryRecordStore) -> None:
        recorder, _ = _recorder(store)
        recorder.record(_result(TestCategory.BATTERY), premium=True)
        payload = json.loads(store.get(TEST_RESULTS_RECORD) or "[]")
        assert payload[0]["testType"] == "Battery"


# ---------------------------------------------------------------------------
# Trial accounting
# ---------------------------------------------------------------------------


class TestUsageAccounting:
    def test_free_run_consumes_trial(self, store: InMemoryRecordStore) -> None:
        recorder, gate = _recorder(store)
        recorder.record(_result(TestCategory.GPU), premium=False)
        assert gate.usage().used(TestCategory.GPU) == 1

    def test_premium_run_does_not_consume_trial(self, store: InMemoryRecordStore) -> None:
        recorder, gate = _recorder(store)
        recorder.record(_result(TestCategory.GPU), premium=True)
        assert gate.usage().used(TestCategory.GPU) == 0

    def test_premium_flag_read_from_gate(self, store: InMemoryRecordStore) -> None:
        recorder, gate = _recorder(store)
        recorder.record(_result(TestCategory.RAM))
        gate.activate_premium()
        recorder.record(_result(TestCategory.RAM))
        assert gate.usage().used(TestCategory.RAM) == 1

    def test_warning_results_also_consume_trial(self, store: InMemoryRecordStore) -> None:
        recorder, gate = _recorder(store)
        recorder.record(_result(status=TestStatus.WARNING), premium=False)
        assert gate.usage().used(TestCategory.CPU) == 1

    def test_without_gate_no_accounting(self, store: InMemoryRecordStore) -> None:
        ResultRecorder(store).record(_result(), premium=False)
        assert "trial_usage" not in store

    def test_failed_charge_leaves_empty_history(self) -> None:
        store = _UsageWriteFailsStore()
        recorder, _ = _recorder(store)
        with pytest.raises(OSError, match="disk full"):
            recorder.record(_result(TestCategory.GPU), premium=False)
        assert recorder.list_results() == []
        assert TEST_RESULTS_RECORD not in store

    def test_failed_charge_restores_previous_history(self) -> None:
        store = _UsageWriteFailsStore()
        recorder, _ = _recorder(store)
        earlier = _result(TestCategory.RAM)
        recorder.record(earlier, premium=True)
        with pytest.raises(OSError):
            recorder.record(_result(TestCategory.GPU), premium=False)
        assert recorder.list_results() == [earlier]


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


class TestResultQueries:
    def test_malformed_entries_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        good = _result().to_record()
        store = InMemoryRecordStore({TEST_RESULTS_RECORD: json.dumps([{"testType": "Disk"}, good])})
        recorder = ResultRecorder(store)
        assert len(recorder.list_results()) == 1
        assert "malformed test result #0" in caplog.text

    def test_non_list_payload_ignored(self) -> None:
        store = InMemoryRecordStore({TEST_RESULTS_RECORD: json.dumps({"oops": 1})})
        assert ResultRecorder(store).list_results() == []

    def test_corrupt_payload_ignored(self) -> None:
        store = InMemoryRecordStore({TEST_RESULTS_RECORD: "not json"})
        assert ResultRecorder(store).list_results() == []

    def test_results_for_category(self, store: InMemoryRecordStore) -> None:
        recorder, _ = _recorder(store)
        recorder.record(_result(TestCategory.CPU), premium=True)
        recorder.record(_result(TestCategory.RAM), premium=True)
        recorder.record(_result(TestCategory.CPU, duration=5.0), premium=True)
        cpu = recorder.results_for(TestCategory.CPU)
        assert [r.duration for r in cpu] == [5.0, 30.0]

    def test_clear(self, store: InMemoryRecordStore) -> None:
        recorder, _ = _recorder(store)
        recorder.record(_result(), premium=True)
        recorder.clear()
        assert len(recorder) == 0
