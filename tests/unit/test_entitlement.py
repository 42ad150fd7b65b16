"""Unit tests for entitlement state and the trial gate.

Covers:
- TrialUsage counters, copy-on-increment, persisted camelCase form
- EntitlementStore premium flag parsing and fallbacks
- EntitlementStore trial usage fallbacks for missing/corrupt records
- TrialGate decisions for free and premium users
- TrialGate.can_run has no side effects
- TrialGate.record_usage monotonicity and persistence
- custom limits and validation
- premium catalogue
"""
from __future__ import annotations

import json

import pytest

from device_diagnostics.entitlement.catalog import PREMIUM_PRICE, premium_features
from device_diagnostics.entitlement.gate import (
    DEFAULT_TRIAL_LIMITS,
    UNLIMITED,
    GateDecision,
    TrialGate,
)
from device_diagnostics.entitlement.store import EntitlementStore, TrialUsage
from device_diagnostics.storage.base import PREMIUM_STATUS_RECORD, TRIAL_USAGE_RECORD
from device_diagnostics.storage.memory import InMemoryRecordStore
from device_diagnostics.stress.models import TestCategory


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _gate(store: InMemoryRecordStore, **limits: int) -> TrialGate:
    mapping = {TestCategory.parse(k): v for k, v in limits.items()}
    return TrialGate(EntitlementStore(store), limits=mapping or None)


def _seed_usage(store: InMemoryRecordStore, **counts: int) -> None:
    EntitlementStore(store).save_trial_usage(TrialUsage(**counts))


# ---------------------------------------------------------------------------
# TrialUsage
# ---------------------------------------------------------------------------


class TestTrialUsage:
    def test_defaults_are_zero(self) -> None:
        usage = TrialUsage()
        assert all(usage.used(c) == 0 for c in TestCategory)

    def test_incremented_returns_copy(self) -> None:
        usage = TrialUsage()
        bumped = usage.incremented(TestCategory.BATTERY)
        assert bumped.used(TestCategory.BATTERY) == 1
        assert usage.used(TestCategory.BATTERY) == 0
        assert bumped.last_reset == usage.last_reset

    def test_record_uses_camel_case(self) -> None:
        record = TrialUsage(cpu_tests=1).to_record()
        assert set(record) == {"cpuTests", "gpuTests", "ramTests", "batteryTests", "lastReset"}
        assert record["cpuTests"] == 1

    def test_negative_counter_rejected(self) -> None:
        with pytest.raises(ValueError):
            TrialUsage(gpu_tests=-1)


# ---------------------------------------------------------------------------
# EntitlementStore
# ---------------------------------------------------------------------------


class TestEntitlementStore:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(None, False), ("true", True), ("TRUE", True), ("false", False), ("yes", False)],
    )
    def test_premium_flag_parsing(self, raw: str | None, expected: bool) -> None:
        store = InMemoryRecordStore({} if raw is None else {PREMIUM_STATUS_RECORD: raw})
        assert EntitlementStore(store).is_premium() is expected

    def test_set_premium_persists_string(self, store: InMemoryRecordStore) -> None:
        EntitlementStore(store).set_premium(True)
        assert store.get(PREMIUM_STATUS_RECORD) == "true"
        EntitlementStore(store).set_premium(False)
        assert store.get(PREMIUM_STATUS_RECORD) == "false"

    def test_unreadable_premium_is_false(self) -> None:
        class Broken(InMemoryRecordStore):
            def get(self, name: str) -> str | None:
                raise OSError("locked")

        assert EntitlementStore(Broken()).is_premium() is False

    def test_missing_usage_is_zeroed(self, store: InMemoryRecordStore) -> None:
        assert EntitlementStore(store).get_trial_usage().used(TestCategory.CPU) == 0

    def test_corrupt_usage_is_zeroed(self, caplog: pytest.LogCaptureFixture) -> None:
        store = InMemoryRecordStore({TRIAL_USAGE_RECORD: "]["})
        assert EntitlementStore(store).get_trial_usage().used(TestCategory.GPU) == 0
        assert "not valid JSON" in caplog.text

    def test_invalid_usage_shape_is_zeroed(self, caplog: pytest.LogCaptureFixture) -> None:
        store = InMemoryRecordStore({TRIAL_USAGE_RECORD: json.dumps({"cpuTests": "many"})})
        assert EntitlementStore(store).get_trial_usage().used(TestCategory.CPU) == 0
        assert "malformed trial usage" in caplog.text

    def test_usage_round_trip(self, store: InMemoryRecordStore) -> None:
        entitlements = EntitlementStore(store)
        entitlements.save_trial_usage(TrialUsage(ram_tests=2))
        assert entitlements.get_trial_usage().used(TestCategory.RAM) == 2
        assert json.loads(store.get(TRIAL_USAGE_RECORD) or "{}")["ramTests"] == 2


# ---------------------------------------------------------------------------
# TrialGate decisions
# ---------------------------------------------------------------------------


class TestTrialGateDecisions:
    def test_fresh_user_has_two_runs(self, store: InMemoryRecordStore) -> None:
        assert _gate(store).can_run(TestCategory.CPU) == GateDecision(allowed=True, remaining=2)

    def test_one_used(self, store: InMemoryRecordStore) -> None:
        _seed_usage(store, cpu_tests=1)
        assert _gate(store).can_run(TestCategory.CPU) == GateDecision(allowed=True, remaining=1)

    def test_limit_reached_denies(self, store: InMemoryRecordStore) -> None:
        _seed_usage(store, cpu_tests=2)
        decision = _gate(store).can_run(TestCategory.CPU)
        assert decision == GateDecision(allowed=False, remaining=0)
        assert not decision.unlimited

    def test_over_limit_remaining_clamped(self, store: InMemoryRecordStore) -> None:
        _seed_usage(store, gpu_tests=7)
        assert _gate(store).can_run(TestCategory.GPU).remaining == 0

    def test_categories_are_independent(self, store: InMemoryRecordStore) -> None:
        _seed_usage(store, cpu_tests=2)
        gate = _gate(store)
        assert not gate.can_run(TestCategory.CPU).allowed
        assert gate.can_run(TestCategory.RAM).allowed

    def test_premium_overrides_usage(self, store: InMemoryRecordStore) -> None:
        _seed_usage(store, cpu_tests=5)
        gate = _gate(store)
        gate.activate_premium()
        decision = gate.can_run(TestCategory.CPU)
        assert decision == GateDecision(allowed=True, remaining=UNLIMITED)
        assert decision.unlimited

    def test_can_run_is_idempotent(self, store: InMemoryRecordStore) -> None:
        _seed_usage(store, battery_tests=1)
        gate = _gate(store)
        before = store.get("trial_usage")
        decisions = {gate.can_run(TestCategory.BATTERY) for _ in range(5)}
        assert decisions == {GateDecision(allowed=True, remaining=1)}
        assert store.get("trial_usage") == before

    def test_custom_limit(self, store: InMemoryRecordStore) -> None:
        gate = _gate(store, cpu=0, ram=5)
        assert not gate.can_run(TestCategory.CPU).allowed
        assert gate.can_run(TestCategory.RAM).remaining == 5
        assert gate.limit_for(TestCategory.GPU) == DEFAULT_TRIAL_LIMITS[TestCategory.GPU]

    def test_negative_limit_raises(self, store: InMemoryRecordStore) -> None:
        with pytest.raises(ValueError, match="must be >= 0"):
            _gate(store, cpu=-1)


# ---------------------------------------------------------------------------
# TrialGate mutations
# ---------------------------------------------------------------------------


class TestTrialGateUsage:
    def test_record_usage_increments_by_one(self, store: InMemoryRecordStore) -> None:
        gate = _gate(store)
        usage = gate.record_usage(TestCategory.GPU)
        assert usage.used(TestCategory.GPU) == 1
        assert gate.usage().used(TestCategory.GPU) == 1
        assert gate.usage().used(TestCategory.CPU) == 0

    def test_counters_are_monotonic(self, store: InMemoryRecordStore) -> None:
        gate = _gate(store)
        seen = [gate.record_usage(TestCategory.RAM).used(TestCategory.RAM) for _ in range(4)]
        assert seen == [1, 2, 3, 4]

    def test_two_runs_exhaust_the_trial(self, store: InMemoryRecordStore) -> None:
        gate = _gate(store)
        gate.record_usage(TestCategory.CPU)
        gate.record_usage(TestCategory.CPU)
        assert gate.can_run(TestCategory.CPU) == GateDecision(allowed=False, remaining=0)

    def test_usage_survives_new_gate(self, store: InMemoryRecordStore) -> None:
        _gate(store).record_usage(TestCategory.BATTERY)
        assert _gate(store).can_run(TestCategory.BATTERY).remaining == 1

    def test_activate_premium(self, store: InMemoryRecordStore) -> None:
        gate = _gate(store)
        assert not gate.is_premium()
        gate.activate_premium()
        assert gate.is_premium()
        assert store.get(PREMIUM_STATUS_RECORD) == "true"


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------


class TestPremiumCatalogue:
    def test_price(self) -> None:
        assert PREMIUM_PRICE == "$4.99"

    def test_features_listed_in_order(self) -> None:
        names = [f.name for f in premium_features()]
        assert names[0] == "Unlimited Stress Tests"
        assert len(names) == 7

    def test_features_returns_new_list(self) -> None:
        premium_features().clear()
        assert len(premium_features()) == 7
