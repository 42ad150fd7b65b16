"""Unit tests for stress-test value objects and run state.

Covers:
- TestCategory parsing and keys
- SafetyLimits / StressTestConfig defaults, validation, immutability
- StressTestConfig.max_iterations
- StressTestResult persisted form (camelCase) and reconstruction
- RunState advance / progress / exhaustion
- RunPhase terminal flags
"""
from __future__ import annotations

import datetime

import pytest
from pydantic import ValidationError

from device_diagnostics.stress.models import (
    Intensity,
    SafetyLimits,
    StressTestConfig,
    StressTestResult,
    TestCategory,
    TestStatus,
)
from device_diagnostics.stress.state import RunPhase, RunState, RunStateError


# ---------------------------------------------------------------------------
# TestCategory
# ---------------------------------------------------------------------------


class TestCategoryParsing:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("cpu", TestCategory.CPU),
            ("GPU", TestCategory.GPU),
            (" ram ", TestCategory.RAM),
            ("Battery", TestCategory.BATTERY),
            ("BATTERY", TestCategory.BATTERY),
        ],
    )
    def test_parse(self, text: str, expected: TestCategory) -> None:
        assert TestCategory.parse(text) is expected

    def test_parse_unknown_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown test category"):
            TestCategory.parse("disk")

    def test_keys_are_lowercase(self) -> None:
        assert [c.key for c in TestCategory] == ["cpu", "gpu", "ram", "battery"]

    def test_battery_display_value(self) -> None:
        assert TestCategory.BATTERY.value == "Battery"


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


class TestStressTestConfig:
    def test_defaults(self) -> None:
        config = StressTestConfig(duration=30)
        assert config.intensity is Intensity.HIGH
        assert config.safety_limits.max_temp == 80.0
        assert config.safety_limits.max_cpu_usage == 100.0

    @pytest.mark.parametrize(("duration", "iterations"), [(5, 50), (30, 300), (60, 600), (0.1, 1)])
    def test_max_iterations(self, duration: float, iterations: int) -> None:
        assert StressTestConfig(duration=duration).max_iterations == iterations

    @pytest.mark.parametrize("duration", [0, -1])
    def test_non_positive_duration_raises(self, duration: float) -> None:
        with pytest.raises(ValidationError):
            StressTestConfig(duration=duration)

    def test_duration_shorter_than_one_tick_raises(self) -> None:
        with pytest.raises(ValidationError, match="shorter than one tick"):
            StressTestConfig(duration=0.01)

    def test_frozen(self) -> None:
        config = StressTestConfig(duration=5)
        with pytest.raises(ValidationError):
            config.duration = 10  # type: ignore[misc]

    def test_accepts_camel_case_aliases(self) -> None:
        config = StressTestConfig.model_validate(
            {"duration": 5, "safetyLimits": {"maxTemp": 50, "maxCpuUsage": 90}}
        )
        assert config.safety_limits == SafetyLimits(max_temp=50, max_cpu_usage=90)

    def test_cpu_usage_bound_validated(self) -> None:
        with pytest.raises(ValidationError):
            SafetyLimits(max_cpu_usage=150)


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------


class TestStressTestResult:
    def test_record_uses_camel_case(self) -> None:
        result = StressTestResult(
            test_type=TestCategory.BATTERY,
            status=TestStatus.PASSED,
            duration=30.0,
            metrics={"drain_rate": 60.0},
        )
        record = result.to_record()
        assert record["testType"] == "Battery"
        assert record["status"] == "passed"
        assert record["metrics"] == {"drain_rate": 60.0}
        assert isinstance(record["timestamp"], str)

    def test_from_record_restores_fields(self) -> None:
        original = StressTestResult(
            test_type=TestCategory.CPU,
            status=TestStatus.WARNING,
            duration=5.1,
            metrics={"throttling_detected": True, "crashes": 0, "max_temp": 50.1},
        )
        restored = StressTestResult.from_record(original.to_record())
        assert restored == original
        assert restored.metrics["throttling_detected"] is True
        assert restored.metrics["crashes"] == 0

    def test_timestamp_is_utc(self) -> None:
        result = StressTestResult(test_type=TestCategory.RAM, status=TestStatus.PASSED, duration=1)
        assert result.timestamp.tzinfo == datetime.timezone.utc

    def test_negative_duration_raises(self) -> None:
        with pytest.raises(ValidationError):
            StressTestResult(test_type=TestCategory.RAM, status=TestStatus.PASSED, duration=-1)


# ---------------------------------------------------------------------------
# RunState / RunPhase
# ---------------------------------------------------------------------------


class TestRunState:
    def test_advance_counts(self) -> None:
        state = RunState(max_iterations=3)
        assert state.advance() == 1
        assert state.advance() == 2
        assert state.iterations_completed == 2

    def test_progress(self) -> None:
        state = RunState(max_iterations=4)
        state.advance()
        assert state.fraction == 0.25
        assert state.progress == 25.0

    def test_exhausted_after_budget(self) -> None:
        state = RunState(max_iterations=2)
        state.advance()
        assert not state.is_exhausted
        state.advance()
        assert state.is_exhausted

    def test_advance_past_budget_raises(self) -> None:
        state = RunState(max_iterations=1)
        state.advance()
        with pytest.raises(RunStateError):
            state.advance()
        assert state.iterations_completed == 1

    def test_zero_budget_raises(self) -> None:
        with pytest.raises(ValueError):
            RunState(max_iterations=0)


class TestRunPhase:
    def test_terminal_phases(self) -> None:
        assert RunPhase.COMPLETED.is_terminal
        assert RunPhase.SAFETY_STOPPED.is_terminal
        assert not RunPhase.IDLE.is_terminal
        assert not RunPhase.RUNNING.is_terminal
