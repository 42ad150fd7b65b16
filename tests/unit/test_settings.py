"""Unit tests for DiagnosticsSettings and YAML persistence."""
from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from device_diagnostics.config.settings import (
    DiagnosticsSettings,
    StressDefaults,
    TrialSettings,
    load_settings,
    save_settings,
)
from device_diagnostics.stress.models import Intensity, TestCategory


class TestDefaults:
    def test_defaults(self) -> None:
        settings = DiagnosticsSettings()
        assert settings.trials.as_category_map() == {c: 2 for c in TestCategory}
        assert settings.stress.free_duration == 30.0
        assert settings.stress.premium_duration == 60.0
        assert settings.history.result_cap == 50
        assert settings.history.snapshot_cap == 1000
        assert settings.history.window_size == 60
        assert settings.scheduling.stress_tick_seconds == 0.1
        assert settings.scheduling.monitor_interval_seconds == 1.0

    def test_config_for_tiers(self) -> None:
        defaults = StressDefaults()
        free = defaults.config_for(premium=False)
        premium = defaults.config_for(premium=True)
        assert free.duration == 30.0
        assert premium.duration == 60.0
        assert free.intensity is Intensity.HIGH
        assert free.safety_limits.max_temp == 80.0
        assert premium.safety_limits.max_cpu_usage == 100.0

    def test_data_dir_expands_home(self) -> None:
        assert "~" not in str(DiagnosticsSettings().resolved_data_dir())


class TestValidation:
    def test_unknown_trial_category_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TrialSettings(limits={"disk": 1})

    def test_negative_trial_limit_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TrialSettings(limits={"cpu": -1})

    def test_partial_trial_limits(self) -> None:
        assert TrialSettings(limits={"battery": 5}).as_category_map() == {TestCategory.BATTERY: 5}

    def test_zero_result_cap_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DiagnosticsSettings.model_validate({"history": {"result_cap": 0}})


class TestYamlPersistence:
    def test_save_and_load_round_trip(self, tmp_path: Path) -> None:
        settings = DiagnosticsSettings.model_validate(
            {"stress": {"free_duration": 10}, "trials": {"limits": {"cpu": 3}}}
        )
        path = save_settings(settings, tmp_path / "conf" / "settings.yaml")
        loaded = load_settings(path)
        assert loaded.stress.free_duration == 10
        assert loaded.trials.as_category_map() == {TestCategory.CPU: 3}
        assert loaded == settings

    def test_saved_file_is_plain_yaml(self, tmp_path: Path) -> None:
        path = save_settings(DiagnosticsSettings(), tmp_path / "settings.yaml")
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert data["stress"]["intensity"] == "high"

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_settings(path) == DiagnosticsSettings()

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "nope.yaml")

    def test_invalid_content_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("scheduling:\n  stress_tick_seconds: -1\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_settings(path)
