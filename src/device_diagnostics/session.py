"""DiagnosticsSession — the calling layer around gate, engine and recorder.

One call to :meth:`DiagnosticsSession.run_test` performs the whole flow:

1. ask the :class:`TrialGate` whether the category may run;
2. build the tier's :class:`StressTestConfig` (longer runs for premium);
3. drive the run through the single-flight :class:`StressTestRunner`;
4. persist the result and, for free users, consume one trial run.

A denied run is not an error: the outcome has ``allowed=False`` and no
result.  Any exception raised while orchestrating produces an outcome
carrying a ``failed`` result and the error message; nothing is persisted
in that path.  A request made while another run is in flight raises
:class:`~device_diagnostics.stress.runner.RunInProgressError`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from device_diagnostics.config.settings import DiagnosticsSettings
from device_diagnostics.device.provider import DeviceDataProvider, MockDeviceProvider
from device_diagnostics.entitlement.gate import GateDecision, TrialGate
from device_diagnostics.entitlement.store import EntitlementStore
from device_diagnostics.history.recorder import ResultRecorder
from device_diagnostics.monitoring.history import SnapshotHistory
from device_diagnostics.monitoring.loop import MonitoringLoop
from device_diagnostics.scheduling.ticker import SleepFunction
from device_diagnostics.storage.base import RecordStore
from device_diagnostics.stress.engine import ProgressCallback, SafetyStopCallback
from device_diagnostics.stress.models import (
    StressTestConfig,
    StressTestResult,
    TestCategory,
    TestStatus,
)
from device_diagnostics.stress.runner import RunInProgressError, StressTestRunner
from device_diagnostics.stress.workloads import RandomSource

logger = logging.getLogger(__name__)


@dataclass
class TestOutcome:
    """What happened when a test was requested.

    Attributes
    ----------
    category:
        Requested category.
    decision:
        Gate decision taken before the run.
    result:
        Final result, a ``failed`` placeholder on error, or ``None`` when
        the run was denied.
    error:
        Error message when orchestration raised.
    safety_stopped:
        True when a safety limit ended the run early.
    progress_events:
        Progress callbacks observed during the run.
    """

    __test__ = False

    category: TestCategory
    decision: GateDecision
    result: StressTestResult | None = None
    error: str | None = None
    safety_stopped: bool = False
    progress_events: int = 0

    @property
    def allowed(self) -> bool:
        return self.decision.allowed

    @property
    def succeeded(self) -> bool:
        return self.result is not None and self.error is None


class DiagnosticsSession:
    """Wire the entitlement, stress, history and monitoring components together.

    Parameters
    ----------
    store:
        Shared record store.
    settings:
        Policy and timing settings.
    provider:
        Device data source for monitoring.
    rng:
        Random source for workloads.
    sleep:
        Coroutine used between engine ticks and monitoring samples.
    """

    def __init__(
        self,
        store: RecordStore,
        settings: DiagnosticsSettings | None = None,
        provider: DeviceDataProvider | None = None,
        rng: RandomSource | None = None,
        sleep: SleepFunction | None = None,
    ) -> None:
        self._settings = settings or DiagnosticsSettings()
        self._entitlements = EntitlementStore(store)
        self._gate = TrialGate(
            self._entitlements, limits=self._settings.trials.as_category_map()
        )
        self._recorder = ResultRecorder(
            store, gate=self._gate, cap=self._settings.history.result_cap
        )
        self._runner = StressTestRunner(
            tick_interval=self._settings.scheduling.stress_tick_seconds,
            sleep=sleep,
            rng=rng,
            ram_block_bytes=self._settings.stress.ram_block_bytes,
        )
        self._snapshots = SnapshotHistory(store, cap=self._settings.history.snapshot_cap)
        self._monitor = MonitoringLoop(
            provider or MockDeviceProvider(),
            history=self._snapshots,
            interval_seconds=self._settings.scheduling.monitor_interval_seconds,
            window_size=self._settings.history.window_size,
            sleep=sleep,
        )

    @property
    def settings(self) -> DiagnosticsSettings:
        return self._settings

    @property
    def gate(self) -> TrialGate:
        return self._gate

    @property
    def recorder(self) -> ResultRecorder:
        return self._recorder

    @property
    def runner(self) -> StressTestRunner:
        return self._runner

    @property
    def snapshots(self) -> SnapshotHistory:
        return self._snapshots

    @property
    def monitor(self) -> MonitoringLoop:
        return self._monitor

    def config_for(self, premium: bool) -> StressTestConfig:
        return self._settings.stress.config_for(premium)

    async def run_test(
        self,
        category: TestCategory,
        on_progress: ProgressCallback | None = None,
        on_safety_stop: SafetyStopCallback | None = None,
        config: StressTestConfig | None = None,
    ) -> TestOutcome:
        """Gate, run, record and account for one stress test.

        Parameters
        ----------
        category:
            Category to run.
        on_progress:
            Forwarded progress callback.
        on_safety_stop:
            Forwarded safety callback (CPU/GPU only).
        config:
            Explicit configuration overriding the tier default.
        """
        premium = self._gate.is_premium()
        decision = self._gate.can_run(category)
        outcome = TestOutcome(category=category, decision=decision)
        if not decision.allowed:
            logger.warning(
                "%s stress test denied: no free runs remaining.", category.value
            )
            return outcome

        run_config = config or self.config_for(premium)

        def _progress(progress: float, metrics: dict[str, object]) -> None:
            outcome.progress_events += 1
            if on_progress is not None:
                on_progress(progress, metrics)

        def _safety_stop() -> None:
            outcome.safety_stopped = True
            if on_safety_stop is not None:
                on_safety_stop()

        try:
            result = await self._runner.run(category, run_config, _progress, _safety_stop)
            self._recorder.record(result, premium=premium)
        except RunInProgressError:
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception("%s stress test failed: %s", category.value, exc)
            outcome.error = str(exc) or type(exc).__name__
            outcome.result = StressTestResult(
                test_type=category, status=TestStatus.FAILED, duration=0.0
            )
            return outcome

        outcome.result = result
        return outcome

    def __repr__(self) -> str:
        return f"DiagnosticsSession(gate={self._gate!r}, runner={self._runner!r})"
