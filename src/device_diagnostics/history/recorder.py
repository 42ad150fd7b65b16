"""ResultRecorder — persisted, capped history of finished stress tests.

History is a JSON array stored newest-first in the ``test_results`` record
and truncated to the most recent ``cap`` entries (50 by default).
Recording a result for a non-premium user also consumes one trial run
through the :class:`~device_diagnostics.entitlement.gate.TrialGate`.
"""
from __future__ import annotations

import logging

from pydantic import ValidationError

from device_diagnostics.entitlement.gate import TrialGate
from device_diagnostics.storage.base import (
    TEST_RESULTS_RECORD,
    RecordStore,
    read_json,
    write_json,
)
from device_diagnostics.stress.models import StressTestResult, TestCategory

logger = logging.getLogger(__name__)

DEFAULT_RESULT_CAP: int = 50


class ResultRecorder:
    """Append finished results to persisted history.

    Parameters
    ----------
    store:
        Backing record store.
    gate:
        Trial gate charged for non-premium runs.  ``None`` disables usage
        accounting.
    cap:
        Maximum number of results retained.
    """

    def __init__(
        self,
        store: RecordStore,
        gate: TrialGate | None = None,
        cap: int = DEFAULT_RESULT_CAP,
    ) -> None:
        if cap < 1:
            raise ValueError(f"cap must be >= 1, got {cap}.")
        self._store = store
        self._gate = gate
        self._cap = cap

    @property
    def cap(self) -> int:
        return self._cap

    def record(
        self, result: StressTestResult, premium: bool | None = None
    ) -> list[StressTestResult]:
        """Persist *result* at the front of history.

        Parameters
        ----------
        result:
            The finished result.
        premium:
            Whether the run belonged to a premium user.  When ``None`` the
            gate's current premium flag is used.

        Returns
        -------
        list[StressTestResult]
            The stored history after insertion, newest first.

        Raises
        ------
        Exception
            Whatever the store or gate raised.  History is restored to its
            previous contents first, so a failed charge leaves no result behind.
        """
        previous = self.list_results()
        history = [result, *previous][: self._cap]
        write_json(self._store, TEST_RESULTS_RECORD, [r.to_record() for r in history])

        if self._gate is not None:
            is_premium = self._gate.is_premium() if premium is None else premium
            if not is_premium:
                try:
                    self._gate.record_usage(result.test_type)
                except Exception:
                    logger.warning(
                        "Trial usage not saved; removing %s result from history.",
                        result.test_type.value,
                    )
                    self._restore(previous)
                    raise

        logger.info(
            "Recorded %s result (%s); history size %d.",
            result.test_type.value,
            result.status.value,
            len(history),
        )
        return history

    def _restore(self, previous: list[StressTestResult]) -> None:
        if previous:
            write_json(self._store, TEST_RESULTS_RECORD, [r.to_record() for r in previous])
        else:
            self._store.delete(TEST_RESULTS_RECORD)

    def list_results(self) -> list[StressTestResult]:
        """Return stored results, newest first.  Unreadable entries are skipped."""
        payload = read_json(self._store, TEST_RESULTS_RECORD)
        if payload is None:
            return []
        if not isinstance(payload, list):
            logger.warning("Ignoring test result history: expected a list.")
            return []
        results: list[StressTestResult] = []
        for index, entry in enumerate(payload):
            try:
                results.append(StressTestResult.from_record(entry))
            except ValidationError as exc:
                logger.warning("Skipping malformed test result #%d: %s", index, exc)
        return results

    def results_for(self, category: TestCategory) -> list[StressTestResult]:
        """Return stored results of *category*, newest first."""
        return [r for r in self.list_results() if r.test_type is category]

    def clear(self) -> None:
        write_json(self._store, TEST_RESULTS_RECORD, [])

    def __len__(self) -> int:
        return len(self.list_results())

    def __repr__(self) -> str:
        return f"ResultRecorder(cap={self._cap}, store={self._store!r})"
