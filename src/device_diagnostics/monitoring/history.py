"""SnapshotHistory — persisted, capped monitoring history (newest first)."""
from __future__ import annotations

import logging

from pydantic import ValidationError

from device_diagnostics.monitoring.snapshot import MonitoringSnapshot
from device_diagnostics.storage.base import (
    MONITORING_HISTORY_RECORD,
    RecordStore,
    read_json,
    write_json,
)

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_CAP: int = 1000


class SnapshotHistory:
    """Long-term store of monitoring snapshots.

    Parameters
    ----------
    store:
        Backing record store.
    cap:
        Maximum number of snapshots retained; older ones are evicted.
    """

    def __init__(self, store: RecordStore, cap: int = DEFAULT_SNAPSHOT_CAP) -> None:
        if cap < 1:
            raise ValueError(f"cap must be >= 1, got {cap}.")
        self._store = store
        self._cap = cap

    @property
    def cap(self) -> int:
        return self._cap

    def append(self, snapshot: MonitoringSnapshot) -> None:
        """Insert *snapshot* at the front and truncate to :attr:`cap`."""
        records = [snapshot.to_record(), *self._raw_records()][: self._cap]
        write_json(self._store, MONITORING_HISTORY_RECORD, records)

    def history(self, limit: int | None = None) -> list[MonitoringSnapshot]:
        """Return stored snapshots, newest first, optionally only the first *limit*."""
        raw = self._raw_records()
        if limit:
            raw = raw[:limit]
        snapshots: list[MonitoringSnapshot] = []
        for index, entry in enumerate(raw):
            try:
                snapshots.append(MonitoringSnapshot.from_record(entry))
            except ValidationError as exc:
                logger.warning("Skipping malformed monitoring snapshot #%d: %s", index, exc)
        return snapshots

    def clear(self) -> None:
        write_json(self._store, MONITORING_HISTORY_RECORD, [])
        logger.info("Monitoring history cleared.")

    def _raw_records(self) -> list[dict[str, object]]:
        payload = read_json(self._store, MONITORING_HISTORY_RECORD)
        if payload is None:
            return []
        if not isinstance(payload, list):
            logger.warning("Ignoring monitoring history: expected a list.")
            return []
        return payload

    def __len__(self) -> int:
        return len(self._raw_records())

    def __repr__(self) -> str:
        return f"SnapshotHistory(cap={self._cap}, store={self._store!r})"
