"""RecordStore — key/value persistence boundary.

Every persisted structure in the package (premium flag, trial usage,
result history, monitoring history) is a single named record holding a
string payload.  Components read-modify-write whole records; there is no
transactional isolation between two writers of the same record.

Helpers :func:`read_json` and :func:`write_json` implement the shared
"unreadable means absent" policy: a record that is missing or fails to
parse is reported as ``None`` and logged, never raised.
"""
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

PREMIUM_STATUS_RECORD: str = "premium_status"
TRIAL_USAGE_RECORD: str = "trial_usage"
TEST_RESULTS_RECORD: str = "test_results"
MONITORING_HISTORY_RECORD: str = "monitoring_history"


class RecordStore(ABC):
    """Abstract store of named string records.

    Subclasses must implement :meth:`get`, :meth:`set` and :meth:`delete`.
    """

    @abstractmethod
    def get(self, name: str) -> str | None:
        """Return the payload stored under *name*, or ``None`` if absent."""

    @abstractmethod
    def set(self, name: str, value: str) -> None:
        """Store *value* under *name*, replacing any previous payload."""

    @abstractmethod
    def delete(self, name: str) -> None:
        """Remove *name*.  Deleting an absent record is a no-op."""

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None


def read_json(store: RecordStore, name: str) -> object | None:
    """Decode the JSON payload of record *name*.

    Returns ``None`` when the record is absent or cannot be decoded.
    """
    try:
        raw = store.get(name)
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read record %r: %s", name, exc)
        return None
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning("Record %r is not valid JSON, ignoring it: %s", name, exc)
        return None


def write_json(store: RecordStore, name: str, payload: object) -> None:
    """Encode *payload* as JSON and store it under *name*."""
    store.set(name, json.dumps(payload))
