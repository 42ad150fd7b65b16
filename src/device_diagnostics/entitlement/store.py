"""EntitlementStore — persisted premium flag and per-category trial usage.

Two records back this store:

* ``premium_status`` — the string ``"true"`` or ``"false"``;
* ``trial_usage`` — JSON ``{"cpuTests", "gpuTests", "ramTests",
  "batteryTests", "lastReset"}``.

Unreadable records fall back to defaults (not premium, zeroed counters)
and are logged, never raised.  Updates are plain read-modify-write: two
concurrent increments of the same counter can lose one.
"""
from __future__ import annotations

import datetime
import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from device_diagnostics.storage.base import (
    PREMIUM_STATUS_RECORD,
    TRIAL_USAGE_RECORD,
    RecordStore,
    read_json,
    write_json,
)
from device_diagnostics.stress.models import TestCategory

logger = logging.getLogger(__name__)


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class TrialUsage(BaseModel):
    """Free runs consumed per category.

    ``last_reset`` is stored for forward compatibility; counters are never
    reset.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    cpu_tests: int = Field(default=0, ge=0)
    gpu_tests: int = Field(default=0, ge=0)
    ram_tests: int = Field(default=0, ge=0)
    battery_tests: int = Field(default=0, ge=0)
    last_reset: datetime.datetime = Field(default_factory=_utcnow)

    @staticmethod
    def _field_for(category: TestCategory) -> str:
        return f"{category.key}_tests"

    def used(self, category: TestCategory) -> int:
        """Runs consumed for *category*."""
        return int(getattr(self, self._field_for(category)))

    def incremented(self, category: TestCategory) -> TrialUsage:
        """Return a copy with *category*'s counter increased by one."""
        name = self._field_for(category)
        return self.model_copy(update={name: getattr(self, name) + 1})

    def to_record(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)


class EntitlementStore:
    """Typed access to entitlement records in a :class:`RecordStore`.

    Parameters
    ----------
    store:
        Backing record store.
    """

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    @property
    def record_store(self) -> RecordStore:
        return self._store

    # ------------------------------------------------------------------
    # Premium flag
    # ------------------------------------------------------------------

    def is_premium(self) -> bool:
        """Return the persisted premium flag (``False`` when unreadable)."""
        try:
            raw = self._store.get(PREMIUM_STATUS_RECORD)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read premium status: %s", exc)
            return False
        return raw is not None and raw.strip().lower() == "true"

    def set_premium(self, value: bool) -> None:
        self._store.set(PREMIUM_STATUS_RECORD, "true" if value else "false")

    # ------------------------------------------------------------------
    # Trial usage
    # ------------------------------------------------------------------

    def get_trial_usage(self) -> TrialUsage:
        """Return persisted usage, or fresh zeroed usage if none is readable."""
        payload = read_json(self._store, TRIAL_USAGE_RECORD)
        if payload is None:
            return TrialUsage()
        try:
            return TrialUsage.model_validate(payload)
        except ValidationError as exc:
            logger.warning("Discarding malformed trial usage record: %s", exc)
            return TrialUsage()

    def save_trial_usage(self, usage: TrialUsage) -> None:
        write_json(self._store, TRIAL_USAGE_RECORD, usage.to_record())

    def __repr__(self) -> str:
        return f"EntitlementStore(store={self._store!r})"
