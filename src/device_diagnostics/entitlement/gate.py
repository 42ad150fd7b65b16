"""TrialGate — decides whether a stress test may start.

Premium users are always allowed (``remaining == UNLIMITED``).  Everyone
else gets a fixed number of free runs per category::

    allowed   = used < limit
    remaining = max(0, limit - used)

:meth:`TrialGate.can_run` is read-only and safe to call as often as a UI
badge needs.  :meth:`TrialGate.record_usage` must be called exactly once per
completed non-premium run; the gate does not check that pairing.
"""
from __future__ import annotations

import logging
from typing import Mapping, NamedTuple

from device_diagnostics.entitlement.store import EntitlementStore, TrialUsage
from device_diagnostics.stress.models import TestCategory

logger = logging.getLogger(__name__)

UNLIMITED: int = -1
"""``remaining`` sentinel for premium users."""

DEFAULT_TRIAL_LIMITS: dict[TestCategory, int] = {
    TestCategory.CPU: 2,
    TestCategory.GPU: 2,
    TestCategory.RAM: 2,
    TestCategory.BATTERY: 2,
}


class GateDecision(NamedTuple):
    """Result of :meth:`TrialGate.can_run`.

    Attributes
    ----------
    allowed:
        Whether a new run may start.
    remaining:
        Free runs left, or :data:`UNLIMITED`.
    """

    allowed: bool
    remaining: int

    @property
    def unlimited(self) -> bool:
        return self.remaining == UNLIMITED


class TrialGate:
    """Entitlement-aware gate in front of the stress-test engine.

    Parameters
    ----------
    store:
        Persisted entitlement state.
    limits:
        Free runs per category.  Categories missing from the mapping use
        :data:`DEFAULT_TRIAL_LIMITS`.

    Raises
    ------
    ValueError
        If any limit is negative.
    """

    def __init__(
        self,
        store: EntitlementStore,
        limits: Mapping[TestCategory, int] | None = None,
    ) -> None:
        merged = {**DEFAULT_TRIAL_LIMITS, **dict(limits or {})}
        for category, limit in merged.items():
            if limit < 0:
                raise ValueError(
                    f"Trial limit for {category.value} must be >= 0, got {limit}."
                )
        self._store = store
        self._limits = merged

    @property
    def limits(self) -> dict[TestCategory, int]:
        return dict(self._limits)

    def limit_for(self, category: TestCategory) -> int:
        return self._limits[category]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_premium(self) -> bool:
        return self._store.is_premium()

    def usage(self) -> TrialUsage:
        """Current persisted trial usage."""
        return self._store.get_trial_usage()

    def can_run(self, category: TestCategory) -> GateDecision:
        """Decide whether a *category* run may start.  No side effects."""
        if self._store.is_premium():
            return GateDecision(allowed=True, remaining=UNLIMITED)
        used = self._store.get_trial_usage().used(category)
        limit = self._limits[category]
        return GateDecision(allowed=used < limit, remaining=max(0, limit - used))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def record_usage(self, category: TestCategory) -> TrialUsage:
        """Increase *category*'s counter by one and persist it.

        Returns
        -------
        TrialUsage
            The updated usage.
        """
        usage = self._store.get_trial_usage().incremented(category)
        self._store.save_trial_usage(usage)
        logger.info(
            "Recorded %s trial run (%d/%d used).",
            category.value,
            usage.used(category),
            self._limits[category],
        )
        return usage

    def activate_premium(self) -> None:
        """Unlock unlimited runs.  There is no deactivation path."""
        self._store.set_premium(True)
        logger.info("Premium activated.")

    def __repr__(self) -> str:
        limits = {c.key: n for c, n in self._limits.items()}
        return f"TrialGate(limits={limits!r})"
