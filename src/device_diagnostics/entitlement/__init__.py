"""Entitlement subsystem — premium flag, trial counters and the run gate."""
from __future__ import annotations

from device_diagnostics.entitlement.catalog import (
    PREMIUM_FEATURES,
    PREMIUM_PRICE,
    PremiumFeature,
    premium_features,
)
from device_diagnostics.entitlement.gate import (
    DEFAULT_TRIAL_LIMITS,
    UNLIMITED,
    GateDecision,
    TrialGate,
)
from device_diagnostics.entitlement.store import EntitlementStore, TrialUsage

__all__ = [
    "EntitlementStore",
    "TrialUsage",
    "TrialGate",
    "GateDecision",
    "UNLIMITED",
    "DEFAULT_TRIAL_LIMITS",
    "PremiumFeature",
    "PREMIUM_FEATURES",
    "PREMIUM_PRICE",
    "premium_features",
]
