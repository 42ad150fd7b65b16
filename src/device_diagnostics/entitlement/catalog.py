"""Premium upgrade catalogue shown to users who hit a trial limit."""
from __future__ import annotations

from dataclasses import dataclass

PREMIUM_PRICE: str = "$4.99"


@dataclass(frozen=True)
class PremiumFeature:
    """One line of the upgrade offer.

    Attributes
    ----------
    name:
        Feature label.
    free:
        Whether free users already have it.
    """

    name: str
    free: bool = False


PREMIUM_FEATURES: tuple[PremiumFeature, ...] = (
    PremiumFeature("Unlimited Stress Tests"),
    PremiumFeature("Advanced Real-Time Graphs"),
    PremiumFeature("Historical Data Tracking"),
    PremiumFeature("Exportable Reports (PDF)"),
    PremiumFeature("Extended Test Duration (up to 30min)"),
    PremiumFeature("Ad-Free Experience"),
    PremiumFeature("Priority Support"),
)


def premium_features() -> list[PremiumFeature]:
    """Return the upgrade offer in display order."""
    return list(PREMIUM_FEATURES)
