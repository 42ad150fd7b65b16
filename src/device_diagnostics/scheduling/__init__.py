"""Scheduling — fixed-interval async tickers shared by the engine and monitor."""
from __future__ import annotations

from device_diagnostics.scheduling.ticker import IntervalTicker, SleepFunction

__all__ = ["IntervalTicker", "SleepFunction"]
