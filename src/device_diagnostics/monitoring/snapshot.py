"""MonitoringSnapshot — one instantaneous sample of live device metrics."""
from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class MonitoringSnapshot(BaseModel):
    """Immutable point sample.

    Attributes
    ----------
    timestamp:
        UTC capture time.
    cpu_usage:
        Average usage across cores, percent.
    ram_usage:
        Memory usage, percent.
    temperature:
        Device (battery) temperature, degrees Celsius.
    battery_level:
        Battery charge, percent.
    gpu_usage:
        GPU usage in percent, when known.
    fps:
        Frames per second, when known.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    timestamp: datetime.datetime = Field(default_factory=_utcnow)
    cpu_usage: float
    ram_usage: float
    temperature: float
    battery_level: float
    gpu_usage: float | None = None
    fps: float | None = None

    def to_record(self) -> dict[str, object]:
        """Return the JSON-compatible persisted form (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_record(cls, record: dict[str, object]) -> MonitoringSnapshot:
        return cls.model_validate(record)
