"""Hardware information records returned by a device data provider.

Units follow the field names' comments: memory in megabytes, storage in
gigabytes, temperatures in degrees Celsius, percentages in ``[0, 100]``.
"""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

Health = Literal["Good", "Fair", "Poor"]

MEGABYTES_PER_GIGABYTE: int = 1024


def megabytes_to_gigabytes(megabytes: float) -> float:
    """Convert megabytes to gigabytes (binary, 1 GB = 1024 MB)."""
    return megabytes / MEGABYTES_PER_GIGABYTE


class CpuInfo(BaseModel):
    cores: int = Field(gt=0)
    architecture: str
    frequency_mhz: float
    usage: list[float]
    """Per-core usage percentages."""
    model: str

    @property
    def average_usage(self) -> float:
        return sum(self.usage) / len(self.usage) if self.usage else 0.0


class GpuInfo(BaseModel):
    model: str
    renderer: str
    vendor: str
    usage: float | None = None
    temperature: float | None = None


class RamInfo(BaseModel):
    total_mb: float
    used_mb: float
    free_mb: float
    usage_percent: float

    @property
    def used_gb(self) -> float:
        return megabytes_to_gigabytes(self.used_mb)

    @property
    def total_gb(self) -> float:
        return megabytes_to_gigabytes(self.total_mb)


class StorageInfo(BaseModel):
    type: str
    total_gb: float
    used_gb: float
    free_gb: float
    health: Health = "Good"


class BatteryInfo(BaseModel):
    level: float
    health: Literal["Good", "Fair", "Poor", "Dead"] = "Good"
    temperature: float
    voltage: float
    technology: str = "Li-Po"
    charge_cycles: int | None = None
    capacity_mah: int | None = None
    is_charging: bool = False


class NetworkInfo(BaseModel):
    type: Literal["WiFi", "Cellular", "None"]
    ssid: str | None = None
    signal_strength_dbm: float | None = None
    ip_address: str | None = None
    download_mbps: float | None = None
    upload_mbps: float | None = None
    latency_ms: float | None = None


class DisplayInfo(BaseModel):
    width: int
    height: int
    dpi: int
    refresh_rate_hz: int
    color_depth: int
    hdr: bool


class DeviceInfo(BaseModel):
    manufacturer: str = "Unknown"
    model: str = "Unknown"
    os_version: str = "Unknown"
    build_number: str = "Unknown"
    device_id: str = "Unknown"


class SensorInfo(BaseModel):
    name: str
    type: str
    available: bool
