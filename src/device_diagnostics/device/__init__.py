"""Device subsystem — hardware information records and data providers."""
from __future__ import annotations

from device_diagnostics.device.models import (
    BatteryInfo,
    CpuInfo,
    DeviceInfo,
    DisplayInfo,
    GpuInfo,
    NetworkInfo,
    RamInfo,
    SensorInfo,
    StorageInfo,
    megabytes_to_gigabytes,
)
from device_diagnostics.device.provider import (
    FALLBACK_BATTERY,
    FALLBACK_NETWORK,
    BatteryReading,
    DeviceDataProvider,
    MockDeviceProvider,
    NetworkReading,
)

__all__ = [
    "CpuInfo",
    "GpuInfo",
    "RamInfo",
    "StorageInfo",
    "BatteryInfo",
    "NetworkInfo",
    "DisplayInfo",
    "DeviceInfo",
    "SensorInfo",
    "megabytes_to_gigabytes",
    "DeviceDataProvider",
    "MockDeviceProvider",
    "BatteryReading",
    "NetworkReading",
    "FALLBACK_BATTERY",
    "FALLBACK_NETWORK",
]
