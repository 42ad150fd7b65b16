"""DeviceDataProvider — best-effort hardware information.

:class:`MockDeviceProvider` synthesises plausible values for every
subsystem.  Battery and network data can come from optional platform
readers; when a reader is missing or fails, the provider logs and returns
fixed fallback values instead.  Callers never see the failure.
"""
from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from typing import Callable, Literal, NamedTuple

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
)
from device_diagnostics.stress.workloads import RandomSource

logger = logging.getLogger(__name__)

Platform = Literal["ios", "android", "default"]


class BatteryReading(NamedTuple):
    """Raw platform battery state: level in ``[0, 1]`` and charging flag."""

    level: float
    is_charging: bool


class NetworkReading(NamedTuple):
    """Raw platform network state."""

    type: Literal["WiFi", "Cellular", "None"]
    ip_address: str | None = None


BatteryReader = Callable[[], BatteryReading]
NetworkReader = Callable[[], NetworkReading]

_CORES: dict[str, int] = {"ios": 6, "android": 8, "default": 4}
_ARCHITECTURE: dict[str, str] = {"ios": "ARM64", "android": "ARM64-v8a", "default": "ARM64"}
_CPU_MODEL: dict[str, str] = {
    "ios": "Apple A15 Bionic",
    "android": "Qualcomm Snapdragon 888",
    "default": "Unknown",
}
_GPU_MODEL: dict[str, str] = {"ios": "Apple GPU (5-core)", "android": "Adreno 660", "default": "Unknown"}
_GPU_VENDOR: dict[str, str] = {"ios": "Apple", "android": "Qualcomm", "default": "Unknown"}
_TOTAL_RAM_MB: dict[str, int] = {"ios": 6144, "android": 8192, "default": 4096}
_STORAGE_TYPE: dict[str, str] = {"ios": "NVMe", "android": "UFS 3.1", "default": "eMMC"}
_BATTERY_CAPACITY: dict[str, int] = {"ios": 3095, "android": 4500, "default": 4000}
_REFRESH_RATE: dict[str, int] = {"ios": 120, "android": 90, "default": 60}

FALLBACK_BATTERY = BatteryInfo(
    level=75,
    health="Good",
    temperature=35.0,
    voltage=4.0,
    technology="Li-Po",
    charge_cycles=150,
    is_charging=False,
)

FALLBACK_NETWORK = NetworkInfo(
    type="WiFi",
    ssid="Demo Network",
    signal_strength_dbm=-60.0,
    ip_address="192.168.1.100",
    download_mbps=85.5,
    upload_mbps=35.2,
    latency_ms=15.8,
)


class DeviceDataProvider(ABC):
    """Abstract source of hardware snapshots."""

    @abstractmethod
    def cpu_info(self) -> CpuInfo: ...

    @abstractmethod
    def gpu_info(self) -> GpuInfo: ...

    @abstractmethod
    def ram_info(self) -> RamInfo: ...

    @abstractmethod
    def storage_info(self) -> StorageInfo: ...

    @abstractmethod
    def battery_info(self) -> BatteryInfo: ...

    @abstractmethod
    def network_info(self) -> NetworkInfo: ...

    @abstractmethod
    def display_info(self) -> DisplayInfo: ...

    @abstractmethod
    def device_info(self) -> DeviceInfo: ...

    @abstractmethod
    def sensors(self) -> list[SensorInfo]: ...


class MockDeviceProvider(DeviceDataProvider):
    """Randomised device data shaped like a typical phone.

    Parameters
    ----------
    platform:
        Selects per-platform constants (core count, RAM size, models).
    rng:
        Random source for jitter.
    seed:
        Seed for the default random source.
    battery_reader:
        Optional platform battery reader.
    network_reader:
        Optional platform network reader.
    device:
        Static device identity to report.
    """

    def __init__(
        self,
        platform: Platform = "android",
        rng: RandomSource | None = None,
        seed: int | None = None,
        battery_reader: BatteryReader | None = None,
        network_reader: NetworkReader | None = None,
        device: DeviceInfo | None = None,
    ) -> None:
        self._platform = platform
        self._rng: RandomSource = rng if rng is not None else random.Random(seed)
        self._battery_reader = battery_reader
        self._network_reader = network_reader
        self._device = device or DeviceInfo()

    @property
    def platform(self) -> Platform:
        return self._platform

    def cpu_info(self) -> CpuInfo:
        cores = _CORES[self._platform]
        return CpuInfo(
            cores=cores,
            architecture=_ARCHITECTURE[self._platform],
            frequency_mhz=2840.0,
            usage=[self._rng.uniform(20.0, 80.0) for _ in range(cores)],
            model=_CPU_MODEL[self._platform],
        )

    def gpu_info(self) -> GpuInfo:
        return GpuInfo(
            model=_GPU_MODEL[self._platform],
            renderer="Hardware Accelerated",
            vendor=_GPU_VENDOR[self._platform],
            usage=self._rng.uniform(10.0, 50.0),
            temperature=self._rng.uniform(35.0, 50.0),
        )

    def ram_info(self) -> RamInfo:
        total = float(_TOTAL_RAM_MB[self._platform])
        used = self._rng.uniform(total * 0.3, total * 0.8)
        return RamInfo(
            total_mb=total,
            used_mb=used,
            free_mb=total - used,
            usage_percent=used / total * 100.0,
        )

    def storage_info(self) -> StorageInfo:
        total = 128.0
        used = self._rng.uniform(40.0, 100.0)
        return StorageInfo(
            type=_STORAGE_TYPE[self._platform],
            total_gb=total,
            used_gb=used,
            free_gb=total - used,
            health="Good",
        )

    def battery_info(self) -> BatteryInfo:
        capacity = _BATTERY_CAPACITY[self._platform]
        if self._battery_reader is None:
            return FALLBACK_BATTERY.model_copy(update={"capacity_mah": capacity})
        try:
            reading = self._battery_reader()
        except Exception as exc:  # noqa: BLE001
            logger.info("Battery reader failed, using fallback data: %s", exc)
            return FALLBACK_BATTERY.model_copy(update={"capacity_mah": capacity})
        return BatteryInfo(
            level=round(reading.level * 100),
            health="Good",
            temperature=self._rng.uniform(30.0, 40.0),
            voltage=self._rng.uniform(3.7, 4.2),
            technology="Li-Po",
            charge_cycles=int(self._rng.uniform(50.0, 250.0)),
            capacity_mah=capacity,
            is_charging=reading.is_charging,
        )

    def network_info(self) -> NetworkInfo:
        if self._network_reader is None:
            return FALLBACK_NETWORK
        try:
            reading = self._network_reader()
        except Exception as exc:  # noqa: BLE001
            logger.info("Network reader failed, using fallback data: %s", exc)
            return FALLBACK_NETWORK
        connected = reading.type != "None"
        return NetworkInfo(
            type=reading.type,
            ssid="WiFi Network" if reading.type == "WiFi" else None,
            signal_strength_dbm=self._rng.uniform(-80.0, -50.0) if connected else None,
            ip_address=reading.ip_address,
            download_mbps=self._rng.uniform(50.0, 150.0),
            upload_mbps=self._rng.uniform(20.0, 70.0),
            latency_ms=self._rng.uniform(10.0, 40.0),
        )

    def display_info(self) -> DisplayInfo:
        return DisplayInfo(
            width=1080,
            height=2400,
            dpi=420,
            refresh_rate_hz=_REFRESH_RATE[self._platform],
            color_depth=24,
            hdr=True,
        )

    def device_info(self) -> DeviceInfo:
        return self._device

    def sensors(self) -> list[SensorInfo]:
        return [
            SensorInfo(name="Accelerometer", type="Motion", available=True),
            SensorInfo(name="Gyroscope", type="Motion", available=True),
            SensorInfo(name="Magnetometer", type="Position", available=True),
            SensorInfo(name="Barometer", type="Environment", available=True),
            SensorInfo(name="Proximity", type="Position", available=True),
            SensorInfo(name="Light Sensor", type="Environment", available=True),
            SensorInfo(name="Fingerprint", type="Biometric", available=self._platform != "default"),
            SensorInfo(name="Face ID", type="Biometric", available=self._platform == "ios"),
        ]

    def __repr__(self) -> str:
        return f"MockDeviceProvider(platform={self._platform!r})"
