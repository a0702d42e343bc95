"""Device-provided position tier.

The host supplies an async reader (GPS daemon, browser bridge, a fixed
coordinate...). The tier bounds the wait and refuses cached readings older
than the configured maximum age.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from earthview.config.models import LocationSettings
from earthview.location.types import GeoFix, LocationUnavailable, checked_fix

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeviceReading:
    lat: float
    lon: float
    timestamp: float  # seconds, same clock as the tier's ``clock``


DeviceReader = Callable[[], Awaitable[DeviceReading]]


def fixed_reader(lat: float, lon: float, *, clock: Callable[[], float] = time.time) -> DeviceReader:
    """Reader that always reports the given coordinate as a fresh fix."""

    async def _read() -> DeviceReading:
        return DeviceReading(lat=float(lat), lon=float(lon), timestamp=clock())

    return _read


class DevicePositionTier:
    def __init__(
        self,
        reader: Optional[DeviceReader],
        settings: Optional[LocationSettings] = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._reader = reader
        self._settings = settings or LocationSettings()
        self._clock = clock

    @property
    def available(self) -> bool:
        return self._reader is not None

    async def __call__(self) -> GeoFix:
        if self._reader is None:
            raise LocationUnavailable("device: no position capability")
        timeout = float(self._settings.device_timeout_s)
        try:
            reading = await asyncio.wait_for(self._reader(), timeout=timeout)
        except (asyncio.TimeoutError, TimeoutError) as exc:
            raise LocationUnavailable(f"device: no fix within {timeout:.1f}s") from exc
        except LocationUnavailable:
            raise
        except Exception as exc:
            raise LocationUnavailable(f"device: reader failed ({exc})") from exc
        age = self._clock() - float(reading.timestamp)
        if age > float(self._settings.device_max_age_s):
            raise LocationUnavailable(f"device: cached fix is {age:.0f}s old")
        return checked_fix(reading.lat, reading.lon, "device")


__all__ = ["DevicePositionTier", "DeviceReader", "DeviceReading", "fixed_reader"]
