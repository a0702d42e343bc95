"""Ordered, single-pass location fallback chain."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from earthview.config.models import LocationSettings
from earthview.location.device import DevicePositionTier, DeviceReader
from earthview.location.ip import IpLookupTier
from earthview.location.types import GeoFix, LocationTier, LocationUnavailable

logger = logging.getLogger(__name__)


def build_tiers(
    settings: Optional[LocationSettings] = None,
    *,
    device_reader: Optional[DeviceReader] = None,
) -> list[LocationTier]:
    """Device tier first, then the IP lookup when enabled."""

    settings = settings or LocationSettings()
    tiers: list[LocationTier] = [DevicePositionTier(device_reader, settings)]
    if settings.ip_enabled:
        tiers.append(IpLookupTier(settings))
    return tiers


async def resolve_location(tiers: Sequence[LocationTier], *, log_info: bool = False) -> Optional[GeoFix]:
    """Try each tier once, in order; ``None`` means unresolved."""

    for index, tier in enumerate(tiers):
        try:
            fix = await tier()
        except LocationUnavailable as exc:
            logger.warning("location tier %d unavailable: %s", index, exc)
            continue
        except Exception:
            logger.warning("location tier %d raised", index, exc_info=True)
            continue
        if log_info:
            logger.info("location resolved via %s: lat=%.4f lon=%.4f", fix.source, fix.lat, fix.lon)
        return fix
    if log_info:
        logger.info("location unresolved after %d tier(s)", len(tiers))
    return None


__all__ = ["build_tiers", "resolve_location"]
