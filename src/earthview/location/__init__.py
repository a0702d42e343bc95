"""Two-tier (device, then IP) location resolution."""

from .device import DevicePositionTier, DeviceReading, fixed_reader
from .ip import IpLookupTier
from .resolver import build_tiers, resolve_location
from .types import GeoFix, LocationTier, LocationUnavailable

__all__ = [
    "DevicePositionTier",
    "DeviceReading",
    "GeoFix",
    "IpLookupTier",
    "LocationTier",
    "LocationUnavailable",
    "build_tiers",
    "fixed_reader",
    "resolve_location",
]
