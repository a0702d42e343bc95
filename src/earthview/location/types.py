"""Location result types."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Awaitable, Callable, Literal

LocationSource = Literal["device", "ip"]


class LocationUnavailable(RuntimeError):
    """A location tier could not produce a usable fix."""


@dataclass(frozen=True)
class GeoFix:
    lat: float
    lon: float
    source: LocationSource


def checked_fix(lat: object, lon: object, source: LocationSource) -> GeoFix:
    """Build a ``GeoFix`` from loosely-typed values or raise ``LocationUnavailable``."""

    try:
        flat = float(lat)  # type: ignore[arg-type]
        flon = float(lon)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise LocationUnavailable(f"{source}: coordinates are not numbers ({lat!r}, {lon!r})") from exc
    if not (math.isfinite(flat) and math.isfinite(flon)):
        raise LocationUnavailable(f"{source}: coordinates are not finite ({flat}, {flon})")
    return GeoFix(lat=flat, lon=flon, source=source)


LocationTier = Callable[[], Awaitable[GeoFix]]


__all__ = ["GeoFix", "LocationSource", "LocationTier", "LocationUnavailable", "checked_fix"]
