"""Ambient globe rotation modes.

The controller is a small state machine; events raised by the runtime pick
the mode, and the mode picks the globe/cloud spin speeds applied each tick.
Mode changes are instantaneous and take effect on the next ``tick``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Union

logger = logging.getLogger(__name__)

EARTH_ROTATION_SPEED = 0.012
CLOUD_ROTATION_SPEED = 0.018
SEARCH_EFFECT_SPIN_Y = 0.45
SEARCH_EFFECT_SPIN_X = 0.12


class RotationMode(str, Enum):
    SEARCH = "search"
    FOCUSING = "focusing"
    LOCKED = "locked"
    FREE = "free"


@dataclass(frozen=True)
class RotationSpeeds:
    """Angular speeds in radians per second."""

    globe: float
    clouds: float


ROTATION_SPEEDS: dict[RotationMode, RotationSpeeds] = {
    RotationMode.SEARCH: RotationSpeeds(EARTH_ROTATION_SPEED * 3.5, CLOUD_ROTATION_SPEED * 3),
    RotationMode.FOCUSING: RotationSpeeds(EARTH_ROTATION_SPEED * 1.2, CLOUD_ROTATION_SPEED * 1.6),
    RotationMode.LOCKED: RotationSpeeds(0.0, CLOUD_ROTATION_SPEED * 0.9),
    RotationMode.FREE: RotationSpeeds(EARTH_ROTATION_SPEED, CLOUD_ROTATION_SPEED * 1.05),
}


def coerce_mode(mode: Union[RotationMode, str, None]) -> RotationMode:
    """Map a mode name to a ``RotationMode``; anything unknown is ``FREE``."""

    if isinstance(mode, RotationMode):
        return mode
    if isinstance(mode, str):
        try:
            return RotationMode(mode.strip().lower())
        except ValueError:
            pass
    logger.debug("unknown rotation mode %r; using free", mode)
    return RotationMode.FREE


@dataclass(frozen=True)
class RotationStep:
    """Angular increments produced by one tick."""

    globe: float
    clouds: float
    effects_x: float = 0.0
    effects_y: float = 0.0


@dataclass
class GlobeOrientation:
    """Accumulated Y rotations of globe and clouds, plus the search effects."""

    globe_y: float = 0.0
    clouds_y: float = 0.0
    effects_x: float = 0.0
    effects_y: float = 0.0


class RotationModeController:
    """Owns the current rotation mode and the accumulated orientation."""

    def __init__(self, mode: Union[RotationMode, str] = RotationMode.SEARCH, *, log_modes: bool = False) -> None:
        self._mode = coerce_mode(mode)
        self._log_modes = bool(log_modes)
        self.orientation = GlobeOrientation()

    @property
    def mode(self) -> RotationMode:
        return self._mode

    @property
    def speeds(self) -> RotationSpeeds:
        return ROTATION_SPEEDS[self._mode]

    @property
    def search_effects_visible(self) -> bool:
        return self._mode is RotationMode.SEARCH

    def set_mode(self, mode: Union[RotationMode, str, None]) -> RotationMode:
        resolved = coerce_mode(mode)
        if resolved is not self._mode and self._log_modes:
            logger.info("rotation mode %s -> %s", self._mode.value, resolved.value)
        self._mode = resolved
        return resolved

    # Event handlers -----------------------------------------------------

    def on_init(self, *, has_descriptor: bool) -> RotationMode:
        return self.set_mode(RotationMode.FREE if has_descriptor else RotationMode.SEARCH)

    def on_descriptor_applied(self) -> RotationMode:
        return self.set_mode(RotationMode.FREE)

    def on_location_requested(self, *, auto_frame: bool) -> RotationMode:
        if auto_frame:
            return self.set_mode(RotationMode.SEARCH)
        return self._mode

    def on_location_resolved(self, *, auto_frame: bool) -> RotationMode:
        return self.set_mode(RotationMode.FOCUSING if auto_frame else RotationMode.FREE)

    def on_location_failed(self) -> RotationMode:
        return self.set_mode(RotationMode.FREE)

    def on_focus_complete(self) -> RotationMode:
        return self.set_mode(RotationMode.LOCKED)

    # Frame tick ---------------------------------------------------------

    def tick(self, delta_s: float) -> RotationStep:
        dt = max(0.0, float(delta_s))
        speeds = self.speeds
        step = RotationStep(globe=speeds.globe * dt, clouds=speeds.clouds * dt)
        if self.search_effects_visible:
            step = RotationStep(
                globe=step.globe,
                clouds=step.clouds,
                effects_x=SEARCH_EFFECT_SPIN_X * dt,
                effects_y=SEARCH_EFFECT_SPIN_Y * dt,
            )
        o = self.orientation
        o.globe_y += step.globe
        o.clouds_y += step.clouds
        o.effects_x += step.effects_x
        o.effects_y += step.effects_y
        return step


__all__ = [
    "GlobeOrientation",
    "ROTATION_SPEEDS",
    "RotationMode",
    "RotationModeController",
    "RotationSpeeds",
    "RotationStep",
    "coerce_mode",
]
