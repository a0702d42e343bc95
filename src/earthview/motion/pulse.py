"""Expanding/fading halo pulses around the located marker."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from earthview.camera.ops import MarkerAnchor
from earthview.config.models import PulseSettings
from earthview.utils.timing import monotonic_ms

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pulse:
    anchor: MarkerAnchor
    start_time: float
    duration_ms: float


@dataclass(frozen=True)
class PulseFrame:
    """Render-ready view of one live pulse."""

    anchor: MarkerAnchor
    scale: float
    opacity: float
    age: float


def pulse_appearance(age: float, settings: PulseSettings) -> tuple[float, float]:
    """Scale and opacity for a pulse at normalised age ``age`` in ``[0, 1)``."""

    t = max(0.0, float(age))
    scale = 1.0 + t * float(settings.growth)
    opacity = float(settings.base_opacity) * (1.0 - t)
    return scale, opacity


class MarkerPulseEmitter:
    """Emits pulses on a fixed cadence while an anchor is registered.

    Pulses are kept in insertion order and retired purely by age. Replacing
    or clearing the anchor drops every live pulse at once.
    """

    def __init__(
        self,
        settings: Optional[PulseSettings] = None,
        *,
        time_fn: Callable[[], float] = monotonic_ms,
        log_debug: bool = False,
    ) -> None:
        self.settings = settings or PulseSettings()
        self._time_fn = time_fn
        self._log_debug = bool(log_debug)
        self._anchor: Optional[MarkerAnchor] = None
        self._pulses: list[Pulse] = []
        self._last_emission = 0.0

    @property
    def anchor(self) -> Optional[MarkerAnchor]:
        return self._anchor

    @property
    def pulses(self) -> tuple[Pulse, ...]:
        return tuple(self._pulses)

    def set_anchor(self, anchor: MarkerAnchor, now: Optional[float] = None) -> None:
        ts = self._time_fn() if now is None else float(now)
        self._anchor = anchor
        self._pulses.clear()
        self._spawn(ts)
        if self._log_debug:
            logger.info("pulse: anchor set lat=%.3f lon=%.3f", anchor.lat, anchor.lon)

    def clear_anchor(self) -> None:
        if self._log_debug and self._anchor is not None:
            logger.info("pulse: anchor cleared (%d live pulses retired)", len(self._pulses))
        self._anchor = None
        self._pulses.clear()

    def _spawn(self, now: float) -> None:
        assert self._anchor is not None
        self._pulses.append(Pulse(anchor=self._anchor, start_time=now, duration_ms=float(self.settings.duration_ms)))
        self._last_emission = now

    def tick(self, now: float) -> list[PulseFrame]:
        now = float(now)
        if self._anchor is not None and now - self._last_emission >= float(self.settings.interval_ms):
            self._spawn(now)

        frames: list[PulseFrame] = []
        alive: list[Pulse] = []
        for pulse in self._pulses:
            if pulse.duration_ms <= 0.0:
                continue
            t = (now - pulse.start_time) / pulse.duration_ms
            if t >= 1.0:
                continue
            scale, opacity = pulse_appearance(t, self.settings)
            alive.append(pulse)
            frames.append(PulseFrame(anchor=pulse.anchor, scale=scale, opacity=opacity, age=max(0.0, t)))
        retired = len(self._pulses) - len(alive)
        self._pulses = alive
        if retired and self._log_debug:
            logger.debug("pulse: retired %d, %d live", retired, len(alive))
        return frames


__all__ = ["MarkerPulseEmitter", "Pulse", "PulseFrame", "pulse_appearance"]
