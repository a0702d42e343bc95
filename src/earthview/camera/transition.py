"""Frame-driven camera fly-to scheduling.

At most one :class:`TransitionJob` exists at a time. ``tick`` is called once
per rendered frame with the current clock reading; there is no queueing, a
new ``start`` silently replaces an unfinished job.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from earthview.camera.rig import CameraRig
from earthview.camera.state import Vec3
from earthview.utils.timing import monotonic_ms

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MS = 2600.0


def ease_out_cubic(t: float) -> float:
    return 1.0 - (1.0 - t) ** 3


def transition_progress(start_time: float, duration_ms: float, now: float) -> float:
    if duration_ms <= 0.0:
        return 1.0
    return min(1.0, max(0.0, (float(now) - float(start_time)) / float(duration_ms)))


def interpolate(from_position: Vec3, to_position: Vec3, eased: float) -> Vec3:
    """Convex combination of the endpoints (exact at 0 and 1)."""

    a = from_position.as_array()
    b = to_position.as_array()
    return Vec3.from_iterable(a * (1.0 - eased) + b * eased)


@dataclass(frozen=True)
class TransitionJob:
    start_time: float
    duration_ms: float
    from_position: Vec3
    to_position: Vec3
    on_complete: Optional[Callable[[], None]] = None


class TransitionScheduler:
    """Owns the in-flight camera transition and advances it per frame."""

    def __init__(
        self,
        *,
        time_fn: Callable[[], float] = monotonic_ms,
        log_debug: bool = False,
    ) -> None:
        self._time_fn = time_fn
        self._job: Optional[TransitionJob] = None
        self._log_debug = bool(log_debug)

    @property
    def job(self) -> Optional[TransitionJob]:
        return self._job

    @property
    def active(self) -> bool:
        return self._job is not None

    def start(
        self,
        rig: CameraRig,
        target_position: Vec3,
        duration_ms: float = DEFAULT_DURATION_MS,
        on_complete: Optional[Callable[[], None]] = None,
        *,
        now: Optional[float] = None,
    ) -> TransitionJob:
        start_time = self._time_fn() if now is None else float(now)
        if self._job is not None and self._log_debug:
            logger.info("transition: discarding unfinished job toward %s", self._job.to_position)
        job = TransitionJob(
            start_time=start_time,
            duration_ms=float(duration_ms),
            from_position=rig.state.position,
            to_position=target_position,
            on_complete=on_complete,
        )
        self._job = job
        if self._log_debug:
            logger.info(
                "transition: start %s -> %s over %.0fms",
                job.from_position,
                job.to_position,
                job.duration_ms,
            )
        return job

    def cancel(self) -> None:
        self._job = None

    def tick(self, rig: CameraRig, now: float) -> None:
        job = self._job
        if job is None:
            return
        progress = transition_progress(job.start_time, job.duration_ms, now)
        eased = ease_out_cubic(progress)
        rig.move_to(interpolate(job.from_position, job.to_position, eased))
        if self._log_debug:
            logger.debug("transition: progress=%.3f eased=%.3f pos=%s", progress, eased, rig.state.position)
        if progress >= 1.0:
            # clear before the callback so a chained start() is not overwritten
            self._job = None
            if job.on_complete is not None:
                job.on_complete()


__all__ = [
    "DEFAULT_DURATION_MS",
    "TransitionJob",
    "TransitionScheduler",
    "ease_out_cubic",
    "interpolate",
    "transition_progress",
]
