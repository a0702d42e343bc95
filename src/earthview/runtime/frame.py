"""Per-frame output handed to the renderer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from earthview.camera.ops import MarkerAnchor, Quaternion
from earthview.camera.state import Vec3
from earthview.motion.pulse import PulseFrame
from earthview.motion.rotation import GlobeOrientation, RotationStep

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CameraView:
    position: Vec3
    fov_deg: float
    roll_deg: float
    target: Vec3
    orientation: Quaternion
    forward: Vec3


@dataclass(frozen=True)
class FrameSnapshot:
    """Everything a renderer needs to draw one frame."""

    now: float
    camera: CameraView
    rotation_mode: str
    rotation: RotationStep
    globe: GlobeOrientation
    search_effects_visible: bool
    pulses: tuple[PulseFrame, ...] = ()
    marker: Optional[MarkerAnchor] = None
    status_text: Optional[str] = None
    transition_active: bool = False


@runtime_checkable
class Renderer(Protocol):
    """Consumer of frame snapshots (GPU-side drawing lives behind this)."""

    def render(self, frame: FrameSnapshot) -> None:
        ...


class LoggingRenderer:
    """Headless renderer that logs a one-line summary every ``every`` frames."""

    def __init__(self, every: int = 1, *, log: logging.Logger = logger) -> None:
        self._every = max(1, int(every))
        self._log = log
        self.frames = 0

    def render(self, frame: FrameSnapshot) -> None:
        self.frames += 1
        if self.frames % self._every:
            return
        pos = frame.camera.position
        fwd = frame.camera.forward
        self._log.info(
            "frame %d t=%.0fms mode=%s cam=(%.3f, %.3f, %.3f) fwd=(%.3f, %.3f, %.3f) fov=%.1f globe=%.4f clouds=%.4f pulses=%d status=%r",
            self.frames,
            frame.now,
            frame.rotation_mode,
            pos.x,
            pos.y,
            pos.z,
            fwd.x,
            fwd.y,
            fwd.z,
            frame.camera.fov_deg,
            frame.globe.globe_y,
            frame.globe.clouds_y,
            len(frame.pulses),
            frame.status_text,
        )


__all__ = ["CameraView", "FrameSnapshot", "LoggingRenderer", "Renderer"]
