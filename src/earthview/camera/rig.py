"""Mutable camera owned by the runtime."""

from __future__ import annotations

from dataclasses import dataclass, field

from earthview.camera import ops
from earthview.camera.state import CameraState, Vec3


@dataclass
class CameraRig:
    """Camera state plus the look-at target and derived orientation."""

    state: CameraState = field(default_factory=CameraState)
    target: Vec3 = ops.ORIGIN
    orientation: ops.Quaternion = (0.0, 0.0, 0.0, 1.0)

    def __post_init__(self) -> None:
        self.look_at_target()

    def look_at_target(self) -> None:
        self.orientation = ops.orient_camera(self.state.position, self.target, self.state.roll_deg)

    def move_to(self, position: Vec3) -> None:
        self.state.position = position
        self.look_at_target()

    def apply_state(self, state: CameraState) -> None:
        """Adopt a decoded viewpoint; the view re-centres on the globe."""

        self.state = state.copy()
        self.target = ops.ORIGIN
        self.look_at_target()


__all__ = ["CameraRig"]
