"""Camera state value types."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable

import numpy as np

FOV_MIN_DEG = 15.0
FOV_MAX_DEG = 90.0
DEFAULT_FOV_DEG = 45.0


def clamp_fov(value: float) -> float:
    """Clamp a vertical field of view into [15, 90]; non-finite input gives 45."""

    try:
        fov = float(value)
    except (TypeError, ValueError):
        return DEFAULT_FOV_DEG
    if not math.isfinite(fov):
        return DEFAULT_FOV_DEG
    return min(FOV_MAX_DEG, max(FOV_MIN_DEG, fov))


@dataclass(frozen=True)
class Vec3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_iterable(cls, values: Iterable[float]) -> "Vec3":
        x, y, z = (float(v) for v in values)
        return cls(x, y, z)

    def as_array(self) -> np.ndarray:
        return np.array((self.x, self.y, self.z), dtype=np.float64)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass
class CameraState:
    """Viewpoint encoded by a camera descriptor.

    ``fov_deg`` is clamped on construction and on every assignment, so the
    [15, 90] range holds after any mutation.
    """

    position: Vec3 = field(default_factory=Vec3)
    roll_deg: float = 0.0
    fov_deg: float = DEFAULT_FOV_DEG

    def __setattr__(self, name: str, value) -> None:  # type: ignore[no-untyped-def]
        if name == "fov_deg":
            value = clamp_fov(value)
        elif name == "roll_deg":
            roll = float(value)
            value = roll if math.isfinite(roll) else 0.0
        elif name == "position" and not isinstance(value, Vec3):
            value = Vec3.from_iterable(value)
        object.__setattr__(self, name, value)

    def copy(self) -> "CameraState":
        return CameraState(position=self.position, roll_deg=self.roll_deg, fov_deg=self.fov_deg)


__all__ = [
    "CameraState",
    "DEFAULT_FOV_DEG",
    "FOV_MAX_DEG",
    "FOV_MIN_DEG",
    "Vec3",
    "clamp_fov",
]
