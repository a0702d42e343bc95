"""Ambient globe rotation and marker pulses."""

from .pulse import MarkerPulseEmitter, Pulse, PulseFrame
from .rotation import (
    ROTATION_SPEEDS,
    GlobeOrientation,
    RotationMode,
    RotationModeController,
    RotationSpeeds,
    RotationStep,
    coerce_mode,
)

__all__ = [
    "GlobeOrientation",
    "MarkerPulseEmitter",
    "Pulse",
    "PulseFrame",
    "ROTATION_SPEEDS",
    "RotationMode",
    "RotationModeController",
    "RotationSpeeds",
    "RotationStep",
    "coerce_mode",
]
