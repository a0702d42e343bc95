"""Camera state, descriptor codec and fly-to transitions."""

from .descriptor import decode, encode, extract_descriptor_from_path
from .rig import CameraRig
from .share import build_share_path, descriptor_from_url, format_coordinate
from .state import CameraState, Vec3, clamp_fov
from .transition import TransitionJob, TransitionScheduler, ease_out_cubic

__all__ = [
    "CameraRig",
    "CameraState",
    "TransitionJob",
    "TransitionScheduler",
    "Vec3",
    "build_share_path",
    "clamp_fov",
    "decode",
    "descriptor_from_url",
    "ease_out_cubic",
    "encode",
    "extract_descriptor_from_path",
    "format_coordinate",
]
