"""Camera descriptor codec.

A descriptor is the compact, URL-safe text form of a viewpoint::

    x<num>y<num>z<num>def<num>[-zoom<num>]

``def`` carries the roll in degrees and the optional ``-zoom`` suffix the
vertical field of view. Decoding is total: malformed input yields ``None``.
"""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Optional

from earthview.camera.state import DEFAULT_FOV_DEG, CameraState, Vec3, clamp_fov

DESCRIPTOR_PATTERN = re.compile(
    r"^x(-?\d+(\.\d+)?)y(-?\d+(\.\d+)?)z(-?\d+(\.\d+)?)def(-?\d+(\.\d+)?)(-zoom(-?\d+(\.\d+)?))?$",
    re.IGNORECASE | re.ASCII,
)
_WHITESPACE = re.compile(r"\s+")

POSITION_DECIMALS = 4
ANGLE_DECIMALS = 2
EDITOR_SENTINEL = "earth-view"
# wide enough for any finite double at fixed point
_FIXED_POINT = Context(prec=400, rounding=ROUND_HALF_UP)


def format_number(value: float, decimals: int = POSITION_DECIMALS) -> str:
    """Fixed-point text with trailing zeros and a dangling point stripped.

    Rounds the exact binary value half away from zero, so ties such as
    ``0.125`` give ``0.13`` like the browser's ``Number.prototype.toFixed``.
    """

    try:
        number = float(value)
    except (TypeError, ValueError):
        return "0"
    if not math.isfinite(number):
        return "0"
    magnitude = Decimal(abs(number)).quantize(Decimal(1).scaleb(-decimals), context=_FIXED_POINT)
    text = f"{magnitude:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if number < 0 and text != "0":
        text = "-" + text
    return text


def encode(state: CameraState) -> str:
    pos = state.position if state.position is not None else Vec3()
    fov = clamp_fov(state.fov_deg)
    return (
        f"x{format_number(pos.x)}"
        f"y{format_number(pos.y)}"
        f"z{format_number(pos.z)}"
        f"def{format_number(state.roll_deg, ANGLE_DECIMALS)}"
        f"-zoom{format_number(fov, ANGLE_DECIMALS)}"
    )


def decode(descriptor: object) -> Optional[CameraState]:
    if not isinstance(descriptor, str) or not descriptor:
        return None
    normalized = _WHITESPACE.sub("", descriptor)
    match = DESCRIPTOR_PATTERN.match(normalized)
    if match is None:
        return None
    roll = float(match.group(7))
    zoom = match.group(10)
    return CameraState(
        position=Vec3(float(match.group(1)), float(match.group(3)), float(match.group(5))),
        roll_deg=roll if math.isfinite(roll) else 0.0,
        fov_deg=clamp_fov(float(zoom)) if zoom is not None else DEFAULT_FOV_DEG,
    )


def extract_descriptor_from_path(pathname: str, site_base: Optional[str] = None) -> str:
    """Return the descriptor candidate carried by a URL path.

    The optional site base (first segment of a project-pages deployment) is
    dropped; a path into the descriptor editor carries no candidate.
    """

    segments = [seg for seg in (pathname or "").split("/") if seg]
    base = (site_base or "").strip()
    if base and segments and segments[0] == base:
        segments.pop(0)
    if not segments:
        return ""
    if segments[0] == EDITOR_SENTINEL:
        return ""
    return "".join(segments)


__all__ = [
    "DESCRIPTOR_PATTERN",
    "EDITOR_SENTINEL",
    "decode",
    "encode",
    "extract_descriptor_from_path",
    "format_number",
]
