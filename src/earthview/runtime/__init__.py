"""Frame-driven globe runtime."""

from .frame import CameraView, FrameSnapshot, LoggingRenderer, Renderer
from .globe import GlobeRuntime
from .status import StatusBanner

__all__ = [
    "CameraView",
    "FrameSnapshot",
    "GlobeRuntime",
    "LoggingRenderer",
    "Renderer",
    "StatusBanner",
]
