"""Shared configuration dataclasses for earthview."""

from .logging_policy import DebugPolicy, LoggingToggles, load_debug_policy
from .models import (
    FramingSettings,
    LocationSettings,
    PulseSettings,
    StatusSettings,
    TransitionSettings,
    ViewConfig,
    load_view_config,
)

__all__ = [
    "DebugPolicy",
    "FramingSettings",
    "LocationSettings",
    "LoggingToggles",
    "PulseSettings",
    "StatusSettings",
    "TransitionSettings",
    "ViewConfig",
    "load_debug_policy",
    "load_view_config",
]
