"""Configuration dataclasses shared across the earthview package."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional

from earthview.config.logging_policy import DebugPolicy, load_debug_policy
from earthview.utils.env import env_bool, env_clamped, env_int, env_positive, env_str


@dataclass(frozen=True)
class TransitionSettings:
    """Camera fly-to timing."""

    duration_ms: float = 2600.0


@dataclass(frozen=True)
class PulseSettings:
    """Marker pulse cadence and appearance."""

    interval_ms: float = 1500.0
    duration_ms: float = 1800.0
    base_opacity: float = 0.35
    growth: float = 2.2


@dataclass(frozen=True)
class LocationSettings:
    """Two-tier location lookup parameters."""

    device_timeout_s: float = 9.0
    device_max_age_s: float = 60.0
    ip_enabled: bool = True
    ip_lookup_url: str = "https://ipapi.co/json/"
    ip_timeout_s: float = 10.0


@dataclass(frozen=True)
class FramingSettings:
    """Where the camera settles when auto-framing a located point."""

    focus_distance: float = 2.6
    lateral_offset: float = 0.22
    vertical_lift: float = 0.45
    min_height: float = -0.4
    max_height: float = 1.5


@dataclass(frozen=True)
class StatusSettings:
    """Status banner timings (milliseconds)."""

    auto_hide_ms: float = 3200.0
    focus_hide_ms: float = 1200.0
    free_hide_ms: float = 1500.0


@dataclass(frozen=True)
class ViewConfig:
    """Top-level configuration for the globe runtime."""

    site_base: Optional[str] = None
    initial_position: tuple[float, float, float] = (0.0, 0.25, 3.6)
    transition: TransitionSettings = field(default_factory=TransitionSettings)
    pulse: PulseSettings = field(default_factory=PulseSettings)
    location: LocationSettings = field(default_factory=LocationSettings)
    framing: FramingSettings = field(default_factory=FramingSettings)
    status: StatusSettings = field(default_factory=StatusSettings)
    debug_policy: DebugPolicy = field(default_factory=lambda: load_debug_policy({}))


def load_view_config(env: Optional[Mapping[str, str]] = None) -> ViewConfig:
    """Resolve ``EARTHVIEW_*`` environment variables into a ``ViewConfig``."""

    site_base = (env_str("EARTHVIEW_SITE_BASE", None, env) or "").strip() or None

    transition = TransitionSettings(
        duration_ms=env_clamped("EARTHVIEW_TRANSITION_MS", TransitionSettings.duration_ms, 0.0, env=env),
    )

    pd = PulseSettings()
    pulse = PulseSettings(
        interval_ms=env_positive("EARTHVIEW_PULSE_INTERVAL_MS", pd.interval_ms, env),
        duration_ms=env_positive("EARTHVIEW_PULSE_DURATION_MS", pd.duration_ms, env),
        base_opacity=env_clamped("EARTHVIEW_PULSE_OPACITY", pd.base_opacity, 0.0, 1.0, env),
        growth=env_clamped("EARTHVIEW_PULSE_GROWTH", pd.growth, 0.0, env=env),
    )

    ld = LocationSettings()
    location = LocationSettings(
        device_timeout_s=env_positive("EARTHVIEW_DEVICE_TIMEOUT_S", ld.device_timeout_s, env),
        device_max_age_s=env_clamped("EARTHVIEW_DEVICE_MAX_AGE_S", ld.device_max_age_s, 0.0, env=env),
        ip_enabled=env_bool("EARTHVIEW_IP_LOOKUP", ld.ip_enabled, env),
        ip_lookup_url=env_str("EARTHVIEW_IP_LOOKUP_URL", None, env) or ld.ip_lookup_url,
        ip_timeout_s=env_positive("EARTHVIEW_IP_TIMEOUT_S", ld.ip_timeout_s, env),
    )

    framing = FramingSettings(
        focus_distance=env_positive("EARTHVIEW_FOCUS_DISTANCE", FramingSettings.focus_distance, env),
    )

    status = StatusSettings(
        auto_hide_ms=float(max(0, env_int("EARTHVIEW_STATUS_HIDE_MS", int(StatusSettings.auto_hide_ms), env))),
    )

    return ViewConfig(
        site_base=site_base,
        transition=transition,
        pulse=pulse,
        location=location,
        framing=framing,
        status=status,
        debug_policy=load_debug_policy(env),
    )


__all__ = [
    "FramingSettings",
    "LocationSettings",
    "PulseSettings",
    "StatusSettings",
    "TransitionSettings",
    "ViewConfig",
    "load_view_config",
]
