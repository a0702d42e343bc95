"""Per-subsystem debug logging switches resolved from ``EARTHVIEW_DEBUG``."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

DEBUG_ENV = "EARTHVIEW_DEBUG"


@dataclass(frozen=True)
class LoggingToggles:
    log_camera_info: bool = False
    log_transition_debug: bool = False
    log_rotation_modes: bool = False
    log_pulse_debug: bool = False
    log_location_info: bool = False
    log_status_changes: bool = False


@dataclass(frozen=True)
class DebugPolicy:
    enabled: bool
    logging: LoggingToggles
    frame_log_every: int = 0


# flag name -> LoggingToggles field
DEBUG_FLAGS: dict[str, str] = {
    "camera": "log_camera_info",
    "transition": "log_transition_debug",
    "rotation": "log_rotation_modes",
    "pulse": "log_pulse_debug",
    "location": "log_location_info",
    "status": "log_status_changes",
}

_ON = frozenset({"1", "true", "yes", "on", "all"})
_OFF = frozenset({"", "0", "false", "no", "off"})

_DISABLED = DebugPolicy(enabled=False, logging=LoggingToggles())


def _flag_names(raw: Any) -> set[str]:
    if isinstance(raw, str):
        raw = raw.split(",")
    if not isinstance(raw, (list, tuple, set)):
        return set()
    return {str(item).strip().lower() for item in raw if str(item).strip()}


def _non_negative_int(raw: Any) -> int:
    try:
        return max(0, int(raw))
    except (TypeError, ValueError, OverflowError):
        return 0


def _policy(flags: set[str], frame_log_every: int = 0) -> DebugPolicy:
    unknown = flags.difference(DEBUG_FLAGS)
    if unknown:
        logger.debug("%s: ignoring unknown flags %s", DEBUG_ENV, sorted(unknown))
    toggles = {f.name: False for f in fields(LoggingToggles)}
    for name in flags.intersection(DEBUG_FLAGS):
        toggles[DEBUG_FLAGS[name]] = True
    return DebugPolicy(enabled=True, logging=LoggingToggles(**toggles), frame_log_every=frame_log_every)


def load_debug_policy(env: Optional[Mapping[str, str]] = None) -> DebugPolicy:
    """Resolve ``EARTHVIEW_DEBUG`` into per-subsystem logging toggles.

    ``EARTHVIEW_DEBUG=1`` switches every toggle on; a comma list such as
    ``camera,pulse`` enables the named subsystems; a JSON object may carry
    ``enabled``, ``flags`` and ``frame_log_every`` (log one frame summary
    every N ticks).
    """

    source = os.environ if env is None else env
    raw = source.get(DEBUG_ENV)
    if raw is None:
        return _DISABLED
    text = raw.strip()
    if text.lower() in _OFF:
        return _DISABLED
    if text.lower() in _ON:
        return _policy(set(DEBUG_FLAGS))

    try:
        parsed = json.loads(text)
    except ValueError:
        return _policy(_flag_names(text))

    if isinstance(parsed, dict):
        enabled = parsed.get("enabled", True)
        if isinstance(enabled, str):
            enabled = enabled.strip().lower() not in _OFF
        if not enabled:
            return _DISABLED
        return _policy(_flag_names(parsed.get("flags", [])), _non_negative_int(parsed.get("frame_log_every", 0)))
    if isinstance(parsed, list):
        return _policy(_flag_names(parsed))
    return _policy(_flag_names(text))


__all__ = [
    "DEBUG_FLAGS",
    "DebugPolicy",
    "LoggingToggles",
    "load_debug_policy",
]
