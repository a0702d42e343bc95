"""Tolerant readers for ``EARTHVIEW_*`` settings.

Every helper takes an optional mapping so config can be resolved from a
plain dict in tests; ``None`` means ``os.environ``. Unparseable values
return the default instead of raising.
"""

from __future__ import annotations

import math
import os
from typing import Mapping, Optional


def _source(env: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return os.environ if env is None else env


def env_str(name: str, default: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    v = _source(env).get(name)
    return v if v is not None else default


def env_bool(name: str, default: bool = False, env: Optional[Mapping[str, str]] = None) -> bool:
    v = _source(env).get(name)
    if v is None:
        return default
    s = v.strip().lower()
    if s in ("1", "true", "yes", "on"):
        return True
    if s in ("0", "false", "no", "off"):
        return False
    return default


def env_int(name: str, default: int, env: Optional[Mapping[str, str]] = None) -> int:
    v = _source(env).get(name)
    if not v:
        return default
    try:
        return int(v.strip(), 10)
    except ValueError:
        return default


def env_float(name: str, default: float, env: Optional[Mapping[str, str]] = None) -> float:
    v = _source(env).get(name)
    if not v:
        return default
    try:
        value = float(v.strip())
    except ValueError:
        return default
    return value if math.isfinite(value) else default


def env_positive(name: str, default: float, env: Optional[Mapping[str, str]] = None) -> float:
    """Like ``env_float`` but zero or negative values also fall back."""

    value = env_float(name, default, env)
    return value if value > 0.0 else default


def env_clamped(
    name: str,
    default: float,
    lo: float,
    hi: float = math.inf,
    env: Optional[Mapping[str, str]] = None,
) -> float:
    return min(hi, max(lo, env_float(name, default, env)))


__all__ = ["env_bool", "env_clamped", "env_float", "env_int", "env_positive", "env_str"]
