"""Clock helpers shared by the frame-driven components."""

from __future__ import annotations

import time


def monotonic_ms() -> float:
    """Monotonic clock reading in milliseconds."""

    return time.perf_counter() * 1000.0


__all__ = ["monotonic_ms"]
