"""Status banner model (message plus optional delayed hide)."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from earthview.config.models import StatusSettings
from earthview.utils.timing import monotonic_ms

logger = logging.getLogger(__name__)


class StatusBanner:
    """A single user-facing status line.

    Non-persistent messages hide themselves ``auto_hide_ms`` after being
    shown. Any new ``show``/``hide`` call supersedes a pending hide.
    """

    def __init__(
        self,
        settings: Optional[StatusSettings] = None,
        *,
        time_fn: Callable[[], float] = monotonic_ms,
        log_changes: bool = False,
    ) -> None:
        self.settings = settings or StatusSettings()
        self._time_fn = time_fn
        self._log_changes = bool(log_changes)
        self._message = ""
        self._visible = False
        self._hide_at: Optional[float] = None

    @property
    def message(self) -> str:
        return self._message

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def text(self) -> Optional[str]:
        """Message currently on screen, or ``None`` when hidden."""

        return self._message if self._visible else None

    @property
    def hide_at(self) -> Optional[float]:
        return self._hide_at

    def show(self, message: str, *, persist: bool = False, now: Optional[float] = None) -> None:
        self._message = str(message)
        self._visible = True
        self._hide_at = None
        if not persist:
            ts = self._time_fn() if now is None else float(now)
            self._hide_at = ts + float(self.settings.auto_hide_ms)
        if self._log_changes:
            logger.info("status: %r (persist=%s)", self._message, persist)

    def hide(self, delay_ms: float = 0.0, *, now: Optional[float] = None) -> None:
        if delay_ms <= 0:
            self._hide_at = None
            self._visible = False
            if self._log_changes:
                logger.info("status: hidden")
            return
        ts = self._time_fn() if now is None else float(now)
        self._hide_at = ts + float(delay_ms)

    def tick(self, now: float) -> None:
        if self._hide_at is not None and float(now) >= self._hide_at:
            self._hide_at = None
            self._visible = False
            if self._log_changes:
                logger.info("status: hidden after timeout")


__all__ = ["StatusBanner"]
