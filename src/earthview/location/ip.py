"""Network (IP geolocation) fallback tier."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import requests

from earthview.config.models import LocationSettings
from earthview.location.types import GeoFix, LocationUnavailable, checked_fix

logger = logging.getLogger(__name__)


class IpLookupTier:
    """Queries an ipapi.co-style endpoint for ``latitude``/``longitude``.

    The blocking HTTP request runs in a worker thread so callers on the
    event loop keep ticking frames while it is in flight.
    """

    def __init__(self, settings: Optional[LocationSettings] = None, *, session: Any = None) -> None:
        self._settings = settings or LocationSettings()
        self._http = session if session is not None else requests

    def fetch(self) -> GeoFix:
        url = self._settings.ip_lookup_url
        try:
            resp = self._http.get(url, timeout=float(self._settings.ip_timeout_s))
        except requests.RequestException as exc:
            raise LocationUnavailable(f"ip: request to {url} failed ({exc})") from exc
        if not resp.ok:
            raise LocationUnavailable(f"ip: HTTP {resp.status_code} from {url}")
        try:
            data = resp.json()
        except ValueError as exc:
            raise LocationUnavailable(f"ip: response from {url} is not JSON") from exc
        if not isinstance(data, dict):
            raise LocationUnavailable(f"ip: unexpected payload {type(data).__name__}")
        logger.debug("ip lookup payload keys=%s", sorted(data))
        return checked_fix(data.get("latitude"), data.get("longitude"), "ip")

    async def __call__(self) -> GeoFix:
        return await asyncio.to_thread(self.fetch)


__all__ = ["IpLookupTier"]
