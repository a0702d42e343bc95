"""Share-link helpers around the descriptor codec."""

from __future__ import annotations

from typing import Optional
from urllib.parse import parse_qs, urlsplit

from earthview.camera.descriptor import extract_descriptor_from_path, format_number

QUERY_KEYS = ("camera", "code")


def descriptor_from_url(url: str, site_base: Optional[str] = None) -> str:
    """Pick the descriptor candidate carried by a full URL.

    Query ``camera``, then query ``code``, then the fragment; the first
    non-empty one wins. Without any of them the path is consulted.
    """

    parts = urlsplit(url or "")
    query = parse_qs(parts.query, keep_blank_values=True)
    for key in QUERY_KEYS:
        # only the first occurrence of a repeated key counts
        value = query.get(key, [""])[0]
        if value:
            return value
    fragment = parts.fragment.lstrip("#")
    if fragment:
        return fragment
    return extract_descriptor_from_path(parts.path, site_base)


def build_share_path(descriptor: str, site_base: Optional[str] = None) -> str:
    base = (site_base or "").strip()
    root = f"/{base}" if base else ""
    if not descriptor:
        return root or "/"
    return f"{root}/{descriptor}"


def format_coordinate(value: float) -> str:
    """Three-decimal read-out used next to the live descriptor."""

    return format_number(value, 3)


__all__ = ["QUERY_KEYS", "build_share_path", "descriptor_from_url", "format_coordinate"]
