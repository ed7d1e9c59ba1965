"""Normalization of raw tab, window and group records."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Dict, Optional
from urllib.parse import unquote, urlsplit

SPECIAL_SCHEME_PORTS = {"http": 80, "https": 443, "ftp": 21, "ws": 80, "wss": 443, "file": None}

_PERCENT_ESCAPE_RE = re.compile(r"%[0-9A-Fa-f]{2}")
_MALFORMED_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_LEADING_HASHES_RE = re.compile(r"^#+\s*")

EMPTY_URL_PARTS: Dict[str, str] = {
    "hostname": "",
    "origin": "",
    "protocol": "",
    "pathname": "",
    "search": "",
    "hash": "",
}


def url_parts(url: str) -> Dict[str, str]:
    """Split `url` into URL-API style components; every part is "" when it cannot be parsed."""
    if not isinstance(url, str) or not url.strip():
        return dict(EMPTY_URL_PARTS)
    try:
        parsed = urlsplit(url.strip())
        scheme = parsed.scheme.lower()
        hostname = parsed.hostname or ""
        port = parsed.port
    except ValueError:
        return dict(EMPTY_URL_PARTS)

    if not scheme:
        return dict(EMPTY_URL_PARTS)

    special = scheme in SPECIAL_SCHEME_PORTS
    if special and scheme != "file" and not hostname:
        return dict(EMPTY_URL_PARTS)

    origin = ""
    if special and scheme != "file":
        origin = f"{scheme}://{hostname}"
        if port is not None and port != SPECIAL_SCHEME_PORTS[scheme]:
            origin = f"{origin}:{port}"

    pathname = parsed.path
    if special and not pathname:
        pathname = "/"

    return {
        "hostname": hostname,
        "origin": origin,
        "protocol": f"{scheme}:",
        "pathname": pathname,
        "search": f"?{parsed.query}" if parsed.query else "",
        "hash": f"#{parsed.fragment}" if parsed.fragment else "",
    }


def unescape_title(raw_title: object) -> str:
    """Undo upstream URL-encoding and Markdown heading markers in a tab title."""
    if not isinstance(raw_title, str) or not raw_title:
        return ""

    requires_decoding = "+" in raw_title or bool(_PERCENT_ESCAPE_RE.search(raw_title))
    decoded = raw_title
    if requires_decoding:
        # Any malformed escape keeps the whole title undecoded.
        candidate = raw_title.replace("+", " ")
        if _MALFORMED_ESCAPE_RE.search(candidate):
            decoded = candidate
        else:
            try:
                decoded = unquote(candidate, errors="strict")
            except UnicodeDecodeError:
                decoded = candidate

    trimmed = decoded.lstrip()
    without_hashes = _LEADING_HASHES_RE.sub("", trimmed, count=1)
    return without_hashes if without_hashes else trimmed


def text_value(value: object) -> str:
    return value if isinstance(value, str) else ""


def optional_int(value: object) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def group_id_of(tab: Mapping) -> Optional[int]:
    """Return the tab's group id, or None when the tab is not in a group (ids < 0)."""
    group_id = optional_int(tab.get("groupId"))
    if group_id is None or group_id < 0:
        return None
    return group_id


def normalize_window(window: object, tabs: list) -> Dict:
    window = window if isinstance(window, Mapping) else {}
    incognito = window.get("incognito")
    if not isinstance(incognito, bool):
        incognito = any(bool(tab.get("incognito")) for tab in tabs if isinstance(tab, Mapping))
    return {
        "id": optional_int(window.get("id")),
        "title": text_value(window.get("title")),
        "focused": bool(window.get("focused")),
        "incognito": incognito,
    }


def normalize_group(group_id: int, group: object) -> Dict:
    group = group if isinstance(group, Mapping) else {}
    return {
        "id": group_id,
        "title": text_value(group.get("title")),
        "color": text_value(group.get("color")),
        "collapsed": bool(group.get("collapsed")),
        "windowId": optional_int(group.get("windowId")),
    }


def index_groups(groups: object) -> Dict[int, Mapping]:
    """Accept group records as a mapping keyed by id or as a list, and index them by id."""
    indexed: Dict[int, Mapping] = {}
    if isinstance(groups, Mapping):
        for key, group in groups.items():
            if not isinstance(group, Mapping):
                continue
            group_id = optional_int(group.get("id"))
            if group_id is None:
                try:
                    group_id = int(key)
                except (TypeError, ValueError):
                    continue
            indexed[group_id] = group
    elif isinstance(groups, (list, tuple)):
        for group in groups:
            if isinstance(group, Mapping):
                group_id = optional_int(group.get("id"))
                if group_id is not None:
                    indexed[group_id] = group
    return indexed
