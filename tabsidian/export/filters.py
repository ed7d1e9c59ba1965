"""Decide which tabs take part in an export."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Iterable, List

INTERNAL_PREFIXES = ("edge://", "chrome://", "chrome-extension://", "moz-extension://", "about:", "extension://")


def sanitize_restricted_urls(urls: Iterable[object] | None) -> List[str]:
    return [entry for entry in (urls or []) if isinstance(entry, str) and entry.strip()]


def is_internal_url(url: str) -> bool:
    return url.startswith(INTERNAL_PREFIXES)


def is_restricted_url(url: object, restricted: Iterable[str] = ()) -> bool:
    if not isinstance(url, str) or not url:
        return False
    if is_internal_url(url):
        return True
    return any(pattern and pattern in url for pattern in restricted)


def should_process_tab(tab: object, restricted: Iterable[str] = (), process_only_selected: bool = False) -> bool:
    if not isinstance(tab, Mapping):
        return False
    if tab.get("pinned") or is_restricted_url(tab.get("url") or "", list(restricted)):
        return False
    if not process_only_selected:
        return True
    return bool(tab.get("highlighted"))


def select_tabs(tabs: Iterable[object], restricted: Iterable[str] = ()) -> List[Mapping]:
    """Keep exportable tabs; with more than one highlighted tab only the selection is kept."""
    tabs = list(tabs or [])
    restricted = sanitize_restricted_urls(restricted)
    highlighted = [tab for tab in tabs if isinstance(tab, Mapping) and tab.get("highlighted")]
    only_selected = len(highlighted) > 1
    return [tab for tab in tabs if should_process_tab(tab, restricted, only_selected)]
