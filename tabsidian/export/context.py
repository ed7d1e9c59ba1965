"""Build the template context from raw tab, window and group records."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Dict, List, Optional, TextIO

from .config import FrontmatterSettings, frontmatter_settings_from_cfg, merge_cfg
from .frontmatter import compose_frontmatter, frontmatter_data
from .normalize import (
    group_id_of,
    index_groups,
    normalize_group,
    normalize_window,
    optional_int,
    text_value,
    unescape_title,
    url_parts,
)
from .timestamps import export_timestamp, iso_utc, relative_time, resolve_now, to_datetime

TAB_FLAGS = ("pinned", "active", "highlighted", "audible", "muted", "discarded", "incognito")


def build_template_context(
    tabs: List[Mapping],
    options: Optional[Mapping] = None,
    stderr: Optional[TextIO] = None,
) -> Dict:
    """Return `{"context": ..., "timestamp": ...}` for the given tabs.

    `options` may carry `window`, `groups`, `now`, `tz`, `cfg` and a prebuilt
    `frontmatter` FrontmatterSettings. Inputs are never mutated.
    """
    options = options or {}
    tabs = list(tabs or [])
    now = resolve_now(options.get("now"))
    timestamp = export_timestamp(now, options.get("tz"))

    cfg = merge_cfg(None, options.get("cfg"))
    settings = options.get("frontmatter")
    if not isinstance(settings, FrontmatterSettings):
        settings = frontmatter_settings_from_cfg(cfg)

    window = normalize_window(options.get("window"), tabs)
    group_records = index_groups(options.get("groups"))

    tab_contexts: List[Dict] = []
    groups: List[Dict] = []
    groups_by_id: Dict[int, Dict] = {}
    ungrouped: List[Dict] = []

    for idx, raw in enumerate(tabs):
        raw = raw if isinstance(raw, Mapping) else {}
        group_id = group_id_of(raw)
        group_summary = None
        if group_id is not None:
            group = groups_by_id.get(group_id)
            if group is None:
                group = normalize_group(group_id, group_records.get(group_id))
                group["tabs"] = []
                group["tabCount"] = 0
                groups_by_id[group_id] = group
                groups.append(group)
            group_summary = {k: group[k] for k in ("id", "title", "color", "collapsed")}

        tab_ctx = _tab_context(raw, idx, window, group_id, group_summary, now)
        tab_contexts.append(tab_ctx)
        if group_id is None:
            ungrouped.append(tab_ctx)
        else:
            groups_by_id[group_id]["tabs"].append(tab_ctx)
            groups_by_id[group_id]["tabCount"] += 1

    export = dict(timestamp)
    export["tabCount"] = len(tab_contexts)

    frontmatter = compose_frontmatter(
        frontmatter_data(export, window, len(tab_contexts)),
        settings,
        stderr=stderr,
    )

    context = {
        "frontmatter": frontmatter,
        "export": export,
        "window": window,
        "tabs": tab_contexts,
        "groups": groups,
        "ungroupedTabs": ungrouped,
    }
    return {"context": context, "timestamp": timestamp}


def _tab_context(raw: Mapping, idx: int, window: Dict, group_id, group_summary, now) -> Dict:
    url = text_value(raw.get("url")).strip()
    last_accessed = to_datetime(raw.get("lastAccessed"))

    tab = {
        "id": optional_int(raw.get("id")),
        "index": idx,
        "position": idx + 1,
        "title": unescape_title(raw.get("title")),
        "url": url,
    }
    tab.update(url_parts(url))
    tab["favicon"] = text_value(raw.get("favIconUrl"))
    for flag in TAB_FLAGS:
        tab[flag] = bool(raw.get(flag))
    tab["windowId"] = optional_int(raw.get("windowId"))
    tab["groupId"] = group_id
    tab["group"] = group_summary
    tab["window"] = window
    tab["timestamps"] = {
        "lastAccessed": iso_utc(last_accessed) if last_accessed is not None else None,
        "lastAccessedRelative": relative_time(last_accessed, now),
    }
    return tab
