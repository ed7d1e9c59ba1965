"""YAML-style frontmatter block for exported notes."""

from __future__ import annotations

import re
from typing import Dict, List, Mapping, Optional, TextIO, Tuple

from tabsidian.template import TemplateError, render_template

from .config import (
    DEFAULT_FRONTMATTER_COLLECTIONS_TEMPLATE,
    DEFAULT_FRONTMATTER_TAGS_TEMPLATE,
    DEFAULT_FRONTMATTER_TITLE_TEMPLATE,
    FRONTMATTER_FIELD_ORDER,
    FrontmatterSettings,
)

_LIST_SPLIT_RE = re.compile(r"[,\r\n]+")


def compose_frontmatter(
    data: Mapping,
    settings: Optional[FrontmatterSettings] = None,
    stderr: Optional[TextIO] = None,
) -> str:
    """Build the frontmatter block from `{export, window, tabCount}`.

    Returns "" when every field is disabled.
    """
    settings = settings or FrontmatterSettings()
    export = data.get("export") or {}
    window = data.get("window") or {}

    fields: List[Tuple[str, str]] = []
    for key in FRONTMATTER_FIELD_ORDER:
        if not settings.is_enabled(key):
            continue
        name = settings.field_name(key)
        if key == "title":
            title = _render_field(settings.title_template, DEFAULT_FRONTMATTER_TITLE_TEMPLATE, data, stderr)
            fields.append((name, yaml_string(title.strip())))
        elif key == "date":
            fields.append((name, yaml_string(export.get("localDate"))))
        elif key == "time":
            fields.append((name, yaml_string(export.get("localTime"))))
        elif key == "exportedAt":
            fields.append((name, yaml_string(export.get("iso"))))
        elif key == "tabCount":
            fields.append((name, str(int(data.get("tabCount") or 0))))
        elif key == "windowIncognito":
            fields.append((name, "true" if window.get("incognito") else "false"))
        elif key == "tags":
            rendered = _render_field(settings.tags_template, DEFAULT_FRONTMATTER_TAGS_TEMPLATE, data, stderr)
            fields.append((name, yaml_list(split_list(rendered))))
        elif key == "collections":
            rendered = _render_field(
                settings.collections_template, DEFAULT_FRONTMATTER_COLLECTIONS_TEMPLATE, data, stderr
            )
            fields.append((name, yaml_list(split_list(rendered))))

    if not fields:
        return ""

    lines = ["---"]
    for name, value in fields:
        if value.startswith("\n"):
            lines.append(f"{name}:{value}")
        else:
            lines.append(f"{name}: {value}")
    lines.append("---")
    return "\n".join(lines) + "\n"


def _render_field(template: str, default: str, data: Mapping, stderr: Optional[TextIO]) -> str:
    try:
        return render_template(template, data)
    except TemplateError as exc:
        if stderr is not None:
            print(f"warn: frontmatter template failed ({exc}); using default", file=stderr)
        return render_template(default, data)


def yaml_string(value: object) -> str:
    if value is None or value == "":
        return '""'
    text = str(value)
    text = text.replace("\\", "\\\\").replace('"', '\\"')
    text = text.replace("\r\n", "\n").replace("\r", "\n").replace("\n", "\\n")
    return f'"{text}"'


def split_list(rendered: str) -> List[str]:
    """Split on commas/newlines and drop case-insensitive duplicates, keeping first-seen casing."""
    seen = set()
    values: List[str] = []
    for part in _LIST_SPLIT_RE.split(rendered or ""):
        value = part.strip()
        if not value:
            continue
        folded = value.casefold()
        if folded in seen:
            continue
        seen.add(folded)
        values.append(value)
    return values


def yaml_list(values: List[str]) -> str:
    if not values:
        return "[]"
    return "".join(f"\n  - {yaml_string(value)}" for value in values)


def frontmatter_data(export: Mapping, window: Mapping, tab_count: int) -> Dict:
    return {"export": dict(export), "window": dict(window), "tabCount": tab_count}
