"""Built-in template presets and template diagnostics for previews."""

from __future__ import annotations

import datetime as _dt
import uuid
from typing import Dict, Iterable, List, Mapping, Optional

from tabsidian.template import TemplateError, render_template, validate_template

from .config import DEFAULT_MARKDOWN_FORMAT
from .context import build_template_context

BUILT_IN_PRESETS: List[Dict[str, str]] = [
    {
        "id": "builtin:default",
        "name": "Default headings",
        "description": "Frontmatter with level-two headings per tab.",
        "template": DEFAULT_MARKDOWN_FORMAT,
    },
    {
        "id": "builtin:list",
        "name": "Compact list",
        "description": "Frontmatter followed by a bullet list of tabs.",
        "template": "{{{frontmatter}}}\n{{#tabs}}- [{{title}}]({{url}})\n{{/tabs}}",
    },
    {
        "id": "builtin:metadata",
        "name": "Metadata summary",
        "description": "Adds hostname and timestamps under each tab entry.",
        "template": (
            "{{{frontmatter}}}\n"
            "{{#tabs}}## {{title}}\n"
            "- URL: {{url}}\n"
            "- Host: {{hostname}}\n"
            "{{#favicon}}- Favicon: {{favicon}}\n{{/favicon}}"
            "{{#timestamps.lastAccessed}}- Last visited: {{timestamps.lastAccessed}}"
            " ({{timestamps.lastAccessedRelative}})\n{{/timestamps.lastAccessed}}"
            "{{^timestamps.lastAccessed}}- Last visited: unknown\n{{/timestamps.lastAccessed}}"
            "\n{{/tabs}}"
        ),
    },
    {
        "id": "builtin:groups",
        "name": "Grouped by tab group",
        "description": "One heading per tab group, ungrouped tabs last.",
        "template": (
            "{{{frontmatter}}}\n"
            "{{#groups}}## {{title}}{{^title}}Untitled group{{/title}}\n"
            "{{#tabs}}- [{{title}}]({{url}})\n{{/tabs}}\n{{/groups}}"
            "{{#ungroupedTabs.0}}## Other tabs\n{{/ungroupedTabs.0}}"
            "{{#ungroupedTabs}}- [{{title}}]({{url}})\n{{/ungroupedTabs}}"
        ),
    },
]

SAMPLE_TABS = [
    {
        "id": 1,
        "title": "Example Domain",
        "url": "https://example.com/welcome?ref=preview#intro",
        "favIconUrl": "https://example.com/favicon.ico",
        "active": True,
        "highlighted": True,
        "windowId": 1,
        "groupId": 7,
        "lastAccessed": 1704110400000,
    },
    {
        "id": 2,
        "title": "Docs <Reference>",
        "url": "https://docs.example.com/",
        "windowId": 1,
        "groupId": -1,
        "lastAccessed": 1704061800000,
    },
]

SAMPLE_WINDOW = {"id": 1, "title": "Sample window", "focused": True, "incognito": False}
SAMPLE_GROUPS = {7: {"id": 7, "title": "Research", "color": "blue", "collapsed": False, "windowId": 1}}
SAMPLE_NOW = _dt.datetime(2024, 1, 2, 3, 4, 5, tzinfo=_dt.timezone.utc)

SAMPLE_TEMPLATE_CONTEXT: Dict = build_template_context(
    SAMPLE_TABS,
    {"window": SAMPLE_WINDOW, "groups": SAMPLE_GROUPS, "now": SAMPLE_NOW, "tz": _dt.timezone.utc},
)["context"]


def normalize_custom_preset(raw: object) -> Optional[Dict[str, str]]:
    if not isinstance(raw, Mapping):
        return None
    template = raw.get("template") if isinstance(raw.get("template"), str) else ""
    name = raw.get("name").strip() if isinstance(raw.get("name"), str) else ""
    if not template or not name:
        return None
    description = raw.get("description").strip() if isinstance(raw.get("description"), str) else ""
    preset_id = raw.get("id")
    if not (isinstance(preset_id, str) and preset_id.startswith("custom:")):
        preset_id = f"custom:{uuid.uuid4()}"
    return {"id": preset_id, "name": name, "description": description, "template": template}


def all_presets(custom_presets: Iterable[Mapping] = ()) -> List[Dict[str, str]]:
    presets = [dict(p) for p in BUILT_IN_PRESETS]
    for raw in custom_presets:
        preset = normalize_custom_preset(raw)
        if preset is not None:
            presets.append(preset)
    return presets


def find_preset_matching_template(template: str, custom_presets: Iterable[Mapping] = ()) -> Optional[Dict[str, str]]:
    for preset in all_presets(custom_presets):
        if preset["template"] == template:
            return preset
    return None


def compute_template_diagnostics(template: str, context: Optional[Mapping] = None) -> Dict:
    """Validate `template` and render a preview against the sample context.

    Never raises; failures are reported through `errors` and `previewError`.
    """
    validation = validate_template(template)
    preview = ""
    preview_error = None
    if validation["errors"]:
        preview_error = "Fix template errors to preview output."
    else:
        try:
            preview = render_template(template, context if context is not None else SAMPLE_TEMPLATE_CONTEXT)
        except TemplateError as exc:
            preview_error = str(exc) or "Unknown template rendering error."
    return {
        "errors": validation["errors"],
        "warnings": validation["warnings"],
        "preview": preview,
        "previewError": preview_error,
    }
