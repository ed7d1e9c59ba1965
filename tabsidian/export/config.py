"""Export configuration and shared constants."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping

DEFAULT_MARKDOWN_FORMAT = "{{{frontmatter}}}\n{{#tabs}}## {{title}}\n[{{url}}]({{url}})\n\n{{/tabs}}"

DEFAULT_OBSIDIAN_NOTE_PATH = "tabSidian/tab-export-{timestamp}.md"

DEFAULT_RESTRICTED_URLS = [
    "chrome-extension://",
    "extension://",
    "moz-extension://",
    "safari-web-extension://",
    "edge://",
    "chrome://",
    "mail.google.com",
    "outlook.live.com",
]

MAX_OBSIDIAN_URI_LENGTH = 60000

FRONTMATTER_FIELD_ORDER = (
    "title",
    "date",
    "time",
    "exportedAt",
    "tabCount",
    "windowIncognito",
    "tags",
    "collections",
)

DEFAULT_FRONTMATTER_FIELD_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "title": "title",
        "date": "date_created",
        "time": "time_created",
        "exportedAt": "exported_at",
        "tabCount": "tab_count",
        "tags": "tags",
        "collections": "collections",
        "windowIncognito": "window_incognito",
    }
)

DEFAULT_FRONTMATTER_ENABLED: Mapping[str, bool] = MappingProxyType(
    {key: True for key in FRONTMATTER_FIELD_ORDER}
)

DEFAULT_FRONTMATTER_TITLE_TEMPLATE = "Tab export {{export.localDate}}"
DEFAULT_FRONTMATTER_TAGS_TEMPLATE = "tabs"
DEFAULT_FRONTMATTER_COLLECTIONS_TEMPLATE = ""

FIELD_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+$")

DEFAULT_CFG: Dict = {
    "markdownFormat": DEFAULT_MARKDOWN_FORMAT,
    "restrictedUrls": list(DEFAULT_RESTRICTED_URLS),
    "obsidianVault": "",
    "obsidianNotePath": DEFAULT_OBSIDIAN_NOTE_PATH,
    "maxObsidianUriLength": MAX_OBSIDIAN_URI_LENGTH,
    "frontmatterFieldNames": dict(DEFAULT_FRONTMATTER_FIELD_NAMES),
    "frontmatterEnabledFields": dict(DEFAULT_FRONTMATTER_ENABLED),
    "frontmatterTitleTemplate": DEFAULT_FRONTMATTER_TITLE_TEMPLATE,
    "frontmatterTagsTemplate": DEFAULT_FRONTMATTER_TAGS_TEMPLATE,
    "frontmatterCollectionsTemplate": DEFAULT_FRONTMATTER_COLLECTIONS_TEMPLATE,
}


@dataclass(frozen=True)
class FrontmatterSettings:
    field_names: Mapping[str, str] = field(default_factory=lambda: DEFAULT_FRONTMATTER_FIELD_NAMES)
    enabled: Mapping[str, bool] = field(default_factory=lambda: DEFAULT_FRONTMATTER_ENABLED)
    title_template: str = DEFAULT_FRONTMATTER_TITLE_TEMPLATE
    tags_template: str = DEFAULT_FRONTMATTER_TAGS_TEMPLATE
    collections_template: str = DEFAULT_FRONTMATTER_COLLECTIONS_TEMPLATE

    def field_name(self, key: str) -> str:
        return self.field_names.get(key) or DEFAULT_FRONTMATTER_FIELD_NAMES[key]

    def is_enabled(self, key: str) -> bool:
        return bool(self.enabled.get(key, DEFAULT_FRONTMATTER_ENABLED[key]))


def merge_cfg(stored_cfg: Dict | None, override_cfg: Dict | None) -> Dict:
    merged = dict(DEFAULT_CFG)
    if stored_cfg:
        merged.update(stored_cfg)
    if override_cfg:
        merged.update(override_cfg)
    return merged


def resolve_field_names(raw: Mapping | None) -> Dict[str, str]:
    """Map each semantic key to a usable output field name.

    Names that are missing or do not match ``[A-Za-z0-9_-]+`` fall back to the default.
    Duplicates are kept as-is.
    """
    raw = raw if isinstance(raw, Mapping) else {}
    resolved = {}
    for key, default in DEFAULT_FRONTMATTER_FIELD_NAMES.items():
        candidate = raw.get(key)
        candidate = candidate.strip() if isinstance(candidate, str) else ""
        resolved[key] = candidate if FIELD_NAME_RE.match(candidate) else default
    return resolved


def resolve_enabled_fields(raw: Mapping | None) -> Dict[str, bool]:
    raw = raw if isinstance(raw, Mapping) else {}
    resolved = {}
    for key, default in DEFAULT_FRONTMATTER_ENABLED.items():
        value = raw.get(key)
        resolved[key] = value if isinstance(value, bool) else default
    return resolved


def _template_or_default(value: object, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return default


def frontmatter_settings_from_cfg(cfg: Mapping | None) -> FrontmatterSettings:
    cfg = cfg or {}
    tags_template = cfg.get("frontmatterTagsTemplate")
    if not isinstance(tags_template, str):
        tags_template = DEFAULT_FRONTMATTER_TAGS_TEMPLATE
    collections_template = cfg.get("frontmatterCollectionsTemplate")
    if not isinstance(collections_template, str):
        collections_template = DEFAULT_FRONTMATTER_COLLECTIONS_TEMPLATE
    return FrontmatterSettings(
        field_names=MappingProxyType(resolve_field_names(cfg.get("frontmatterFieldNames"))),
        enabled=MappingProxyType(resolve_enabled_fields(cfg.get("frontmatterEnabledFields"))),
        title_template=_template_or_default(cfg.get("frontmatterTitleTemplate"), DEFAULT_FRONTMATTER_TITLE_TEMPLATE),
        tags_template=tags_template,
        collections_template=collections_template,
    )
