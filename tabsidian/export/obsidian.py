"""Route exported Markdown into Obsidian through obsidian://new URIs."""

from __future__ import annotations

import re
from typing import Dict, Mapping, Optional
from urllib.parse import quote

from .config import DEFAULT_OBSIDIAN_NOTE_PATH, MAX_OBSIDIAN_URI_LENGTH

OBSIDIAN_NEW_SCHEME = "obsidian://new"

# Characters left alone by JavaScript's encodeURIComponent.
_URI_COMPONENT_SAFE = "-_.!~*'()"

VAULT_PATTERN = re.compile(r"^[\w-](?:[\w\- ]+)?$")
NOTE_PATH_ALLOWED = re.compile(r"^[a-zA-Z0-9 _\-/{}.]+$")
NOTE_PATH_INVALID_SEGMENT = re.compile(r"(^|/)(\.{1,2})(/|$)")


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_obsidian_url(
    vault: Optional[str],
    filepath: Optional[str],
    content: Optional[str] = None,
    clipboard: bool = False,
    overwrite: bool = True,
    silent: bool = False,
) -> Dict:
    query_parts = []

    def append(key: str, value: object) -> None:
        if value is None:
            return
        if isinstance(value, bool):
            value = "true" if value else "false"
        value = str(value)
        if not value:
            return
        query_parts.append(f"{key}={encode_uri_component(value)}")

    append("file", filepath)
    if overwrite:
        append("overwrite", True)
    append("vault", vault)
    if clipboard:
        append("clipboard", True)
    if silent:
        append("silent", True)
    if isinstance(content, str):
        append("content", content)

    query = "&".join(query_parts)
    url = f"{OBSIDIAN_NEW_SCHEME}?{query}" if query else OBSIDIAN_NEW_SCHEME
    return {"url": url, "totalLength": len(url)}


def sanitize_note_path(value: object) -> str:
    if not isinstance(value, str):
        return ""
    segments = [segment.strip() for segment in value.strip().replace("\\", "/").split("/")]
    sanitized = "/".join(segment for segment in segments if segment)
    if not sanitized:
        return ""
    if not sanitized.lower().endswith(".md"):
        sanitized = f"{sanitized}.md"
    if NOTE_PATH_INVALID_SEGMENT.search(sanitized):
        return ""
    return sanitized


def apply_note_path_template(note_path: str, formatted_timestamp: str) -> str:
    return note_path.replace("{timestamp}", formatted_timestamp)


def export_filename(formatted_timestamp: str) -> str:
    return f"{formatted_timestamp}_OpenTabs.md"


def resolve_obsidian_settings(cfg: Mapping) -> Dict:
    vault = cfg.get("obsidianVault")
    vault = vault.strip() if isinstance(vault, str) else ""
    note_path_source = cfg.get("obsidianNotePath")
    if not isinstance(note_path_source, str) or not note_path_source.strip():
        note_path_source = DEFAULT_OBSIDIAN_NOTE_PATH
    note_path = sanitize_note_path(note_path_source)
    return {"enabled": bool(vault and note_path), "vault": vault, "notePath": note_path}


def validate_obsidian_preferences(vault: object, note_path: object) -> Dict:
    """Check user-entered vault and note path; `error` is None when both are usable."""
    raw_vault = vault.strip() if isinstance(vault, str) else ""
    raw_path = note_path.strip() if isinstance(note_path, str) else ""
    if not raw_vault and not raw_path:
        return {"vault": "", "notePath": "", "error": None}
    if not raw_vault:
        return {"vault": "", "notePath": raw_path, "error": "Vault name is required when configuring Obsidian exports."}
    if not VAULT_PATTERN.match(raw_vault):
        return {
            "vault": raw_vault,
            "notePath": raw_path,
            "error": "Vault name may include letters, numbers, spaces, underscores, and hyphens.",
        }

    candidate = raw_path or DEFAULT_OBSIDIAN_NOTE_PATH
    normalized = "/".join(s.strip() for s in candidate.replace("\\", "/").split("/") if s.strip())
    error = None
    if not normalized:
        error = "Provide a note path within your Obsidian vault."
    elif not normalized.lower().endswith(".md"):
        error = "Obsidian note paths must end with .md."
    elif NOTE_PATH_INVALID_SEGMENT.search(normalized):
        error = "Note paths cannot traverse parent directories."
    elif not NOTE_PATH_ALLOWED.match(normalized):
        error = "Note paths may only include letters, numbers, spaces, hyphens, slashes, dots, and {timestamp}."
    return {"vault": raw_vault, "notePath": normalized, "error": error}


def plan_obsidian_export(
    markdown: str,
    formatted_timestamp: str,
    settings: Mapping,
    clipboard_ok: bool,
    max_length: int = MAX_OBSIDIAN_URI_LENGTH,
) -> Dict:
    """Pick the obsidian:// URI for an export.

    With the note on the clipboard the content is embedded only while the URI
    stays under `max_length`; without it the content must fit or the export is
    refused with reason "url_too_long".
    """
    if not settings.get("enabled"):
        return {"attempted": False, "url": None, "notePath": "", "reason": "disabled"}

    note_path = apply_note_path_template(settings.get("notePath") or "", formatted_timestamp)
    base = {"vault": settings.get("vault"), "filepath": note_path, "overwrite": True}

    if clipboard_ok:
        url_info = build_obsidian_url(clipboard=True, content=markdown, **base)
        if url_info["totalLength"] > max_length:
            url_info = build_obsidian_url(clipboard=True, **base)
    else:
        url_info = build_obsidian_url(content=markdown, **base)
        if url_info["totalLength"] > max_length:
            return {
                "attempted": True,
                "url": None,
                "notePath": note_path,
                "reason": "url_too_long",
                "totalLength": url_info["totalLength"],
            }

    return {
        "attempted": True,
        "url": url_info["url"],
        "notePath": note_path,
        "reason": None,
        "totalLength": url_info["totalLength"],
    }
