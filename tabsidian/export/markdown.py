"""Render tabs into a Markdown document, falling back to the default template."""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, TextIO

from tabsidian.template import TemplateError, render_template

from .config import DEFAULT_MARKDOWN_FORMAT
from .context import build_template_context

LEGACY_PLACEHOLDERS = ("{title}", "{url}")


def upgrade_legacy_format(markdown_format: str) -> str:
    """Convert a stored single-brace format ("## {title}\\n[{url}]({url})") into a template."""
    if "{{" in markdown_format or not any(p in markdown_format for p in LEGACY_PLACEHOLDERS):
        return markdown_format
    body = (
        markdown_format.replace("{title}", "{{title}}")
        .replace("{url}", "{{url}}")
        .replace("\\n", "\n")
    )
    return "{{{frontmatter}}}\n{{#tabs}}" + body + "{{/tabs}}"


def resolve_markdown_format(value: object) -> str:
    if isinstance(value, str) and value.strip():
        return upgrade_legacy_format(value)
    return DEFAULT_MARKDOWN_FORMAT


def format_tabs_markdown(
    tabs: List[Mapping],
    markdown_format: Optional[str] = None,
    options: Optional[Mapping] = None,
    stderr: Optional[TextIO] = None,
) -> Dict:
    """Render `tabs` with `markdown_format`.

    A template that fails to parse or render is replaced by the default
    template for this export; a `warn:` line goes to `stderr` when given.
    """
    built = build_template_context(tabs, options, stderr=stderr)
    context = built["context"]
    timestamp = built["timestamp"]
    template = resolve_markdown_format(markdown_format)

    try:
        markdown = render_template(template, context)
    except TemplateError as exc:
        if stderr is not None:
            print(f"warn: template render failed ({exc}); using default template", file=stderr)
        markdown = render_template(DEFAULT_MARKDOWN_FORMAT, context)

    return {
        "markdown": markdown,
        "formattedTimestamp": timestamp["formattedTimestamp"],
        "timestamp": timestamp,
    }
