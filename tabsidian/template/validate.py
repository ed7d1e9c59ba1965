"""Static safety checks for user templates."""

from __future__ import annotations

import re
from typing import Dict, List

from .parser import parse_template
from .tokens import TemplateError

# The frontmatter block is pre-rendered and escaped field by field, so raw output is expected there.
_FRONTMATTER_RAW_RE = re.compile(r"\{\{\{\s*frontmatter\s*\}\}\}|\{\{&\s*frontmatter\s*\}\}")
# A partial tag; "{{{>x}}}" is a raw variable, not a partial.
_PARTIAL_RE = re.compile(r"(?<!\{)\{\{\s*>")

TRIPLE_WARNING = "Triple mustaches ({{{ }}}) bypass HTML escaping. Prefer standard {{variable}} tags."
AMPERSAND_WARNING = "Unescaped variables ({{& name}}) bypass HTML escaping. Prefer standard {{variable}} tags."
PARTIAL_WARNING = "Partials are not supported and will cause rendering errors."


def validate_template(template: str) -> Dict[str, List[str]]:
    """Return parse errors and advisory warnings without rendering."""
    errors: List[str] = []
    warnings: List[str] = []

    if not isinstance(template, str):
        return {"errors": ["Template must be a string."], "warnings": warnings}

    try:
        parse_template(template)
    except TemplateError as exc:
        errors.append(str(exc) or "Unknown template parsing error.")

    sanitized = _FRONTMATTER_RAW_RE.sub("", template)
    if "{{{" in sanitized:
        warnings.append(TRIPLE_WARNING)
    if "{{&" in sanitized:
        warnings.append(AMPERSAND_WARNING)
    if _PARTIAL_RE.search(template):
        warnings.append(PARTIAL_WARNING)
        if not any("Partials" in message for message in errors):
            errors.append("Partials are not supported in templates.")

    return {"errors": errors, "warnings": warnings}
