"""Sandboxed Mustache-subset template engine."""

from .parser import MAX_SECTION_DEPTH, parse_template
from .renderer import escape_html, render_template, render_tokens
from .tokens import (
    Comment,
    InvertedSection,
    Section,
    TemplateError,
    TemplateSyntaxError,
    Text,
    Token,
    Unescaped,
    Variable,
)
from .validate import validate_template

__all__ = [
    "MAX_SECTION_DEPTH",
    "parse_template",
    "render_template",
    "render_tokens",
    "escape_html",
    "validate_template",
    "TemplateError",
    "TemplateSyntaxError",
    "Token",
    "Text",
    "Variable",
    "Unescaped",
    "Section",
    "InvertedSection",
    "Comment",
]
