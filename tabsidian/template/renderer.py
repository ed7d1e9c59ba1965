"""Render parsed templates against a context stack.

Lookups walk the stack innermost-first and only accept a frame that resolves
the complete dotted path; partial matches never merge across frames.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, List, Sequence, Tuple

from .parser import parse_template
from .tokens import (
    Comment,
    InvertedSection,
    Section,
    TemplateError,
    Text,
    Token,
    Unescaped,
    Variable,
)

_MISSING = object()
_INDEX_RE = re.compile(r"[0-9]+")


def render_template(template: str, context: Any) -> str:
    """Parse and render `template` with `context` as the outermost frame."""
    tokens = parse_template(template)
    return render_tokens(tokens, [context])


def render_tokens(tokens: Sequence[Token], stack: List[Any]) -> str:
    out: List[str] = []
    for token in tokens:
        if isinstance(token, Text):
            out.append(token.value)
        elif isinstance(token, Comment):
            continue
        elif isinstance(token, Variable):
            out.append(escape_html(_stringify(_lookup(token.name, stack))))
        elif isinstance(token, Unescaped):
            out.append(_stringify(_lookup(token.name, stack)))
        elif isinstance(token, Section):
            out.append(_render_section(token, stack))
        elif isinstance(token, InvertedSection):
            value = _lookup(token.name, stack)
            if not _is_truthy(value):
                out.append(render_tokens(token.children, stack))
        else:
            raise TemplateError(f"Unsupported token: {token!r}")
    return "".join(out)


def _render_section(token: Section, stack: List[Any]) -> str:
    value = _lookup(token.name, stack)
    if _is_list(value):
        parts = []
        for item in value:
            stack.append(item)
            try:
                parts.append(render_tokens(token.children, stack))
            finally:
                stack.pop()
        return "".join(parts)
    if isinstance(value, Mapping):
        stack.append(value)
        try:
            return render_tokens(token.children, stack)
        finally:
            stack.pop()
    if _is_truthy(value):
        return render_tokens(token.children, stack)
    return ""


def _lookup(name: str, stack: Sequence[Any]) -> Any:
    value = _resolve(name, stack)
    if value is _MISSING:
        return None
    if callable(value):
        raise TemplateError("Functions are not supported in templates.")
    return value


def _resolve(name: str, stack: Sequence[Any]) -> Any:
    if not stack:
        return _MISSING
    if name == ".":
        return stack[-1]

    path = name.split(".")
    for frame in reversed(stack):
        found, value = _walk(frame, path)
        if found:
            return value
    return _MISSING


def _walk(frame: Any, path: Sequence[str]) -> Tuple[bool, Any]:
    current = frame
    for segment in path:
        if isinstance(current, Mapping):
            if segment not in current:
                return False, None
            current = current[segment]
        elif _is_list(current) and _INDEX_RE.fullmatch(segment):
            idx = int(segment)
            if idx >= len(current):
                return False, None
            current = current[idx]
        else:
            return False, None
    return True, current


def _is_list(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_truthy(value: Any) -> bool:
    if _is_list(value):
        return len(value) > 0
    if isinstance(value, Mapping):
        return True
    return bool(value)


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if _is_list(value):
        return ",".join(_stringify(item) for item in value)
    if isinstance(value, Mapping):
        return ""
    return str(value)


def escape_html(value: str) -> str:
    return value.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
