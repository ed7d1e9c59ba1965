"""Recursive-descent parser for the Mustache subset used by export templates."""

from __future__ import annotations

from typing import List, Optional

from .tokens import (
    Comment,
    InvertedSection,
    Section,
    TemplateSyntaxError,
    Text,
    Token,
    Unescaped,
    Variable,
)

TAG_OPEN = "{{"
TAG_CLOSE = "}}"
TRIPLE_OPEN = "{{{"
TRIPLE_CLOSE = "}}}"

SIGILS = "#^/!>&"
MAX_SECTION_DEPTH = 64


class _Cursor:
    __slots__ = ("template", "index", "max_depth")

    def __init__(self, template: str, max_depth: int) -> None:
        self.template = template
        self.index = 0
        self.max_depth = max_depth

    def at_end(self) -> bool:
        return self.index >= len(self.template)


def parse_template(template: str, max_depth: int = MAX_SECTION_DEPTH) -> List[Token]:
    """Parse `template` into a token tree.

    Raises TemplateSyntaxError for unterminated tags, unbalanced sections,
    partials, and sections nested deeper than `max_depth`.
    """
    if not isinstance(template, str):
        raise TemplateSyntaxError("Template must be a string.")
    cursor = _Cursor(template, max_depth)
    return _parse_tokens(cursor, stop_name=None, depth=0)


def _parse_tokens(cursor: _Cursor, stop_name: Optional[str], depth: int) -> List[Token]:
    template = cursor.template
    collected: List[Token] = []

    while not cursor.at_end():
        open_idx = template.find(TAG_OPEN, cursor.index)
        if open_idx == -1:
            collected.append(Text(template[cursor.index :]))
            cursor.index = len(template)
            break

        if open_idx > cursor.index:
            collected.append(Text(template[cursor.index : open_idx]))
            cursor.index = open_idx

        if template.startswith(TRIPLE_OPEN, cursor.index):
            close_idx = template.find(TRIPLE_CLOSE, cursor.index + len(TRIPLE_OPEN))
            if close_idx == -1:
                raise TemplateSyntaxError("Unterminated triple mustache.")
            name = template[cursor.index + len(TRIPLE_OPEN) : close_idx].strip()
            cursor.index = close_idx + len(TRIPLE_CLOSE)
            collected.append(Unescaped(name))
            continue

        close_idx = template.find(TAG_CLOSE, cursor.index + len(TAG_OPEN))
        if close_idx == -1:
            raise TemplateSyntaxError("Unterminated mustache tag.")

        inner = template[cursor.index + len(TAG_OPEN) : close_idx].strip()
        cursor.index = close_idx + len(TAG_CLOSE)
        if not inner:
            continue

        sigil = inner[0] if inner[0] in SIGILS else ""
        content = inner[1:].strip() if sigil else inner

        if sigil == "!":
            collected.append(Comment())
        elif sigil == ">":
            raise TemplateSyntaxError("Partials are not supported in templates.")
        elif sigil == "/":
            if stop_name is None or content != stop_name:
                raise TemplateSyntaxError(f'Unexpected closing tag for "{content}".')
            return collected
        elif sigil in ("#", "^"):
            if not content:
                raise TemplateSyntaxError("Section tag is missing a name.")
            if depth + 1 > cursor.max_depth:
                raise TemplateSyntaxError(f"Sections are nested deeper than {cursor.max_depth} levels.")
            children = tuple(_parse_tokens(cursor, stop_name=content, depth=depth + 1))
            if sigil == "#":
                collected.append(Section(content, children))
            else:
                collected.append(InvertedSection(content, children))
        elif sigil == "&":
            collected.append(Unescaped(content))
        else:
            collected.append(Variable(content))

    if stop_name is not None:
        raise TemplateSyntaxError(f'Section "{stop_name}" was not closed.')

    return collected
