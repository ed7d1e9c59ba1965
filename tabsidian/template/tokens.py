"""Token tree produced by the template parser."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union


class TemplateError(ValueError):
    """Raised when a template cannot be rendered."""


class TemplateSyntaxError(TemplateError):
    """Raised when a template cannot be parsed."""


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Variable:
    name: str


@dataclass(frozen=True)
class Unescaped:
    name: str


@dataclass(frozen=True)
class Section:
    name: str
    children: Tuple["Token", ...]


@dataclass(frozen=True)
class InvertedSection:
    name: str
    children: Tuple["Token", ...]


@dataclass(frozen=True)
class Comment:
    pass


Token = Union[Text, Variable, Unescaped, Section, InvertedSection, Comment]
