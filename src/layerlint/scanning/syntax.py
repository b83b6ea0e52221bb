"""Syntax models for structurally parsed source files.

FileSyntax is what a language parser produces for one file:
    - Per-declaration: name, kind, line span, candidate references
    - Per-file: line count and part-file directives

SourceUnit is a declaration placed in the architecture: it carries the
feature and folder-declared layer of its file plus the naming verdict.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..exceptions import AnalysisError


class UnitKind(str, Enum):
    """Syntactic kind of a top-level declaration."""

    CLASS = "class"
    ABSTRACT_CLASS = "abstract_class"
    MIXIN = "mixin"
    ENUM = "enum"
    EXTENSION = "extension"
    TYPEDEF = "typedef"
    FUNCTION = "function"

    @property
    def is_class_like(self) -> bool:
        return self in (UnitKind.CLASS, UnitKind.ABSTRACT_CLASS)


@dataclass(frozen=True)
class Reference:
    """A candidate type reference: an identifier shaped like a type name.

    Attributes:
        name: Identifier as written (qualifiers stripped)
        line: First line (1-indexed) where it occurs inside the declaration
    """

    name: str
    line: int


@dataclass(frozen=True)
class Declaration:
    """A top-level declaration found by a parser.

    Attributes:
        name: Declared name
        kind: Syntactic kind
        start_line: First line of the declaration, annotations included
        end_line: Last line of the declaration
        references: Candidate references, one per name, ordered by line
    """

    name: str
    kind: UnitKind
    start_line: int
    end_line: int
    references: tuple[Reference, ...] = ()


@dataclass(frozen=True)
class FileSyntax:
    """Structural view of one file.

    Attributes:
        path: POSIX path relative to the project root
        language: Language name
        line_count: Physical line count
        declarations: Top-level declarations in source order
        parts: URIs named by ``part '...';`` directives
        part_of: URI or library named by a ``part of`` directive
    """

    path: str
    language: str
    line_count: int
    declarations: tuple[Declaration, ...] = ()
    parts: tuple[str, ...] = ()
    part_of: Optional[str] = None


@dataclass(frozen=True)
class SourceUnit:
    """One declared type (or top-level function) placed in the architecture."""

    name: str
    kind: UnitKind
    path: str
    feature: Optional[str]
    layer: str
    start_line: int
    end_line: int
    references: tuple[Reference, ...]
    naming_ok: bool = True

    @property
    def qualified_name(self) -> str:
        return f"{self.path}::{self.name}"


@dataclass(frozen=True)
class ExtractedFile:
    """Per-file extraction result: either syntax and units, or an error.

    A file with an error contributes no units; the error is reported once.
    """

    path: str
    syntax: Optional[FileSyntax] = None
    units: tuple[SourceUnit, ...] = ()
    error: Optional[AnalysisError] = None

    @property
    def ok(self) -> bool:
        return self.error is None
