"""Source indexing and structural extraction."""

from .dart import DartParser
from .index import AccessFailure, IndexedFile, PartGroup, SourceIndex, SourceIndexer
from .languages import LANGUAGES, LanguageConfig, get_language_config
from .syntax import (
    Declaration,
    ExtractedFile,
    FileSyntax,
    Reference,
    SourceUnit,
    UnitKind,
)
from .syntax_extractor import PARSERS, SyntaxExtractor
from .tokenizer import Token, tokenize

__all__ = [
    "AccessFailure",
    "DartParser",
    "Declaration",
    "ExtractedFile",
    "FileSyntax",
    "IndexedFile",
    "LANGUAGES",
    "LanguageConfig",
    "PARSERS",
    "PartGroup",
    "Reference",
    "SourceIndex",
    "SourceIndexer",
    "SourceUnit",
    "SyntaxExtractor",
    "Token",
    "UnitKind",
    "get_language_config",
    "tokenize",
]
