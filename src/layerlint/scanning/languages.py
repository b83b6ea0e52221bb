"""Language configurations for structural extraction.

Adding a new language:
  1. Add a LanguageConfig entry to LANGUAGES below.
  2. Register a parser for it in syntax_extractor.PARSERS.
"""

import re as _re
from dataclasses import dataclass


@dataclass(frozen=True)
class LanguageConfig:
    """Everything the index and extractor need to know about a language."""

    name: str
    extensions: tuple[str, ...]

    # Identifiers that may name a declared type (candidate references).
    type_name_pattern: _re.Pattern

    # Declarations starting with this prefix are library-private.
    private_prefix: str = "_"

    # Whether split files are linked by explicit directives (Dart `part`).
    has_part_directives: bool = False

    # Directory names never worth descending into.
    skip_dirs: tuple[str, ...] = (
        ".git",
        ".dart_tool",
        ".idea",
        ".vscode",
        "build",
        "node_modules",
        ".pub-cache",
    )

    def is_private(self, name: str) -> bool:
        return bool(self.private_prefix) and name.startswith(self.private_prefix)


LANGUAGES: dict[str, LanguageConfig] = {
    "dart": LanguageConfig(
        name="dart",
        extensions=(".dart",),
        type_name_pattern=_re.compile(r"_?[A-Z][A-Za-z0-9_$]*"),
        has_part_directives=True,
    ),
}


def get_language_config(name: str) -> LanguageConfig:
    """Look up a language; raises KeyError for unknown names."""
    return LANGUAGES[name]
