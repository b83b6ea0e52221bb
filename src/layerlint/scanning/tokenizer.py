"""Tokenizer for brace-delimited source code.

Comments are dropped, each string literal collapses into one STRING token,
and every token records the bracket depth it sits at (an opening or closing
bracket carries the depth *outside* the pair). Malformed input raises
ParsingError: unterminated strings or comments, and brackets that do not
balance.

String rules follow Dart: single or double quotes, triple-quoted multi-line
strings, ``r''`` raw strings, ``$name`` and ``${expr}`` interpolation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..exceptions import ParsingError

IDENT = "ident"
STRING = "string"
NUMBER = "number"
PUNCT = "punct"

_IDENT_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_NUMBER_RE = re.compile(r"[0-9][0-9A-Za-z_]*(?:\.[0-9][0-9A-Za-z_]*)?")

_OPENERS = {"{": "}", "(": ")", "[": "]"}
_CLOSERS = {"}": "{", ")": "(", "]": "["}


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    line: int
    depth: int


class Tokenizer:
    """Single-use tokenizer over one file's text."""

    def __init__(self, text: str, path: str, language: str = "dart"):
        self.text = text
        self.path = path
        self.language = language
        self.pos = 0
        self.line = 1
        self.stack: list[tuple[str, int]] = []
        self.tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        text = self.text
        n = len(text)
        while self.pos < n:
            ch = text[self.pos]
            if ch == "\n":
                self.line += 1
                self.pos += 1
            elif ch.isspace():
                self.pos += 1
            elif text.startswith("//", self.pos):
                self._skip_line_comment()
            elif text.startswith("/*", self.pos):
                self._skip_block_comment()
            elif ch in "'\"":
                self._string(raw=False)
            elif ch == "r" and self.pos + 1 < n and text[self.pos + 1] in "'\"":
                self.pos += 1
                self._string(raw=True)
            elif ch.isalpha() or ch in "_$":
                self._emit_match(_IDENT_RE, IDENT)
            elif ch.isdigit():
                self._emit_match(_NUMBER_RE, NUMBER)
            else:
                self._punct(ch)

        if self.stack:
            opener, line = self.stack[-1]
            raise self._error(f"unclosed '{opener}'", line)
        return self.tokens

    # ── Comments ───────────────────────────────────────────────

    def _skip_line_comment(self) -> None:
        end = self.text.find("\n", self.pos)
        self.pos = len(self.text) if end == -1 else end

    def _skip_block_comment(self) -> None:
        # Dart block comments nest
        start_line = self.line
        depth = 0
        text = self.text
        while self.pos < len(text):
            if text.startswith("/*", self.pos):
                depth += 1
                self.pos += 2
            elif text.startswith("*/", self.pos):
                depth -= 1
                self.pos += 2
                if depth == 0:
                    return
            else:
                if text[self.pos] == "\n":
                    self.line += 1
                self.pos += 1
        raise self._error("unterminated block comment", start_line)

    # ── Strings ────────────────────────────────────────────────

    def _string(self, raw: bool, emit: bool = True) -> None:
        text = self.text
        quote = text[self.pos]
        triple = text.startswith(quote * 3, self.pos)
        delim = quote * 3 if triple else quote
        start_line = self.line
        self.pos += len(delim)

        chars: list[str] = []
        interpolated = False
        while True:
            if self.pos >= len(text):
                raise self._error("unterminated string", start_line)
            if text.startswith(delim, self.pos):
                self.pos += len(delim)
                break
            c = text[self.pos]
            if c == "\n":
                if not triple:
                    raise self._error("unterminated string", start_line)
                self.line += 1
            elif not raw and c == "\\":
                if self.pos + 1 < len(text):
                    escaped = text[self.pos + 1]
                    if escaped == "\n":
                        self.line += 1
                    chars.append(escaped)
                self.pos += 2
                continue
            elif not raw and text.startswith("${", self.pos):
                interpolated = True
                self.pos += 2
                self._skip_interpolation(start_line)
                continue
            chars.append(c)
            self.pos += 1

        if emit:
            value = "" if interpolated else "".join(chars)
            self.tokens.append(Token(STRING, value, start_line, len(self.stack)))

    def _skip_interpolation(self, start_line: int) -> None:
        """Skip a ``${...}`` body, including nested braces and strings."""
        text = self.text
        depth = 1
        while self.pos < len(text):
            c = text[self.pos]
            if c in "'\"":
                self._string(raw=False, emit=False)
                continue
            if c == "r" and self.pos + 1 < len(text) and text[self.pos + 1] in "'\"":
                self.pos += 1
                self._string(raw=True, emit=False)
                continue
            if c == "\n":
                self.line += 1
            elif c == "{":
                depth += 1
            elif c == "}":
                depth -= 1
                if depth == 0:
                    self.pos += 1
                    return
            self.pos += 1
        raise self._error("unterminated string interpolation", start_line)

    # ── Words and punctuation ──────────────────────────────────

    def _emit_match(self, pattern: re.Pattern, kind: str) -> None:
        match = pattern.match(self.text, self.pos)
        if match is None:
            # Non-ASCII letters and digits are not valid outside strings
            raise self._error(f"unexpected character {self.text[self.pos]!r}", self.line)
        self.tokens.append(Token(kind, match.group(), self.line, len(self.stack)))
        self.pos = match.end()

    def _punct(self, ch: str) -> None:
        if ch in _OPENERS:
            self.tokens.append(Token(PUNCT, ch, self.line, len(self.stack)))
            self.stack.append((ch, self.line))
        elif ch in _CLOSERS:
            if not self.stack or self.stack[-1][0] != _CLOSERS[ch]:
                raise self._error(f"unexpected '{ch}'", self.line)
            self.stack.pop()
            self.tokens.append(Token(PUNCT, ch, self.line, len(self.stack)))
        elif self.text.startswith("=>", self.pos):
            self.tokens.append(Token(PUNCT, "=>", self.line, len(self.stack)))
            self.pos += 2
            return
        else:
            self.tokens.append(Token(PUNCT, ch, self.line, len(self.stack)))
        self.pos += 1

    def _error(self, reason: str, line: Optional[int]) -> ParsingError:
        return ParsingError(Path(self.path), self.language, reason, line=line)


def tokenize(text: str, path: str, language: str = "dart") -> list[Token]:
    return Tokenizer(text, path, language).tokenize()
