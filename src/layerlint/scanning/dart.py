"""Structural parser for Dart.

Works on the token stream, not a full grammar: top-level statements are
split at depth-0 ``;`` or at a depth-0 closing ``}``, then each statement
header is classified as a directive, a type declaration, a top-level
function, or something the analysis does not care about (variables).

Supported declarations:
    class (abstract / sealed / interface / base / final / mixin class),
    mixin, enum, named extension, extension type, typedef,
    top-level function, getter and setter.
"""

from __future__ import annotations

from typing import Iterator, Optional

from .languages import LanguageConfig, get_language_config
from .syntax import Declaration, FileSyntax, Reference, UnitKind
from .tokenizer import IDENT, PUNCT, STRING, Token, tokenize

_CLASS_MODIFIERS = frozenset(
    {"abstract", "sealed", "base", "final", "interface", "mixin", "augment"}
)
_ABSTRACT_MODIFIERS = frozenset({"abstract", "sealed", "interface"})
_DIRECTIVES = frozenset({"import", "export", "library"})
_RESERVED = frozenset(
    {
        "if", "for", "while", "switch", "return", "new", "const", "var", "final",
        "late", "external", "static", "void", "dynamic", "get", "set", "operator",
        "async", "await", "yield", "assert", "throw", "catch", "super", "this", "Function",
    }
)

_Statement = list[Token]


class DartParser:
    """Produces FileSyntax for one Dart file."""

    language = "dart"

    def __init__(self, config: Optional[LanguageConfig] = None):
        self.config = config or get_language_config("dart")

    def parse(self, text: str, path: str) -> FileSyntax:
        """Parse file content.

        Raises:
            ParsingError: If the file is not structurally well formed
        """
        tokens = tokenize(text, path, self.language)

        declarations: list[Declaration] = []
        parts: list[str] = []
        part_of: Optional[str] = None

        for stmt in _split_statements(tokens):
            body = _strip_annotations(stmt)
            if not body:
                continue

            head = body[0]
            if head.kind == IDENT and head.text in _DIRECTIVES:
                continue
            if head.kind == IDENT and head.text == "part" and len(body) > 1:
                if body[1].text == "of":
                    part_of = _directive_target(body[2:])
                    continue
                if body[1].kind == STRING:
                    parts.append(body[1].text)
                    continue

            declaration = self._declaration(stmt, body)
            if declaration is not None:
                declarations.append(declaration)

        return FileSyntax(
            path=path,
            language=self.language,
            line_count=len(text.splitlines()),
            declarations=tuple(declarations),
            parts=tuple(parts),
            part_of=part_of,
        )

    # ── Classification ─────────────────────────────────────────

    def _declaration(self, stmt: _Statement, body: _Statement) -> Optional[Declaration]:
        header: _Statement = []
        for tok in body:
            if tok.depth == 0 and tok.kind == PUNCT and tok.text in ("{", "=>", ";"):
                break
            header.append(tok)
        terminator = body[len(header)].text if len(header) < len(body) else None

        found = _type_declaration(header) or _function_declaration(header, terminator)
        if found is None:
            return None

        kind, name = found
        return Declaration(
            name=name,
            kind=kind,
            start_line=stmt[0].line,
            end_line=stmt[-1].line,
            references=self._references(stmt, name),
        )

    def _references(self, stmt: _Statement, own_name: str) -> tuple[Reference, ...]:
        pattern = self.config.type_name_pattern
        first_seen: dict[str, int] = {}
        for tok in stmt:
            if tok.kind != IDENT or tok.text == own_name or tok.text in first_seen:
                continue
            if pattern.fullmatch(tok.text):
                first_seen[tok.text] = tok.line
        refs = (Reference(name=n, line=line) for n, line in first_seen.items())
        return tuple(sorted(refs, key=lambda r: (r.line, r.name)))


def _split_statements(tokens: list[Token]) -> Iterator[_Statement]:
    stmt: _Statement = []
    for i, tok in enumerate(tokens):
        stmt.append(tok)
        if tok.depth != 0 or tok.kind != PUNCT:
            continue
        if tok.text == ";":
            yield stmt
            stmt = []
        elif tok.text == "}":
            nxt = tokens[i + 1] if i + 1 < len(tokens) else None
            # `final x = {...};` ends at the semicolon, not the brace
            if nxt is None or nxt.text != ";":
                yield stmt
                stmt = []
    if stmt:
        yield stmt


def _strip_annotations(stmt: _Statement) -> _Statement:
    i = 0
    while i < len(stmt) and stmt[i].kind == PUNCT and stmt[i].text == "@":
        i += 1
        if i < len(stmt) and stmt[i].kind == IDENT:
            i += 1
        while i + 1 < len(stmt) and stmt[i].text == "." and stmt[i + 1].kind == IDENT:
            i += 2
        if i < len(stmt) and stmt[i].text == "(":
            depth = stmt[i].depth
            i += 1
            while i < len(stmt) and not (stmt[i].text == ")" and stmt[i].depth == depth):
                i += 1
            i += 1
    return stmt[i:]


def _directive_target(tokens: _Statement) -> Optional[str]:
    if tokens and tokens[0].kind == STRING:
        return tokens[0].text
    name = "".join(t.text for t in tokens if t.text != ";")
    return name or None


def _type_declaration(header: _Statement) -> Optional[tuple[UnitKind, str]]:
    i = 0
    modifiers: set[str] = set()
    while i < len(header) and header[i].kind == IDENT and header[i].text in _CLASS_MODIFIERS:
        modifiers.add(header[i].text)
        i += 1

    if i + 1 < len(header) and header[i].text == "class" and header[i + 1].kind == IDENT:
        kind = UnitKind.ABSTRACT_CLASS if modifiers & _ABSTRACT_MODIFIERS else UnitKind.CLASS
        return kind, header[i + 1].text

    if "mixin" in modifiers and i < len(header) and header[i].kind == IDENT:
        return UnitKind.MIXIN, header[i].text

    if modifiers or len(header) < 2:
        return None

    keyword = header[0].text
    if keyword == "enum" and header[1].kind == IDENT:
        return UnitKind.ENUM, header[1].text

    if keyword == "extension":
        j = 2 if header[1].text == "type" and len(header) > 2 else 1
        if header[j].kind == IDENT and header[j].text != "on":
            return UnitKind.EXTENSION, header[j].text
        return None

    if keyword == "typedef":
        if any(t.text == "=" for t in header):
            name_tok = header[1]
        else:
            # Legacy form: typedef ReturnType Name(params);
            paren = _first_paren(header)
            name_tok = header[paren - 1] if paren else header[-1]
        if name_tok.kind == IDENT:
            return UnitKind.TYPEDEF, name_tok.text

    return None


def _function_declaration(
    header: _Statement, terminator: Optional[str]
) -> Optional[tuple[UnitKind, str]]:
    # Only bodies count; external declarations and variables end with ';'
    if terminator not in ("{", "=>") or not header:
        return None

    # Getter: Type get name => ...
    if len(header) >= 2 and header[-2].text == "get" and header[-1].kind == IDENT:
        return UnitKind.FUNCTION, header[-1].text

    # The parameter list is the last group; earlier ones belong to the return
    # type (`void Function(int) make()`, `(int, String) pair()`)
    paren = _last_paren(header)
    if paren is None:
        return None

    if any(t.text == "=" for t in header[:paren]):
        return None

    j = paren - 1
    if j >= 0 and header[j].text == ">":
        # Skip type parameters: name<T extends Base>(...)
        depth = 0
        while j >= 0:
            if header[j].text == ">":
                depth += 1
            elif header[j].text == "<":
                depth -= 1
                if depth == 0:
                    j -= 1
                    break
            j -= 1

    if j >= 0 and header[j].kind == IDENT and header[j].text not in _RESERVED:
        return UnitKind.FUNCTION, header[j].text
    return None


def _first_paren(header: _Statement) -> Optional[int]:
    for i, tok in enumerate(header):
        if tok.kind == PUNCT and tok.text == "(" and tok.depth == 0:
            return i
    return None


def _last_paren(header: _Statement) -> Optional[int]:
    for i in range(len(header) - 1, -1, -1):
        tok = header[i]
        if tok.kind == PUNCT and tok.text == "(" and tok.depth == 0:
            return i
    return None
