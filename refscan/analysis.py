"""Pure line-level analysis: matching, previews, inline symbol extraction."""

from __future__ import annotations

import re
from typing import Literal, Protocol

MatchMode = Literal["word", "substring"]

PREVIEW_CONTEXT_CHARS = 40
MAX_SYMBOLS_PER_LINE = 20

# Identifier characters used on both sides of a word-mode boundary.
_IDENT_CHARS = "A-Za-z0-9_$"
_IDENT_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_REGEX_SPECIALS = re.compile(r"[.*+?^${}()|\[\]\\]")

KEYWORDS = frozenset({
    "const", "let", "var", "function", "return", "if", "else", "for", "while",
    "switch", "case", "break", "continue", "class", "extends", "new", "try",
    "catch", "finally", "throw", "import", "from", "export", "default", "as",
    "implements", "interface", "public", "private", "protected", "readonly",
    "static", "super", "this", "typeof", "instanceof", "in", "of", "delete",
    "void", "yield", "await", "do", "with", "package", "namespace", "enum",
    "type",
})


def escape_regexp(text: str) -> str:
    return _REGEX_SPECIALS.sub(lambda m: "\\" + m.group(0), text)


def word_pattern(word: str) -> re.Pattern[str]:
    """Compile the boundary-delimited pattern used for word-mode matching."""
    return re.compile(
        rf"(?<![{_IDENT_CHARS}]){escape_regexp(word)}(?![{_IDENT_CHARS}])"
    )


def find_word_hits(line: str, word: str, pattern: re.Pattern[str] | None = None) -> list[int]:
    if not word:
        return []
    compiled = pattern or word_pattern(word)
    return [m.start() for m in compiled.finditer(line)]


def find_text_hits(line: str, query: str) -> list[int]:
    # Overlapping occurrences are reported: "aa" in "aaa" -> [0, 1].
    if not query:
        return []
    hits: list[int] = []
    start = line.find(query)
    while start != -1:
        hits.append(start)
        start = line.find(query, start + 1)
    return hits


def find_hits(
    line: str,
    query: str,
    mode: MatchMode,
    pattern: re.Pattern[str] | None = None,
) -> list[int]:
    if mode == "word":
        return find_word_hits(line, query, pattern)
    return find_text_hits(line, query)


def create_preview(line: str, start_col: int, length: int) -> str:
    start_col = max(0, min(start_col, len(line)))
    end_col = min(len(line), start_col + max(0, length))
    prefix = line[max(0, start_col - PREVIEW_CONTEXT_CHARS):start_col]
    suffix = line[end_col:end_col + PREVIEW_CONTEXT_CHARS]
    return f"{prefix}{line[start_col:end_col]}{suffix}"


def extract_symbols_from_line(line: str, exclude: str) -> list[str]:
    # Heuristic: C-family / scripting identifiers, not scope aware.
    seen: dict[str, None] = {}
    for match in _IDENT_RE.finditer(line):
        token = match.group(0)
        if token == exclude or token in KEYWORDS or token in seen:
            continue
        seen[token] = None
        if len(seen) >= MAX_SYMBOLS_PER_LINE:
            break
    return list(seen)


class SymbolExtractor(Protocol):
    def extract(self, line: str, exclude: str) -> list[str]:
        ...


class LexicalSymbolExtractor:
    """Default extractor backed by `extract_symbols_from_line`."""

    def extract(self, line: str, exclude: str) -> list[str]:
        return extract_symbols_from_line(line, exclude)
