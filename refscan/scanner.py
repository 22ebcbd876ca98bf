"""Scan one file and turn every match into a MatchHit."""

from __future__ import annotations

import asyncio
import os
import re
from pathlib import Path

from .analysis import SymbolExtractor, create_preview, find_hits, word_pattern
from .diagnostics import SearchDiagnostics
from .models import Batch, MatchHit, SearchRequest

_LINE_BREAK = re.compile(r"\r?\n")


def display_path(path: str, root: str | Path | None = None) -> str:
    if root is None:
        return path
    try:
        return Path(os.path.relpath(path, root)).as_posix()
    except ValueError:
        return path


def split_lines(text: str, max_lines: int) -> list[str]:
    return _LINE_BREAK.split(text)[:max_lines]


def scan_text(
    path: str,
    text: str,
    request: SearchRequest,
    extractor: SymbolExtractor,
    pattern: re.Pattern[str] | None = None,
) -> tuple[Batch, int]:
    """Return the hits for already-loaded content and the number of lines scanned."""
    query = request.query
    if request.match_mode == "word" and pattern is None:
        pattern = word_pattern(query)

    lines = split_lines(text, request.limits.max_lines_per_file)
    hits: list[MatchHit] = []
    for line_no, line in enumerate(lines):
        if not line:
            continue
        columns = find_hits(line, query, request.match_mode, pattern)
        if not columns:
            continue
        symbols = tuple(extractor.extract(line, query))
        for column in columns:
            hits.append(
                MatchHit(
                    path=path,
                    line=line_no,
                    column=column,
                    length=len(query),
                    preview=create_preview(line, column, len(query)),
                    symbols=symbols,
                )
            )
    return tuple(hits), len(lines)


async def scan_file(
    path: str,
    request: SearchRequest,
    *,
    extractor: SymbolExtractor,
    diagnostics: SearchDiagnostics,
    pattern: re.Pattern[str] | None = None,
    root: str | Path | None = None,
) -> Batch:
    try:
        raw = await asyncio.to_thread(Path(path).read_bytes)
    except OSError as exc:
        diagnostics.emit(
            "scan_failed",
            f"[WARN] Failed to scan {path}: {exc}",
            severity="warning",
            data={"path": path, "error": str(exc)},
        )
        return ()

    # Undecodable bytes are replaced; binary files are scanned as best-effort text.
    text = raw.decode("utf-8", errors="replace")
    try:
        batch, scanned_lines = scan_text(path, text, request, extractor, pattern)
    except Exception as exc:
        diagnostics.emit(
            "scan_failed",
            f"[WARN] Failed to scan {path}: {exc}",
            severity="warning",
            data={"path": path, "error": str(exc)},
        )
        return ()

    if batch or request.verbose:
        label = display_path(path, root)
        diagnostics.emit(
            "file_scanned",
            f"[FILE] {label} hits={len(batch)} scannedLines={scanned_lines}",
            data={"path": label, "hits": len(batch), "scanned_lines": scanned_lines},
        )
    return batch
