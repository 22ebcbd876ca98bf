"""Candidate file enumeration.

Walk a root directory, prune excluded directories in place, and keep files
matching the include glob. Globs use gitignore semantics (via pathspec)
with `{a,b}` alternatives expanded up front.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional, Sequence

from pathspec import GitIgnoreSpec

DEFAULT_INCLUDE_GLOB = "**/*"
DEFAULT_EXCLUDE_GLOB = "**/{node_modules,dist,out,build,.git,.venv,venv,.tox,.cache}/**"


class EnumerationError(RuntimeError):
    """Raised when the candidate file list cannot be produced."""


def expand_braces(pattern: str) -> list[str]:
    start = pattern.find("{")
    if start == -1:
        return [pattern]
    end = pattern.find("}", start)
    if end == -1:
        return [pattern]
    head, body, tail = pattern[:start], pattern[start + 1:end], pattern[end + 1:]
    expanded: list[str] = []
    for option in body.split(","):
        expanded.extend(expand_braces(f"{head}{option}{tail}"))
    return expanded


def compile_globs(patterns: Iterable[str] | str | None) -> Optional[GitIgnoreSpec]:
    if patterns is None:
        return None
    if isinstance(patterns, str):
        patterns = [patterns]
    lines: list[str] = []
    for raw in patterns:
        raw = (raw or "").strip()
        if raw:
            lines.extend(expand_braces(raw))
    if not lines:
        return None
    return GitIgnoreSpec.from_lines(lines)


def find_files(
    root: str | Path,
    include_glob: Iterable[str] | str | None = DEFAULT_INCLUDE_GLOB,
    exclude_glob: Iterable[str] | str | None = DEFAULT_EXCLUDE_GLOB,
    max_files: int = 1000,
) -> list[str]:
    base = Path(root).expanduser()
    try:
        base = base.resolve()
    except OSError as exc:
        raise EnumerationError(f"Cannot resolve search root {root}: {exc}") from exc
    if not base.is_dir():
        raise EnumerationError(f"Not a directory: {base}")

    include = compile_globs(include_glob)
    exclude = compile_globs(exclude_glob)
    found: list[str] = []

    def _walk_error(exc: OSError) -> None:
        if Path(exc.filename or "") == base:
            raise EnumerationError(f"Cannot list {base}: {exc}") from exc

    for dirpath, dirnames, filenames in os.walk(base, onerror=_walk_error):
        rel_dir = Path(dirpath).relative_to(base).as_posix()
        prefix = "" if rel_dir == "." else f"{rel_dir}/"

        # Mutate dirnames in-place to prune traversal.
        dirnames[:] = sorted(
            d for d in dirnames
            if not (exclude and exclude.match_file(f"{prefix}{d}/"))
        )

        for filename in sorted(filenames):
            rel = f"{prefix}{filename}"
            if include and not include.match_file(rel):
                continue
            if exclude and exclude.match_file(rel):
                continue
            full_path = Path(dirpath) / filename
            if full_path.is_symlink() and not full_path.exists():
                continue
            found.append(str(full_path))
            if len(found) >= max_files:
                return found

    return found


def _normalize(path: str | Path) -> str:
    try:
        return str(Path(path).expanduser().resolve())
    except OSError:
        return str(path)


def prioritize(paths: Sequence[str], active_path: str | Path | None) -> list[str]:
    """Move the active file to the front so it is scanned first.

    Only reorders: an active file that is not among `paths` is ignored, and
    candidates are compared by resolved path so a relative spelling of the
    active file is not scanned twice.
    """
    ordered = list(paths)
    if not active_path:
        return ordered
    active = _normalize(active_path)
    first = [path for path in ordered if _normalize(path) == active]
    if not first:
        return ordered
    return [first[0], *(path for path in ordered if _normalize(path) != active)]
