"""Split candidate files into size tiers before scanning."""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass, field
from typing import Sequence

from .diagnostics import SearchDiagnostics
from .models import CandidateFile

LARGE_FILE_THRESHOLD = 1024 * 1024  # 1 MiB
STAT_BATCH_SIZE = 100


@dataclass
class Categorized:
    regular: list[CandidateFile] = field(default_factory=list)
    large: list[CandidateFile] = field(default_factory=list)


async def _stat_size(path: str, diagnostics: SearchDiagnostics) -> CandidateFile:
    try:
        stat = await asyncio.to_thread(os.stat, path)
        return CandidateFile(path=path, size=int(stat.st_size))
    except OSError as exc:
        diagnostics.emit(
            "stat_failed",
            f"[WARN] Failed to get size for {path}: {exc}",
            severity="warning",
            data={"path": path, "error": str(exc)},
        )
        return CandidateFile(path=path, size=0)


async def categorize_files(
    paths: Sequence[str],
    diagnostics: SearchDiagnostics,
    *,
    threshold: int = LARGE_FILE_THRESHOLD,
    batch_size: int = STAT_BATCH_SIZE,
) -> Categorized:
    result = Categorized()
    for offset in range(0, len(paths), batch_size):
        chunk = paths[offset:offset + batch_size]
        sized = await asyncio.gather(*(_stat_size(path, diagnostics) for path in chunk))
        for candidate in sized:
            if candidate.size > threshold:
                result.large.append(candidate)
            else:
                result.regular.append(candidate)

    diagnostics.emit(
        "categorized",
        f"[INFO] Categorized files: {len(result.regular)} regular, {len(result.large)} large",
        data={"regular": len(result.regular), "large": len(result.large)},
    )
    return result
