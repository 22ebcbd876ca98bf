"""Bounded-concurrency scan of a candidate file list.

Files are split by size, then each group is drained by a small pool of
cooperative workers that share one cursor. All workers run on the same event
loop and only suspend while stat-ing or reading a file, so the cursor and the
aggregator need no locking.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Optional, Sequence

from .aggregator import BatchCallback, StreamingAggregator
from .analysis import LexicalSymbolExtractor, SymbolExtractor, word_pattern
from .categorize import categorize_files
from .deadline import Deadline
from .diagnostics import LoggingDiagnostics, SearchDiagnostics
from .models import CandidateFile, SearchOutcome, SearchRequest
from .scanner import scan_file

REGULAR_CONCURRENCY = 16
LARGE_CONCURRENCY = 4
SINGLE_GROUP_CONCURRENCY = 8


class _Cursor:
    def __init__(self, total: int):
        self.total = total
        self._next = 0

    def claim(self) -> int:
        index = self._next
        self._next += 1
        return index


class ParallelSearch:
    """State for one request: deadline, aggregator and progress counters."""

    def __init__(
        self,
        request: SearchRequest,
        *,
        diagnostics: Optional[SearchDiagnostics] = None,
        extractor: Optional[SymbolExtractor] = None,
        on_batch: Optional[BatchCallback] = None,
        root: str | Path | None = None,
    ):
        self.request = request
        self.diagnostics = diagnostics or LoggingDiagnostics()
        self.extractor = extractor or LexicalSymbolExtractor()
        self.aggregator = StreamingAggregator(self.diagnostics, on_batch)
        self.root = root
        self.files_scanned = 0
        self._pattern: Optional[re.Pattern[str]] = (
            word_pattern(request.query) if request.match_mode == "word" else None
        )
        self._deadline: Optional[Deadline] = None

    def _on_timer_expired(self, elapsed_ms: int) -> None:
        self.diagnostics.emit(
            "aborted",
            f"[ABORT] Parallel search timeout after {elapsed_ms}ms, "
            f"returning partial results ({len(self.aggregator)})",
            severity="warning",
            data={"elapsed_ms": elapsed_ms, "results": len(self.aggregator), "source": "timer"},
        )

    def _abort_on_wall_clock(self, deadline: Deadline) -> None:
        if deadline.cancelled:
            return
        deadline.trip()
        elapsed = deadline.elapsed_ms()
        self.diagnostics.emit(
            "aborted",
            f"[ABORT] Search timeout during processing after {elapsed}ms, "
            f"returning partial results ({len(self.aggregator)})",
            severity="warning",
            data={"elapsed_ms": elapsed, "results": len(self.aggregator), "source": "clock"},
        )

    async def run_group(self, files: Sequence[CandidateFile], concurrency: int, group: str) -> None:
        deadline = self._deadline
        if deadline is None:
            raise RuntimeError("run_group() called outside run()")
        total = len(files)
        if total == 0:
            return

        cursor = _Cursor(total)
        processed = 0
        limits = self.request.limits

        async def worker() -> None:
            nonlocal processed
            while not deadline.cancelled:
                index = cursor.claim()
                if index >= total:
                    break

                batch = await scan_file(
                    files[index].path,
                    self.request,
                    extractor=self.extractor,
                    diagnostics=self.diagnostics,
                    pattern=self._pattern,
                    root=self.root,
                )
                processed += 1
                self.files_scanned += 1
                if processed % limits.progress_every == 0 or self.request.verbose:
                    self.diagnostics.emit(
                        "progress",
                        f"[PROGRESS] {group} files: {processed}/{total} "
                        f"results={len(self.aggregator)} elapsedMs={deadline.elapsed_ms()}",
                        data={
                            "group": group,
                            "processed": processed,
                            "total": total,
                            "results": len(self.aggregator),
                        },
                    )

                if batch:
                    await self.aggregator.on_batch(batch)

                if deadline.expired():
                    self._abort_on_wall_clock(deadline)
                    break

        await asyncio.gather(*(worker() for _ in range(min(concurrency, total))))

    async def run(self, paths: Sequence[str], *, categorize: bool = True) -> SearchOutcome:
        request = self.request
        deadline = Deadline(request.limits.max_search_ms, on_expire=self._on_timer_expired).start()
        self._deadline = deadline
        try:
            if categorize:
                groups = await categorize_files(paths, self.diagnostics)
                await self.run_group(groups.regular, REGULAR_CONCURRENCY, "regular")
                if groups.large and not deadline.cancelled:
                    self.diagnostics.emit(
                        "large_files",
                        f"[INFO] Processing {len(groups.large)} large files with reduced concurrency",
                        data={"count": len(groups.large)},
                    )
                    await self.run_group(groups.large, LARGE_CONCURRENCY, "large")
            else:
                candidates = [CandidateFile(path=path, size=0) for path in paths]
                await self.run_group(candidates, SINGLE_GROUP_CONCURRENCY, "all")
        finally:
            deadline.cancel()

        hits = self.aggregator.freeze()
        elapsed = deadline.elapsed_ms()
        outcome = SearchOutcome(
            query=request.query,
            hits=hits,
            cancelled=self.files_scanned < len(paths),
            elapsed_ms=elapsed,
            files_scanned=self.files_scanned,
            files_total=len(paths),
        )
        self.diagnostics.emit(
            "result",
            f"[RESULT] {len(hits)} references for {request.query} in {elapsed}ms (parallel)",
            data={
                "results": len(hits),
                "elapsed_ms": elapsed,
                "cancelled": outcome.cancelled,
                "files_scanned": self.files_scanned,
            },
        )
        return outcome


async def find_references_parallel(
    request: SearchRequest,
    paths: Sequence[str],
    *,
    diagnostics: Optional[SearchDiagnostics] = None,
    extractor: Optional[SymbolExtractor] = None,
    on_batch: Optional[BatchCallback] = None,
    root: str | Path | None = None,
    categorize: bool = True,
) -> SearchOutcome:
    search = ParallelSearch(
        request,
        diagnostics=diagnostics,
        extractor=extractor,
        on_batch=on_batch,
        root=root,
    )
    return await search.run(paths, categorize=categorize)
