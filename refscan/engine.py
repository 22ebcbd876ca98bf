"""Reference search entry points.

`find_references` runs one search end to end: enumerate candidates, put the
active file first, and scan. `ReferenceExplorer` adds the expansion cache used
when a user drills into a symbol found on a result line.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from .aggregator import BatchCallback
from .analysis import SymbolExtractor
from .cache import ExpansionCache
from .diagnostics import LoggingDiagnostics, SearchDiagnostics
from .discovery import DEFAULT_EXCLUDE_GLOB, DEFAULT_INCLUDE_GLOB, EnumerationError, find_files, prioritize
from .models import MatchHit, SearchOutcome, SearchRequest
from .parallel_search import find_references_parallel
from .runtime_config import build_request
from .scanner import display_path


async def find_references(
    request: SearchRequest,
    candidates: Optional[Sequence[str]] = None,
    *,
    root: str | Path | None = None,
    include_glob: Iterable[str] | str | None = DEFAULT_INCLUDE_GLOB,
    exclude_glob: Iterable[str] | str | None = DEFAULT_EXCLUDE_GLOB,
    active_path: str | Path | None = None,
    on_batch: Optional[BatchCallback] = None,
    diagnostics: Optional[SearchDiagnostics] = None,
    extractor: Optional[SymbolExtractor] = None,
    categorize: bool = True,
) -> SearchOutcome:
    """Search `candidates`, or every file under `root` when none are given.

    Never raises for per-file problems; the worst case is an empty outcome.
    """
    sink = diagnostics or LoggingDiagnostics()
    sink.emit(
        "search_started",
        f'[SEARCH] Fast manual scan for text="{request.query}" mode={request.match_mode} '
        f'include="{include_glob}" exclude="{exclude_glob}"',
        data={"query": request.query, "match_mode": request.match_mode},
    )

    if root is not None:
        root = Path(root).expanduser().resolve()

    if candidates is None:
        if root is None:
            raise ValueError("either candidates or root is required")
        try:
            paths = await asyncio.to_thread(
                find_files,
                root,
                include_glob,
                exclude_glob,
                request.limits.max_files,
            )
        except (EnumerationError, OSError) as exc:
            sink.emit(
                "enumeration_failed",
                f"[ERROR] findFiles failed: {exc}",
                severity="error",
                data={"root": str(root), "error": str(exc)},
            )
            return SearchOutcome(query=request.query, error=str(exc))
    else:
        paths = list(candidates)[:request.limits.max_files]

    paths = prioritize(paths, active_path)
    return await find_references_parallel(
        request,
        paths,
        diagnostics=sink,
        extractor=extractor,
        on_batch=on_batch,
        root=root,
        categorize=categorize,
    )


class ReferenceExplorer:
    """Root searches plus cached symbol expansion for one search root."""

    def __init__(
        self,
        root: str | Path,
        *,
        include_glob: Iterable[str] | str | None = DEFAULT_INCLUDE_GLOB,
        exclude_glob: Iterable[str] | str | None = DEFAULT_EXCLUDE_GLOB,
        diagnostics: Optional[SearchDiagnostics] = None,
        extractor: Optional[SymbolExtractor] = None,
        cache: Optional[ExpansionCache] = None,
        **request_options: Any,
    ):
        self.root = Path(root).expanduser().resolve()
        self.include_glob = include_glob
        self.exclude_glob = exclude_glob
        self.diagnostics = diagnostics or LoggingDiagnostics()
        self.extractor = extractor
        self.cache = cache if cache is not None else ExpansionCache()
        self.request_options = request_options

    def request_for(self, query: str, **overrides: Any) -> SearchRequest:
        options = {**self.request_options, **overrides}
        return build_request(query, **options)

    async def search(
        self,
        query: str,
        *,
        active_path: str | Path | None = None,
        on_batch: Optional[BatchCallback] = None,
        **overrides: Any,
    ) -> SearchOutcome:
        return await find_references(
            self.request_for(query, **overrides),
            root=self.root,
            include_glob=self.include_glob,
            exclude_glob=self.exclude_glob,
            active_path=active_path,
            on_batch=on_batch,
            diagnostics=self.diagnostics,
            extractor=self.extractor,
        )

    async def expand(
        self,
        symbol: str,
        *,
        on_batch: Optional[BatchCallback] = None,
    ) -> tuple[tuple[MatchHit, ...], bool]:
        """Return (hits, served_from_cache). Only complete results are cached."""
        request = self.request_for(symbol)
        cached = self.cache.get(request.query)
        if cached is not None:
            self.diagnostics.emit(
                "expand",
                f"[EXPAND] Symbol: {request.query} (cached, {len(cached)} refs)",
                data={"symbol": request.query, "cached": True},
            )
            return cached, True

        self.diagnostics.emit(
            "expand",
            f"[EXPAND] Symbol: {request.query}",
            data={"symbol": request.query, "cached": False},
        )
        outcome = await find_references(
            request,
            root=self.root,
            include_glob=self.include_glob,
            exclude_glob=self.exclude_glob,
            on_batch=on_batch,
            diagnostics=self.diagnostics,
            extractor=self.extractor,
        )
        if outcome.complete:
            self.cache.put(request.query, outcome.hits)
        return outcome.hits, False

    async def expand_and_summarize(self, symbol: str) -> list[dict[str, Any]]:
        hits, _ = await self.expand(symbol)
        return [
            {
                "label": f"{display_path(hit.path, self.root)}:{hit.line + 1}  {hit.preview.strip()}",
                "inline_symbols": list(hit.symbols),
            }
            for hit in hits
        ]
