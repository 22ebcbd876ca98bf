"""RefScan REST API routes."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import ValidationError

from .engine import ReferenceExplorer
from .grouping import group_by_file, sort_groups_by_active
from .models import FileGroupOut, HitOut, MatchHit, SearchResponseOut
from .runtime_config import EXCLUDE_GLOB, INCLUDE_GLOB, SEARCH_ROOT

logger = logging.getLogger("refscan.api")

router = APIRouter(prefix="/api", tags=["api"])

# One explorer (and so one expansion cache) per search root, for the process lifetime.
_explorers: dict[str, ReferenceExplorer] = {}


def _resolve_root(root: Optional[str]) -> Path:
    raw = (root or "").strip()
    path = Path(raw).expanduser() if raw else SEARCH_ROOT
    try:
        path = path.resolve()
    except OSError as exc:
        raise HTTPException(400, f"Invalid search root: {exc}")
    if not path.is_dir():
        raise HTTPException(404, f"Search root not found: {path}")
    return path


def get_explorer(root: Optional[str] = None) -> ReferenceExplorer:
    path = _resolve_root(root)
    key = str(path)
    explorer = _explorers.get(key)
    if explorer is None:
        explorer = ReferenceExplorer(path, include_glob=INCLUDE_GLOB, exclude_glob=EXCLUDE_GLOB)
        _explorers[key] = explorer
    return explorer


def reset_explorers() -> int:
    count = len(_explorers)
    _explorers.clear()
    return count


def hit_out(hit: MatchHit) -> HitOut:
    return HitOut(
        path=hit.path,
        line=hit.line,
        column=hit.column,
        length=hit.length,
        preview=hit.preview,
        symbols=list(hit.symbols),
    )


def groups_out(hits: Iterable[MatchHit], root: Path, active: Optional[str] = None) -> list[FileGroupOut]:
    groups = sort_groups_by_active(group_by_file(hits, root), active)
    return [
        FileGroupOut(path=g.path, label=g.label, hits=[hit_out(h) for h in g.hits])
        for g in groups
    ]


def resolve_active(active: Optional[str]) -> Optional[str]:
    raw = (active or "").strip()
    if not raw:
        return None
    return str(Path(raw).expanduser().resolve())


@router.get("/health")
async def health():
    return {"status": "ok", "roots": len(_explorers)}


@router.get("/references/search", response_model=SearchResponseOut)
async def search_references(
    q: str = Query(..., min_length=1, max_length=500),
    mode: str = Query("substring", pattern="^(word|substring|text)$"),
    root: Optional[str] = None,
    active: Optional[str] = None,
    max_search_ms: Optional[int] = Query(None, ge=1),
    max_files: Optional[int] = Query(None, ge=1),
):
    explorer = get_explorer(root)
    active_path = resolve_active(active)
    try:
        outcome = await explorer.search(
            q,
            active_path=active_path,
            match_mode=mode,
            max_search_ms=max_search_ms,
            max_files=max_files,
        )
    except ValidationError as exc:
        raise HTTPException(400, f"Invalid search: {exc.errors()[0].get('msg', 'bad request')}")
    if outcome.error:
        logger.error("Search for %r failed: %s", q, outcome.error)

    return SearchResponseOut(
        ok=outcome.error is None,
        query=outcome.query,
        match_mode=explorer.request_for(q, match_mode=mode).match_mode,
        cancelled=outcome.cancelled,
        elapsed_ms=outcome.elapsed_ms,
        files_scanned=outcome.files_scanned,
        files_total=outcome.files_total,
        total=len(outcome.hits),
        error=outcome.error,
        groups=groups_out(outcome.hits, explorer.root, active_path),
    )


@router.get("/references/expand", response_model=SearchResponseOut)
async def expand_symbol(
    symbol: str = Query(..., min_length=1, max_length=200),
    root: Optional[str] = None,
):
    explorer = get_explorer(root)
    try:
        hits, cached = await explorer.expand(symbol)
    except ValidationError as exc:
        raise HTTPException(400, f"Invalid symbol: {exc.errors()[0].get('msg', 'bad request')}")
    return SearchResponseOut(
        query=symbol.strip(),
        match_mode=explorer.request_for(symbol).match_mode,
        cached=cached,
        total=len(hits),
        groups=groups_out(hits, explorer.root),
    )


@router.get("/references/cache")
async def cache_status(root: Optional[str] = None):
    explorer = get_explorer(root)
    return {"root": str(explorer.root), "entries": len(explorer.cache), "queries": explorer.cache.queries()}


@router.delete("/references/cache")
async def clear_cache(root: Optional[str] = None):
    explorer = get_explorer(root)
    cleared = explorer.cache.clear()
    logger.info("Cleared %s cached expansions for %s", cleared, explorer.root)
    return {"ok": True, "cleared": cleared}
