"""Deduplicate per-file batches and forward net-new hits to the caller."""

from __future__ import annotations

import inspect
from typing import Awaitable, Callable, Optional, Union

from .diagnostics import SearchDiagnostics
from .models import Batch, MatchHit

BatchCallback = Callable[[Batch], Union[None, Awaitable[None]]]


class StreamingAggregator:
    """Owns the seen-set and running result list for one request.

    Workers never touch these directly; they only hand over finished batches.
    """

    def __init__(self, diagnostics: SearchDiagnostics, on_batch: Optional[BatchCallback] = None):
        self._diagnostics = diagnostics
        self._on_batch = on_batch
        self._seen: set[tuple[str, int, int]] = set()
        self._hits: list[MatchHit] = []
        self._frozen = False

    def __len__(self) -> int:
        return len(self._hits)

    def accept(self, batch: Batch) -> Batch:
        """Fold a batch into the result and return only the hits not seen before."""
        if self._frozen:
            return ()
        fresh: list[MatchHit] = []
        for hit in batch:
            key = hit.key
            if key in self._seen:
                continue
            self._seen.add(key)
            self._hits.append(hit)
            fresh.append(hit)
        return tuple(fresh)

    async def on_batch(self, batch: Batch) -> Batch:
        fresh = self.accept(batch)
        if fresh and self._on_batch is not None:
            try:
                result = self._on_batch(fresh)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                self._diagnostics.emit(
                    "callback_failed",
                    f"[WARN] onBatch error: {exc}",
                    severity="warning",
                    data={"error": str(exc)},
                )
        return fresh

    def freeze(self) -> tuple[MatchHit, ...]:
        self._frozen = True
        return tuple(self._hits)
