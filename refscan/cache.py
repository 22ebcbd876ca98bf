"""Process-lifetime cache of completed expansion results."""

from __future__ import annotations

from typing import Optional

from .models import MatchHit


class ExpansionCache:
    """query -> completed hits. Never evicted and never invalidated."""

    def __init__(self):
        self._entries: dict[str, tuple[MatchHit, ...]] = {}

    def get(self, query: str) -> Optional[tuple[MatchHit, ...]]:
        return self._entries.get(query)

    def put(self, query: str, hits: tuple[MatchHit, ...]) -> None:
        self._entries[query] = tuple(hits)

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count

    def queries(self) -> list[str]:
        return sorted(self._entries)

    def __contains__(self, query: object) -> bool:
        return query in self._entries

    def __len__(self) -> int:
        return len(self._entries)
