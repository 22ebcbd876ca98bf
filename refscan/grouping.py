"""Group hits per file and order the groups for display."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional, Sequence

from .models import FileGroup, MatchHit
from .scanner import display_path


def group_by_file(hits: Iterable[MatchHit], root: str | Path | None = None) -> list[FileGroup]:
    by_path: dict[str, FileGroup] = {}
    for hit in hits:
        group = by_path.get(hit.path)
        if group is None:
            group = FileGroup(path=hit.path, label=display_path(hit.path, root))
            by_path[hit.path] = group
        group.hits.append(hit)
    for group in by_path.values():
        group.hits.sort(key=lambda h: (h.line, h.column))
    return list(by_path.values())


def sort_groups_by_active(groups: Sequence[FileGroup], active_path: Optional[str] = None) -> list[FileGroup]:
    """Active file first, then its directory siblings, then everything else by label."""
    if not active_path:
        return sorted(groups, key=lambda g: g.label)

    active_dir = os.path.dirname(active_path)

    def score(group: FileGroup) -> int:
        if group.path == active_path:
            return 2
        if group.path.startswith(active_dir + "/") or group.path.startswith(active_dir + "\\"):
            return 1
        return 0

    return sorted(groups, key=lambda g: (-score(g), g.label))
