"""RefScan — request models and search result types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

MatchModeIn = Literal["word", "substring", "text"]


class SearchLimits(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    max_files: int = Field(default=1000, ge=1)
    max_lines_per_file: int = Field(default=10000, ge=1)
    max_search_ms: int = Field(default=15000, ge=1)
    progress_every: int = Field(default=50, ge=1)


class SearchRequest(BaseModel):
    """One search invocation. Built once and passed to every component."""

    model_config = {"frozen": True, "extra": "forbid"}

    query: str
    match_mode: Literal["word", "substring"] = "substring"
    limits: SearchLimits = Field(default_factory=SearchLimits)
    verbose: bool = False

    @field_validator("query")
    @classmethod
    def _query_not_blank(cls, value: str) -> str:
        cleaned = (value or "").strip()
        if not cleaned:
            raise ValueError("query must not be empty")
        return cleaned

    @field_validator("match_mode", mode="before")
    @classmethod
    def _normalize_mode(cls, value):
        # "text" is the older name for substring matching.
        if isinstance(value, str) and value.strip().lower() == "text":
            return "substring"
        return value


@dataclass(frozen=True)
class CandidateFile:
    path: str
    size: int


@dataclass(frozen=True)
class MatchHit:
    path: str
    line: int
    column: int
    length: int
    preview: str
    symbols: tuple[str, ...] = ()

    @property
    def key(self) -> tuple[str, int, int]:
        return (self.path, self.line, self.column)


Batch = tuple[MatchHit, ...]


@dataclass(frozen=True)
class SearchOutcome:
    query: str
    hits: tuple[MatchHit, ...] = ()
    cancelled: bool = False
    elapsed_ms: int = 0
    files_scanned: int = 0
    files_total: int = 0
    error: Optional[str] = None

    @property
    def complete(self) -> bool:
        return not self.cancelled and self.error is None

    def keys(self) -> set[tuple[str, int, int]]:
        return {hit.key for hit in self.hits}


@dataclass
class FileGroup:
    path: str
    label: str
    hits: list[MatchHit] = field(default_factory=list)


# ── API payloads ──────────────────────────────────────────


class HitOut(BaseModel):
    path: str
    line: int
    column: int
    length: int
    preview: str
    symbols: list[str] = Field(default_factory=list)


class FileGroupOut(BaseModel):
    path: str
    label: str
    hits: list[HitOut]


class SearchResponseOut(BaseModel):
    ok: bool = True
    query: str
    match_mode: str
    cancelled: bool = False
    cached: bool = False
    elapsed_ms: int = 0
    files_scanned: int = 0
    files_total: int = 0
    total: int = 0
    error: Optional[str] = None
    groups: list[FileGroupOut] = Field(default_factory=list)


class StreamSearchIn(BaseModel):
    model_config = {"extra": "forbid"}

    query: str = Field(..., min_length=1, max_length=500)
    mode: MatchModeIn = "substring"
    root: Optional[str] = None
    active: Optional[str] = None
