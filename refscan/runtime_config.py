"""Runtime paths and search defaults.

Values are read from the environment once, at import. Every search then
builds an immutable `SearchRequest` from them, so a running search never
sees configuration change underneath it.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from platformdirs import user_data_dir

from .discovery import DEFAULT_EXCLUDE_GLOB, DEFAULT_INCLUDE_GLOB
from .models import SearchLimits, SearchRequest

APP_NAME = "RefScan"
APP_ROOT = Path(__file__).resolve().parent.parent


def _env_int(name: str, default: int, low: int = 1, high: int = 10_000_000) -> int:
    raw = (os.environ.get(name) or "").strip()
    try:
        value = int(raw) if raw else default
    except ValueError:
        value = default
    return max(low, min(value, high))


def _env_flag(name: str) -> bool:
    return (os.environ.get(name) or "").strip().lower() in {"1", "true", "yes", "on"}


def _default_home() -> Path:
    return Path(user_data_dir(APP_NAME, appauthor=False))


REFSCAN_HOME = Path(
    os.environ.get("REFSCAN_HOME", str(_default_home()))
).expanduser().resolve()
LOGS_DIR = Path(
    os.environ.get("REFSCAN_LOGS_DIR", str(REFSCAN_HOME / "logs"))
).expanduser().resolve()
SEARCH_ROOT = Path(
    os.environ.get("REFSCAN_ROOT", os.getcwd())
).expanduser().resolve()

INCLUDE_GLOB = (os.environ.get("REFSCAN_INCLUDE_GLOB") or DEFAULT_INCLUDE_GLOB).strip()
EXCLUDE_GLOB = (os.environ.get("REFSCAN_EXCLUDE_GLOB") or DEFAULT_EXCLUDE_GLOB).strip()
LOG_LEVEL = (os.environ.get("REFSCAN_LOG_LEVEL") or "INFO").strip().upper()

MAX_FILES = _env_int("REFSCAN_MAX_FILES", 1000)
MAX_LINES_PER_FILE = _env_int("REFSCAN_MAX_LINES_PER_FILE", 10000)
MAX_SEARCH_MS = _env_int("REFSCAN_MAX_SEARCH_MS", 15000)
PROGRESS_EVERY = _env_int("REFSCAN_PROGRESS_EVERY", 50)
VERBOSE = _env_flag("REFSCAN_VERBOSE")

_mode = (os.environ.get("REFSCAN_MATCH_MODE") or "substring").strip().lower()
MATCH_MODE = "word" if _mode == "word" else "substring"


def ensure_runtime_dirs() -> None:
    REFSCAN_HOME.mkdir(parents=True, exist_ok=True)
    LOGS_DIR.mkdir(parents=True, exist_ok=True)


def default_limits() -> SearchLimits:
    return SearchLimits(
        max_files=MAX_FILES,
        max_lines_per_file=MAX_LINES_PER_FILE,
        max_search_ms=MAX_SEARCH_MS,
        progress_every=PROGRESS_EVERY,
    )


def build_request(query: str, **overrides: Any) -> SearchRequest:
    """Build a request from configured defaults; `overrides` win when not None."""
    limit_values = default_limits().model_dump()
    for key in list(overrides):
        if key in limit_values:
            value = overrides.pop(key)
            if value is not None:
                limit_values[key] = value
    limits = SearchLimits(**limit_values)

    match_mode = overrides.pop("match_mode", None) or MATCH_MODE
    verbose = overrides.pop("verbose", None)
    if overrides:
        raise ValueError(f"Unknown search options: {', '.join(sorted(overrides))}")
    return SearchRequest(
        query=query,
        match_mode=match_mode,
        limits=limits,
        verbose=VERBOSE if verbose is None else bool(verbose),
    )
