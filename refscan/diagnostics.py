"""Search diagnostics sinks.

The engine reports what it is doing through a sink rather than a module
logger, so hosts can route events (log file, websocket, test recorder).
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

logger = logging.getLogger("refscan.search")

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class SearchDiagnostics(Protocol):
    def emit(
        self,
        event_type: str,
        message: str,
        *,
        severity: str = "info",
        data: dict[str, Any] | None = None,
    ) -> None:
        ...


class LoggingDiagnostics:
    """Default sink: one log line per event on the `refscan.search` logger."""

    def __init__(self, log: logging.Logger | None = None):
        self._log = log or logger

    def emit(
        self,
        event_type: str,
        message: str,
        *,
        severity: str = "info",
        data: dict[str, Any] | None = None,
    ) -> None:
        self._log.log(_LEVELS.get(severity, logging.INFO), message)


class RecordingDiagnostics:
    """Keeps every event in memory for later inspection."""

    def __init__(self):
        self.events: list[dict[str, Any]] = []

    def emit(
        self,
        event_type: str,
        message: str,
        *,
        severity: str = "info",
        data: dict[str, Any] | None = None,
    ) -> None:
        self.events.append(
            {
                "type": event_type,
                "message": message,
                "severity": severity,
                "data": data or {},
            }
        )

    def of_type(self, event_type: str) -> list[dict[str, Any]]:
        return [event for event in self.events if event["type"] == event_type]

    def severities(self) -> set[str]:
        return {event["severity"] for event in self.events}
