"""RefScan — WebSocket connection manager for streamed searches."""

import logging
from fastapi import WebSocket
from typing import Dict, Set

logger = logging.getLogger("refscan.ws")


class ConnectionManager:
    """Tracks open search streams per channel."""

    def __init__(self):
        # channel -> set of websocket connections
        self._channels: Dict[str, Set[WebSocket]] = {}

    async def connect(self, ws: WebSocket, channel: str = "references"):
        await ws.accept()
        self._channels.setdefault(channel, set()).add(ws)
        logger.info(f"Client connected to #{channel}")

    def disconnect(self, ws: WebSocket):
        for members in self._channels.values():
            members.discard(ws)
        logger.info("Client disconnected")

    def count(self, channel: str) -> int:
        return len(self._channels.get(channel, set()))

    async def send_personal(self, ws: WebSocket, message: dict) -> bool:
        try:
            await ws.send_json(message)
            return True
        except Exception:
            self.disconnect(ws)
            return False


manager = ConnectionManager()
