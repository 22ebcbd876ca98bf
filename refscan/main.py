"""RefScan — Main FastAPI application."""

import json
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from .models import StreamSearchIn
from .routes_api import get_explorer, groups_out, hit_out, resolve_active, router as api_router
from .runtime_config import LOG_LEVEL, LOGS_DIR, SEARCH_ROOT, ensure_runtime_dirs
from .websocket import manager

# ── Logging ────────────────────────────────────────────────
LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format=LOG_FORMAT,
)
logger = logging.getLogger("refscan")


def _attach_file_log() -> None:
    log_path = LOGS_DIR / "refscan.log"
    if any(getattr(h, "baseFilename", None) == str(log_path) for h in logger.handlers):
        return
    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)


# ── Lifespan ───────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("RefScan starting up (root: %s)", SEARCH_ROOT)
    ensure_runtime_dirs()
    try:
        _attach_file_log()
    except OSError as exc:
        logger.warning("Could not open log file in %s: %s", LOGS_DIR, exc)
    yield
    logger.info("RefScan shutting down.")


# ── App ────────────────────────────────────────────────────
app = FastAPI(title="RefScan", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


# ── WebSocket endpoint ─────────────────────────────────────
@app.websocket("/ws/references")
async def references_stream(ws: WebSocket):
    """Stream one `batch` message per file with new hits, then `done`."""
    await manager.connect(ws, "references")

    try:
        while True:
            raw = await ws.receive_text()
            try:
                msg = StreamSearchIn(**json.loads(raw))
                explorer = get_explorer(msg.root)
                explorer.request_for(msg.query, match_mode=msg.mode)
            except (TypeError, ValueError, ValidationError) as exc:
                await manager.send_personal(ws, {"type": "error", "error": f"Invalid search: {exc}"})
                continue
            except HTTPException as exc:
                await manager.send_personal(ws, {"type": "error", "error": exc.detail})
                continue
            active_path = resolve_active(msg.active)

            async def forward(batch, query=msg.query):
                await manager.send_personal(
                    ws,
                    {
                        "type": "batch",
                        "query": query,
                        "hits": [hit_out(hit).model_dump() for hit in batch],
                    },
                )

            logger.info(f"[WS] search: {msg.query[:80]}")
            outcome = await explorer.search(
                msg.query,
                active_path=active_path,
                on_batch=forward,
                match_mode=msg.mode,
            )
            await manager.send_personal(
                ws,
                {
                    "type": "done",
                    "query": outcome.query,
                    "total": len(outcome.hits),
                    "cancelled": outcome.cancelled,
                    "elapsed_ms": outcome.elapsed_ms,
                    "error": outcome.error,
                    "groups": [
                        g.model_dump()
                        for g in groups_out(outcome.hits, explorer.root, active_path)
                    ],
                },
            )

    except WebSocketDisconnect:
        manager.disconnect(ws)
        logger.info("WS disconnected: #references")
