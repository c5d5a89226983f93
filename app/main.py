from __future__ import annotations

import asyncio
import logging
import os

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.log_buffer import get_buffer_handler, install_buffer_handler
from app.settings import Settings, get_settings
from app.stats.pipeline import collect_combined_stats, league_payload

logger = logging.getLogger(__name__)
_settings = get_settings()

app = FastAPI(title="Top Performers Dashboard")
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(_settings.cors_allow_origins),
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def start_logging() -> None:
    install_buffer_handler()
    logger.info(
        "App starting up: game_state=%s max_events=%s",
        _settings.game_state,
        _settings.max_events,
    )


@app.get("/health")
def health():
    return {"status": "ok", "service": "stats"}


@app.get("/api/nba-stats")
async def api_nba_stats(settings: Settings = Depends(get_settings)):
    return await asyncio.to_thread(league_payload, "NBA", settings)


@app.get("/api/nfl-stats")
async def api_nfl_stats(settings: Settings = Depends(get_settings)):
    return await asyncio.to_thread(league_payload, "NFL", settings)


@app.get("/api/player-stats")
async def api_player_stats(settings: Settings = Depends(get_settings)):
    try:
        combined = await collect_combined_stats(settings)
    except Exception as exc:
        logger.exception("Combined stats error")
        return {"success": False, "error": str(exc), "data": []}
    return combined.to_payload()


@app.get("/api/logs")
def api_logs(limit: int = 100, level: str | None = None):
    handler = get_buffer_handler()
    return {"entries": handler.entries(limit=limit, level=level)}


# Mounted last so the API routes above take precedence over "/".
if os.path.isdir(_settings.static_dir):
    app.mount("/", StaticFiles(directory=_settings.static_dir, html=True), name="static")
