"""ESPN HTTP client for fetching scoreboards and per-game detail."""

from __future__ import annotations

import logging
from typing import Any

import requests

from app.ingestion.leagues import get_league_path
from app.settings import Settings, get_settings

logger = logging.getLogger(__name__)
SCOREBOARD_BASE_PATH = "/apis/site/v2"
MAX_BODY_SNIPPET = 300
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; Dashboard/1.0)"
HEADERS = {
    "Accept": "application/json",
    "User-Agent": DEFAULT_USER_AGENT,
}


def is_fetch_error(payload: Any) -> bool:
    return not isinstance(payload, dict) or payload.get("ok") is False


def build_scoreboard_url(league_key: str, settings: Settings, *suffix: str) -> str:
    league_path = get_league_path(league_key)
    if league_path is None:
        raise ValueError(f"Unsupported league key: {league_key}")
    parts = [f"{settings.espn_base_url}{SCOREBOARD_BASE_PATH}/{league_path}/scoreboard"]
    parts.extend(str(part) for part in suffix)
    return "/".join(parts)


def _get_json(url: str, league_key: str, settings: Settings, what: str) -> dict:
    try:
        response = requests.get(
            url,
            headers=HEADERS,
            timeout=settings.espn_timeout_seconds,
        )
    except requests.RequestException as exc:
        logger.error("ESPN %s request failed league=%s url=%s error=%s", what, league_key, url, exc)
        return {
            "ok": False,
            "error": f"Failed to fetch ESPN {what}",
            "details": str(exc),
            "league": league_key,
            "url": url,
        }

    if response.status_code < 200 or response.status_code >= 300:
        body_snippet = (response.text or "")[:MAX_BODY_SNIPPET]
        logger.error(
            "ESPN %s non-2xx status=%s league=%s body=%s",
            what,
            response.status_code,
            league_key,
            body_snippet,
        )
        return {
            "ok": False,
            "error": "ESPN returned non-2xx response",
            "status": response.status_code,
            "body": body_snippet,
            "league": league_key,
            "url": url,
        }

    try:
        payload = response.json()
    except ValueError as exc:
        logger.error("ESPN %s returned non-JSON body league=%s url=%s", what, league_key, url)
        return {
            "ok": False,
            "error": "ESPN returned non-JSON response",
            "details": str(exc),
            "status": response.status_code,
            "body": (response.text or "")[:MAX_BODY_SNIPPET],
            "league": league_key,
            "url": url,
        }
    if not isinstance(payload, dict):
        return {
            "ok": False,
            "error": "ESPN returned unexpected JSON shape",
            "status": response.status_code,
            "league": league_key,
            "url": url,
        }
    return payload


def _fetch(league_key: str, settings: Settings | None, what: str, *suffix: str) -> dict:
    settings = settings or get_settings()
    try:
        url = build_scoreboard_url(league_key, settings, *suffix)
    except ValueError as exc:
        return {"ok": False, "error": str(exc), "league": league_key}
    logger.debug("Fetching ESPN %s league=%s url=%s", what, league_key, url)
    return _get_json(url, league_key, settings, what)


def fetch_scoreboard(league_key: str, settings: Settings | None = None) -> dict:
    """Fetch today's ESPN scoreboard for a league.

    Returns parsed JSON on success. On failure, returns a controlled error dict.
    """

    return _fetch(league_key, settings, "scoreboard")


def fetch_event_detail(league_key: str, event_id: str, settings: Settings | None = None) -> dict:
    return _fetch(league_key, settings, "event detail", event_id)


def fetch_event_boxscore(league_key: str, event_id: str, settings: Settings | None = None) -> dict:
    return _fetch(league_key, settings, "boxscore", event_id, "boxscore")
