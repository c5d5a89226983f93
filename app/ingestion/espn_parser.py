"""Parser for ESPN scoreboard payloads."""

from __future__ import annotations

import logging
from typing import Any

from app.ingestion.schema import CompetitorDTO, EventDTO, GameState

logger = logging.getLogger(__name__)
UNKNOWN_TEAM = "UNK"


def safe_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def normalize_state(status: dict[str, Any]) -> GameState:
    status_type = status.get("type", {}) if isinstance(status, dict) else {}
    if not isinstance(status_type, dict):
        return "unknown"
    state = status_type.get("state") or status_type.get("name")
    if isinstance(state, str):
        state_lower = state.lower()
        if state_lower in {"pre", "scheduled", "status_scheduled"}:
            return "scheduled"
        if state_lower in {"in", "in_progress", "in progress", "status_in_progress"}:
            return "live"
        if state_lower in {"post", "final", "status_final"}:
            return "final"
    description = status_type.get("description") or ""
    if isinstance(description, str):
        description_lower = description.lower()
        if "final" in description_lower:
            return "final"
        if "in progress" in description_lower:
            return "live"
        if "scheduled" in description_lower:
            return "scheduled"
    return "unknown"


def _parse_competitor(competitor: dict[str, Any]) -> CompetitorDTO | None:
    home_away = competitor.get("homeAway")
    if home_away not in {"home", "away"}:
        return None
    team = competitor.get("team")
    if not isinstance(team, dict):
        team = {}
    team_id = team.get("id")
    return CompetitorDTO(
        team_id=str(team_id) if team_id is not None else None,
        abbreviation=str(team.get("abbreviation") or UNKNOWN_TEAM),
        home_away=home_away,
        score=safe_int(competitor.get("score")),
    )


def parse_event(event: dict[str, Any], league_key: str) -> EventDTO | None:
    """Parse one scoreboard event; returns None when it lacks two competitors."""

    event_id = event.get("id")
    if event_id is None:
        return None

    competitions = event.get("competitions")
    if not isinstance(competitions, list) or not competitions:
        return None
    competition = competitions[0]
    if not isinstance(competition, dict):
        return None

    competitors = competition.get("competitors")
    if not isinstance(competitors, list) or len(competitors) < 2:
        return None

    home = None
    away = None
    for competitor in competitors:
        if not isinstance(competitor, dict):
            continue
        parsed = _parse_competitor(competitor)
        if parsed is None:
            continue
        if parsed.home_away == "home" and home is None:
            home = parsed
        elif parsed.home_away == "away" and away is None:
            away = parsed
    if home is None or away is None:
        return None

    status = competition.get("status") or event.get("status") or {}
    return EventDTO(
        event_id=str(event_id),
        league=league_key.upper(),
        state=normalize_state(status),
        home=home,
        away=away,
    )


def parse_scoreboard(scoreboard_json: dict, league_key: str, limit: int | None = None) -> list[EventDTO]:
    """Parse ESPN scoreboard JSON into EventDTO list, keeping the first *limit* events."""

    events = scoreboard_json.get("events")
    if not isinstance(events, list):
        return []
    if limit is not None:
        events = events[:limit]

    parsed_events: list[EventDTO] = []
    for event in events:
        if not isinstance(event, dict):
            continue
        parsed = parse_event(event, league_key)
        if parsed is None:
            logger.debug("Skipped event without two competitors id=%s", event.get("id"))
            continue
        parsed_events.append(parsed)

    return parsed_events
