"""Fallback performers for teams without usable real stats."""

from __future__ import annotations

import logging
import math
import random
from typing import TYPE_CHECKING, Any

from app.ingestion.schema import CompetitorDTO, EventDTO
from app.schemas import PerformerRecord

if TYPE_CHECKING:
    from app.stats.profiles import SportProfile

logger = logging.getLogger(__name__)


def basketball_metrics(score: int, rng: random.Random) -> dict[str, int]:
    return {
        "points": max(15, math.floor(score * 0.25 + rng.uniform(0, 10))),
        "rebounds": math.floor(rng.uniform(0, 8)) + 5,
        "assists": math.floor(rng.uniform(0, 8)) + 3,
    }


def football_metrics(score: int, rng: random.Random) -> dict[str, int]:
    return {
        "passing_yards": max(150, math.floor(score * 8 + rng.uniform(0, 100))),
        "passing_tds": math.floor(score / 7) + math.floor(rng.uniform(0, 3)),
    }


def synthesize_performer(
    profile: SportProfile,
    event: EventDTO,
    competitor: CompetitorDTO,
    rng: random.Random,
    name: str | None = None,
) -> PerformerRecord:
    metrics = profile.synthesize(competitor.score, rng)
    return PerformerRecord(
        name=name or profile.default_label.format(team=competitor.abbreviation),
        team=competitor.abbreviation,
        league=profile.league,
        game=event.matchup,
        game_id=event.event_id,
        is_live=event.state == "live",
        source="synthesized",
        **metrics,
    )


def _team_groups(boxscore: dict[str, Any], team_abbreviation: str) -> list[dict]:
    # Player groups live under "players"; older payloads put them under "teams".
    for key in ("players", "teams"):
        entries = boxscore.get(key)
        if not isinstance(entries, list):
            continue
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            team = entry.get("team")
            if not isinstance(team, dict) or team.get("abbreviation") != team_abbreviation:
                continue
            statistics = entry.get("statistics")
            groups = [
                group
                for group in statistics or []
                if isinstance(group, dict) and isinstance(group.get("athletes"), list)
            ]
            if groups:
                return groups
    return []


def _group_matches(group: dict[str, Any], wanted: str) -> bool:
    wanted = wanted.lower()
    return any(
        isinstance(group.get(key), str) and group[key].lower() == wanted
        for key in ("label", "name", "text")
    )


def recover_roster_name(
    boxscore: dict[str, Any],
    team_abbreviation: str,
    profile: SportProfile,
) -> str | None:
    """Best-effort lookup of a real player name for a synthesized record."""

    if not isinstance(boxscore, dict):
        return None
    if isinstance(boxscore.get("boxscore"), dict):
        boxscore = boxscore["boxscore"]

    groups = _team_groups(boxscore, team_abbreviation)
    if profile.roster_group is not None:
        groups = [group for group in groups if _group_matches(group, profile.roster_group)]
    for group in groups[:1]:
        for player in group["athletes"]:
            if not isinstance(player, dict):
                continue
            athlete = player.get("athlete")
            if not isinstance(athlete, dict) or not athlete.get("displayName"):
                continue
            if profile.roster_position is not None:
                position = player.get("position") or athlete.get("position")
                if not isinstance(position, dict) or position.get("abbreviation") != profile.roster_position:
                    continue
            return str(athlete["displayName"])
    return None
