"""Pull real performers out of an ESPN event detail payload."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from app.ingestion.espn_parser import UNKNOWN_TEAM, safe_int
from app.ingestion.schema import EventDTO
from app.schemas import PerformerRecord
from app.stats.profiles import BoxMetric, SportProfile
from app.stats.text_parser import parse_leader_value

logger = logging.getLogger(__name__)


def rank_records(records: Iterable[PerformerRecord], profile: SportProfile) -> list[PerformerRecord]:
    return sorted(records, key=profile.rank_key, reverse=True)


def _first_competition(detail: dict[str, Any]) -> dict[str, Any]:
    competitions = detail.get("competitions")
    if isinstance(competitions, list) and competitions and isinstance(competitions[0], dict):
        return competitions[0]
    return {}


def _metric_indices(group: dict[str, Any], metrics: tuple[BoxMetric, ...]) -> dict[str, int]:
    headers: list[str] = []
    for key in ("labels", "names", "keys"):
        values = group.get(key)
        if isinstance(values, list) and values:
            headers = [str(value) for value in values]
            break
    indices = {}
    for metric in metrics:
        index = next(
            (headers.index(label) for label in metric.labels if label in headers),
            metric.fallback_index,
        )
        indices[metric.name] = index
    return indices


def _stat_at(stats: list[Any], index: int) -> int:
    if index >= len(stats):
        return 0
    return safe_int(stats[index])


def extract_boxscore_performers(
    detail: dict[str, Any],
    event: EventDTO,
    profile: SportProfile,
) -> list[PerformerRecord]:
    """Read boxscore.players: the top athletes per team by the primary stat."""

    if not profile.box_metrics:
        return []
    boxscore = detail.get("boxscore")
    players = boxscore.get("players") if isinstance(boxscore, dict) else None
    if not isinstance(players, list):
        return []

    primary = profile.primary_metric
    records: list[PerformerRecord] = []
    for team_entry in players:
        if not isinstance(team_entry, dict):
            continue
        statistics = team_entry.get("statistics")
        if not isinstance(statistics, list) or not statistics or not isinstance(statistics[0], dict):
            continue
        group = statistics[0]
        team = team_entry.get("team")
        team_abbr = team.get("abbreviation") if isinstance(team, dict) else None
        indices = _metric_indices(group, profile.box_metrics)

        candidates: list[PerformerRecord] = []
        for entry in group.get("athletes") or []:
            if not isinstance(entry, dict):
                continue
            athlete = entry.get("athlete")
            stats = entry.get("stats")
            if not isinstance(athlete, dict) or not isinstance(stats, list) or not stats:
                continue
            metrics = {name: _stat_at(stats, index) for name, index in indices.items()}
            if metrics[primary] <= 0:
                continue
            candidates.append(
                PerformerRecord(
                    name=athlete.get("displayName") or "Unknown Player",
                    team=team_abbr or UNKNOWN_TEAM,
                    league=profile.league,
                    game=event.matchup,
                    game_id=event.event_id,
                    is_live=event.state == "live",
                    source="real",
                    **metrics,
                )
            )
        records.extend(rank_records(candidates, profile)[: profile.box_per_team])

    return records


def _resolve_team(leader: dict[str, Any], event: EventDTO, default: str) -> str:
    team = leader.get("team")
    team_id = team.get("id") if isinstance(team, dict) else None
    if team_id is None:
        return default
    for competitor in event.competitors:
        if competitor.team_id is not None and competitor.team_id == str(team_id):
            return competitor.abbreviation
    return UNKNOWN_TEAM


def _leader_categories(detail: dict[str, Any], event: EventDTO) -> list[tuple[dict[str, Any], str]]:
    """Leader categories paired with the team abbreviation implied by where they sit."""

    competition = _first_competition(detail)
    leaders = competition.get("leaders")
    if isinstance(leaders, list) and leaders:
        return [(category, UNKNOWN_TEAM) for category in leaders if isinstance(category, dict)]

    categories: list[tuple[dict[str, Any], str]] = []
    by_id = {competitor.team_id: competitor.abbreviation for competitor in event.competitors}
    for competitor in competition.get("competitors") or []:
        if not isinstance(competitor, dict) or not isinstance(competitor.get("leaders"), list):
            continue
        team = competitor.get("team") if isinstance(competitor.get("team"), dict) else {}
        team_abbr = by_id.get(str(team.get("id")), team.get("abbreviation") or UNKNOWN_TEAM)
        categories.extend(
            (category, team_abbr) for category in competitor["leaders"] if isinstance(category, dict)
        )
    return categories


def extract_leader_performers(
    detail: dict[str, Any],
    event: EventDTO,
    profile: SportProfile,
) -> list[PerformerRecord]:
    """Parse category leader strings into real candidates, ranked by yardage."""

    if not profile.leader_patterns:
        return []

    candidates: list[PerformerRecord] = []
    for category, implied_team in _leader_categories(detail, event):
        category_name = category.get("name")
        if category_name not in profile.leader_patterns:
            continue
        for leader in (category.get("leaders") or [])[: profile.leaders_per_category]:
            if not isinstance(leader, dict):
                continue
            athlete = leader.get("athlete")
            display_value = leader.get("displayValue")
            if not isinstance(athlete, dict) or not display_value:
                continue
            metrics = parse_leader_value(category_name, display_value, profile.leader_patterns)
            if metrics is None:
                continue
            candidates.append(
                PerformerRecord(
                    name=athlete.get("displayName") or "Unknown Player",
                    team=_resolve_team(leader, event, implied_team),
                    league=profile.league,
                    game=event.matchup,
                    game_id=event.event_id,
                    is_live=event.state == "live",
                    source="real",
                    **metrics,
                )
            )

    return rank_records(candidates, profile)
