"""Fetch -> classify -> extract -> fallback -> assemble, per league."""

from __future__ import annotations

import asyncio
import logging
import random
from collections import Counter
from dataclasses import dataclass, field

from app.ingestion.espn_client import (
    fetch_event_boxscore,
    fetch_event_detail,
    fetch_scoreboard,
    is_fetch_error,
)
from app.ingestion.espn_parser import parse_scoreboard
from app.ingestion.schema import CompetitorDTO, EventDTO
from app.schemas import CombinedEnvelope, PerformerRecord, StatsEnvelope
from app.settings import Settings, get_settings
from app.stats.extractor import (
    extract_boxscore_performers,
    extract_leader_performers,
    rank_records,
)
from app.stats.profiles import SportProfile, get_profile
from app.stats.synthesizer import recover_roster_name, synthesize_performer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventResult:
    live: bool = False
    records: list[PerformerRecord] = field(default_factory=list)


def _extract_real(
    event: EventDTO,
    profile: SportProfile,
    settings: Settings,
) -> list[PerformerRecord]:
    """All real candidates for the event, before the per-event cut."""
    try:
        detail = fetch_event_detail(profile.league, event.event_id, settings)
        if is_fetch_error(detail):
            logger.info(
                "No detail for %s event=%s error=%s",
                profile.league,
                event.event_id,
                detail.get("error") if isinstance(detail, dict) else None,
            )
            return []
        return (
            extract_boxscore_performers(detail, event, profile)
            or extract_leader_performers(detail, event, profile)
        )
    except Exception:
        logger.exception(
            "Could not read detailed %s stats for event=%s",
            profile.league,
            event.event_id,
        )
        return []


def _roster_name(
    event: EventDTO,
    competitor: CompetitorDTO,
    profile: SportProfile,
    settings: Settings,
) -> str | None:
    try:
        boxscore = fetch_event_boxscore(profile.league, event.event_id, settings)
        if is_fetch_error(boxscore):
            return None
        return recover_roster_name(boxscore, competitor.abbreviation, profile)
    except Exception:
        logger.exception(
            "Roster lookup failed for %s event=%s team=%s",
            profile.league,
            event.event_id,
            competitor.abbreviation,
        )
        return None


def repair_team_coverage(
    candidates: list[PerformerRecord],
    event: EventDTO,
    profile: SportProfile,
    rng: random.Random,
    settings: Settings,
) -> list[PerformerRecord]:
    """Add one synthesized performer when the real candidates cover only one side.

    Coverage is judged on every real candidate, so a team with any real record
    is never given an invented one.
    """

    teams = {record.team for record in candidates}
    covered = [competitor for competitor in event.competitors if competitor.abbreviation in teams]
    if len(covered) != 1:
        return candidates
    missing = event.away if covered[0] is event.home else event.home
    name = _roster_name(event, missing, profile, settings)
    logger.info(
        "Only %s represented in event=%s, adding %s for %s",
        covered[0].abbreviation,
        event.event_id,
        name or "synthesized player",
        missing.abbreviation,
    )
    return [*candidates, synthesize_performer(profile, event, missing, rng, name=name)]


def select_performers(
    candidates: list[PerformerRecord],
    event: EventDTO,
    profile: SportProfile,
) -> list[PerformerRecord]:
    """Top `per_event_limit` candidates, keeping each competitor's best record.

    A competitor left out by the plain cut takes the slot of the lowest-ranked
    record from a team that holds more than one.
    """

    ranked = rank_records(candidates, profile)
    chosen = ranked[: profile.per_event_limit]
    for competitor in event.competitors:
        if any(record.team == competitor.abbreviation for record in chosen):
            continue
        best = next((record for record in ranked if record.team == competitor.abbreviation), None)
        if best is None:
            continue
        counts = Counter(record.team for record in chosen)
        drop = next((record for record in reversed(chosen) if counts[record.team] > 1), None)
        if drop is None:
            continue
        chosen = [record for record in chosen if record is not drop] + [best]
    return rank_records(chosen, profile)


def process_event(
    event: EventDTO,
    profile: SportProfile,
    settings: Settings,
    rng: random.Random,
) -> EventResult:
    if event.state != settings.game_state:
        return EventResult()

    live = event.state == "live"
    logger.info(
        "%s %s game detected: %s event=%s",
        "Live" if live else "Finished",
        profile.league,
        event.matchup,
        event.event_id,
    )
    candidates = _extract_real(event, profile, settings)
    if candidates:
        candidates = repair_team_coverage(candidates, event, profile, rng, settings)
        records = select_performers(candidates, event, profile)
        logger.info("Added %s %s players from event=%s", len(records), profile.league, event.event_id)
    else:
        records = [
            synthesize_performer(profile, event, competitor, rng)
            for competitor in event.competitors
        ]
        logger.info(
            "Generated %s stats for event=%s: %s",
            profile.league,
            event.event_id,
            event.matchup,
        )
    return EventResult(live=live, records=records)


def assemble_envelope(results: list[EventResult]) -> StatsEnvelope:
    return StatsEnvelope(
        success=True,
        data=[record for result in results for record in result.records],
        has_live_games=any(result.live for result in results),
    )


def collect_league_stats(
    league_key: str,
    settings: Settings | None = None,
    rng: random.Random | None = None,
) -> StatsEnvelope:
    """Build the top performers envelope for one league.

    Upstream failures are absorbed: the envelope is still successful, with no data.
    """

    settings = settings or get_settings()
    rng = rng or random.Random()
    profile = get_profile(league_key)

    logger.info("Fetching %s stats...", profile.league)
    payload = fetch_scoreboard(profile.league, settings)
    if is_fetch_error(payload):
        logger.warning(
            "Scoreboard unavailable league=%s error=%s details=%s",
            profile.league,
            payload.get("error"),
            payload.get("details"),
        )
        return assemble_envelope([])

    events = parse_scoreboard(payload, profile.league, limit=settings.max_events)
    results = [process_event(event, profile, settings, rng) for event in events]
    envelope = assemble_envelope(results)
    logger.info(
        "%s stats done: events=%s performers=%s",
        profile.league,
        len(events),
        len(envelope.data),
    )
    return envelope


def league_payload(league_key: str, settings: Settings | None = None) -> dict:
    """Envelope as served over HTTP; unexpected errors become success=false."""

    try:
        return collect_league_stats(league_key, settings).to_payload()
    except Exception as exc:
        logger.exception("%s stats error", league_key.upper())
        return {"success": False, "error": str(exc), "data": []}


async def collect_combined_stats(settings: Settings | None = None) -> CombinedEnvelope:
    settings = settings or get_settings()
    logger.info("Fetching combined player stats...")
    nba, nfl = await asyncio.gather(
        asyncio.to_thread(league_payload, "NBA", settings),
        asyncio.to_thread(league_payload, "NFL", settings),
    )
    return CombinedEnvelope(
        success=True,
        data=[*(nba.get("data") or []), *(nfl.get("data") or [])],
        nba=nba,
        nfl=nfl,
    )
