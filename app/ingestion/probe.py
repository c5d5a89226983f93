"""Quick probe: print the top performers the API would serve for a league."""

from __future__ import annotations

import argparse
import logging

from app.ingestion.espn_client import fetch_scoreboard, is_fetch_error
from app.ingestion.espn_parser import parse_scoreboard
from app.ingestion.leagues import LEAGUE_PATHS
from app.settings import get_settings
from app.stats.pipeline import collect_league_stats


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Probe ESPN for a league and print event states and top performers.",
    )
    parser.add_argument(
        "--league",
        type=str,
        default="NBA",
        help="League key (NBA or NFL).",
    )
    return parser.parse_args()


def _normalize_league(raw: str) -> str:
    value = raw.strip().upper()
    if value not in LEAGUE_PATHS:
        supported = ", ".join(sorted(LEAGUE_PATHS))
        raise SystemExit(
            f"Unsupported league: {value}. Supported leagues: {supported}"
        )
    return value


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    args = _parse_args()
    league = _normalize_league(args.league)
    settings = get_settings()

    payload = fetch_scoreboard(league, settings)
    if is_fetch_error(payload):
        logging.error("ESPN error: %s", payload.get("error"))
        details = payload.get("details")
        if details:
            logging.error("Details: %s", details)
        raise SystemExit(1)

    events = parse_scoreboard(payload, league, limit=settings.max_events)
    for event in events:
        logging.info("event=%s %s state=%s", event.event_id, event.matchup, event.state)

    envelope = collect_league_stats(league, settings)
    for record in envelope.data:
        logging.info(
            "%s (%s) %s source=%s",
            record.name,
            record.team,
            record.to_payload(),
            record.source,
        )
    logging.info(
        "Fetched %s events, %s performers for league=%s state=%s",
        len(events),
        len(envelope.data),
        league,
        settings.game_state,
    )


if __name__ == "__main__":
    main()
