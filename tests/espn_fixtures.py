from __future__ import annotations

from app.ingestion.espn_parser import parse_event


def competitor(home_away: str, team_id: str, abbreviation: str, score: str = "0") -> dict:
    return {
        "homeAway": home_away,
        "score": score,
        "team": {"id": team_id, "abbreviation": abbreviation, "displayName": abbreviation},
    }


def scoreboard_event(
    event_id: str,
    state: str,
    home: tuple[str, str, str] = ("1", "LAL", "110"),
    away: tuple[str, str, str] = ("2", "BOS", "104"),
) -> dict:
    return {
        "id": event_id,
        "date": "2026-10-18T23:30Z",
        "competitions": [
            {
                "id": event_id,
                "status": {"type": {"state": state}},
                "competitors": [
                    competitor("home", *home),
                    competitor("away", *away),
                ],
            }
        ],
    }


def event_dto(event_id: str = "401", state: str = "post", league: str = "NBA", **teams):
    return parse_event(scoreboard_event(event_id, state, **teams), league)


def nba_team_box(abbreviation: str, athletes: list[tuple[str, str, str, str]]) -> dict:
    return {
        "team": {"abbreviation": abbreviation},
        "statistics": [
            {
                "labels": ["MIN", "PTS", "REB", "AST"],
                "athletes": [
                    {"athlete": {"displayName": name}, "stats": ["30", pts, reb, ast]}
                    for name, pts, reb, ast in athletes
                ],
            }
        ],
    }


def nfl_leader(category: str, team_id: str, name: str, display_value: str) -> dict:
    return {
        "name": category,
        "leaders": [
            {
                "displayValue": display_value,
                "athlete": {"displayName": name},
                "team": {"id": team_id},
            }
        ],
    }


def nfl_detail(*categories: dict) -> dict:
    return {"competitions": [{"leaders": list(categories)}]}
