from __future__ import annotations

import random
import unittest
from unittest.mock import patch

from app.schemas import PerformerRecord
from app.settings import Settings
from app.stats.pipeline import collect_league_stats, select_performers
from app.stats.profiles import NBA_PROFILE
from espn_fixtures import event_dto, nba_team_box, nfl_detail, nfl_leader, scoreboard_event

FINAL = Settings(game_state="final")
LIVE = Settings(game_state="live")
NFL_TEAMS = {"home": ("12", "KC", "27"), "away": ("2", "BUF", "20")}
FETCH_ERROR = {"ok": False, "error": "ESPN returned non-2xx response", "status": 500}


def _run(league: str, scoreboard: dict, detail=None, boxscore=None, settings: Settings = FINAL):
    detail_kwargs = {"side_effect": detail} if isinstance(detail, Exception) else {"return_value": detail}
    with patch("app.stats.pipeline.fetch_scoreboard", return_value=scoreboard), patch(
        "app.stats.pipeline.fetch_event_detail", **detail_kwargs
    ) as mock_detail, patch(
        "app.stats.pipeline.fetch_event_boxscore", return_value=boxscore or FETCH_ERROR
    ) as mock_boxscore:
        envelope = collect_league_stats(league, settings, rng=random.Random(7))
    return envelope, mock_detail, mock_boxscore


class EventStateFilterTests(unittest.TestCase):
    def test_events_outside_target_state_emit_nothing(self) -> None:
        scoreboard = {
            "events": [
                scoreboard_event("1", "pre"),
                scoreboard_event("2", "in"),
                scoreboard_event("3", "delayed"),
            ]
        }

        envelope, mock_detail, _ = _run("NBA", scoreboard, detail=FETCH_ERROR)

        self.assertTrue(envelope.success)
        self.assertEqual([], envelope.data)
        self.assertFalse(envelope.has_live_games)
        mock_detail.assert_not_called()

    def test_live_mode_only_surfaces_live_games(self) -> None:
        scoreboard = {"events": [scoreboard_event("1", "post"), scoreboard_event("2", "in")]}

        envelope, _, _ = _run("NBA", scoreboard, detail=FETCH_ERROR, settings=LIVE)

        self.assertTrue(envelope.has_live_games)
        self.assertEqual({"2"}, {record.game_id for record in envelope.data})
        self.assertTrue(all(record.is_live for record in envelope.data))

    def test_only_first_events_are_considered(self) -> None:
        scoreboard = {"events": [scoreboard_event(str(i), "post") for i in range(3)]}

        envelope, mock_detail, _ = _run(
            "NBA", scoreboard, detail=FETCH_ERROR, settings=Settings(max_events=2)
        )

        self.assertEqual(2, mock_detail.call_count)
        self.assertEqual({"0", "1"}, {record.game_id for record in envelope.data})


class BoxscoreExtractionTests(unittest.TestCase):
    def test_top_two_real_players_by_points(self) -> None:
        detail = {
            "boxscore": {
                "players": [
                    nba_team_box("LAL", [("LeBron James", "30", "8", "9"), ("Anthony Davis", "25", "12", "2"), ("Bench", "0", "1", "0")]),
                    nba_team_box("BOS", [("Jayson Tatum", "28", "7", "5"), ("Jaylen Brown", "20", "4", "3")]),
                ]
            }
        }

        envelope, _, mock_boxscore = _run("NBA", {"events": [scoreboard_event("401", "post")]}, detail=detail)

        self.assertEqual(["LeBron James", "Jayson Tatum"], [record.name for record in envelope.data])
        first = envelope.data[0].to_payload()
        self.assertEqual(30, first["points"])
        self.assertEqual(8, first["rebounds"])
        self.assertEqual(9, first["assists"])
        self.assertEqual("real", first["source"])
        self.assertEqual("401", first["gameId"])
        self.assertEqual("BOS @ LAL", first["game"])
        mock_boxscore.assert_not_called()

    def test_weak_real_player_is_kept_over_synthesis(self) -> None:
        detail = {
            "boxscore": {
                "players": [
                    nba_team_box("LAL", [("LeBron James", "40", "8", "9"), ("Anthony Davis", "35", "12", "2")]),
                    nba_team_box("BOS", [("Jayson Tatum", "10", "7", "5")]),
                ]
            }
        }

        envelope, _, mock_boxscore = _run("NBA", {"events": [scoreboard_event("401", "post")]}, detail=detail)

        self.assertEqual(
            [("LeBron James", "LAL"), ("Jayson Tatum", "BOS")],
            [(record.name, record.team) for record in envelope.data],
        )
        self.assertTrue(all(record.source == "real" for record in envelope.data))
        mock_boxscore.assert_not_called()

    def test_team_without_scorers_gets_one_synthesized_player_within_limit(self) -> None:
        detail = {
            "boxscore": {
                "players": [
                    nba_team_box("LAL", [("LeBron James", "40", "8", "9"), ("Anthony Davis", "35", "12", "2")]),
                    nba_team_box("BOS", [("Jayson Tatum", "0", "7", "5")]),
                ]
            }
        }

        envelope, _, mock_boxscore = _run("NBA", {"events": [scoreboard_event("401", "post")]}, detail=detail)

        self.assertEqual(2, len(envelope.data))
        self.assertEqual({"LeBron James", "BOS Top Scorer"}, {record.name for record in envelope.data})
        bos = [record for record in envelope.data if record.team == "BOS"][0]
        self.assertEqual("synthesized", bos.source)
        self.assertGreaterEqual(bos.points, 15)
        mock_boxscore.assert_called_once()


class LeaderExtractionTests(unittest.TestCase):
    def test_leaders_ranked_by_yards(self) -> None:
        detail = nfl_detail(
            {
                "name": "passingYards",
                "leaders": [
                    {"displayValue": "25/35, 300 YDS, 3 TD, 1 INT", "athlete": {"displayName": "Patrick Mahomes"}, "team": {"id": "12"}},
                    {"displayValue": "20/30, 250 YDS, 2 TD", "athlete": {"displayName": "Josh Allen"}, "team": {"id": "2"}},
                ],
            },
            nfl_leader("rushingYards", "12", "Isiah Pacheco", "11 CAR, 107 YDS, 1 TD"),
            nfl_leader("receivingYards", "2", "Khalil Shakir", "5 REC, 87 YDS"),
            nfl_leader("sacks", "2", "Von Miller", "2 SACK"),
        )

        envelope, _, mock_boxscore = _run(
            "NFL", {"events": [scoreboard_event("401", "post", **NFL_TEAMS)]}, detail=detail
        )

        self.assertEqual(
            ["Patrick Mahomes", "Josh Allen", "Isiah Pacheco", "Khalil Shakir"],
            [record.name for record in envelope.data],
        )
        payload = envelope.data[0].to_payload()
        self.assertEqual(300, payload["passingYards"])
        self.assertEqual(3, payload["passingTDs"])
        self.assertEqual(1, payload["passingINTs"])
        self.assertEqual("KC", payload["team"])
        self.assertNotIn("points", payload)
        self.assertTrue(all(record.source == "real" for record in envelope.data))
        mock_boxscore.assert_not_called()

    def test_unmatched_strings_are_skipped_and_unknown_team_is_unk(self) -> None:
        detail = nfl_detail(
            nfl_leader("passingYards", "12", "Patrick Mahomes", "n/a"),
            nfl_leader("rushingYards", "99", "Somebody", "9 CAR, 60 YDS"),
        )

        envelope, _, _ = _run(
            "NFL", {"events": [scoreboard_event("401", "post", **NFL_TEAMS)]}, detail=detail
        )

        real = [record for record in envelope.data if record.source == "real"]
        self.assertEqual(["Somebody"], [record.name for record in real])
        self.assertEqual("UNK", real[0].team)

    def test_one_sided_leaders_add_missing_team_with_roster_name(self) -> None:
        detail = nfl_detail(
            nfl_leader("passingYards", "12", "Patrick Mahomes", "25/35, 300 YDS, 3 TD"),
            nfl_leader("rushingYards", "12", "Isiah Pacheco", "11 CAR, 107 YDS, 1 TD"),
        )
        boxscore = {
            "boxscore": {
                "players": [
                    {
                        "team": {"abbreviation": "BUF"},
                        "statistics": [
                            {
                                "name": "passing",
                                "athletes": [
                                    {"athlete": {"displayName": "Josh Allen", "position": {"abbreviation": "QB"}}}
                                ],
                            }
                        ],
                    }
                ]
            }
        }

        envelope, _, _ = _run(
            "NFL",
            {"events": [scoreboard_event("401", "post", **NFL_TEAMS)]},
            detail=detail,
            boxscore=boxscore,
        )

        self.assertEqual({"KC", "BUF"}, {record.team for record in envelope.data})
        buf = [record for record in envelope.data if record.team == "BUF"][0]
        self.assertEqual("Josh Allen", buf.name)
        self.assertEqual("synthesized", buf.source)
        self.assertGreaterEqual(buf.passing_yards, 150)
        yards = [record.yards for record in envelope.data]
        self.assertEqual(sorted(yards, reverse=True), yards)

    def test_trailing_real_leader_keeps_slot_for_their_team(self) -> None:
        detail = nfl_detail(
            {
                "name": "passingYards",
                "leaders": [
                    {"displayValue": "28/36, 320 YDS, 3 TD", "athlete": {"displayName": "Patrick Mahomes"}, "team": {"id": "12"}},
                    {"displayValue": "12/25, 100 YDS, 0 TD, 1 INT", "athlete": {"displayName": "Josh Allen"}, "team": {"id": "2"}},
                ],
            },
            nfl_leader("rushingYards", "12", "Isiah Pacheco", "19 CAR, 180 YDS, 2 TD"),
            {
                "name": "receivingYards",
                "leaders": [
                    {"displayValue": "9 REC, 150 YDS, 1 TD", "athlete": {"displayName": "Travis Kelce"}, "team": {"id": "12"}},
                    {"displayValue": "7 REC, 120 YDS", "athlete": {"displayName": "Rashee Rice"}, "team": {"id": "12"}},
                ],
            },
        )

        envelope, _, mock_boxscore = _run(
            "NFL", {"events": [scoreboard_event("401", "post", **NFL_TEAMS)]}, detail=detail
        )

        self.assertEqual(
            ["Patrick Mahomes", "Isiah Pacheco", "Travis Kelce", "Josh Allen"],
            [record.name for record in envelope.data],
        )
        self.assertTrue(all(record.source == "real" for record in envelope.data))
        mock_boxscore.assert_not_called()

    def test_competitor_level_leaders_imply_team(self) -> None:
        detail = {
            "competitions": [
                {
                    "competitors": [
                        {"team": {"id": "12"}, "leaders": [nfl_leader("passingYards", "12", "Patrick Mahomes", "25/35, 300 YDS, 3 TD")]},
                        {"team": {"id": "2"}, "leaders": [{"name": "rushingYards", "leaders": [{"displayValue": "12 CAR, 70 YDS", "athlete": {"displayName": "James Cook"}}]}]},
                    ]
                }
            ]
        }

        envelope, _, _ = _run(
            "NFL", {"events": [scoreboard_event("401", "post", **NFL_TEAMS)]}, detail=detail
        )

        self.assertEqual([("Patrick Mahomes", "KC"), ("James Cook", "BUF")], [(r.name, r.team) for r in envelope.data])


class SelectPerformersTests(unittest.TestCase):
    def _record(self, name: str, team: str, points: int, source: str = "real") -> PerformerRecord:
        return PerformerRecord(
            name=name,
            team=team,
            league="NBA",
            game="BOS @ LAL",
            game_id="401",
            is_live=False,
            source=source,
            points=points,
            rebounds=0,
            assists=0,
        )

    def test_plain_cut_when_both_teams_make_it(self) -> None:
        candidates = [
            self._record("Anthony Davis", "LAL", 25),
            self._record("Jayson Tatum", "BOS", 28),
            self._record("LeBron James", "LAL", 30),
        ]

        chosen = select_performers(candidates, event_dto(), NBA_PROFILE)

        self.assertEqual(["LeBron James", "Jayson Tatum"], [record.name for record in chosen])

    def test_never_exceeds_limit_after_swapping_in_missing_team(self) -> None:
        candidates = [
            self._record("LeBron James", "LAL", 40),
            self._record("Anthony Davis", "LAL", 35),
            self._record("Austin Reaves", "LAL", 20),
            self._record("BOS Top Scorer", "BOS", 18, source="synthesized"),
        ]

        chosen = select_performers(candidates, event_dto(), NBA_PROFILE)

        self.assertEqual(NBA_PROFILE.per_event_limit, len(chosen))
        self.assertEqual(["LeBron James", "BOS Top Scorer"], [record.name for record in chosen])


class FallbackTests(unittest.TestCase):
    def test_detail_failure_synthesizes_both_teams(self) -> None:
        envelope, _, _ = _run(
            "NFL", {"events": [scoreboard_event("401", "post", **NFL_TEAMS)]}, detail=FETCH_ERROR
        )

        self.assertEqual(["KC QB", "BUF QB"], [record.name for record in envelope.data])
        self.assertTrue(all(record.source == "synthesized" for record in envelope.data))

    def test_detail_exception_is_absorbed(self) -> None:
        envelope, _, _ = _run(
            "NBA", {"events": [scoreboard_event("401", "post")]}, detail=RuntimeError("boom")
        )

        self.assertTrue(envelope.success)
        self.assertEqual(["LAL Top Scorer", "BOS Top Scorer"], [record.name for record in envelope.data])

    def test_fallback_is_per_event(self) -> None:
        detail = {
            "boxscore": {
                "players": [
                    nba_team_box("LAL", [("LeBron James", "30", "8", "9")]),
                    nba_team_box("BOS", [("Jayson Tatum", "28", "7", "5")]),
                ]
            }
        }
        scoreboard = {"events": [scoreboard_event("1", "post"), scoreboard_event("2", "post")]}
        with patch("app.stats.pipeline.fetch_scoreboard", return_value=scoreboard), patch(
            "app.stats.pipeline.fetch_event_detail", side_effect=[detail, FETCH_ERROR]
        ):
            envelope = collect_league_stats("NBA", FINAL, rng=random.Random(1))

        sources = [(record.game_id, record.source) for record in envelope.data]
        self.assertEqual(
            [("1", "real"), ("1", "real"), ("2", "synthesized"), ("2", "synthesized")],
            sources,
        )

    def test_scoreboard_failure_is_absorbed(self) -> None:
        envelope, mock_detail, _ = _run("NBA", FETCH_ERROR)

        self.assertEqual(
            {"success": True, "data": [], "source": "espn", "hasLiveGames": False},
            envelope.to_payload(),
        )
        mock_detail.assert_not_called()


if __name__ == "__main__":
    unittest.main()
