"""Per-sport configuration for the top performers pipeline."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable

from app.schemas import PerformerRecord
from app.stats.synthesizer import basketball_metrics, football_metrics
from app.stats.text_parser import LEADER_PATTERNS, LeaderPattern


@dataclass(frozen=True)
class BoxMetric:
    name: str
    labels: tuple[str, ...]
    fallback_index: int


@dataclass(frozen=True)
class SportProfile:
    league: str
    rank_key: Callable[[PerformerRecord], int]
    per_event_limit: int
    synthesize: Callable[[int, random.Random], dict[str, int]]
    default_label: str
    box_metrics: tuple[BoxMetric, ...] = ()
    box_per_team: int = 2
    leader_patterns: dict[str, LeaderPattern] = field(default_factory=dict)
    leaders_per_category: int = 2
    roster_group: str | None = None
    roster_position: str | None = None

    @property
    def primary_metric(self) -> str | None:
        return self.box_metrics[0].name if self.box_metrics else None


NBA_PROFILE = SportProfile(
    league="NBA",
    rank_key=lambda record: record.points or 0,
    per_event_limit=2,
    synthesize=basketball_metrics,
    default_label="{team} Top Scorer",
    box_metrics=(
        BoxMetric("points", ("PTS", "points"), 0),
        BoxMetric("rebounds", ("REB", "rebounds"), 1),
        BoxMetric("assists", ("AST", "assists"), 2),
    ),
)

NFL_PROFILE = SportProfile(
    league="NFL",
    rank_key=lambda record: record.yards,
    per_event_limit=4,
    synthesize=football_metrics,
    default_label="{team} QB",
    leader_patterns=LEADER_PATTERNS,
    roster_group="passing",
    roster_position="QB",
)

PROFILES: dict[str, SportProfile] = {
    profile.league: profile for profile in (NBA_PROFILE, NFL_PROFILE)
}


def get_profile(league_key: str) -> SportProfile:
    profile = PROFILES.get(league_key.upper())
    if profile is None:
        raise ValueError(f"Unsupported league key: {league_key}")
    return profile
