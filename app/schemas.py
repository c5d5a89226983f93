from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

NBA_METRICS = ("points", "rebounds", "assists")
NFL_METRICS = (
    "passing_yards",
    "passing_tds",
    "passing_ints",
    "completions",
    "attempts",
    "rushing_yards",
    "rushing_tds",
    "rushing_attempts",
    "receiving_yards",
    "receiving_tds",
    "receiving_catches",
)
NFL_YARDAGE = ("passing_yards", "rushing_yards", "receiving_yards")


class PerformerRecord(BaseModel):
    """A single top performer, serialized with the dashboard's camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    name: str
    team: str
    league: Literal["NBA", "NFL"]
    game: str
    game_id: str
    is_live: bool = False
    source: Literal["real", "synthesized"] = "real"

    points: Optional[int] = None
    rebounds: Optional[int] = None
    assists: Optional[int] = None

    passing_yards: Optional[int] = None
    passing_tds: Optional[int] = Field(default=None, alias="passingTDs")
    passing_ints: Optional[int] = Field(default=None, alias="passingINTs")
    completions: Optional[int] = None
    attempts: Optional[int] = None
    rushing_yards: Optional[int] = None
    rushing_tds: Optional[int] = Field(default=None, alias="rushingTDs")
    rushing_attempts: Optional[int] = None
    receiving_yards: Optional[int] = None
    receiving_tds: Optional[int] = Field(default=None, alias="receivingTDs")
    receiving_catches: Optional[int] = None

    @model_validator(mode="after")
    def _check_metric_set(self) -> "PerformerRecord":
        other = NFL_METRICS if self.league == "NBA" else NBA_METRICS
        if any(getattr(self, field) is not None for field in other):
            raise ValueError(f"{self.league} record carries metrics of another league")
        if self.league == "NBA" and any(getattr(self, field) is None for field in NBA_METRICS):
            raise ValueError("NBA record requires points, rebounds and assists")
        if self.league == "NFL" and all(getattr(self, field) is None for field in NFL_YARDAGE):
            raise ValueError("NFL record requires at least one yardage field")
        return self

    @property
    def yards(self) -> int:
        return self.passing_yards or self.rushing_yards or self.receiving_yards or 0

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class StatsEnvelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    data: list[PerformerRecord] = Field(default_factory=list)
    source: str = "espn"
    has_live_games: bool = Field(default=False, alias="hasLiveGames")

    def to_payload(self) -> dict:
        return {
            "success": self.success,
            "data": [record.to_payload() for record in self.data],
            "source": self.source,
            "hasLiveGames": self.has_live_games,
        }


class CombinedEnvelope(BaseModel):
    success: bool = True
    data: list[dict] = Field(default_factory=list)
    nba: dict
    nfl: dict

    def to_payload(self) -> dict:
        return self.model_dump()
