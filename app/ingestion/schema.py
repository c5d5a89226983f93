"""Internal data contract for scoreboard events."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

GameState = Literal["scheduled", "live", "final", "unknown"]


class CompetitorDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    team_id: Optional[str] = None
    abbreviation: str
    home_away: Literal["home", "away"]
    score: int = 0


class EventDTO(BaseModel):
    """
    One scoreboard event, as seen during a single request.
    """

    model_config = ConfigDict(frozen=True)

    event_id: str
    league: str
    state: GameState
    home: CompetitorDTO
    away: CompetitorDTO

    @property
    def matchup(self) -> str:
        return f"{self.away.abbreviation} @ {self.home.abbreviation}"

    @property
    def competitors(self) -> tuple[CompetitorDTO, CompetitorDTO]:
        return (self.home, self.away)
