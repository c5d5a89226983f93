"""Leagues served by the dashboard and where ESPN keeps them."""

# league key -> (ESPN sport segment, ESPN league segment)
LEAGUES: dict[str, tuple[str, str]] = {
    "NBA": ("basketball", "nba"),
    "NFL": ("football", "nfl"),
}
LEAGUE_PATHS: dict[str, str] = {
    key: f"sports/{sport}/{league}" for key, (sport, league) in LEAGUES.items()
}


def get_league_path(league_key: str) -> str | None:
    """ESPN path for a league key such as "nba"; None when unsupported."""
    return LEAGUE_PATHS.get(league_key.strip().upper())
