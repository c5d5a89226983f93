from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)
_SETTINGS: Settings | None = None

GAME_STATES = ("final", "live")


@dataclass(frozen=True)
class Settings:
    espn_base_url: str = "https://site.api.espn.com"
    espn_timeout_seconds: int = 12
    game_state: str = "final"
    max_events: int = 5
    static_dir: str = "static"
    cors_allow_origins: tuple[str, ...] = ("*",)


def _int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ValueError(f"{name} must be >= 1, got {value}")
    return value


def _parse_game_state(raw: str | None) -> str:
    value = (raw or "final").strip().lower()
    if value not in GAME_STATES:
        raise ValueError(
            f"STATS_GAME_STATE must be one of {', '.join(GAME_STATES)}, got {value!r}"
        )
    return value


def _parse_origins(raw: str | None) -> tuple[str, ...]:
    origins = tuple(origin.strip() for origin in (raw or "*").split(",") if origin.strip())
    return origins or ("*",)


def load_settings() -> Settings:
    return Settings(
        espn_base_url=os.getenv("ESPN_BASE_URL", "https://site.api.espn.com").rstrip("/"),
        espn_timeout_seconds=_int_env("ESPN_TIMEOUT_SECONDS", 12),
        game_state=_parse_game_state(os.getenv("STATS_GAME_STATE")),
        max_events=_int_env("STATS_MAX_EVENTS", 5),
        static_dir=os.getenv("STATIC_DIR", "static"),
        cors_allow_origins=_parse_origins(os.getenv("CORS_ALLOW_ORIGINS")),
    )


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is not None:
        return _SETTINGS
    _SETTINGS = load_settings()
    logger.info(
        "Settings loaded: game_state=%s max_events=%s espn_base_url=%s",
        _SETTINGS.game_state,
        _SETTINGS.max_events,
        _SETTINGS.espn_base_url,
    )
    return _SETTINGS
