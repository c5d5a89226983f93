"""Parse ESPN leader display strings such as "13/19, 183 YDS, 1 TD, 1 INT"."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeaderPattern:
    regex: re.Pattern[str]
    # record field -> regex group index; fields whose group did not match default to 0
    fields: dict[str, int]


LEADER_PATTERNS: dict[str, LeaderPattern] = {
    "passingYards": LeaderPattern(
        regex=re.compile(r"(\d+)/(\d+),\s*(\d+)\s*YDS,\s*(\d+)\s*TD(?:,\s*(\d+)\s*INT)?"),
        fields={
            "completions": 1,
            "attempts": 2,
            "passing_yards": 3,
            "passing_tds": 4,
            "passing_ints": 5,
        },
    ),
    "rushingYards": LeaderPattern(
        regex=re.compile(r"(\d+)\s*CAR,\s*(\d+)\s*YDS(?:,\s*(\d+)\s*TD)?"),
        fields={
            "rushing_attempts": 1,
            "rushing_yards": 2,
            "rushing_tds": 3,
        },
    ),
    "receivingYards": LeaderPattern(
        regex=re.compile(r"(\d+)\s*REC,\s*(\d+)\s*YDS(?:,\s*(\d+)\s*TD)?"),
        fields={
            "receiving_catches": 1,
            "receiving_yards": 2,
            "receiving_tds": 3,
        },
    ),
}


def parse_leader_value(
    category: str,
    display_value: str,
    patterns: dict[str, LeaderPattern] | None = None,
) -> dict[str, int] | None:
    """Return the metrics encoded in *display_value*, or None when it does not match."""

    table = LEADER_PATTERNS if patterns is None else patterns
    pattern = table.get(category)
    if pattern is None or not isinstance(display_value, str):
        return None
    match = pattern.regex.search(display_value)
    if match is None:
        logger.debug("Leader string did not match category=%s value=%r", category, display_value)
        return None
    return {field: int(match.group(group) or 0) for field, group in pattern.fields.items()}
