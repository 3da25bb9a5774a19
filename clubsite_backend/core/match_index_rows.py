# clubsite_backend/core/match_index_rows.py
"""
Builds public match index rows from raw match records.

A row is a plain dict holding only the fields that have a value (absent
keys are left out, never written as empty), except the two score columns
which are always present and None while the match is unplayed.
"""

import logging
import re
from datetime import date, datetime
from typing import Any, Mapping, Optional

import pytz

from clubsite_backend.core.config import MATCH_DATE_TIMEZONE
from clubsite_backend.core.exceptions import InvalidIndexKeyError
from clubsite_backend.models.match_index_model import INDEX_KEY_DELIMITER, INDEX_META_ID
from clubsite_backend.models.team_model import TeamInfo

logger = logging.getLogger(__name__)

# Synthetic ids for matches that live outside any competition
FRIENDLY_COMPETITION_ID = "friendly"
PRACTICE_COMPETITION_ID = "practice"
SINGLE_ROUND_ID = "single"

# Default labels shown on the public site
FRIENDLY_COMPETITION_LABEL = "親善試合"
PRACTICE_COMPETITION_LABEL = "練習試合"
SINGLE_ROUND_LABEL = "単発"

_DATE_ONLY_PATTERN = re.compile(r"^(\d{4})[-/.](\d{1,2})[-/.](\d{1,2})$")

SCORE_FIELDS = ("score_home", "score_away")


# ---------------------------------------------
# Date normalization
# ---------------------------------------------
def _datetime_to_date_string(value: datetime, tz_name: str) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(pytz.timezone(tz_name))
    return value.date().isoformat()


def _normalize_date_string(text: str, tz_name: str) -> str:
    text = text.strip()
    if not text:
        return ""

    # Date-only strings are kept exactly as written once they prove to be real dates
    m = _DATE_ONLY_PATTERN.match(text)
    if m:
        try:
            date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        except ValueError:
            return ""
        return text

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return ""
    return _datetime_to_date_string(parsed, tz_name)


def match_date_sort_key(text: Optional[str]) -> date:
    """Calendar date of a normalized match date string (date.min when unreadable)."""
    m = _DATE_ONLY_PATTERN.match((text or "").strip())
    if not m:
        return date.min
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return date.min


def normalize_match_date(value: Any, tz_name: str = MATCH_DATE_TIMEZONE) -> str:
    """
    Reduce whatever was stored as a match date to a plain date string.

    Accepts:
    - objects exposing to_date()/toDate() (e.g. store timestamps)
    - datetime (aware values are converted to tz_name first) and date
    - strings: date-only strings are returned trimmed, ISO datetimes give
      their ISO date

    Returns "" for anything that cannot be read as a date.
    """
    if value is None:
        return ""

    for attr in ("to_date", "toDate"):
        converter = getattr(value, attr, None)
        if callable(converter):
            try:
                value = converter()
            except (TypeError, ValueError):
                return ""
            break

    if isinstance(value, datetime):
        return _datetime_to_date_string(value, tz_name)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return _normalize_date_string(value, tz_name)
    return ""


# ---------------------------------------------
# Keys
# ---------------------------------------------
def build_index_key(competition_id: str, round_id: str, match_id: str) -> str:
    """
    Document-style key "{competitionId}__{roundId}__{matchId}".
    Components must be non-empty, must not contain the delimiter and must not
    be the reserved meta id.
    """
    parts = (competition_id, round_id, match_id)
    for part in parts:
        if not isinstance(part, str) or not part:
            raise InvalidIndexKeyError(f"Empty index key component in {parts!r}.")
        if INDEX_KEY_DELIMITER in part:
            raise InvalidIndexKeyError(f"Index key component {part!r} contains '{INDEX_KEY_DELIMITER}'.")
        if part == INDEX_META_ID:
            raise InvalidIndexKeyError(f"Index key component {part!r} is reserved.")
    return INDEX_KEY_DELIMITER.join(parts)


# ---------------------------------------------
# Row building
# ---------------------------------------------
def strip_unset(row: Mapping[str, Any]) -> dict:
    """Drop keys without a value. Score columns are kept even when None."""
    return {k: v for k, v in row.items() if v is not None or k in SCORE_FIELDS}


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _score(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    return None


def _team_display(team_lookup: Mapping[str, TeamInfo], team_id: Any, fallback_name: Any, fallback_logo: Any):
    """Live team record first, then what was copied onto the match."""
    info = team_lookup.get(team_id) if isinstance(team_id, str) else None
    name = (info.name if info else None) or _text(fallback_name)
    logo = (info.logo_url if info else None) or _text(fallback_logo)
    return name, logo


def build_index_row(
    match: Mapping[str, Any],
    team_lookup: Mapping[str, TeamInfo],
    *,
    competition_id: str,
    round_id: str,
    competition_name: Optional[str] = None,
    round_name: Optional[str] = None,
) -> Optional[dict]:
    """
    Map one raw match (a dict of match columns, including "id") to one index row.

    Returns None when the match date cannot be normalized; such a match never
    reaches the index. Raises InvalidIndexKeyError for unusable key components.
    """
    match_id = match.get("id")
    build_index_key(competition_id, round_id, match_id)

    match_date = normalize_match_date(match.get("match_date"))
    if not match_date:
        logger.debug("Dropping match %s from index: unusable match date %r", match_id, match.get("match_date"))
        return None

    home_name, home_logo = _team_display(
        team_lookup, match.get("home_team"), match.get("home_team_name"), match.get("home_team_logo")
    )
    away_name, away_logo = _team_display(
        team_lookup, match.get("away_team"), match.get("away_team_name"), match.get("away_team_logo")
    )

    return strip_unset({
        "match_id": match_id,
        "competition_id": competition_id,
        "round_id": round_id,
        "match_date": match_date,
        "match_time": _text(match.get("match_time")),
        "competition_name": _text(competition_name),
        "round_name": _text(round_name),
        "home_team": _text(match.get("home_team")),
        "away_team": _text(match.get("away_team")),
        "home_team_name": home_name,
        "away_team_name": away_name,
        "home_team_logo": home_logo,
        "away_team_logo": away_logo,
        "score_home": _score(match.get("score_home")),
        "score_away": _score(match.get("score_away")),
    })


def friendly_competition_id(match: Mapping[str, Any]) -> str:
    if match.get("competition_id") == PRACTICE_COMPETITION_ID:
        return PRACTICE_COMPETITION_ID
    return FRIENDLY_COMPETITION_ID


def build_friendly_index_row(match: Mapping[str, Any], team_lookup: Mapping[str, TeamInfo]) -> Optional[dict]:
    """
    Friendly and practice matches get synthetic ids ("friendly"/"practice",
    round "single") and default labels unless the match sets its own.
    """
    competition_id = friendly_competition_id(match)
    default_label = (
        PRACTICE_COMPETITION_LABEL if competition_id == PRACTICE_COMPETITION_ID else FRIENDLY_COMPETITION_LABEL
    )
    return build_index_row(
        match,
        team_lookup,
        competition_id=competition_id,
        round_id=SINGLE_ROUND_ID,
        competition_name=_text(match.get("competition_name")) or default_label,
        round_name=_text(match.get("round_name")) or SINGLE_ROUND_LABEL,
    )
