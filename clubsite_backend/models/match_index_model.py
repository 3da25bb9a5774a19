# match_index_model.py
# Defines the public match index: a flat, denormalized copy of every match a
# club has (competition matches and friendlies), plus one meta record per club.

from typing import Optional
from sqlmodel import SQLModel, Field


# Delimiter used by the document-style key "{competitionId}__{roundId}__{matchId}"
INDEX_KEY_DELIMITER = "__"

# Reserved key of the meta record; never valid as a key component
INDEX_META_ID = "_meta"

# Columns a row may carry besides the key (everything the row builder emits)
INDEX_ROW_FIELDS = (
    "match_date",
    "match_time",
    "competition_name",
    "round_name",
    "home_team",
    "away_team",
    "home_team_name",
    "away_team_name",
    "home_team_logo",
    "away_team_logo",
    "score_home",
    "score_away",
)


class PublicMatchIndexRow(SQLModel, table=True):
    """
    One flattened match. Rebuildable at any time from the match tables;
    no row is authoritative.
    """
    __tablename__ = "public_match_index"

    club_id: str = Field(primary_key=True)
    competition_id: str = Field(primary_key=True)
    round_id: str = Field(primary_key=True)
    match_id: str = Field(primary_key=True)

    match_date: str = Field(index=True)
    match_time: Optional[str] = None
    competition_name: Optional[str] = None
    round_name: Optional[str] = None

    home_team: Optional[str] = Field(default=None, index=True)
    away_team: Optional[str] = Field(default=None, index=True)
    home_team_name: Optional[str] = None
    away_team_name: Optional[str] = None
    home_team_logo: Optional[str] = None
    away_team_logo: Optional[str] = None

    score_home: Optional[int] = None
    score_away: Optional[int] = None

    @property
    def index_key(self) -> str:
        return INDEX_KEY_DELIMITER.join((self.competition_id, self.round_id, self.match_id))


class PublicMatchIndexMeta(SQLModel, table=True):
    """Bookkeeping for the last full backfill of a club's index."""
    __tablename__ = "public_match_index_meta"

    club_id: str = Field(primary_key=True)
    updated_at: str
    count: int = 0
