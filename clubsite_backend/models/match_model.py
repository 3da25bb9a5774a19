# match_model.py
# Defines Match (nested under competition -> round) and FriendlyMatch
# (flat collection of friendly/practice games), plus the request schemas
# admin handlers accept.

from typing import Optional
from sqlalchemy import ForeignKeyConstraint
from sqlmodel import SQLModel, Field
from clubsite_backend.core.scores import Score, score_from_columns
from clubsite_backend.models.team_model import new_id


class MatchFields(SQLModel):
    """
    Columns shared by competition matches and friendlies.
    A match with either score missing is unplayed.
    """
    home_team: str = ""
    away_team: str = ""

    # Kept as the raw string the admin entered ("2024-05-12" etc.)
    match_date: str = ""
    match_time: Optional[str] = None

    score_home: Optional[int] = Field(default=None, ge=0)
    score_away: Optional[int] = Field(default=None, ge=0)

    # Names/logos copied onto the match when it was written
    home_team_name: Optional[str] = None
    away_team_name: Optional[str] = None
    home_team_logo: Optional[str] = None
    away_team_logo: Optional[str] = None

    @property
    def score(self) -> Score:
        return score_from_columns(self.score_home, self.score_away)


class Match(MatchFields, table=True):
    """A fixture inside a competition round."""
    __table_args__ = (
        ForeignKeyConstraint(
            ["club_id", "round_id"],
            ["round.club_id", "round.id"],
        ),
    )

    club_id: str = Field(primary_key=True)
    id: str = Field(default_factory=new_id, primary_key=True)
    competition_id: str = Field(index=True)
    round_id: str = Field(index=True)


class FriendlyMatch(MatchFields, table=True):
    """
    A one-off friendly or practice game, stored outside any competition.
    competition_id is only ever "practice" (or unset, meaning friendly).
    """
    __tablename__ = "friendly_match"

    club_id: str = Field(primary_key=True)
    id: str = Field(default_factory=new_id, primary_key=True)

    competition_id: Optional[str] = None
    competition_name: Optional[str] = None
    round_name: Optional[str] = None


# -------------------------------
# Request schemas
# -------------------------------
class MatchCreate(SQLModel):
    """Payload for creating a competition match."""
    id: Optional[str] = None
    home_team: str
    away_team: str
    match_date: str
    match_time: Optional[str] = None
    score_home: Optional[int] = Field(default=None, ge=0)
    score_away: Optional[int] = Field(default=None, ge=0)
    home_team_name: Optional[str] = None
    away_team_name: Optional[str] = None
    home_team_logo: Optional[str] = None
    away_team_logo: Optional[str] = None


class MatchUpdate(SQLModel):
    """Partial update of a match. Only the fields sent are applied."""
    home_team: Optional[str] = None
    away_team: Optional[str] = None
    match_date: Optional[str] = None
    match_time: Optional[str] = None
    score_home: Optional[int] = Field(default=None, ge=0)
    score_away: Optional[int] = Field(default=None, ge=0)
    home_team_name: Optional[str] = None
    away_team_name: Optional[str] = None
    home_team_logo: Optional[str] = None
    away_team_logo: Optional[str] = None


class FriendlyMatchCreate(MatchCreate):
    competition_id: Optional[str] = None   # "practice" for practice games
    competition_name: Optional[str] = None
    round_name: Optional[str] = None


class FriendlyMatchUpdate(MatchUpdate):
    competition_id: Optional[str] = None
    competition_name: Optional[str] = None
    round_name: Optional[str] = None


# Fields whose change affects the league table
STANDINGS_FIELDS = {"home_team", "away_team", "score_home", "score_away"}
