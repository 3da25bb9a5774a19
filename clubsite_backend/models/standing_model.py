# standing_model.py
# Defines Standing (one league table row per team per competition) and the
# schemas for manual table edits.

from typing import Optional, List
from sqlmodel import SQLModel, Field


class Standing(SQLModel, table=True):
    """
    One row of a competition's league table.
    Fully derived from match results; the whole table is replaced on every
    recalculation.
    """
    club_id: str = Field(primary_key=True)
    competition_id: str = Field(primary_key=True)
    team_id: str = Field(primary_key=True)

    rank: int = 0
    team_name: str = ""
    logo_url: Optional[str] = None

    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    points: int = 0


class StandingEdit(SQLModel):
    """Hand-edited tallies for one team. Unset fields keep the saved value."""
    team_id: str
    wins: Optional[int] = Field(default=None, ge=0)
    draws: Optional[int] = Field(default=None, ge=0)
    losses: Optional[int] = Field(default=None, ge=0)
    goals_for: Optional[int] = Field(default=None, ge=0)
    goals_against: Optional[int] = Field(default=None, ge=0)


class StandingsEditRequest(SQLModel):
    edits: List[StandingEdit]
