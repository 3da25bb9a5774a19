# competition_model.py
# Defines Competition (league / cup / league_cup) and its Rounds.

from typing import Optional, List, Dict, Any
from enum import Enum
from sqlalchemy import ForeignKeyConstraint
from sqlmodel import SQLModel, Field, JSON, Column
from clubsite_backend.models.team_model import new_id


class CompetitionFormat(str, Enum):
    """How a competition is played (drives whether standings exist)"""
    LEAGUE = "league"            # Every round counts toward the table
    CUP = "cup"                  # Knockout only, no table
    LEAGUE_CUP = "league_cup"    # Table built from matchday rounds only ("第N節")


class RankLabelColor(str, Enum):
    """Colours a rank band can be highlighted with on the public table"""
    GREEN = "green"
    RED = "red"
    ORANGE = "orange"
    BLUE = "blue"
    YELLOW = "yellow"


class Competition(SQLModel, table=True):
    """
    A competition a club takes part in, for one season.
    `teams` lists the team ids that get a row in the standings.
    """
    club_id: str = Field(primary_key=True)
    id: str = Field(default_factory=new_id, primary_key=True)

    name: str
    season: Optional[str] = None
    format: CompetitionFormat = Field(default=CompetitionFormat.LEAGUE)
    logo_url: Optional[str] = None

    teams: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    # [{"from": 1, "to": 2, "color": "green"}, ...]
    rank_labels: Optional[List[Dict[str, Any]]] = Field(default=None, sa_column=Column(JSON))


class Round(SQLModel, table=True):
    """
    A round (matchday or knockout stage) inside a competition.
    The name is for display; only league_cup standings look at it.
    """
    __table_args__ = (
        ForeignKeyConstraint(
            ["club_id", "competition_id"],
            ["competition.club_id", "competition.id"],
        ),
    )

    club_id: str = Field(primary_key=True)
    id: str = Field(default_factory=new_id, primary_key=True)
    competition_id: str = Field(index=True)

    name: str = ""

