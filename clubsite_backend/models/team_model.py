# team_model.py
# Defines the Team model. Teams belong to a club and are referenced by id
# from competitions and matches.

from typing import Optional
from uuid import uuid4
from sqlmodel import SQLModel, Field


def new_id() -> str:
    """Generates a fresh string id for club-scoped records."""
    return uuid4().hex


class Team(SQLModel, table=True):
    """A team owned by a club (the club's own squads and its opponents)."""
    club_id: str = Field(primary_key=True)
    id: str = Field(default_factory=new_id, primary_key=True)

    name: str
    logo_url: Optional[str] = None


class TeamInfo(SQLModel):
    """Display data used to resolve team names/logos by id."""
    name: str = ""
    logo_url: Optional[str] = None
