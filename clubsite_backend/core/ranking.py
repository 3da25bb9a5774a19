# clubsite_backend/core/ranking.py
"""
Tie-break ranker for league tables.

Turns per-team tallies into a fully ordered, ranked table:

1) points (3 per win, 1 per draw) descending
2) goal difference descending
3) goals scored descending
4) team name ascending

Rank is the 1-based position after sorting, so teams that tie on every
criterion still get distinct ranks (decided by name).
"""

import unicodedata
from dataclasses import dataclass, asdict
from typing import Iterable, List, Optional

POINTS_PER_WIN = 3
POINTS_PER_DRAW = 1


@dataclass
class TeamTally:
    """Running win/draw/loss and goal totals for one team."""
    team_id: str
    team_name: str
    logo_url: Optional[str] = None
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0


@dataclass(frozen=True)
class RankedStanding:
    """A tally with every derived column filled in and its final rank."""
    team_id: str
    team_name: str
    logo_url: Optional[str]
    rank: int
    played: int
    wins: int
    draws: int
    losses: int
    goals_for: int
    goals_against: int
    goal_difference: int
    points: int

    def as_dict(self) -> dict:
        return asdict(self)


def calculate_points(wins: int, draws: int) -> int:
    return wins * POINTS_PER_WIN + draws * POINTS_PER_DRAW


def team_name_sort_key(name: str) -> tuple:
    """
    Collation key for team names: compatibility-normalized and case-folded
    first (so "ＦＣ東京" and "FC東京" sort together), raw text last so the
    order stays total.
    """
    text = name or ""
    return (unicodedata.normalize("NFKC", text).casefold(), text)


def _sort_key(line: RankedStanding) -> tuple:
    return (-line.points, -line.goal_difference, -line.goals_for, team_name_sort_key(line.team_name))


def rank_standings(tallies: Iterable[TeamTally]) -> List[RankedStanding]:
    """
    Derive points/goal difference/played for each tally and rank them.
    Pure: the input tallies are not modified.
    """
    derived = [
        RankedStanding(
            team_id=t.team_id,
            team_name=t.team_name,
            logo_url=t.logo_url,
            rank=0,
            played=t.wins + t.draws + t.losses,
            wins=t.wins,
            draws=t.draws,
            losses=t.losses,
            goals_for=t.goals_for,
            goals_against=t.goals_against,
            goal_difference=t.goals_for - t.goals_against,
            points=calculate_points(t.wins, t.draws),
        )
        for t in tallies
    ]

    # team_id breaks the (practically impossible) full tie so input order never matters
    derived.sort(key=lambda line: (_sort_key(line), line.team_id))

    return [
        RankedStanding(**{**line.as_dict(), "rank": index + 1})
        for index, line in enumerate(derived)
    ]
