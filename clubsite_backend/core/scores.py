# clubsite_backend/core/scores.py
"""
Match score as an explicit sum type.

Either a match has not been played yet (`Unplayed`) or it has a final
result (`Played`). Storage keeps two nullable integer columns; everything
that needs the result goes through `score_from_columns`.
"""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Unplayed:
    pass


@dataclass(frozen=True)
class Played:
    home: int
    away: int

    def __post_init__(self):
        if self.home < 0 or self.away < 0:
            raise ValueError(f"Scores must be non-negative, got {self.home}-{self.away}.")

    @property
    def home_won(self) -> bool:
        return self.home > self.away

    @property
    def away_won(self) -> bool:
        return self.away > self.home

    @property
    def is_draw(self) -> bool:
        return self.home == self.away


Score = Union[Unplayed, Played]

UNPLAYED = Unplayed()


def score_from_columns(score_home: Optional[int], score_away: Optional[int]) -> Score:
    """Unplayed unless both sides have a score."""
    if score_home is None or score_away is None:
        return UNPLAYED
    return Played(int(score_home), int(score_away))
