# clubsite_backend/core/standings.py
"""
Folds match results into league table tallies.

No I/O here: callers load the competition, its rounds and matches, and the
club's team lookup, then persist whatever `build_standings` returns.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from clubsite_backend.core.exceptions import StandingsNotApplicableError
from clubsite_backend.core.ranking import RankedStanding, TeamTally, rank_standings
from clubsite_backend.core.scores import Played
from clubsite_backend.models.competition_model import CompetitionFormat
from clubsite_backend.models.team_model import TeamInfo

UNKNOWN_TEAM_NAME = "Unknown Team"

# League matchday rounds are named "第1節", "第 12 節", ...
LEAGUE_ROUND_NAME_PATTERN = re.compile(r"^第\s*\d+\s*節$")


@dataclass
class RoundResults:
    """A round's name and the matches played (or scheduled) in it."""
    name: str
    matches: Sequence = field(default_factory=list)


def is_league_round_name(name) -> bool:
    if not isinstance(name, str):
        return False
    return bool(LEAGUE_ROUND_NAME_PATTERN.match(name.strip()))


def ensure_standings_enabled(competition_id: str, competition_format) -> CompetitionFormat:
    """
    Refuse cup competitions before any aggregation happens.
    Returns the format as a CompetitionFormat.
    """
    fmt = CompetitionFormat(competition_format)
    if fmt == CompetitionFormat.CUP:
        raise StandingsNotApplicableError(competition_id, fmt.value)
    return fmt


def select_standings_rounds(competition_format, rounds: Iterable[RoundResults]) -> List[RoundResults]:
    """league_cup only counts matchday rounds; league counts everything."""
    if CompetitionFormat(competition_format) == CompetitionFormat.LEAGUE_CUP:
        return [r for r in rounds if is_league_round_name(r.name)]
    return list(rounds)


def seed_tallies(team_ids: Iterable[str], team_lookup: Mapping[str, TeamInfo]) -> Dict[str, TeamTally]:
    """One zeroed tally per declared team, in declaration order."""
    tallies: Dict[str, TeamTally] = {}
    for team_id in team_ids:
        if team_id in tallies:
            continue
        info = team_lookup.get(team_id)
        tallies[team_id] = TeamTally(
            team_id=team_id,
            team_name=(info.name if info and info.name else UNKNOWN_TEAM_NAME),
            logo_url=info.logo_url if info else None,
        )
    return tallies


def _record_side(tally: Optional[TeamTally], scored: int, conceded: int) -> None:
    # Teams outside the declared list have no tally; only their side is skipped
    if tally is None:
        return
    tally.goals_for += scored
    tally.goals_against += conceded
    if scored > conceded:
        tally.wins += 1
    elif scored < conceded:
        tally.losses += 1
    else:
        tally.draws += 1


def apply_match(tallies: Dict[str, TeamTally], match) -> bool:
    """
    Add one match to the tallies. Unplayed matches are ignored.
    Returns True when the match counted.
    """
    score = match.score
    if not isinstance(score, Played):
        return False

    _record_side(tallies.get(match.home_team), score.home, score.away)
    _record_side(tallies.get(match.away_team), score.away, score.home)
    return True


def build_standings(
    competition_id: str,
    competition_format,
    team_ids: Sequence[str],
    team_lookup: Mapping[str, TeamInfo],
    rounds: Iterable[RoundResults],
) -> List[RankedStanding]:
    """
    Full recomputation of a competition's table from its matches.

    Steps:
    1. Refuse cup format.
    2. Seed a tally per declared team.
    3. Pick the rounds that count (league_cup: matchday rounds only).
    4. Fold every played match into the tallies.
    5. Rank.
    """
    fmt = ensure_standings_enabled(competition_id, competition_format)
    tallies = seed_tallies(team_ids, team_lookup)

    for round_results in select_standings_rounds(fmt, rounds):
        for match in round_results.matches:
            apply_match(tallies, match)

    return rank_standings(tallies.values())


def rerank_edited_standings(lines: Iterable) -> List[RankedStanding]:
    """
    Manual override path: take hand-edited rows (anything exposing team_id,
    team_name, logo_url, wins, draws, losses, goals_for, goals_against) and
    re-derive played/points/goal difference and rank. Match data is not read.
    """
    tallies = [
        TeamTally(
            team_id=line.team_id,
            team_name=line.team_name or UNKNOWN_TEAM_NAME,
            logo_url=line.logo_url,
            wins=line.wins,
            draws=line.draws,
            losses=line.losses,
            goals_for=line.goals_for,
            goals_against=line.goals_against,
        )
        for line in lines
    ]
    return rank_standings(tallies)
