"""
Helpers that create club data through the MatchStore for tests.
All of them are coroutines; run them inside asyncio.run().
"""
from __future__ import annotations

from typing import Iterable, Optional, Tuple

from clubsite_backend.models.competition_model import Competition, CompetitionFormat, Round
from clubsite_backend.models.match_model import FriendlyMatch, Match
from clubsite_backend.models.team_model import Team

CLUB_ID = "club-1"


async def add_teams(store, names: dict, club_id: str = CLUB_ID, logos: Optional[dict] = None):
    logos = logos or {}
    for team_id, name in names.items():
        await store.add_team(Team(club_id=club_id, id=team_id, name=name, logo_url=logos.get(team_id)))


async def add_competition(
    store,
    competition_id: str,
    team_ids: Iterable[str],
    fmt: str = "league",
    name: Optional[str] = None,
    club_id: str = CLUB_ID,
    rank_labels=None,
):
    return await store.add_competition(Competition(
        club_id=club_id,
        id=competition_id,
        name=name or competition_id,
        season="2024",
        format=CompetitionFormat(fmt),
        teams=list(team_ids),
        rank_labels=rank_labels,
    ))


async def add_round(store, competition_id: str, round_id: str, name: str, club_id: str = CLUB_ID):
    return await store.add_round(Round(club_id=club_id, id=round_id, competition_id=competition_id, name=name))


def make_match(
    match_id: str,
    home: str,
    away: str,
    score: Optional[Tuple[int, int]] = None,
    competition_id: str = "league",
    round_id: str = "r1",
    match_date: str = "2024-04-07",
    club_id: str = CLUB_ID,
    **extra,
) -> Match:
    return Match(
        club_id=club_id,
        id=match_id,
        competition_id=competition_id,
        round_id=round_id,
        home_team=home,
        away_team=away,
        match_date=match_date,
        score_home=score[0] if score else None,
        score_away=score[1] if score else None,
        **extra,
    )


async def add_match(store, match_id, home, away, score=None, competition_id="league", round_id="r1", **extra):
    return await store.save_match(
        make_match(match_id, home, away, score, competition_id=competition_id, round_id=round_id, **extra)
    )


def make_friendly(
    match_id: str,
    home: str,
    away: str,
    score: Optional[Tuple[int, int]] = None,
    match_date: str = "2024-02-11",
    club_id: str = CLUB_ID,
    **extra,
) -> FriendlyMatch:
    return FriendlyMatch(
        club_id=club_id,
        id=match_id,
        home_team=home,
        away_team=away,
        match_date=match_date,
        score_home=score[0] if score else None,
        score_away=score[1] if score else None,
        **extra,
    )


async def add_friendly(store, match_id, home, away, score=None, **extra):
    return await store.save_friendly_match(make_friendly(match_id, home, away, score, **extra))


async def scenario_a(store):
    """Teams A, B, C in one league round: A 2-1 B, B 0-0 C."""
    await add_teams(store, {"A": "A", "B": "B", "C": "C"})
    await add_competition(store, "league", ["A", "B", "C"], fmt="league", name="市民リーグ")
    await add_round(store, "league", "r1", "第1節")
    await add_match(store, "m1", "A", "B", (2, 1))
    await add_match(store, "m2", "B", "C", (0, 0))
