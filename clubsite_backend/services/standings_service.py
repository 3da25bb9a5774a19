# clubsite_backend/services/standings_service.py
# Recalculates, hand-edits and serves competition league tables.

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional

from clubsite_backend.core.exceptions import CompetitionNotFoundError
from clubsite_backend.core.ranking import RankedStanding
from clubsite_backend.core.standings import (
    UNKNOWN_TEAM_NAME,
    RoundResults,
    build_standings,
    ensure_standings_enabled,
    rerank_edited_standings,
)
from clubsite_backend.models.competition_model import Competition, RankLabelColor
from clubsite_backend.models.standing_model import Standing, StandingEdit
from clubsite_backend.services.match_store import MatchStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("wins", "draws", "losses", "goals_for", "goals_against")
RANK_LABEL_COLORS = {c.value for c in RankLabelColor}


async def load_competition(store: MatchStore, club_id: str, competition_id: str) -> Competition:
    competition = await store.get_competition(club_id, competition_id)
    if competition is None:
        raise CompetitionNotFoundError(club_id, competition_id)
    return competition


async def load_round_results(store: MatchStore, club_id: str, competition_id: str) -> List[RoundResults]:
    """All rounds of a competition with their matches (match reads run concurrently)."""
    rounds = await store.list_rounds(club_id, competition_id)
    matches_by_round = await asyncio.gather(
        *(store.list_matches(club_id, competition_id, r.id) for r in rounds)
    )
    return [RoundResults(name=r.name, matches=matches) for r, matches in zip(rounds, matches_by_round)]


async def compute_standings(store: MatchStore, competition: Competition) -> List[RankedStanding]:
    """Aggregate the table from match results without saving it."""
    # Refuse cup before touching any match data
    ensure_standings_enabled(competition.id, competition.format)

    team_lookup, rounds = await asyncio.gather(
        store.team_lookup(competition.club_id),
        load_round_results(store, competition.club_id, competition.id),
    )
    return build_standings(
        competition.id,
        competition.format,
        competition.teams or [],
        team_lookup,
        rounds,
    )


# =========================================
# FULL RECALCULATION
# =========================================
async def recalculate_standings(store: MatchStore, club_id: str, competition_id: str) -> List[RankedStanding]:
    """
    Rebuild a competition's table from all its matches and replace the saved
    table in one transaction.

    Raises:
        CompetitionNotFoundError: unknown competition.
        StandingsNotApplicableError: cup competitions have no table.
    """
    competition = await load_competition(store, club_id, competition_id)
    standings = await compute_standings(store, competition)

    await store.replace_standings(club_id, competition_id, [s.as_dict() for s in standings])
    logger.info(
        "Recalculated standings for club %s competition %s (%d teams)",
        club_id, competition_id, len(standings),
    )
    return standings


# =========================================
# MANUAL OVERRIDE
# =========================================
async def apply_manual_standings_edit(
    store: MatchStore,
    club_id: str,
    competition_id: str,
    edits: Iterable[StandingEdit],
) -> List[RankedStanding]:
    """
    Apply hand-edited tallies over the saved table, re-derive played, points
    and goal difference, re-rank and save. Matches are never read here.

    Every declared team gets a row: teams without a saved row start from
    zero. Edits for teams outside the competition are ignored.
    """
    competition = await load_competition(store, club_id, competition_id)
    ensure_standings_enabled(competition_id, competition.format)

    saved = {s.team_id: s for s in await store.list_standings(club_id, competition_id)}
    team_lookup = await store.team_lookup(club_id)

    for team_id in competition.teams or []:
        if team_id not in saved:
            info = team_lookup.get(team_id)
            saved[team_id] = Standing(
                club_id=club_id,
                competition_id=competition_id,
                team_id=team_id,
                team_name=(info.name if info and info.name else UNKNOWN_TEAM_NAME),
                logo_url=info.logo_url if info else None,
            )

    for edit in edits:
        row = saved.get(edit.team_id)
        if row is None:
            logger.warning(
                "Ignoring standings edit for team %s not in competition %s", edit.team_id, competition_id
            )
            continue

        for field_name in EDITABLE_FIELDS:
            value = getattr(edit, field_name)
            if value is not None:
                setattr(row, field_name, value)

    standings = rerank_edited_standings(saved.values())
    await store.replace_standings(club_id, competition_id, [s.as_dict() for s in standings])
    logger.info("Saved manual standings edit for club %s competition %s", club_id, competition_id)
    return standings


# =========================================
# PUBLIC READ
# =========================================
def sanitize_rank_labels(raw: Any) -> List[Dict[str, Any]]:
    """
    Keep only well-formed rank bands: positive integer bounds with from <= to
    and a known colour.
    """
    if not isinstance(raw, list):
        return []

    labels = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        try:
            start = int(item.get("from"))
            end = int(item.get("to"))
        except (TypeError, ValueError):
            continue
        color = item.get("color")
        if start > 0 and end > 0 and start <= end and color in RANK_LABEL_COLORS:
            labels.append({"from": start, "to": end, "color": color})
    return labels


def _saved_row_payload(row: Standing, team_lookup) -> Dict[str, Any]:
    info = team_lookup.get(row.team_id)
    return {
        "team_id": row.team_id,
        "rank": row.rank,
        "team_name": (info.name if info and info.name else None) or row.team_name or UNKNOWN_TEAM_NAME,
        "logo_url": (info.logo_url if info else None) or row.logo_url,
        "played": row.played,
        "wins": row.wins,
        "draws": row.draws,
        "losses": row.losses,
        "goals_for": row.goals_for,
        "goals_against": row.goals_against,
        "goal_difference": row.goal_difference,
        "points": row.points,
    }


async def get_public_standings(store: MatchStore, club_id: str, competition_id: str) -> Dict[str, Any]:
    """
    Table for the public site.
    - Saved standings (recalculated or hand-edited) win when present.
    - Otherwise the table is computed on the fly from matches (not saved).
    """
    competition = await load_competition(store, club_id, competition_id)
    ensure_standings_enabled(competition_id, competition.format)

    payload: Dict[str, Any] = {
        "competition": {
            "id": competition.id,
            "name": competition.name or "",
            "season": competition.season,
            "logo_url": competition.logo_url,
        },
        "rank_labels": sanitize_rank_labels(competition.rank_labels),
        "standings": [],
        "error_message": None,
    }

    if not competition.teams:
        payload["error_message"] = "No teams are registered for this competition."
        return payload

    saved, team_lookup = await asyncio.gather(
        store.list_standings(club_id, competition_id),
        store.team_lookup(club_id),
    )
    if saved:
        rows = [_saved_row_payload(row, team_lookup) for row in saved]
        rows.sort(key=lambda r: r["rank"])
        payload["standings"] = rows
        return payload

    payload["standings"] = [s.as_dict() for s in await compute_standings(store, competition)]
    return payload


def standings_to_payload(standings: Optional[List[RankedStanding]]) -> List[Dict[str, Any]]:
    return [s.as_dict() for s in standings or []]
