# admin_match_routes.py
# Admin API for creating/editing matches. Every mutation writes the match
# first, then keeps the public match index and the league table in step.

import logging

from fastapi import APIRouter, Depends, HTTPException

from clubsite_backend.core.database import get_store
from clubsite_backend.core.match_index_rows import friendly_competition_id, SINGLE_ROUND_ID
from clubsite_backend.models.competition_model import CompetitionFormat
from clubsite_backend.models.match_model import (
    FriendlyMatch,
    FriendlyMatchCreate,
    FriendlyMatchUpdate,
    Match,
    MatchCreate,
    MatchUpdate,
    STANDINGS_FIELDS,
)
from clubsite_backend.services.match_index_service import (
    ensure_public_match_index,
    sync_public_match_index_quietly,
)
from clubsite_backend.services.match_store import MatchStore
from clubsite_backend.services.standings_service import recalculate_standings, standings_to_payload

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------
# Helpers
# ---------------------------------------------
async def _load_competition_round(store: MatchStore, club_id: str, competition_id: str, round_id: str):
    competition = await store.get_competition(club_id, competition_id)
    if not competition:
        raise HTTPException(status_code=404, detail="Competition not found.")

    round_ = await store.get_round(club_id, round_id)
    if not round_ or round_.competition_id != competition_id:
        raise HTTPException(status_code=404, detail="Round not found in this competition.")
    return competition, round_


async def _refresh_standings_after_edit(store: MatchStore, competition, changed_fields) -> list | None:
    """
    Recalculate the table when a standings-relevant field changed.
    Cup competitions have no table, so nothing happens for them.
    A failure here is reported to the admin: the table must not silently go stale.
    """
    if not (STANDINGS_FIELDS & set(changed_fields)):
        return None
    if CompetitionFormat(competition.format) == CompetitionFormat.CUP:
        return None

    try:
        standings = await recalculate_standings(store, competition.club_id, competition.id)
    except Exception as exc:
        logger.exception("Standings recalculation failed for competition %s", competition.id)
        raise HTTPException(
            status_code=500,
            detail=f"Match saved, but recalculating standings failed: {exc}",
        ) from exc
    return standings_to_payload(standings)


# =========================================
# COMPETITION MATCHES
# =========================================
@router.post("/clubs/{club_id}/competitions/{competition_id}/rounds/{round_id}/matches")
async def create_match(
    club_id: str,
    competition_id: str,
    round_id: str,
    data: MatchCreate,
    store: MatchStore = Depends(get_store),
):
    """
    Create a match inside a round. A client-chosen id already in use is
    refused (409).
    1) Write the match
    2) Upsert its public index row (best-effort)
    3) Recalculate standings if it already has a score
    """
    competition, _ = await _load_competition_round(store, club_id, competition_id, round_id)

    fields = data.model_dump(exclude_unset=True)
    if not fields.get("id"):
        fields.pop("id", None)
    elif await store.get_match(club_id, fields["id"]):
        raise HTTPException(status_code=409, detail="A match with this id already exists.")
    match = await store.save_match(
        Match(club_id=club_id, competition_id=competition_id, round_id=round_id, **fields)
    )

    patch = match.model_dump(exclude={"club_id", "competition_id", "round_id"})
    index_synced = await sync_public_match_index_quietly(
        store, club_id, competition_id, round_id, match.id, patch
    )
    standings = await _refresh_standings_after_edit(
        store, competition, [k for k in ("score_home", "score_away") if patch.get(k) is not None]
    )

    return {
        "message": "Match created.",
        "match": match.model_dump(),
        "index_synced": index_synced,
        "standings": standings,
    }


@router.patch("/clubs/{club_id}/competitions/{competition_id}/rounds/{round_id}/matches/{match_id}")
async def update_match(
    club_id: str,
    competition_id: str,
    round_id: str,
    match_id: str,
    data: MatchUpdate,
    store: MatchStore = Depends(get_store),
):
    """Apply a partial update; only the fields sent are changed."""
    competition, _ = await _load_competition_round(store, club_id, competition_id, round_id)

    match = await store.get_match(club_id, match_id)
    if not match or match.competition_id != competition_id or match.round_id != round_id:
        raise HTTPException(status_code=404, detail="Match not found.")

    patch = data.model_dump(exclude_unset=True)
    for key, value in patch.items():
        setattr(match, key, value)
    match = await store.save_match(match)

    index_synced = await sync_public_match_index_quietly(
        store, club_id, competition_id, round_id, match_id, patch
    )
    standings = await _refresh_standings_after_edit(store, competition, patch.keys())

    return {
        "message": "Match updated.",
        "match": match.model_dump(),
        "index_synced": index_synced,
        "standings": standings,
    }


# =========================================
# FRIENDLY / PRACTICE MATCHES
# =========================================
@router.post("/clubs/{club_id}/friendly-matches")
async def create_friendly_match(club_id: str, data: FriendlyMatchCreate, store: MatchStore = Depends(get_store)):
    fields = data.model_dump(exclude_unset=True)
    if not fields.get("id"):
        fields.pop("id", None)
    elif await store.get_friendly_match(club_id, fields["id"]):
        raise HTTPException(status_code=409, detail="A friendly match with this id already exists.")
    match = await store.save_friendly_match(FriendlyMatch(club_id=club_id, **fields))

    patch = match.model_dump(exclude={"club_id"})
    index_synced = await sync_public_match_index_quietly(
        store, club_id, friendly_competition_id(patch), SINGLE_ROUND_ID, match.id, patch
    )
    return {"message": "Friendly match created.", "match": match.model_dump(), "index_synced": index_synced}


@router.patch("/clubs/{club_id}/friendly-matches/{match_id}")
async def update_friendly_match(
    club_id: str,
    match_id: str,
    data: FriendlyMatchUpdate,
    store: MatchStore = Depends(get_store),
):
    match = await store.get_friendly_match(club_id, match_id)
    if not match:
        raise HTTPException(status_code=404, detail="Friendly match not found.")

    patch = data.model_dump(exclude_unset=True)
    for key, value in patch.items():
        setattr(match, key, value)
    match = await store.save_friendly_match(match)

    index_synced = await sync_public_match_index_quietly(
        store, club_id, friendly_competition_id(match.model_dump()), SINGLE_ROUND_ID, match_id, patch
    )
    return {"message": "Friendly match updated.", "match": match.model_dump(), "index_synced": index_synced}


# =========================================
# PUBLIC MATCH INDEX MAINTENANCE
# =========================================
@router.post("/clubs/{club_id}/public-match-index/backfill")
async def backfill_public_match_index_endpoint(club_id: str, store: MatchStore = Depends(get_store)):
    """
    One-time rebuild of the club's public match index.
    Does nothing when the index already holds rows.
    """
    count = await ensure_public_match_index(store, club_id)
    if count is None:
        return {"message": "already", "count": 0}
    return {"message": "ok", "count": count}
