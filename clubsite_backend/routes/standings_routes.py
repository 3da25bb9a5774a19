# standings_routes.py
# Admin API for league tables: full recalculation and manual edits.

from fastapi import APIRouter, Depends, HTTPException

from clubsite_backend.core.database import get_store
from clubsite_backend.core.exceptions import CompetitionNotFoundError, StandingsNotApplicableError
from clubsite_backend.models.standing_model import StandingsEditRequest
from clubsite_backend.services.match_store import MatchStore
from clubsite_backend.services.standings_service import (
    apply_manual_standings_edit,
    load_competition,
    recalculate_standings,
    standings_to_payload,
)
from clubsite_backend.core.standings import ensure_standings_enabled

router = APIRouter()


# =========================================
# GET SAVED STANDINGS
# =========================================
@router.get("/clubs/{club_id}/competitions/{competition_id}/standings")
async def get_saved_standings(club_id: str, competition_id: str, store: MatchStore = Depends(get_store)):
    """The table as currently saved, ordered by rank."""
    try:
        competition = await load_competition(store, club_id, competition_id)
        ensure_standings_enabled(competition_id, competition.format)
    except CompetitionNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except StandingsNotApplicableError as exc:
        raise HTTPException(status_code=409, detail=str(exc))

    rows = await store.list_standings(club_id, competition_id)
    return {
        "competition_id": competition_id,
        "standings": [r.model_dump(exclude={"club_id", "competition_id"}) for r in rows],
    }


# =========================================
# RECALCULATE FROM MATCHES
# =========================================
@router.post("/clubs/{club_id}/competitions/{competition_id}/standings/recalculate")
async def recalculate_standings_endpoint(club_id: str, competition_id: str, store: MatchStore = Depends(get_store)):
    """
    Rebuild the table from every played match and replace the saved table.
    Cup competitions are refused (409).
    """
    try:
        standings = await recalculate_standings(store, club_id, competition_id)
    except CompetitionNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except StandingsNotApplicableError as exc:
        raise HTTPException(status_code=409, detail=str(exc))

    return {"message": "Standings recalculated.", "standings": standings_to_payload(standings)}


# =========================================
# MANUAL EDIT
# =========================================
@router.put("/clubs/{club_id}/competitions/{competition_id}/standings")
async def edit_standings(
    club_id: str,
    competition_id: str,
    data: StandingsEditRequest,
    store: MatchStore = Depends(get_store),
):
    """
    Save hand-edited wins/draws/losses/goals. Points, goal difference and
    played are re-derived and the table is re-sorted; matches are not read.
    """
    try:
        standings = await apply_manual_standings_edit(store, club_id, competition_id, data.edits)
    except CompetitionNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except StandingsNotApplicableError as exc:
        raise HTTPException(status_code=409, detail=str(exc))

    return {"message": "Standings saved.", "standings": standings_to_payload(standings)}
