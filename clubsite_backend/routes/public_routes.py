# public_routes.py
# Read-only API behind the public club site.

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from clubsite_backend.core.database import get_store
from clubsite_backend.core.exceptions import CompetitionNotFoundError, StandingsNotApplicableError
from clubsite_backend.services.match_index_service import list_public_matches
from clubsite_backend.services.match_store import MatchStore
from clubsite_backend.services.standings_service import get_public_standings

router = APIRouter()


@router.get("/clubs/{club_id}/matches")
async def get_club_matches(
    club_id: str,
    team_id: Optional[str] = Query(default=None),
    store: MatchStore = Depends(get_store),
):
    """
    Every match of the club (or of one team), read from the public match
    index. The first request for a club builds the index.
    """
    matches = await list_public_matches(store, club_id, team_id=team_id)
    return {"club_id": club_id, "count": len(matches), "matches": matches}


@router.get("/clubs/{club_id}/standings")
async def get_club_standings(
    club_id: str,
    competition_id: str = Query(...),
    store: MatchStore = Depends(get_store),
):
    try:
        return await get_public_standings(store, club_id, competition_id)
    except CompetitionNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except StandingsNotApplicableError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
