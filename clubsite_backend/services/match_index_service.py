# clubsite_backend/services/match_index_service.py
# Keeps the public match index (flat copy of every club match) in sync with
# the competition -> round -> match tables and the friendly matches.

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

import pytz

from clubsite_backend.core.config import INDEX_BATCH_SIZE, STORE_BATCH_OP_LIMIT
from clubsite_backend.core.exceptions import InvalidIndexKeyError
from clubsite_backend.core.match_index_rows import (
    FRIENDLY_COMPETITION_ID,
    PRACTICE_COMPETITION_ID,
    SINGLE_ROUND_ID,
    build_friendly_index_row,
    build_index_row,
    match_date_sort_key,
)
from clubsite_backend.models.competition_model import Competition
from clubsite_backend.models.match_index_model import PublicMatchIndexRow
from clubsite_backend.services.match_store import MatchStore

logger = logging.getLogger(__name__)

FRIENDLY_COMPETITION_IDS = {FRIENDLY_COMPETITION_ID, PRACTICE_COMPETITION_ID}


def _safe_build(builder, *args, **kwargs) -> Optional[dict]:
    """Row builder call that drops (and reports) matches with unusable key parts."""
    try:
        return builder(*args, **kwargs)
    except InvalidIndexKeyError as exc:
        logger.warning("Skipping match for public index: %s", exc)
        return None


def chunked(rows: List[dict], size: int):
    if size <= 0:
        raise ValueError("Batch size must be positive.")
    for start in range(0, len(rows), size):
        yield rows[start:start + size]


# =========================================
# FULL SCAN
# =========================================
async def _competition_rows(store: MatchStore, club_id: str, competition: Competition, team_lookup) -> List[dict]:
    """Rows for one competition: read all rounds, then every round's matches in parallel."""
    rounds = await store.list_rounds(club_id, competition.id)
    matches_by_round = await asyncio.gather(
        *(store.list_matches(club_id, competition.id, r.id) for r in rounds)
    )

    rows = []
    for round_, matches in zip(rounds, matches_by_round):
        for match in matches:
            row = _safe_build(
                build_index_row,
                match.model_dump(),
                team_lookup,
                competition_id=competition.id,
                round_id=round_.id,
                competition_name=competition.name,
                round_name=round_.name,
            )
            if row is not None:
                rows.append(row)
    return rows


async def collect_public_match_rows(store: MatchStore, club_id: str) -> List[dict]:
    """Build every index row the club's source data currently yields."""
    team_lookup, competitions, friendlies = await asyncio.gather(
        store.team_lookup(club_id),
        store.list_competitions(club_id),
        store.list_friendly_matches(club_id),
    )

    per_competition = await asyncio.gather(
        *(_competition_rows(store, club_id, c, team_lookup) for c in competitions)
    )
    rows = [row for comp_rows in per_competition for row in comp_rows]

    for match in friendlies:
        row = _safe_build(build_friendly_index_row, match.model_dump(), team_lookup)
        if row is not None:
            rows.append(row)

    # Never write a row without a usable date
    return [r for r in rows if isinstance(r.get("match_date"), str) and r["match_date"].strip()]


# =========================================
# BACKFILL
# =========================================
async def backfill_public_match_index(
    store: MatchStore,
    club_id: str,
    batch_size: int = INDEX_BATCH_SIZE,
) -> int:
    """
    Rebuild the club's public match index from source data.

    Rows are merge-written in batches of `batch_size` (one transaction each),
    then the meta record gets {updated_at, count}. Safe to re-run: keys are
    deterministic and writes are merges. Any error aborts the run; batches
    already committed stay committed.

    Returns the number of rows written.
    """
    if batch_size > STORE_BATCH_OP_LIMIT:
        raise ValueError(f"Batch size {batch_size} exceeds the store limit of {STORE_BATCH_OP_LIMIT}.")

    rows = await collect_public_match_rows(store, club_id)

    batches = 0
    for batch in chunked(rows, batch_size):
        await store.commit_index_batch(club_id, batch)
        batches += 1

    updated_at = datetime.now(pytz.utc).isoformat()
    await store.write_index_meta(club_id, updated_at=updated_at, count=len(rows))

    logger.info("Backfilled public match index for club %s: %d rows in %d batches", club_id, len(rows), batches)
    return len(rows)


# =========================================
# PRESENCE GATE
# =========================================
async def has_public_match_index_data(store: MatchStore, club_id: str) -> bool:
    """True once the index holds at least one real row (meta lives apart)."""
    return await store.has_index_rows(club_id)


async def ensure_public_match_index(store: MatchStore, club_id: str) -> Optional[int]:
    """
    Backfill once: returns the row count written, or None when the index
    already had data and nothing was done.
    """
    if await has_public_match_index_data(store, club_id):
        return None
    return await backfill_public_match_index(store, club_id)


# =========================================
# INCREMENTAL UPSERT
# =========================================
async def _match_snapshot(store: MatchStore, club_id: str, competition_id: str, match_id: str) -> Dict[str, Any]:
    if competition_id in FRIENDLY_COMPETITION_IDS:
        current = await store.get_friendly_match(club_id, match_id)
    else:
        current = await store.get_match(club_id, match_id)
    return current.model_dump() if current is not None else {}


async def upsert_public_match_index_row(
    store: MatchStore,
    club_id: str,
    competition_id: str,
    round_id: str,
    match_id: str,
    patch: Mapping[str, Any],
) -> Optional[dict]:
    """
    Rebuild and merge-write the index row of one match after an admin edit.

    The patch is laid over the stored match (or stands alone when the match
    cannot be read). Returns the row written, or None when the match has no
    usable date and was left out.
    """
    snapshot = await _match_snapshot(store, club_id, competition_id, match_id)
    merged = {**snapshot, **dict(patch), "id": match_id}
    team_lookup = await store.team_lookup(club_id)

    if competition_id in FRIENDLY_COMPETITION_IDS:
        if competition_id == PRACTICE_COMPETITION_ID:
            merged["competition_id"] = PRACTICE_COMPETITION_ID
        row = build_friendly_index_row(merged, team_lookup)
    else:
        competition, round_ = await asyncio.gather(
            store.get_competition(club_id, competition_id),
            store.get_round(club_id, round_id),
        )
        row = build_index_row(
            merged,
            team_lookup,
            competition_id=competition_id,
            round_id=round_id,
            competition_name=competition.name if competition else None,
            round_name=round_.name if round_ else None,
        )

    if row is None:
        logger.debug("Match %s has no usable date; public index left untouched", match_id)
        return None

    await store.commit_index_batch(club_id, [row])
    return row


async def sync_public_match_index_quietly(
    store: MatchStore,
    club_id: str,
    competition_id: str,
    round_id: str,
    match_id: str,
    patch: Mapping[str, Any],
) -> bool:
    """
    Best-effort index sync for admin handlers: the match write has already
    succeeded, so a failure here is logged and swallowed.
    """
    try:
        await upsert_public_match_index_row(store, club_id, competition_id, round_id, match_id, patch)
    except Exception:
        logger.exception(
            "Public match index sync failed for club %s match %s/%s/%s",
            club_id, competition_id, round_id, match_id,
        )
        return False
    return True


# =========================================
# PUBLIC READ
# =========================================
def _row_payload(row: PublicMatchIndexRow) -> Dict[str, Any]:
    payload = row.model_dump(exclude={"club_id"})
    payload["key"] = row.index_key
    return payload


async def list_public_matches(store: MatchStore, club_id: str, team_id: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    All matches of a club (optionally only those involving `team_id`), sorted
    by date then kick-off time. Runs the one-time backfill first if the index
    is still empty.
    """
    await ensure_public_match_index(store, club_id)
    rows = await store.list_index_rows(club_id, team_id=team_id)
    rows.sort(key=lambda r: (match_date_sort_key(r.match_date), r.match_time or "", r.index_key))
    return [_row_payload(r) for r in rows]
