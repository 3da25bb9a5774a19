import asyncio
from types import SimpleNamespace

import pytest

from clubsite_backend.core.exceptions import BatchTooLargeError, UnsupportedDatabaseError
from clubsite_backend.services.match_index_service import (
    backfill_public_match_index,
    ensure_public_match_index,
    has_public_match_index_data,
    list_public_matches,
    sync_public_match_index_quietly,
    upsert_public_match_index_row,
)
from clubsite_backend.services.match_store import MatchStore, _dialect_insert

from factories import (
    CLUB_ID,
    add_competition,
    add_friendly,
    add_match,
    add_round,
    add_teams,
    make_match,
    scenario_a,
)


class SpyStore(MatchStore):
    """Records every index write."""

    def __init__(self, session_maker):
        super().__init__(session_maker)
        self.batch_sizes = []
        self.meta_writes = []

    async def commit_index_batch(self, club_id, rows):
        self.batch_sizes.append(len(rows))
        return await super().commit_index_batch(club_id, rows)

    async def write_index_meta(self, club_id, updated_at, count):
        self.meta_writes.append(count)
        return await super().write_index_meta(club_id, updated_at, count)


class BrokenIndexStore(MatchStore):
    async def commit_index_batch(self, club_id, rows):
        raise RuntimeError("index unavailable")


def _rows(store, club_id=CLUB_ID):
    rows = asyncio.run(store.list_index_rows(club_id))
    return sorted((r.model_dump() for r in rows), key=lambda r: r["match_id"])


def test_backfill_writes_rows_and_meta(store):
    asyncio.run(scenario_a(store))
    asyncio.run(add_friendly(store, "f1", "A", "C", (1, 1)))

    count = asyncio.run(backfill_public_match_index(store, CLUB_ID))

    assert count == 3
    rows = {r["match_id"]: r for r in _rows(store)}
    assert rows["m1"]["competition_id"] == "league"
    assert rows["m1"]["round_name"] == "第1節"
    assert rows["m1"]["competition_name"] == "市民リーグ"
    assert (rows["m1"]["score_home"], rows["m1"]["score_away"]) == (2, 1)
    assert (rows["f1"]["competition_id"], rows["f1"]["round_id"]) == ("friendly", "single")

    meta = asyncio.run(store.get_index_meta(CLUB_ID))
    assert meta.count == 3
    assert meta.updated_at


def test_backfill_twice_yields_identical_rows(store):
    asyncio.run(scenario_a(store))
    asyncio.run(backfill_public_match_index(store, CLUB_ID))
    first = _rows(store)

    asyncio.run(backfill_public_match_index(store, CLUB_ID))
    assert _rows(store) == first


def test_matches_without_usable_date_are_left_out(store):
    asyncio.run(scenario_a(store))
    asyncio.run(add_match(store, "m3", "A", "C", match_date="未定"))

    count = asyncio.run(backfill_public_match_index(store, CLUB_ID))

    assert count == 2
    assert {r["match_id"] for r in _rows(store)} == {"m1", "m2"}
    assert asyncio.run(store.get_index_meta(CLUB_ID)).count == 2


def test_thousand_matches_are_written_in_three_batches(session_maker):
    store = SpyStore(session_maker)

    async def seed():
        await add_teams(store, {"A": "A", "B": "B"})
        await add_competition(store, "league", ["A", "B"])
        await add_round(store, "league", "r1", "第1節")
        await store.add_matches(make_match(f"m{i:04d}", "A", "B", (1, 0)) for i in range(1000))

    asyncio.run(seed())
    count = asyncio.run(backfill_public_match_index(store, CLUB_ID))

    assert count == 1000
    assert store.batch_sizes == [450, 450, 100]
    assert store.meta_writes == [1000]


def test_batch_size_above_store_limit_is_refused(store):
    with pytest.raises(ValueError):
        asyncio.run(backfill_public_match_index(store, CLUB_ID, batch_size=501))

    rows = [{"match_id": f"m{i}", "competition_id": "c", "round_id": "r", "match_date": "2024-01-01"} for i in range(501)]
    with pytest.raises(BatchTooLargeError):
        asyncio.run(store.commit_index_batch(CLUB_ID, rows))


def test_presence_gate_ignores_meta_and_backfills_once(session_maker):
    store = SpyStore(session_maker)
    asyncio.run(scenario_a(store))
    asyncio.run(store.write_index_meta(CLUB_ID, updated_at="2024-01-01T00:00:00+00:00", count=0))

    assert asyncio.run(has_public_match_index_data(store, CLUB_ID)) is False
    assert asyncio.run(ensure_public_match_index(store, CLUB_ID)) == 2
    assert asyncio.run(has_public_match_index_data(store, CLUB_ID)) is True
    assert asyncio.run(ensure_public_match_index(store, CLUB_ID)) is None
    assert store.batch_sizes == [2]


def test_upsert_lays_patch_over_stored_match(store):
    asyncio.run(scenario_a(store))
    asyncio.run(backfill_public_match_index(store, CLUB_ID))

    row = asyncio.run(upsert_public_match_index_row(
        store, CLUB_ID, "league", "r1", "m2", {"score_home": 3, "score_away": 2}
    ))

    assert row["home_team"] == "B" and row["away_team"] == "C"
    assert row["round_name"] == "第1節"
    stored = {r["match_id"]: r for r in _rows(store)}["m2"]
    assert (stored["score_home"], stored["score_away"]) == (3, 2)
    assert stored["home_team_name"] == "B"


def test_upsert_keeps_columns_the_new_row_leaves_out(store):
    key = {"match_id": "m1", "competition_id": "league", "round_id": "r1"}
    asyncio.run(store.commit_index_batch(CLUB_ID, [{**key, "match_date": "2024-04-07", "home_team_logo": "a.png"}]))
    asyncio.run(store.commit_index_batch(CLUB_ID, [{**key, "match_date": "2024-04-14", "score_home": None}]))

    (row,) = _rows(store)
    assert row["match_date"] == "2024-04-14"
    assert row["home_team_logo"] == "a.png"


def test_upsert_friendly_and_practice(store):
    asyncio.run(add_teams(store, {"A": "Aoba", "B": "Boso"}))
    asyncio.run(add_friendly(store, "p1", "A", "B", competition_id="practice"))

    row = asyncio.run(upsert_public_match_index_row(store, CLUB_ID, "practice", "single", "p1", {"score_home": 1, "score_away": 0}))

    assert row["competition_id"] == "practice"
    assert row["competition_name"] == "練習試合"
    assert row["home_team_name"] == "Aoba"
    assert row["score_home"] == 1


def test_upsert_without_usable_date_writes_nothing(store):
    asyncio.run(scenario_a(store))
    row = asyncio.run(upsert_public_match_index_row(store, CLUB_ID, "league", "r1", "m1", {"match_date": ""}))
    assert row is None
    assert _rows(store) == []


def test_quiet_sync_reports_failure_without_raising(session_maker):
    store = BrokenIndexStore(session_maker)
    asyncio.run(scenario_a(store))
    ok = asyncio.run(sync_public_match_index_quietly(store, CLUB_ID, "league", "r1", "m1", {"score_home": 5}))
    assert ok is False


def test_list_public_matches_backfills_filters_and_sorts(store):
    async def seed():
        await scenario_a(store)
        await add_match(store, "m0", "C", "A", match_date="2024-03-01", match_time="09:00")
        await add_match(store, "m5", "A", "C", match_date="2024-04-07", match_time="08:00")

    asyncio.run(seed())

    matches = asyncio.run(list_public_matches(store, CLUB_ID))
    # unset kick-off times sort ahead of set ones on the same day
    assert [m["match_id"] for m in matches] == ["m0", "m1", "m2", "m5"]
    assert matches[0]["key"] == "league__r1__m0"
    assert "club_id" not in matches[0]

    team_a = asyncio.run(list_public_matches(store, CLUB_ID, team_id="A"))
    assert [m["match_id"] for m in team_a] == ["m0", "m1", "m5"]


def test_list_public_matches_orders_by_calendar_date_not_text(store):
    async def seed():
        await scenario_a(store)
        await add_match(store, "m3", "A", "C", match_date="2024-10-1")
        await add_match(store, "m4", "C", "B", match_date="2024-4-10")
        await add_match(store, "m5", "B", "A", match_date="2024/3/1")

    asyncio.run(seed())

    matches = asyncio.run(list_public_matches(store, CLUB_ID))
    assert [m["match_id"] for m in matches] == ["m5", "m1", "m2", "m4", "m3"]
    assert matches[3]["match_date"] == "2024-4-10"


def test_upserts_refuse_databases_without_on_conflict():
    session = SimpleNamespace(bind=SimpleNamespace(dialect=SimpleNamespace(name="mysql")))
    with pytest.raises(UnsupportedDatabaseError):
        _dialect_insert(session)
