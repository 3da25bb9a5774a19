# clubsite_backend/services/match_store.py
# Read/write access to a club's teams, competitions, rounds, matches,
# standings and public match index. Pure I/O: no standings or index logic.

from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from sqlalchemy import delete, or_
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import select

from clubsite_backend.core.config import STORE_BATCH_OP_LIMIT
from clubsite_backend.core.exceptions import BatchTooLargeError, UnsupportedDatabaseError
from clubsite_backend.models.competition_model import Competition, Round
from clubsite_backend.models.match_index_model import (
    INDEX_ROW_FIELDS, PublicMatchIndexMeta, PublicMatchIndexRow
)
from clubsite_backend.models.match_model import FriendlyMatch, Match
from clubsite_backend.models.standing_model import Standing
from clubsite_backend.models.team_model import Team, TeamInfo

INDEX_KEY_COLUMNS = ("club_id", "competition_id", "round_id", "match_id")


def _dialect_insert(session: AsyncSession):
    """INSERT construct with ON CONFLICT support for the bound database."""
    name = session.bind.dialect.name
    if name == "postgresql":
        return postgresql.insert
    if name == "sqlite":
        return sqlite.insert
    raise UnsupportedDatabaseError(name)


class MatchStore:
    """
    Every read opens its own session, so reads can be fanned out with
    asyncio.gather. Every write method is one transaction.
    """

    def __init__(self, session_maker: async_sessionmaker):
        self.session_maker = session_maker

    # =========================================
    # TEAMS
    # =========================================
    async def list_teams(self, club_id: str) -> List[Team]:
        async with self.session_maker() as session:
            result = await session.execute(select(Team).where(Team.club_id == club_id))
            return list(result.scalars().all())

    async def team_lookup(self, club_id: str) -> Dict[str, TeamInfo]:
        """teamId -> {name, logo_url} for resolving display data."""
        teams = await self.list_teams(club_id)
        return {t.id: TeamInfo(name=t.name or "", logo_url=t.logo_url) for t in teams}

    async def add_team(self, team: Team) -> Team:
        async with self.session_maker() as session:
            session.add(team)
            await session.commit()
            return team

    # =========================================
    # COMPETITIONS & ROUNDS
    # =========================================
    async def list_competitions(self, club_id: str) -> List[Competition]:
        async with self.session_maker() as session:
            result = await session.execute(select(Competition).where(Competition.club_id == club_id))
            return list(result.scalars().all())

    async def get_competition(self, club_id: str, competition_id: str) -> Optional[Competition]:
        async with self.session_maker() as session:
            return await session.get(Competition, {"club_id": club_id, "id": competition_id})

    async def add_competition(self, competition: Competition) -> Competition:
        async with self.session_maker() as session:
            session.add(competition)
            await session.commit()
            return competition

    async def list_rounds(self, club_id: str, competition_id: str) -> List[Round]:
        async with self.session_maker() as session:
            result = await session.execute(
                select(Round).where(Round.club_id == club_id, Round.competition_id == competition_id)
            )
            return list(result.scalars().all())

    async def get_round(self, club_id: str, round_id: str) -> Optional[Round]:
        async with self.session_maker() as session:
            return await session.get(Round, {"club_id": club_id, "id": round_id})

    async def add_round(self, round_: Round) -> Round:
        async with self.session_maker() as session:
            session.add(round_)
            await session.commit()
            return round_

    # =========================================
    # MATCHES
    # =========================================
    async def list_matches(self, club_id: str, competition_id: str, round_id: str) -> List[Match]:
        async with self.session_maker() as session:
            result = await session.execute(
                select(Match).where(
                    Match.club_id == club_id,
                    Match.competition_id == competition_id,
                    Match.round_id == round_id,
                )
            )
            return list(result.scalars().all())

    async def get_match(self, club_id: str, match_id: str) -> Optional[Match]:
        async with self.session_maker() as session:
            return await session.get(Match, {"club_id": club_id, "id": match_id})

    async def save_match(self, match: Match) -> Match:
        """Insert or overwrite a competition match."""
        async with self.session_maker() as session:
            merged = await session.merge(match)
            await session.commit()
            return merged

    async def add_matches(self, matches: Iterable) -> int:
        """Bulk insert of competition or friendly matches (seeding/imports)."""
        count = 0
        async with self.session_maker() as session:
            for match in matches:
                session.add(match)
                count += 1
            await session.commit()
        return count

    async def list_friendly_matches(self, club_id: str) -> List[FriendlyMatch]:
        async with self.session_maker() as session:
            result = await session.execute(select(FriendlyMatch).where(FriendlyMatch.club_id == club_id))
            return list(result.scalars().all())

    async def get_friendly_match(self, club_id: str, match_id: str) -> Optional[FriendlyMatch]:
        async with self.session_maker() as session:
            return await session.get(FriendlyMatch, {"club_id": club_id, "id": match_id})

    async def save_friendly_match(self, match: FriendlyMatch) -> FriendlyMatch:
        async with self.session_maker() as session:
            merged = await session.merge(match)
            await session.commit()
            return merged

    # =========================================
    # STANDINGS
    # =========================================
    async def list_standings(self, club_id: str, competition_id: str) -> List[Standing]:
        async with self.session_maker() as session:
            result = await session.execute(
                select(Standing)
                .where(Standing.club_id == club_id, Standing.competition_id == competition_id)
                .order_by(Standing.rank)
            )
            return list(result.scalars().all())

    async def replace_standings(self, club_id: str, competition_id: str, rows: Sequence[Mapping]) -> int:
        """
        Delete the competition's whole table and write the new one in a single
        transaction. Either both happen or neither does.
        """
        async with self.session_maker() as session:
            async with session.begin():
                await session.execute(
                    delete(Standing).where(
                        Standing.club_id == club_id,
                        Standing.competition_id == competition_id,
                    )
                )
                for row in rows:
                    session.add(Standing(club_id=club_id, competition_id=competition_id, **row))
        return len(rows)

    # =========================================
    # PUBLIC MATCH INDEX
    # =========================================
    async def commit_index_batch(self, club_id: str, rows: Sequence[Mapping]) -> int:
        """
        Merge-write index rows as one atomic batch.
        Only the columns present in a row are written; existing columns the
        row leaves out are kept (last write wins per column).
        """
        if len(rows) > STORE_BATCH_OP_LIMIT:
            raise BatchTooLargeError(len(rows), STORE_BATCH_OP_LIMIT)
        if not rows:
            return 0

        async with self.session_maker() as session:
            insert = _dialect_insert(session)
            async with session.begin():
                for row in rows:
                    values = {"club_id": club_id, **row}
                    update_columns = {k: v for k, v in values.items() if k in INDEX_ROW_FIELDS}
                    stmt = insert(PublicMatchIndexRow).values(**values)
                    if update_columns:
                        stmt = stmt.on_conflict_do_update(
                            index_elements=list(INDEX_KEY_COLUMNS),
                            set_=update_columns,
                        )
                    else:
                        stmt = stmt.on_conflict_do_nothing(index_elements=list(INDEX_KEY_COLUMNS))
                    await session.execute(stmt)
        return len(rows)

    async def has_index_rows(self, club_id: str) -> bool:
        async with self.session_maker() as session:
            result = await session.execute(
                select(PublicMatchIndexRow.match_id).where(PublicMatchIndexRow.club_id == club_id).limit(1)
            )
            return result.first() is not None

    async def list_index_rows(self, club_id: str, team_id: Optional[str] = None) -> List[PublicMatchIndexRow]:
        async with self.session_maker() as session:
            stmt = select(PublicMatchIndexRow).where(PublicMatchIndexRow.club_id == club_id)
            if team_id:
                stmt = stmt.where(
                    or_(PublicMatchIndexRow.home_team == team_id, PublicMatchIndexRow.away_team == team_id)
                )
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def write_index_meta(self, club_id: str, updated_at: str, count: int) -> PublicMatchIndexMeta:
        async with self.session_maker() as session:
            meta = await session.merge(PublicMatchIndexMeta(club_id=club_id, updated_at=updated_at, count=count))
            await session.commit()
            return meta

    async def get_index_meta(self, club_id: str) -> Optional[PublicMatchIndexMeta]:
        async with self.session_maker() as session:
            return await session.get(PublicMatchIndexMeta, club_id)
