import logging
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import delete, func
from typing import List, Optional

from bracket_pool.app.engine.advancement import BracketResolver, picks_winner
from bracket_pool.app.models.matchup_model import Matchup
from bracket_pool.app.models.pick_model import Pick
from bracket_pool.app.models.user_model import User
from bracket_pool.app.schemas.bracket_schema import AdminPickView
from bracket_pool.app.services.bracket_service import bracket_service
from bracket_pool.app.services.tournament_service import tournament_service

logger = logging.getLogger(__name__)

# INSERT ... ON CONFLICT per backend
DIALECT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}

class TournamentLockedError(Exception):
    """Picks can't be created or changed once the tournament is locked."""

class PickService:
    async def upsert_pick(self, db: AsyncSession, user_id: str, matchup_id: int, chosen_winner: str) -> Pick:
        """
        Creates or overwrites the user's pick for a matchup.

        The chosen team must be one of the two competitors the user currently
        sees for that matchup, which for later rounds come from the user's
        own earlier picks. TBD slots can't be picked.
        """
        matchup = await bracket_service.get_matchup(db, matchup_id)
        if not matchup:
            raise LookupError("Matchup not found")

        tournament = await tournament_service.get_tournament(db, matchup.tournament_id)
        if tournament_service.is_locked(tournament):
            raise TournamentLockedError("Tournament is locked")

        await self._check_choice(db, matchup, user_id, chosen_winner)

        insert = DIALECT_INSERTS.get(db.get_bind().dialect.name)
        if insert is None:
            raise RuntimeError(f"Unsupported database backend: {db.get_bind().dialect.name}")

        # One pick per (user, matchup), written in a single statement so
        # concurrent first saves can't both insert
        stmt = insert(Pick).values(user_id=user_id, matchup_id=matchup_id, chosen_winner=chosen_winner)
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "matchup_id"],
            set_={"chosen_winner": stmt.excluded.chosen_winner, "updated_at": func.now()},
        ).returning(Pick)
        result = await db.execute(stmt, execution_options={"populate_existing": True})
        pick = result.scalar_one()

        await db.commit()
        return pick

    async def admin_set_pick(self, db: AsyncSession, pick_id: int, chosen_winner: str) -> Pick:
        """
        Admin correction of an existing pick. Works while the tournament is
        locked, but the team must still be playing in the pick owner's bracket.
        """
        result = await db.execute(select(Pick).where(Pick.id == pick_id))
        pick = result.scalar_one_or_none()
        if not pick:
            raise LookupError("Pick not found")

        matchup = await bracket_service.get_matchup(db, pick.matchup_id)
        if not matchup:
            raise LookupError("Matchup not found")

        await self._check_choice(db, matchup, pick.user_id, chosen_winner)

        previous = pick.chosen_winner
        pick.chosen_winner = chosen_winner
        await db.commit()
        await db.refresh(pick)
        logger.warning(
            "Pick %s (user %s, matchup %s) changed by admin: %s -> %s",
            pick_id, pick.user_id, pick.matchup_id, previous, chosen_winner
        )
        return pick

    async def _check_choice(self, db: AsyncSession, matchup: Matchup, user_id: str, chosen_winner: str):
        matchups = await bracket_service.list_matchups(db, matchup.tournament_id)
        own_picks = await bracket_service.picks_by_matchup(db, matchup.tournament_id, user_id)
        resolver = BracketResolver(matchups, picks_winner(own_picks), bracket_service.layout)
        team1, team2 = resolver.competitors(matchup)

        if team1 is None or team2 is None:
            raise ValueError("Both competitors must be known before picking this matchup")
        if chosen_winner not in (team1.name, team2.name):
            raise ValueError(f"{chosen_winner!r} is not playing in this matchup")

    async def list_picks(
        self,
        db: AsyncSession,
        tournament_id: int,
        user_id: Optional[str] = None
    ) -> List[Pick]:
        query = (
            select(Pick)
            .join(Matchup, Matchup.id == Pick.matchup_id)
            .where(Matchup.tournament_id == tournament_id)
        )
        if user_id is not None:
            query = query.where(Pick.user_id == user_id)
        result = await db.execute(query.order_by(Pick.user_id, Pick.matchup_id))
        return list(result.scalars().all())

    async def admin_list(self, db: AsyncSession, tournament_id: int) -> List[AdminPickView]:
        """Every pick of the tournament with its matchup slot and the picker's name."""
        result = await db.execute(
            select(Pick, Matchup, User.display_name)
            .join(Matchup, Matchup.id == Pick.matchup_id)
            .outerjoin(User, User.id == Pick.user_id)
            .where(Matchup.tournament_id == tournament_id)
            .order_by(Matchup.round, Matchup.region, Matchup.match_order, Pick.user_id)
        )
        return [
            AdminPickView(
                id=p.id,
                user_id=p.user_id,
                display_name=name or p.user_id,
                matchup_id=m.id,
                region=m.region,
                round=m.round,
                match_order=m.match_order,
                team1_name=m.team1_name,
                team2_name=m.team2_name,
                winner=m.winner,
                chosen_winner=p.chosen_winner,
                updated_at=p.updated_at,
            )
            for p, m, name in result.all()
        ]

    async def delete_user_picks(self, db: AsyncSession, user_id: str, tournament_id: Optional[int] = None) -> int:
        query = delete(Pick).where(Pick.user_id == user_id)
        if tournament_id is not None:
            in_tournament = select(Matchup.id).where(Matchup.tournament_id == tournament_id)
            query = query.where(Pick.matchup_id.in_(in_tournament))
        result = await db.execute(query.execution_options(synchronize_session="fetch"))
        await db.commit()
        deleted = result.rowcount or 0
        logger.info("Deleted %d picks for user %s", deleted, user_id)
        return deleted

    async def reset_tournament_picks(self, db: AsyncSession, tournament_id: int) -> int:
        """Deletes every pick on the tournament's matchups."""
        in_tournament = select(Matchup.id).where(Matchup.tournament_id == tournament_id)
        result = await db.execute(
            delete(Pick).where(Pick.matchup_id.in_(in_tournament)).execution_options(synchronize_session="fetch")
        )
        await db.commit()
        deleted = result.rowcount or 0
        logger.warning("Tournament %s: reset %d picks", tournament_id, deleted)
        return deleted

pick_service = PickService()
