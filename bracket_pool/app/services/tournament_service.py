import logging
from datetime import datetime
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import update
from typing import Any, Dict, List, Optional

from bracket_pool.app.models.tournament_model import Tournament
from bracket_pool.app.engine.lock import as_utc, is_locked, lock_status

logger = logging.getLogger(__name__)

# Fields an admin may change through update_tournament
UPDATABLE_FIELDS = ("name", "is_locked_manual", "lock_at")
# lock_at=None clears the lock time; these can't be cleared
REQUIRED_FIELDS = ("name", "is_locked_manual")

class TournamentService:
    async def create_tournament(
        self,
        db: AsyncSession,
        name: str,
        year: int,
        lock_at: Optional[datetime] = None
    ) -> Tournament:
        tournament = Tournament(
            name=name,
            year=year,
            is_active=False,
            is_locked_manual=False,
            lock_at=as_utc(lock_at) if lock_at else None
        )
        db.add(tournament)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ValueError(f"Tournament {name!r} {year} already exists")
        await db.refresh(tournament)
        logger.info("Tournament %s created (%s %s)", tournament.id, name, year)
        return tournament

    async def list_tournaments(self, db: AsyncSession) -> List[Tournament]:
        result = await db.execute(select(Tournament).order_by(Tournament.created_at.desc(), Tournament.id.desc()))
        return list(result.scalars().all())

    async def get_tournament(self, db: AsyncSession, tournament_id: int) -> Optional[Tournament]:
        result = await db.execute(select(Tournament).where(Tournament.id == tournament_id))
        return result.scalar_one_or_none()

    async def get_active(self, db: AsyncSession) -> Optional[Tournament]:
        """Newest active tournament, or None."""
        result = await db.execute(
            select(Tournament)
            .where(Tournament.is_active.is_(True))
            .order_by(Tournament.created_at.desc(), Tournament.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def activate(self, db: AsyncSession, tournament_id: int) -> Optional[Tournament]:
        """Makes this the only active tournament."""
        t = await self.get_tournament(db, tournament_id)
        if not t:
            return None

        await db.execute(
            update(Tournament).where(Tournament.id != tournament_id).values(is_active=False)
        )
        t.is_active = True
        await db.commit()
        await db.refresh(t)
        logger.info("Tournament %s is now active", tournament_id)
        return t

    async def update_tournament(
        self,
        db: AsyncSession,
        tournament_id: int,
        patch: Dict[str, Any]
    ) -> Optional[Tournament]:
        """
        Applies name / is_locked_manual / lock_at changes (lock_at=None clears it).
        Raises ValueError when the patch carries nothing to update, nulls a
        required field, or renames onto an existing (name, year).
        """
        changes = {k: v for k, v in patch.items() if k in UPDATABLE_FIELDS}
        if not changes:
            raise ValueError("No fields to update")
        for key in REQUIRED_FIELDS:
            if key in changes and changes[key] is None:
                raise ValueError(f"{key} cannot be null")
        if "name" in changes and not str(changes["name"]).strip():
            raise ValueError("name cannot be empty")

        t = await self.get_tournament(db, tournament_id)
        if not t:
            return None

        if changes.get("lock_at") is not None:
            changes["lock_at"] = as_utc(changes["lock_at"])
        year = t.year
        for key, value in changes.items():
            setattr(t, key, value)

        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ValueError(f"Tournament {changes.get('name')!r} {year} already exists")
        await db.refresh(t)
        logger.info("Tournament %s updated: %s", tournament_id, sorted(changes))
        return t

    def is_locked(self, tournament: Tournament, now: Optional[datetime] = None) -> bool:
        return is_locked(bool(tournament.is_locked_manual), tournament.lock_at, now)

    def lock_status(self, tournament: Tournament, now: Optional[datetime] = None) -> Dict[str, Any]:
        state, message = lock_status(bool(tournament.is_locked_manual), tournament.lock_at, now)
        return {"state": state.value, "is_locked": state == "LOCKED", "message": message}

tournament_service = TournamentService()
