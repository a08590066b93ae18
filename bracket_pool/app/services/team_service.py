from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from typing import Any, Dict, List

from bracket_pool.app.models.team_model import Team

class TeamService:
    async def list_teams(self, db: AsyncSession, tournament_id: int) -> List[Team]:
        result = await db.execute(
            select(Team).where(Team.tournament_id == tournament_id).order_by(Team.seed, Team.id)
        )
        return list(result.scalars().all())

    async def add_teams(self, db: AsyncSession, tournament_id: int, teams: List[Dict[str, Any]]) -> List[Team]:
        """Bulk insert. Blank names are dropped; raises ValueError if nothing is left."""
        rows = [
            Team(tournament_id=tournament_id, name=t["name"].strip(), seed=t.get("seed"))
            for t in teams
            if (t.get("name") or "").strip()
        ]
        if not rows:
            raise ValueError("No valid teams provided")

        db.add_all(rows)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ValueError("Team names must be unique within a tournament")
        for row in rows:
            await db.refresh(row)
        return rows

    async def wipe_teams(self, db: AsyncSession, tournament_id: int) -> int:
        result = await db.execute(delete(Team).where(Team.tournament_id == tournament_id))
        await db.commit()
        return result.rowcount or 0

team_service = TeamService()
