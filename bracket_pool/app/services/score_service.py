from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import List

from bracket_pool.app.engine.scoring import compute_leaderboard
from bracket_pool.app.models.matchup_model import Matchup
from bracket_pool.app.models.pick_model import Pick
from bracket_pool.app.schemas.score_schema import LeaderboardEntry
from bracket_pool.app.services.user_service import user_service

class ScoreService:
    async def leaderboard(self, db: AsyncSession, tournament_id: int) -> List[LeaderboardEntry]:
        """Computed live on every request; nothing is cached or stored."""
        # 1. Matchups with an official outcome
        result = await db.execute(
            select(Matchup).where(
                Matchup.tournament_id == tournament_id,
                Matchup.winner.is_not(None)
            )
        )
        decided = result.scalars().all()
        if not decided:
            return []

        # 2. All picks on those matchups
        picks_result = await db.execute(
            select(Pick).where(Pick.matchup_id.in_([m.id for m in decided]))
        )
        picks = picks_result.scalars().all()
        if not picks:
            return []

        # 3. Display names for whoever picked
        names = await user_service.display_names(db, {p.user_id for p in picks})

        return compute_leaderboard(decided, picks, names)

score_service = ScoreService()
