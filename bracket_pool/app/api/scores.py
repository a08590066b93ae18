from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from bracket_pool.app.core.database import get_db
from bracket_pool.app.schemas.score_schema import LeaderboardEntry
from bracket_pool.app.services.score_service import score_service
from bracket_pool.app.services.tournament_service import tournament_service

router = APIRouter()

@router.get("/leaderboard", response_model=List[LeaderboardEntry])
async def get_leaderboard(tournament_id: Optional[int] = None, db: AsyncSession = Depends(get_db)):
    """Users ranked by points for correct picks. Defaults to the active tournament."""
    if tournament_id is None:
        active = await tournament_service.get_active(db)
        if not active:
            raise HTTPException(status_code=404, detail="No active tournament")
        tournament_id = active.id

    return await score_service.leaderboard(db, tournament_id)
