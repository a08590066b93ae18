from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel
from typing import List, Optional

from bracket_pool.app.core.auth import get_current_user
from bracket_pool.app.core.database import get_db
from bracket_pool.app.models.user_model import User
from bracket_pool.app.schemas.bracket_schema import PickResponse
from bracket_pool.app.services.pick_service import TournamentLockedError, pick_service

router = APIRouter()

class PickCreate(BaseModel):
    matchup_id: int
    chosen_winner: str

@router.post("", response_model=PickResponse)
async def save_pick(
    payload: PickCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Creates or replaces the signed-in user's pick for a matchup."""
    try:
        return await pick_service.upsert_pick(db, user.id, payload.matchup_id, payload.chosen_winner)
    except LookupError:
        raise HTTPException(status_code=404, detail="Matchup not found")
    except TournamentLockedError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("", response_model=List[PickResponse])
async def list_picks(tournament_id: int, user_id: Optional[str] = None, db: AsyncSession = Depends(get_db)):
    return await pick_service.list_picks(db, tournament_id, user_id)
