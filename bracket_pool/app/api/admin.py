from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select
from pydantic import BaseModel
from typing import List, Optional

from bracket_pool.app.core.auth import require_admin
from bracket_pool.app.core.database import get_db
from bracket_pool.app.models.matchup_model import Matchup
from bracket_pool.app.models.pick_model import Pick
from bracket_pool.app.models.team_model import Team
from bracket_pool.app.models.tournament_model import Tournament
from bracket_pool.app.models.user_model import User
from bracket_pool.app.schemas.bracket_schema import AdminPickView, PickResponse
from bracket_pool.app.services.pick_service import pick_service
from bracket_pool.app.services.tournament_service import tournament_service

RESET_CONFIRMATION = "I-UNDERSTAND-THIS-DELETES-ALL-PICKS"

router = APIRouter(dependencies=[Depends(require_admin)])

class PickCorrection(BaseModel):
    chosen_winner: str

@router.delete("/tournaments/{tournament_id}/picks", status_code=status.HTTP_200_OK)
async def reset_tournament_picks(tournament_id: int, confirmation: str, db: AsyncSession = Depends(get_db)):
    """
    Deletes every pick for the tournament.
    Query Param 'confirmation' must equal 'I-UNDERSTAND-THIS-DELETES-ALL-PICKS'.
    """
    if confirmation != RESET_CONFIRMATION:
        raise HTTPException(
            status_code=400,
            detail="Invalid confirmation string. Operation aborted."
        )
    if not await tournament_service.get_tournament(db, tournament_id):
        raise HTTPException(status_code=404, detail="Tournament not found")

    deleted = await pick_service.reset_tournament_picks(db, tournament_id)
    return {"ok": True, "deleted": deleted}

@router.delete("/users/{user_id}/picks")
async def delete_user_picks(user_id: str, tournament_id: Optional[int] = None, db: AsyncSession = Depends(get_db)):
    deleted = await pick_service.delete_user_picks(db, user_id, tournament_id)
    return {"ok": True, "deleted": deleted}

@router.get("/picks", response_model=List[AdminPickView])
async def list_all_picks(tournament_id: int, db: AsyncSession = Depends(get_db)):
    return await pick_service.admin_list(db, tournament_id)

@router.put("/picks/{pick_id}", response_model=PickResponse)
async def correct_pick(pick_id: int, payload: PickCorrection, db: AsyncSession = Depends(get_db)):
    """Changes a user's pick, including after the tournament has locked."""
    try:
        return await pick_service.admin_set_pick(db, pick_id, payload.chosen_winner)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/status")
async def get_admin_status(db: AsyncSession = Depends(get_db)):
    """
    Get database statistics for admin dashboard.
    """
    counts = {}
    for label, model in (
        ("tournaments", Tournament),
        ("teams", Team),
        ("matchups", Matchup),
        ("picks", Pick),
        ("users", User),
    ):
        result = await db.execute(select(func.count()).select_from(model))
        counts[label] = result.scalar() or 0

    decided = await db.execute(select(func.count()).select_from(Matchup).where(Matchup.winner.is_not(None)))
    counts["decided_matchups"] = decided.scalar() or 0
    return counts
