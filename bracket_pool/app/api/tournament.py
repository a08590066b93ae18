from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from bracket_pool.app.core.auth import require_admin
from bracket_pool.app.core.database import get_db
from bracket_pool.app.schemas.bracket_schema import BracketView, LockStatusResponse, TournamentResponse
from bracket_pool.app.services.bracket_service import bracket_service
from bracket_pool.app.services.tournament_service import tournament_service

router = APIRouter()

class TournamentCreate(BaseModel):
    name: str
    year: int
    lock_at: Optional[datetime] = None

class TournamentUpdate(BaseModel):
    name: Optional[str] = None
    is_locked_manual: Optional[bool] = None
    lock_at: Optional[datetime] = None

class TournamentDetail(TournamentResponse):
    lock: LockStatusResponse

def _detail(t) -> TournamentDetail:
    return TournamentDetail(
        **TournamentResponse.model_validate(t).model_dump(),
        lock=tournament_service.lock_status(t)
    )

@router.get("", response_model=List[TournamentResponse])
async def list_tournaments(db: AsyncSession = Depends(get_db)):
    return await tournament_service.list_tournaments(db)

@router.post("", response_model=TournamentResponse, status_code=201, dependencies=[Depends(require_admin)])
async def create_tournament(payload: TournamentCreate, db: AsyncSession = Depends(get_db)):
    try:
        return await tournament_service.create_tournament(db, payload.name, payload.year, payload.lock_at)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/active", response_model=Optional[TournamentDetail])
async def get_active_tournament(db: AsyncSession = Depends(get_db)):
    """Newest active tournament, or null when none is active."""
    t = await tournament_service.get_active(db)
    if not t:
        return None
    return _detail(t)

@router.get("/{id}", response_model=TournamentDetail)
async def get_tournament(id: int, db: AsyncSession = Depends(get_db)):
    t = await tournament_service.get_tournament(db, id)
    if not t:
        raise HTTPException(status_code=404, detail="Tournament not found")
    return _detail(t)

@router.put("/{id}", response_model=TournamentDetail, dependencies=[Depends(require_admin)])
async def update_tournament(id: int, payload: TournamentUpdate, db: AsyncSession = Depends(get_db)):
    """Rename, toggle the manual lock, or move/clear lock_at (send null to clear)."""
    patch = payload.model_dump(exclude_unset=True)
    try:
        t = await tournament_service.update_tournament(db, id, patch)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not t:
        raise HTTPException(status_code=404, detail="Tournament not found")
    return _detail(t)

@router.post("/{id}/activate", response_model=TournamentDetail, dependencies=[Depends(require_admin)])
async def activate_tournament(id: int, db: AsyncSession = Depends(get_db)):
    t = await tournament_service.activate(db, id)
    if not t:
        raise HTTPException(status_code=404, detail="Tournament not found")
    return _detail(t)

@router.get("/{id}/bracket", response_model=BracketView)
async def get_bracket(id: int, user_id: Optional[str] = None, db: AsyncSession = Depends(get_db)):
    """
    Resolved bracket. Without user_id: the official bracket.
    With user_id: that user's picks (read-only share view).
    """
    t = await tournament_service.get_tournament(db, id)
    if not t:
        raise HTTPException(status_code=404, detail="Tournament not found")
    return await bracket_service.build_view(db, t, user_id)
