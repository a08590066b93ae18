from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel
from typing import List, Optional

from bracket_pool.app.core.auth import require_admin
from bracket_pool.app.core.database import get_db
from bracket_pool.app.models.enums import SeedingMode
from bracket_pool.app.schemas.bracket_schema import MatchupResponse
from bracket_pool.app.services.bracket_service import bracket_service
from bracket_pool.app.services.tournament_service import tournament_service

router = APIRouter()

class WinnerUpdate(BaseModel):
    winner: Optional[str] = None  # null clears the outcome

class MatchupIn(BaseModel):
    region: str
    round: int
    match_order: int
    team1_name: Optional[str] = None
    team2_name: Optional[str] = None
    team1_seed: Optional[int] = None
    team2_seed: Optional[int] = None

class MatchupsCreate(BaseModel):
    tournament_id: int
    matchups: List[MatchupIn]

class MatchupUpdate(BaseModel):
    region: Optional[str] = None
    round: Optional[int] = None
    match_order: Optional[int] = None
    team1_name: Optional[str] = None
    team2_name: Optional[str] = None
    team1_seed: Optional[int] = None
    team2_seed: Optional[int] = None

class GenerateRequest(BaseModel):
    tournament_id: int
    mode: SeedingMode = SeedingMode.SEEDED
    wipe: bool = True

@router.get("", response_model=List[MatchupResponse])
async def list_matchups(tournament_id: int, round: Optional[int] = None, db: AsyncSession = Depends(get_db)):
    return await bracket_service.list_matchups(db, tournament_id, round)

@router.get("/{matchup_id}", response_model=MatchupResponse)
async def get_matchup(matchup_id: int, db: AsyncSession = Depends(get_db)):
    matchup = await bracket_service.get_matchup(db, matchup_id)
    if not matchup:
        raise HTTPException(status_code=404, detail="Matchup not found")
    return matchup

@router.put("/{matchup_id}/winner", response_model=MatchupResponse, dependencies=[Depends(require_admin)])
async def set_winner(matchup_id: int, payload: WinnerUpdate, db: AsyncSession = Depends(get_db)):
    try:
        return await bracket_service.set_winner(db, matchup_id, payload.winner)
    except LookupError:
        raise HTTPException(status_code=404, detail="Matchup not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.post("/generate", dependencies=[Depends(require_admin)])
async def generate_bracket(payload: GenerateRequest, db: AsyncSession = Depends(get_db)):
    """Builds the full bracket skeleton from the tournament's teams."""
    if not await tournament_service.get_tournament(db, payload.tournament_id):
        raise HTTPException(status_code=404, detail="Tournament not found")
    try:
        matchups = await bracket_service.generate_bracket(db, payload.tournament_id, payload.mode, payload.wipe)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "ok": True,
        "tournament_id": payload.tournament_id,
        "inserted": len(matchups),
        "mode": payload.mode,
    }

@router.post("", response_model=List[MatchupResponse], status_code=201, dependencies=[Depends(require_admin)])
async def create_matchups(payload: MatchupsCreate, db: AsyncSession = Depends(get_db)):
    if not await tournament_service.get_tournament(db, payload.tournament_id):
        raise HTTPException(status_code=404, detail="Tournament not found")
    try:
        return await bracket_service.create_matchups(
            db, payload.tournament_id, [m.model_dump() for m in payload.matchups]
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.put("/{matchup_id}", response_model=MatchupResponse, dependencies=[Depends(require_admin)])
async def update_matchup(matchup_id: int, payload: MatchupUpdate, db: AsyncSession = Depends(get_db)):
    """Fixes stored teams, seeds or the slot. Send only the fields to change (null clears a team)."""
    try:
        return await bracket_service.update_matchup(db, matchup_id, payload.model_dump(exclude_unset=True))
    except LookupError:
        raise HTTPException(status_code=404, detail="Matchup not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.delete("/{matchup_id}", dependencies=[Depends(require_admin)])
async def delete_matchup(matchup_id: int, db: AsyncSession = Depends(get_db)):
    if not await bracket_service.delete_matchup(db, matchup_id):
        raise HTTPException(status_code=404, detail="Matchup not found")
    return {"ok": True}
