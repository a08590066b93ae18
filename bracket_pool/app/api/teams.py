from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel
from typing import List, Optional

from bracket_pool.app.core.auth import require_admin
from bracket_pool.app.core.database import get_db
from bracket_pool.app.schemas.bracket_schema import TeamResponse
from bracket_pool.app.services.team_service import team_service
from bracket_pool.app.services.tournament_service import tournament_service

router = APIRouter()

class TeamIn(BaseModel):
    name: str
    seed: Optional[int] = None

class TeamsCreate(BaseModel):
    """Either a bulk list in `teams`, or a single team via `name` / `seed`."""
    tournament_id: int
    teams: Optional[List[TeamIn]] = None
    name: Optional[str] = None
    seed: Optional[int] = None

@router.get("", response_model=List[TeamResponse])
async def list_teams(tournament_id: int, db: AsyncSession = Depends(get_db)):
    return await team_service.list_teams(db, tournament_id)

@router.post("", response_model=List[TeamResponse], status_code=201, dependencies=[Depends(require_admin)])
async def add_teams(payload: TeamsCreate, db: AsyncSession = Depends(get_db)):
    if not await tournament_service.get_tournament(db, payload.tournament_id):
        raise HTTPException(status_code=404, detail="Tournament not found")
    if payload.teams is not None:
        teams = [t.model_dump() for t in payload.teams]
    else:
        teams = [{"name": payload.name, "seed": payload.seed}]
    try:
        return await team_service.add_teams(db, payload.tournament_id, teams)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.delete("/wipe", dependencies=[Depends(require_admin)])
async def wipe_teams(tournament_id: int, db: AsyncSession = Depends(get_db)):
    deleted = await team_service.wipe_teams(db, tournament_id)
    return {"ok": True, "deleted": deleted}
