from fastapi import APIRouter, Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel
from typing import Optional

from bracket_pool.app.core.auth import get_current_user
from bracket_pool.app.core.database import get_db
from bracket_pool.app.models.user_model import User
from bracket_pool.app.schemas.bracket_schema import PublicUserResponse, UserResponse
from bracket_pool.app.services.user_service import user_service

router = APIRouter()

class SyncUser(BaseModel):
    id: str
    email: str
    display_name: Optional[str] = None

class ProfileUpdate(BaseModel):
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None

@router.post("/sync", response_model=UserResponse)
async def sync_user(
    payload: SyncUser,
    x_user_id: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db)
):
    """
    Called by the auth layer after sign-in to mirror the user locally.
    Only the signed-in user can sync their own record.
    """
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not signed in")
    if x_user_id != payload.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Can only sync your own account")
    try:
        return await user_service.sync_user(db, payload.id, payload.email, payload.display_name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)):
    return user

@router.put("/me", response_model=UserResponse)
async def update_me(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    try:
        return await user_service.update_profile(db, user, payload.display_name, payload.avatar_url)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/{user_id}", response_model=PublicUserResponse)
async def get_user(user_id: str, db: AsyncSession = Depends(get_db)):
    user = await user_service.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
