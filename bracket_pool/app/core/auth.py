"""
Authorization

Sign-in is handled by the upstream auth provider, which forwards the
signed-in user's id in the X-User-Id header. Privileges come from the role
stored on the user record; every admin route goes through require_admin.
"""

from typing import Optional
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from bracket_pool.app.core.database import get_db
from bracket_pool.app.models.user_model import User
from bracket_pool.app.services.user_service import user_service

async def get_current_user(
    x_user_id: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db)
) -> User:
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not signed in")

    user = await user_service.get_user(db, x_user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown user; sync the account first")
    return user

async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin only")
    return user
