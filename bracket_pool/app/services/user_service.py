import logging
import os
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import Dict, Iterable, Optional

from bracket_pool.app.models.user_model import User
from bracket_pool.app.models.enums import UserRole

logger = logging.getLogger(__name__)

def admin_emails() -> set:
    """Comma separated ADMIN_EMAILS; the only place the privileged list is read."""
    raw = os.getenv("ADMIN_EMAILS", "")
    return {e.strip().lower() for e in raw.split(",") if e.strip()}

class UserService:
    async def get_user(self, db: AsyncSession, user_id: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def sync_user(
        self,
        db: AsyncSession,
        user_id: str,
        email: str,
        display_name: Optional[str] = None
    ) -> User:
        """
        Upserts the auth provider's user. Display name falls back to the
        e-mail local part. The e-mail is fixed at the first sync and the
        admin role is always derived from that stored address via ADMIN_EMAILS.
        """
        user_id = (user_id or "").strip()
        email = (email or "").strip()
        if not user_id or not email:
            raise ValueError("Missing id or email")

        cleaned = (display_name or "").strip()

        user = await self.get_user(db, user_id)
        if not user:
            final_name = cleaned or email.split("@")[0] or "Player"
            user = User(id=user_id, email=email, display_name=final_name)
            db.add(user)
        else:
            if email.lower() != user.email.lower():
                logger.warning("User %s: ignoring e-mail change on sync", user_id)
            # Keep a name the user chose in their profile unless a new one is sent
            if cleaned:
                user.display_name = cleaned

        user.role = self.role_for(user.email).value

        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ValueError("E-mail is already registered to another user")
        await db.refresh(user)
        return user

    def role_for(self, email: str) -> UserRole:
        return UserRole.ADMIN if email.strip().lower() in admin_emails() else UserRole.MEMBER

    async def update_profile(
        self,
        db: AsyncSession,
        user: User,
        display_name: Optional[str] = None,
        avatar_url: Optional[str] = None
    ) -> User:
        if display_name is not None:
            cleaned = display_name.strip()
            if not cleaned:
                raise ValueError("Display name cannot be empty")
            user.display_name = cleaned
        if avatar_url is not None:
            user.avatar_url = avatar_url or None
        await db.commit()
        await db.refresh(user)
        return user

    async def display_names(self, db: AsyncSession, user_ids: Iterable[str]) -> Dict[str, str]:
        """Predictor directory: id -> display name for the ids that exist."""
        ids = list(set(user_ids))
        if not ids:
            return {}
        result = await db.execute(select(User.id, User.display_name).where(User.id.in_(ids)))
        return {row.id: row.display_name for row in result.all()}

user_service = UserService()
