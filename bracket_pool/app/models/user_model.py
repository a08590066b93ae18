from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from bracket_pool.app.core.database import Base

class User(Base):
    """Mirror of the auth provider's user, plus the display data the pool needs."""
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)  # id issued by the auth provider
    email = Column(String(255), nullable=False, unique=True)
    display_name = Column(String(120), nullable=False)
    avatar_url = Column(String(512), nullable=True)
    role = Column(String, default="member", nullable=False)  # admin | member
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
