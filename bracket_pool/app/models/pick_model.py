from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from bracket_pool.app.core.database import Base

class Pick(Base):
    __tablename__ = "picks"
    __table_args__ = (UniqueConstraint("user_id", "matchup_id", name="picks_user_matchup_uidx"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    matchup_id = Column(Integer, ForeignKey("matchups.id", ondelete="CASCADE"), nullable=False, index=True)
    chosen_winner = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

