from sqlalchemy import Column, Integer, String, Boolean, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from bracket_pool.app.core.database import Base

class Tournament(Base):
    __tablename__ = "tournaments"
    __table_args__ = (UniqueConstraint("name", "year", name="tournaments_name_year_uidx"),)

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    name = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    is_active = Column(Boolean, default=False, nullable=False)

    # Lock State: locked when the manual flag is set OR now >= lock_at
    is_locked_manual = Column(Boolean, default=False, nullable=False)
    lock_at = Column(DateTime(timezone=True), nullable=True)

