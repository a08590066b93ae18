from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from bracket_pool.app.core.database import Base

class Team(Base):
    __tablename__ = "teams"
    __table_args__ = (UniqueConstraint("tournament_id", "name", name="teams_tournament_name_uidx"),)

    id = Column(Integer, primary_key=True, index=True)
    tournament_id = Column(Integer, ForeignKey("tournaments.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    seed = Column(Integer, nullable=True)

