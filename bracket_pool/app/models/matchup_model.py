from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from bracket_pool.app.core.database import Base

class Matchup(Base):
    """
    One pairing slot of the bracket, addressed by (region, round, match_order).
    Only round-1 rows carry team names; later rounds are derived at read time
    by the advancement engine.
    """
    __tablename__ = "matchups"
    __table_args__ = (
        UniqueConstraint("tournament_id", "region", "round", "match_order", name="matchups_slot_uidx"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tournament_id = Column(Integer, ForeignKey("tournaments.id"), nullable=False, index=True)

    region = Column(String, nullable=False)
    round = Column(Integer, nullable=False)
    match_order = Column(Integer, nullable=False)

    team1_name = Column(String, nullable=True)
    team2_name = Column(String, nullable=True)
    team1_seed = Column(Integer, nullable=True)  # display only
    team2_seed = Column(Integer, nullable=True)

    # Official outcome (team name), admin-controlled
    winner = Column(String, nullable=True)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

