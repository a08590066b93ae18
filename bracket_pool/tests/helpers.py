from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bracket_pool.app.core.bracket_config import BracketLayout, FinalStageConfig
from bracket_pool.app.core.database import Base
from bracket_pool.app.models.matchup_model import Matchup
from bracket_pool.app.models.pick_model import Pick
# Imported for their tables
from bracket_pool.app.models.team_model import Team  # noqa: F401
from bracket_pool.app.models.tournament_model import Tournament  # noqa: F401
from bracket_pool.app.models.user_model import User  # noqa: F401

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

FOUR_REGIONS = BracketLayout(
    regions=["East", "West", "South", "Midwest"],
    final_stage=FinalStageConfig(
        region="Final Four",
        semifinals=[("East", "West"), ("South", "Midwest")]
    ),
)

SINGLE_REGION = BracketLayout(regions=["East"])

def matchup(id, region, round, order, team1=None, team2=None, winner=None, seed1=None, seed2=None):
    return Matchup(
        id=id,
        tournament_id=1,
        region=region,
        round=round,
        match_order=order,
        team1_name=team1,
        team2_name=team2,
        team1_seed=seed1,
        team2_seed=seed2,
        winner=winner,
    )

def pick(user_id, matchup_id, chosen):
    return Pick(user_id=user_id, matchup_id=matchup_id, chosen_winner=chosen)

def four_team_region():
    """
    East only: R1 #1 A(1) vs B(4), R1 #2 C(2) vs D(3), R2 #1 winner vs winner.
    """
    return [
        matchup(1, "East", 1, 1, "A", "B", seed1=1, seed2=4),
        matchup(2, "East", 1, 2, "C", "D", seed1=2, seed2=3),
        matchup(3, "East", 2, 1),
    ]

async def make_session_maker():
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return engine, sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
