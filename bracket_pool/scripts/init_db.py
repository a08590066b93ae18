import asyncio
import os
import sys

sys.path.append(os.path.join(os.path.dirname(__file__), '../../'))

from bracket_pool.app.core.database import engine, Base
# IMPORT ALL MODELS
from bracket_pool.app.models.user_model import User
from bracket_pool.app.models.tournament_model import Tournament
from bracket_pool.app.models.team_model import Team
from bracket_pool.app.models.matchup_model import Matchup
from bracket_pool.app.models.pick_model import Pick

async def init_models():
    async with engine.begin() as conn:
        # Safe create (only creates if missing). Schema changes need manual ALTERs.
        await conn.run_sync(Base.metadata.create_all)
        print("Database tables updated.")

if __name__ == "__main__":
    asyncio.run(init_models())
