import logging
import os
from fastapi import FastAPI, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text

from bracket_pool.app.core.database import get_db
from bracket_pool.app.core.bracket_config import registry
from bracket_pool.app.api.admin import router as admin_router
from bracket_pool.app.api.matchups import router as matchups_router
from bracket_pool.app.api.picks import router as picks_router
from bracket_pool.app.api.scores import router as scores_router
from bracket_pool.app.api.teams import router as teams_router
from bracket_pool.app.api.tournament import router as tournament_router
from bracket_pool.app.api.users import router as users_router

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

app = FastAPI(title="Bracket Pool")

# --- CORS ---
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
    if o.strip()
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(tournament_router, prefix="/tournaments", tags=["Tournaments"])
app.include_router(teams_router, prefix="/teams", tags=["Teams"])
app.include_router(matchups_router, prefix="/matchups", tags=["Matchups"])
app.include_router(picks_router, prefix="/picks", tags=["Picks"])
app.include_router(scores_router, prefix="/scores", tags=["Scores"])
app.include_router(users_router, prefix="/users", tags=["Users"])
app.include_router(admin_router, prefix="/admin", tags=["Admin"])

@app.get("/health")
async def health(db: AsyncSession = Depends(get_db)):
    """Round-trips the database."""
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logging.getLogger(__name__).error("Health check failed: %s", e)
        raise HTTPException(status_code=503, detail="Database unavailable")
    return {"ok": True}

@app.get("/bracket/layout")
async def get_layout():
    """Regions, final stage and round labels, for rendering."""
    return registry.get().model_dump()
