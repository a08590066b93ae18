"""
Bracket Service - Matchup store and bracket views

Single source of truth for matchup rows:
- Listing / fetching matchups
- Setting or clearing official outcomes (admin)
- Hand edits of single matchups (admin)
- Generating the bracket skeleton from a tournament's teams
- Building resolved bracket views (official, or one user's picks)
"""

import logging
from typing import Any, Dict, List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import delete, update

from bracket_pool.app.core.bracket_config import BracketLayout, registry
from bracket_pool.app.engine.advancement import BracketResolver, Competitor, official_winner, picks_winner
from bracket_pool.app.engine.scoring import is_correct
from bracket_pool.app.engine.seeding import build_bracket
from bracket_pool.app.models.enums import SeedingMode
from bracket_pool.app.models.matchup_model import Matchup
from bracket_pool.app.models.pick_model import Pick
from bracket_pool.app.models.team_model import Team
from bracket_pool.app.models.tournament_model import Tournament
from bracket_pool.app.schemas.bracket_schema import BracketView, CompetitorView, ResolvedMatchup
from bracket_pool.app.services.team_service import team_service
from bracket_pool.app.services.tournament_service import tournament_service

logger = logging.getLogger(__name__)

# Columns an admin may set on a single matchup; the official winner goes through set_winner
MATCHUP_FIELDS = ("region", "round", "match_order", "team1_name", "team2_name", "team1_seed", "team2_seed")

def _clean_matchup_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    cleaned = {}
    for key, value in data.items():
        if key not in MATCHUP_FIELDS:
            continue
        if isinstance(value, str):
            value = value.strip() or None
        cleaned[key] = value
    return cleaned

def _competitor_view(c: Optional[Competitor]) -> Optional[CompetitorView]:
    if c is None:
        return None
    return CompetitorView(name=c.name, seed=c.seed)

class BracketService:
    """Centralized service for matchup operations"""

    def __init__(self, layout: Optional[BracketLayout] = None):
        self._layout = layout

    @property
    def layout(self) -> BracketLayout:
        return self._layout or registry.get()

    async def list_matchups(
        self,
        db: AsyncSession,
        tournament_id: int,
        round_number: Optional[int] = None
    ) -> List[Matchup]:
        query = select(Matchup).where(Matchup.tournament_id == tournament_id)
        if round_number is not None:
            query = query.where(Matchup.round == round_number)
        query = query.order_by(Matchup.round, Matchup.region, Matchup.match_order, Matchup.id)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_matchup(self, db: AsyncSession, matchup_id: int) -> Optional[Matchup]:
        result = await db.execute(select(Matchup).where(Matchup.id == matchup_id))
        return result.scalar_one_or_none()

    async def picks_by_matchup(self, db: AsyncSession, tournament_id: int, user_id: str) -> Dict[int, str]:
        """One user's picks for a tournament, keyed by matchup id."""
        result = await db.execute(
            select(Pick.matchup_id, Pick.chosen_winner)
            .join(Matchup, Matchup.id == Pick.matchup_id)
            .where(Matchup.tournament_id == tournament_id, Pick.user_id == user_id)
        )
        return {row.matchup_id: row.chosen_winner for row in result.all()}

    async def set_winner(self, db: AsyncSession, matchup_id: int, winner: Optional[str]) -> Matchup:
        """
        Records (or clears, with winner=None) the official outcome.
        The winner must be one of the competitors in the official bracket.
        """
        matchup = await self.get_matchup(db, matchup_id)
        if not matchup:
            raise LookupError(f"Matchup {matchup_id} not found")

        if winner is not None:
            siblings = await self.list_matchups(db, matchup.tournament_id)
            resolver = BracketResolver(siblings, official_winner, self.layout)
            names = [c.name for c in resolver.competitors(matchup) if c is not None]
            if winner not in names:
                raise ValueError(
                    f"{winner!r} is not playing in this matchup (competitors: {names or 'TBD'})"
                )

        matchup.winner = winner
        await db.commit()
        await db.refresh(matchup)

        if winner is None:
            logger.info("Matchup %s: official outcome cleared", matchup_id)
        else:
            logger.info("Matchup %s: official winner %s", matchup_id, winner)
        return matchup

    async def create_matchups(self, db: AsyncSession, tournament_id: int, rows: List[Dict[str, Any]]) -> List[Matchup]:
        """
        Inserts hand-made matchup slots (single or bulk), e.g. stored
        final-stage pairings. Raises ValueError on a slot that already exists.
        """
        if not rows:
            raise ValueError("No matchups provided")
        cleaned = [_clean_matchup_fields(row) for row in rows]
        for row in cleaned:
            if any(row.get(key) is None for key in ("region", "round", "match_order")):
                raise ValueError("Each matchup needs region, round and match_order")
        matchups = [Matchup(tournament_id=tournament_id, **row) for row in cleaned]
        db.add_all(matchups)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ValueError("A matchup already exists for one of these (region, round, match_order) slots")
        for m in matchups:
            await db.refresh(m)
        logger.info("Tournament %s: added %d matchups", tournament_id, len(matchups))
        return matchups

    async def update_matchup(self, db: AsyncSession, matchup_id: int, patch: Dict[str, Any]) -> Matchup:
        """
        Edits a matchup's slot, stored teams or seeds. Renaming a stored team
        also renames it in the tournament's team list, recorded outcomes and
        picks, so a typo fix doesn't orphan them.
        """
        matchup = await self.get_matchup(db, matchup_id)
        if not matchup:
            raise LookupError(f"Matchup {matchup_id} not found")

        changes = _clean_matchup_fields(patch)
        if not changes:
            raise ValueError("No fields to update")
        for key in ("region", "round", "match_order"):
            if key in changes and changes[key] is None:
                raise ValueError(f"{key} cannot be null")

        renames = {}
        for key in ("team1_name", "team2_name"):
            old, new = getattr(matchup, key), changes.get(key)
            if key in changes and old and new and old != new:
                renames[old] = new

        tournament_id = matchup.tournament_id
        for key, value in changes.items():
            setattr(matchup, key, value)

        in_tournament = select(Matchup.id).where(Matchup.tournament_id == tournament_id)
        try:
            for old, new in renames.items():
                await db.execute(
                    update(Matchup)
                    .where(Matchup.tournament_id == tournament_id, Matchup.winner == old)
                    .values(winner=new)
                    .execution_options(synchronize_session="fetch")
                )
                await db.execute(
                    update(Pick)
                    .where(Pick.matchup_id.in_(in_tournament), Pick.chosen_winner == old)
                    .values(chosen_winner=new)
                    .execution_options(synchronize_session="fetch")
                )
                await db.execute(
                    update(Team)
                    .where(Team.tournament_id == tournament_id, Team.name == old)
                    .values(name=new)
                    .execution_options(synchronize_session="fetch")
                )
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ValueError("Update collides with an existing matchup slot or team name")
        await db.refresh(matchup)

        logger.info("Matchup %s updated: %s", matchup_id, sorted(changes))
        for old, new in renames.items():
            logger.info("Tournament %s: renamed team %r -> %r", tournament_id, old, new)
        return matchup

    async def delete_matchup(self, db: AsyncSession, matchup_id: int) -> bool:
        """Deletes one matchup and the picks made on it."""
        matchup = await self.get_matchup(db, matchup_id)
        if not matchup:
            return False

        await db.execute(
            delete(Pick).where(Pick.matchup_id == matchup_id).execution_options(synchronize_session="fetch")
        )
        await db.delete(matchup)
        await db.commit()
        logger.info("Matchup %s deleted", matchup_id)
        return True

    async def generate_bracket(
        self,
        db: AsyncSession,
        tournament_id: int,
        mode: SeedingMode = SeedingMode.SEEDED,
        wipe: bool = True
    ) -> List[Matchup]:
        """
        Builds every matchup slot from the tournament's teams.
        Raises ValueError when the team count doesn't fit the layout.
        """
        teams = await team_service.list_teams(db, tournament_id)
        slots = build_bracket(teams, self.layout, mode)

        if wipe:
            existing = select(Matchup.id).where(Matchup.tournament_id == tournament_id)
            await db.execute(
                delete(Pick).where(Pick.matchup_id.in_(existing)).execution_options(synchronize_session="fetch")
            )
            await db.execute(
                delete(Matchup).where(Matchup.tournament_id == tournament_id).execution_options(synchronize_session="fetch")
            )
        elif await self.list_matchups(db, tournament_id):
            raise ValueError("Bracket already exists for this tournament; regenerate with wipe enabled")

        rows = [Matchup(tournament_id=tournament_id, **slot) for slot in slots]
        db.add_all(rows)
        await db.commit()

        logger.info(
            "Tournament %s: generated %d matchups from %d teams (%s)",
            tournament_id, len(rows), len(teams), mode
        )
        return await self.list_matchups(db, tournament_id)

    async def build_view(
        self,
        db: AsyncSession,
        tournament: Tournament,
        user_id: Optional[str] = None
    ) -> BracketView:
        """
        Resolved bracket for the official outcomes (user_id=None) or for one
        user's picks. A user's view advances their own earlier picks.
        """
        matchups = await self.list_matchups(db, tournament.id)

        picks: Dict[int, str] = {}
        if user_id is not None:
            picks = await self.picks_by_matchup(db, tournament.id, user_id)

        source = picks_winner(picks) if user_id is not None else official_winner
        resolver = BracketResolver(matchups, source, self.layout)

        resolved = []
        for m in matchups:
            team1, team2 = resolver.competitors(m)
            pick = picks.get(m.id)
            resolved.append(ResolvedMatchup(
                id=m.id,
                region=m.region,
                round=m.round,
                round_label=self.layout.round_label(m.round),
                match_order=m.match_order,
                team1=_competitor_view(team1),
                team2=_competitor_view(team2),
                winner=m.winner,
                pick=pick,
                is_correct=is_correct(pick, m.winner) if (pick and m.winner) else None,
            ))

        champions = {
            region: _competitor_view(resolver.region_champion(region))
            for region in resolver.regions()
        }

        return BracketView(
            tournament_id=tournament.id,
            user_id=user_id,
            lock=tournament_service.lock_status(tournament),
            champions=champions,
            matchups=resolved,
        )

bracket_service = BracketService()
