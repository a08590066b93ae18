#!/usr/bin/env python3
"""
Bracket Diagnostic Script
Prints the active tournament's lock state, official bracket progress,
regional champions and the current leaderboard.
"""

import asyncio
import os
import sys

# Add project root to path so we can import from bracket_pool.app
sys.path.append(os.path.join(os.path.dirname(__file__), '../../'))

from bracket_pool.app.core.database import AsyncSessionLocal
from bracket_pool.app.engine.advancement import BracketResolver
from bracket_pool.app.services.bracket_service import bracket_service
from bracket_pool.app.services.score_service import score_service
from bracket_pool.app.services.tournament_service import tournament_service

async def diagnose():
    async with AsyncSessionLocal() as db:
        t = await tournament_service.get_active(db)
        if not t:
            print("No active tournament.")
            return

        lock = tournament_service.lock_status(t)
        print(f"--- Diagnostic: Tournament #{t.id} {t.name} {t.year} ---")
        print(f"Lock: {lock['state']} ({lock['message']})")

        matchups = await bracket_service.list_matchups(db, t.id)
        decided = [m for m in matchups if m.winner]
        print(f"\nMatchups decided: {len(decided)}/{len(matchups)}")

        resolver = BracketResolver(matchups, layout=bracket_service.layout)
        rounds = sorted({m.round for m in matchups})
        for r in rounds:
            in_round = [m for m in matchups if m.round == r]
            done = sum(1 for m in in_round if m.winner)
            print(f"  {bracket_service.layout.round_label(r)}: {done}/{len(in_round)}")

        # Outcomes that no longer match the official competitors (e.g. an earlier result was changed)
        stale = [m for m in decided if resolver.winner(m) is None]
        if stale:
            print(f"\n⚠️  {len(stale)} recorded outcome(s) don't match the current competitors:")
            for m in stale[:10]:
                print(f"  Matchup {m.id} ({m.region} R{m.round} #{m.match_order}): winner={m.winner}")

        print("\nChampions:")
        for region in resolver.regions():
            champ = resolver.region_champion(region)
            print(f"  {region}: {champ.name if champ else 'TBD'}")

        board = await score_service.leaderboard(db, t.id)
        print(f"\nLeaderboard ({len(board)} scoring users):")
        for i, row in enumerate(board[:10], start=1):
            print(f"  {i}. {row.display_name}: {row.total_score} pts ({row.correct_count} correct)")

if __name__ == "__main__":
    asyncio.run(diagnose())
