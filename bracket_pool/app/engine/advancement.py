"""
Bracket Advancement Engine

Derives the competitors of every matchup from the round-1 pairings and a
"winner source". Matchups are a flat collection addressed by
(region, round, match_order); the tree is implicit:

    matchup k in round N is fed by matchups 2k-1 and 2k in round N-1 (same region)

The final stage region (e.g. "Final Four") is fed by regional champions in its
first round and follows the positional rule afterwards.

The same recursion serves two readings of the bracket:
- official_winner: the admin-recorded outcomes (canonical bracket, champions)
- picks_winner(...): one user's picks (their personalised path, which keeps
  advancing their own choices even after an official upset)
"""

import logging
from typing import Callable, Dict, Iterable, List, Mapping, NamedTuple, Optional, Tuple

from bracket_pool.app.core.bracket_config import BracketLayout, registry

logger = logging.getLogger(__name__)

class Competitor(NamedTuple):
    name: str
    seed: Optional[int] = None

CompetitorPair = Tuple[Optional[Competitor], Optional[Competitor]]

# (matchup) -> team name, or None when no outcome / pick is recorded
WinnerSource = Callable[[object], Optional[str]]

def official_winner(matchup) -> Optional[str]:
    return matchup.winner

def picks_winner(picks_by_matchup: Mapping[int, str]) -> WinnerSource:
    """Winner source backed by one user's picks, keyed by matchup id."""
    def source(matchup) -> Optional[str]:
        return picks_by_matchup.get(matchup.id)
    return source

def _stored_competitor(name: Optional[str], seed: Optional[int]) -> Optional[Competitor]:
    if not name:
        return None
    return Competitor(name, seed)

class BracketResolver:
    """
    Resolves competitors for one tournament under one winner source.
    Results are memoised per matchup id for the lifetime of the instance,
    so build a new resolver per computation pass.
    """

    def __init__(
        self,
        matchups: Iterable,
        winner_source: WinnerSource = official_winner,
        layout: Optional[BracketLayout] = None
    ):
        self.layout = layout or registry.get()
        self.winner_source = winner_source
        self.matchups: List = list(matchups)
        self._slots: Dict[Tuple[str, int, int], object] = {}
        self._last_round: Dict[str, int] = {}
        self._cache: Dict[int, CompetitorPair] = {}

        for m in self.matchups:
            self._slots[(m.region, m.round, m.match_order)] = m
            if m.round > self._last_round.get(m.region, 0):
                self._last_round[m.region] = m.round

    # --- Lookups ---

    def find(self, region: str, round_number: int, match_order: int):
        return self._slots.get((region, round_number, match_order))

    def regions(self) -> List[str]:
        return sorted(self._last_round.keys())

    def first_round_of(self, region: str) -> Optional[int]:
        rounds = [r for (reg, r, _) in self._slots if reg == region]
        return min(rounds) if rounds else None

    # --- Resolution ---

    def competitors(self, matchup) -> CompetitorPair:
        """Returns (competitor A, competitor B); either may be None (TBD)."""
        cached = self._cache.get(matchup.id)
        if cached is not None:
            return cached

        if matchup.region == self.layout.final_region:
            pair = self._final_stage_competitors(matchup)
        elif matchup.round == 1:
            pair = (
                _stored_competitor(matchup.team1_name, matchup.team1_seed),
                _stored_competitor(matchup.team2_name, matchup.team2_seed),
            )
        else:
            pair = self._from_parents(matchup)

        self._cache[matchup.id] = pair
        return pair

    def _from_parents(self, matchup) -> CompetitorPair:
        base_order = 2 * matchup.match_order - 1
        parent_round = matchup.round - 1
        parent_a = self.find(matchup.region, parent_round, base_order)
        parent_b = self.find(matchup.region, parent_round, base_order + 1)
        return (self.winner(parent_a), self.winner(parent_b))

    def _final_stage_competitors(self, matchup) -> CompetitorPair:
        first_round = self.first_round_of(matchup.region)
        if matchup.round != first_round:
            # Championship and beyond: positional rule inside the final region
            return self._from_parents(matchup)

        stored = (
            _stored_competitor(matchup.team1_name, matchup.team1_seed),
            _stored_competitor(matchup.team2_name, matchup.team2_seed),
        )
        feeding = self.layout.semifinal_regions(matchup.match_order)
        if feeding is None:
            return stored

        slots = []
        for region, fallback in zip(feeding, stored):
            if region in self._last_round and region != matchup.region:
                slots.append(self.region_champion(region))
            else:
                # No regional tree for this slot: the stored team is authoritative
                slots.append(fallback)
        return (slots[0], slots[1])

    def winner(self, matchup) -> Optional[Competitor]:
        """
        The matchup's winner under the winner source. Only counts when the
        chosen team is one of the matchup's resolved competitors.
        """
        if matchup is None:
            return None

        chosen = self.winner_source(matchup)
        if not chosen:
            return None

        for competitor in self.competitors(matchup):
            if competitor is not None and competitor.name == chosen:
                return competitor

        logger.debug(
            "Matchup %s: winner %r is not one of its resolved competitors",
            matchup.id, chosen
        )
        return None

    def region_champion(self, region: str) -> Optional[Competitor]:
        last_round = self._last_round.get(region)
        if last_round is None:
            return None
        return self.winner(self.find(region, last_round, 1))

    def resolve_all(self) -> Dict[int, CompetitorPair]:
        return {m.id: self.competitors(m) for m in self.matchups}

def resolve_competitors(
    matchup,
    matchups: Iterable,
    winner_source: WinnerSource = official_winner,
    layout: Optional[BracketLayout] = None
) -> CompetitorPair:
    """One-shot resolution of a single matchup against its tournament's matchups."""
    return BracketResolver(matchups, winner_source, layout).competitors(matchup)
