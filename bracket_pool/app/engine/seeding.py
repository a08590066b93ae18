import random
from typing import Any, Dict, List, Optional, Sequence, Tuple

from bracket_pool.app.core.bracket_config import BracketLayout
from bracket_pool.app.models.enums import SeedingMode

UNSEEDED = 9999

def standard_bracket_order(size: int) -> List[int]:
    """
    Seed positions in bracket order, so that adjacent pairs meet in round 1
    and the top seeds can only meet late: 4 -> [1, 4, 2, 3].
    """
    order = [1]
    while len(order) < size:
        span = len(order) * 2 + 1
        order = [s for seed in order for s in (seed, span - seed)]
    return order

def round1_pairings(size: int, layout: BracketLayout) -> List[Tuple[int, int]]:
    """1-based seed position pairs for round 1 of a region with `size` teams."""
    configured = layout.round1_pairings.get(size)
    if configured:
        return [tuple(p) for p in configured]
    order = standard_bracket_order(size)
    return [(order[i], order[i + 1]) for i in range(0, size, 2)]

def order_teams(teams: Sequence, mode: SeedingMode = SeedingMode.SEEDED) -> List:
    ordered = list(teams)
    if mode == SeedingMode.RANDOM:
        random.shuffle(ordered)
    else:
        # Missing seeds go last; stable by id
        ordered.sort(key=lambda t: (t.seed if t.seed is not None else UNSEEDED, t.id))
    return ordered

def _is_power_of_two(n: int) -> bool:
    return n >= 2 and n & (n - 1) == 0

def _slot(region: str, round_number: int, match_order: int, team1=None, team2=None) -> Dict[str, Any]:
    return {
        "region": region,
        "round": round_number,
        "match_order": match_order,
        "team1_name": team1.name if team1 is not None else None,
        "team2_name": team2.name if team2 is not None else None,
        "team1_seed": team1.seed if team1 is not None else None,
        "team2_seed": team2.seed if team2 is not None else None,
        "winner": None,
    }

def build_bracket(
    teams: Sequence,
    layout: BracketLayout,
    mode: SeedingMode = SeedingMode.SEEDED,
    regions: Optional[Sequence[str]] = None
) -> List[Dict[str, Any]]:
    """
    Full bracket skeleton: seeded round-1 matchups per region, empty slots
    for every later regional round and, with more than one region, the
    final stage (semifinals per configured region pair + championship).
    """
    regions = list(regions or layout.regions)
    if not regions:
        raise ValueError("No regions configured")
    if not teams:
        raise ValueError("No teams found for this tournament")

    per_region, remainder = divmod(len(teams), len(regions))
    if remainder or not _is_power_of_two(per_region):
        raise ValueError(
            f"Need a power-of-two number of teams per region across {len(regions)} region(s). "
            f"Found {len(teams)} teams."
        )

    semifinals = layout.final_stage.semifinals
    if len(regions) > 1 and not semifinals:
        raise ValueError(
            f"No semifinal pairing for {len(regions)} regions; configure final_stage.semifinals"
        )

    # Regions take consecutive chunks of the seed-ordered list, first listed
    # region first. Seeds are read as overall ranks 1..N: teams that share
    # regional seeds (1-16 in each region) land together in the first region.
    ordered = order_teams(teams, mode)
    pairings = round1_pairings(per_region, layout)
    regional_rounds = per_region.bit_length() - 1
    slots: List[Dict[str, Any]] = []

    for r, region in enumerate(regions):
        chunk = ordered[r * per_region:(r + 1) * per_region]

        for i, (a, b) in enumerate(pairings, start=1):
            slots.append(_slot(region, 1, i, chunk[a - 1], chunk[b - 1]))

        for round_number in range(2, regional_rounds + 1):
            for i in range(1, (per_region >> round_number) + 1):
                slots.append(_slot(region, round_number, i))

    if len(regions) > 1:
        final_region = layout.final_region
        count = len(semifinals)
        round_number = regional_rounds + 1
        while True:
            for i in range(1, count + 1):
                slots.append(_slot(final_region, round_number, i))
            if count == 1:
                break
            count = (count + 1) // 2
            round_number += 1

    return slots
