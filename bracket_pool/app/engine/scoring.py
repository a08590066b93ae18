from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from bracket_pool.app.schemas.score_schema import LeaderboardEntry

def round_points(round_number: int) -> int:
    """Points for a correct pick: 1, 2, 4, 8, 16, 32 for rounds 1-6."""
    return 2 ** max(0, round_number - 1)

def is_correct(chosen_winner: Optional[str], official_winner: Optional[str]) -> bool:
    return official_winner is not None and chosen_winner == official_winner

def compute_leaderboard(
    matchups: Iterable,
    picks: Iterable,
    display_names: Optional[Mapping[str, str]] = None
) -> List[LeaderboardEntry]:
    """
    Live leaderboard from official outcomes and all picks.

    matchups: objects with id, round, winner (undecided ones are ignored)
    picks: objects with user_id, matchup_id, chosen_winner
    display_names: user id -> display name; missing ids fall back to the id

    Scoring is value equality of the pick against the outcome on the same
    matchup id, independent of whether the picked team could have reached it.
    """
    display_names = display_names or {}

    # 1. Decided matchups
    decided: Dict[int, Tuple[int, str]] = {}
    for m in matchups:
        if m.winner is None:
            continue
        decided[m.id] = (m.round or 1, m.winner)

    if not decided:
        return []

    # 2. Fold picks into per-user totals
    totals: Dict[str, List[int]] = {}
    for p in picks:
        meta = decided.get(p.matchup_id)
        if meta is None:
            continue
        round_number, official = meta
        if not is_correct(p.chosen_winner, official):
            continue

        user_id = str(p.user_id)
        entry = totals.setdefault(user_id, [0, 0])
        entry[0] += round_points(round_number)
        entry[1] += 1

    # 3. Rank: score desc, then name (case-insensitive), then id for stable output
    rows = [
        LeaderboardEntry(
            user_id=user_id,
            display_name=display_names.get(user_id) or user_id,
            total_score=score,
            correct_count=correct,
        )
        for user_id, (score, correct) in totals.items()
    ]
    rows.sort(key=lambda r: (-r.total_score, r.display_name.lower(), r.user_id))
    return rows
