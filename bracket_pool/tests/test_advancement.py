import unittest
from bracket_pool.app.engine.advancement import (
    BracketResolver,
    Competitor,
    official_winner,
    picks_winner,
    resolve_competitors,
)
from bracket_pool.tests.helpers import FOUR_REGIONS, SINGLE_REGION, four_team_region, matchup

class TestRegionalAdvancement(unittest.TestCase):
    def setUp(self):
        self.matchups = four_team_region()
        self.r1_top, self.r1_bottom, self.r2 = self.matchups

    def test_round_one_returns_stored_competitors(self):
        pair = resolve_competitors(self.r1_top, self.matchups, official_winner, SINGLE_REGION)
        self.assertEqual(pair, (Competitor("A", 1), Competitor("B", 4)))

    def test_round_two_fed_by_official_winners(self):
        """
        Scenario: A beats B, C beats D. Round 2 must be A vs C, seeds carried along.
        """
        self.r1_top.winner = "A"
        self.r1_bottom.winner = "C"

        pair = resolve_competitors(self.r2, self.matchups, official_winner, SINGLE_REGION)
        self.assertEqual(pair, (Competitor("A", 1), Competitor("C", 2)))

    def test_unresolved_parent_leaves_slot_empty(self):
        self.r1_top.winner = "B"

        team1, team2 = resolve_competitors(self.r2, self.matchups, official_winner, SINGLE_REGION)
        self.assertEqual(team1, Competitor("B", 4))
        self.assertIsNone(team2)

    def test_fully_unresolved_tree(self):
        resolver = BracketResolver(self.matchups, official_winner, SINGLE_REGION)
        self.assertEqual(resolver.competitors(self.r2), (None, None))
        self.assertIsNone(resolver.region_champion("East"))

    def test_winner_outside_competitors_is_ignored(self):
        """A stale outcome naming a team that isn't in the matchup doesn't advance anyone."""
        self.r1_top.winner = "Z"
        self.r1_bottom.winner = "D"

        pair = resolve_competitors(self.r2, self.matchups, official_winner, SINGLE_REGION)
        self.assertEqual(pair, (None, Competitor("D", 3)))

    def test_resolution_is_idempotent_and_order_independent(self):
        self.r1_top.winner = "A"
        self.r1_bottom.winner = "D"
        self.r2.winner = "D"

        forward = BracketResolver(self.matchups, official_winner, SINGLE_REGION)
        first = forward.resolve_all()
        second = forward.resolve_all()

        backward = BracketResolver(list(reversed(self.matchups)), official_winner, SINGLE_REGION)
        # Ask for the deepest matchup first so the cache is filled in a different order
        backward.competitors(self.r2)

        self.assertEqual(first, second)
        self.assertEqual(first, backward.resolve_all())
        self.assertEqual(forward.region_champion("East"), Competitor("D", 3))

    def test_missing_parent_slot(self):
        """Round 2 #2 has no parents at all in a four-team region."""
        orphan = matchup(4, "East", 2, 2)
        pair = resolve_competitors(orphan, self.matchups + [orphan], official_winner, SINGLE_REGION)
        self.assertEqual(pair, (None, None))

class TestPersonalisedView(unittest.TestCase):
    def setUp(self):
        self.matchups = four_team_region()
        self.r1_top, self.r1_bottom, self.r2 = self.matchups
        # Official results: favourites win
        self.r1_top.winner = "A"
        self.r1_bottom.winner = "C"

    def test_user_sees_own_upset_advance(self):
        """
        Scenario: the user picked B over A. Officially A won, but the user's
        bracket keeps B in round 2.
        """
        picks = {1: "B", 2: "C"}
        user_view = BracketResolver(self.matchups, picks_winner(picks), SINGLE_REGION)
        official = BracketResolver(self.matchups, official_winner, SINGLE_REGION)

        self.assertEqual(user_view.competitors(self.r2), (Competitor("B", 4), Competitor("C", 2)))
        self.assertEqual(official.competitors(self.r2), (Competitor("A", 1), Competitor("C", 2)))

    def test_missing_pick_is_tbd(self):
        user_view = BracketResolver(self.matchups, picks_winner({2: "D"}), SINGLE_REGION)
        self.assertEqual(user_view.competitors(self.r2), (None, Competitor("D", 3)))

    def test_user_champion(self):
        picks = {1: "B", 2: "C", 3: "B"}
        user_view = BracketResolver(self.matchups, picks_winner(picks), SINGLE_REGION)
        self.assertEqual(user_view.region_champion("East"), Competitor("B", 4))

    def test_stale_later_pick_after_changing_earlier_pick(self):
        """User first had B advancing and picked B to win, then switched round 1 to A."""
        picks = {1: "A", 2: "C", 3: "B"}
        user_view = BracketResolver(self.matchups, picks_winner(picks), SINGLE_REGION)
        self.assertIsNone(user_view.region_champion("East"))

class TestFinalStage(unittest.TestCase):
    def setUp(self):
        # Two teams per region: each region is decided in round 1
        self.regional = [
            matchup(1, "East", 1, 1, "E1", "E2", winner="E1"),
            matchup(2, "West", 1, 1, "W1", "W2", winner="W2"),
            matchup(3, "South", 1, 1, "S1", "S2", winner="S1"),
            matchup(4, "Midwest", 1, 1, "M1", "M2"),
        ]
        self.semi_1 = matchup(5, "Final Four", 2, 1)
        self.semi_2 = matchup(6, "Final Four", 2, 2)
        self.final = matchup(7, "Final Four", 3, 1)
        self.matchups = self.regional + [self.semi_1, self.semi_2, self.final]

    def test_semifinals_take_region_champions(self):
        resolver = BracketResolver(self.matchups, official_winner, FOUR_REGIONS)
        self.assertEqual(resolver.competitors(self.semi_1), (Competitor("E1"), Competitor("W2")))
        # Midwest undecided
        self.assertEqual(resolver.competitors(self.semi_2), (Competitor("S1"), None))

    def test_championship_from_semifinal_winners(self):
        self.regional[3].winner = "M2"
        self.semi_1.winner = "W2"
        self.semi_2.winner = "M2"

        resolver = BracketResolver(self.matchups, official_winner, FOUR_REGIONS)
        self.assertEqual(resolver.competitors(self.final), (Competitor("W2"), Competitor("M2")))

        self.final.winner = "W2"
        resolver = BracketResolver(self.matchups, official_winner, FOUR_REGIONS)
        self.assertEqual(resolver.region_champion("Final Four"), Competitor("W2"))

    def test_semifinal_slots_stored_directly_without_regional_tree(self):
        """Only the final stage exists: stored semifinal teams are used as-is."""
        semi = matchup(10, "Final Four", 5, 1, "Duke", "UNC", seed1=1, seed2=2)
        final = matchup(11, "Final Four", 6, 1)
        other = matchup(12, "Final Four", 5, 2, "Kansas", "Auburn")
        semi.winner = "UNC"
        other.winner = "Kansas"

        resolver = BracketResolver([semi, other, final], official_winner, FOUR_REGIONS)
        self.assertEqual(resolver.competitors(semi), (Competitor("Duke", 1), Competitor("UNC", 2)))
        self.assertEqual(resolver.competitors(final), (Competitor("UNC", 2), Competitor("Kansas")))

    def test_user_final_four_follows_user_picks(self):
        picks = {1: "E2", 2: "W1", 5: "E2"}
        resolver = BracketResolver(self.matchups, picks_winner(picks), FOUR_REGIONS)
        self.assertEqual(resolver.competitors(self.semi_1), (Competitor("E2"), Competitor("W1")))
        self.assertEqual(resolver.competitors(self.final), (Competitor("E2"), None))

if __name__ == '__main__':
    unittest.main()
