import unittest
from collections import Counter
from types import SimpleNamespace
from bracket_pool.app.core.bracket_config import BracketLayout, FinalStageConfig, registry
from bracket_pool.app.engine.advancement import BracketResolver, Competitor
from bracket_pool.app.engine.seeding import (
    build_bracket,
    order_teams,
    round1_pairings,
    standard_bracket_order,
)
from bracket_pool.app.models.enums import SeedingMode
from bracket_pool.tests.helpers import FOUR_REGIONS, SINGLE_REGION, matchup

def make_teams(count, seeded=True):
    return [
        SimpleNamespace(id=i, name=f"Team {i}", seed=i if seeded else None)
        for i in range(1, count + 1)
    ]

class TestBracketOrder(unittest.TestCase):
    def test_standard_order(self):
        self.assertEqual(standard_bracket_order(2), [1, 2])
        self.assertEqual(standard_bracket_order(4), [1, 4, 2, 3])
        self.assertEqual(standard_bracket_order(8), [1, 8, 4, 5, 2, 7, 3, 6])

    def test_configured_pairings_take_priority(self):
        layout = registry.get()
        self.assertEqual(round1_pairings(16, layout)[:3], [(1, 16), (8, 9), (5, 12)])
        self.assertEqual(round1_pairings(4, layout), [(1, 4), (2, 3)])

    def test_unseeded_teams_go_last(self):
        teams = [
            SimpleNamespace(id=1, name="X", seed=None),
            SimpleNamespace(id=2, name="Y", seed=2),
            SimpleNamespace(id=3, name="Z", seed=1),
            SimpleNamespace(id=4, name="W", seed=None),
        ]
        self.assertEqual([t.name for t in order_teams(teams)], ["Z", "Y", "X", "W"])

class TestBuildBracket(unittest.TestCase):
    def test_full_64_team_bracket(self):
        """
        Scenario: 64 seeded teams over the configured four regions.
        32 + 16 + 8 + 4 regional matchups, 2 semifinals and 1 championship.
        """
        layout = registry.get()
        slots = build_bracket(make_teams(64), layout)

        self.assertEqual(len(slots), 63)
        per_round = Counter(s["round"] for s in slots)
        self.assertEqual([per_round[r] for r in range(1, 7)], [32, 16, 8, 4, 2, 1])

        east_opener = next(s for s in slots if s["region"] == "East" and s["round"] == 1 and s["match_order"] == 1)
        self.assertEqual((east_opener["team1_name"], east_opener["team2_name"]), ("Team 1", "Team 16"))
        self.assertEqual((east_opener["team1_seed"], east_opener["team2_seed"]), (1, 16))

        finals = [s for s in slots if s["region"] == layout.final_region]
        self.assertEqual(sorted((s["round"], s["match_order"]) for s in finals), [(5, 1), (5, 2), (6, 1)])
        # Later rounds hold no teams and no outcomes
        self.assertTrue(all(s["team1_name"] is None and s["winner"] is None for s in slots if s["round"] > 1))

    def test_single_region(self):
        slots = build_bracket(make_teams(4), SINGLE_REGION)
        self.assertEqual(
            [(s["round"], s["match_order"], s["team1_name"], s["team2_name"]) for s in slots],
            [(1, 1, "Team 1", "Team 4"), (1, 2, "Team 2", "Team 3"), (2, 1, None, None)]
        )

    def test_generated_bracket_resolves_end_to_end(self):
        slots = build_bracket(make_teams(8), FOUR_REGIONS)
        self.assertEqual(len(slots), 7)

        matchups = [
            matchup(i, s["region"], s["round"], s["match_order"], s["team1_name"], s["team2_name"])
            for i, s in enumerate(slots, start=1)
        ]
        for m in matchups:
            if m.round == 1:
                m.winner = m.team1_name

        resolver = BracketResolver(matchups, layout=FOUR_REGIONS)
        semi = next(m for m in matchups if m.region == "Final Four" and m.match_order == 1)
        self.assertEqual(resolver.competitors(semi), (Competitor("Team 1"), Competitor("Team 3")))

    def test_regional_seeds_fill_first_region(self):
        """
        Scenario: 64 teams entered with regional seeds 1-16 in each of four
        regions. Seeds are read as overall ranks, so the four 1-seeds through
        the four 4-seeds all land in East and East opens with a 1 vs a 4.
        """
        teams = [
            SimpleNamespace(id=i, name=f"Team {i}", seed=(i - 1) % 16 + 1)
            for i in range(1, 65)
        ]
        slots = build_bracket(teams, registry.get())

        east_seeds = {
            seed
            for s in slots if s["region"] == "East" and s["round"] == 1
            for seed in (s["team1_seed"], s["team2_seed"])
        }
        self.assertEqual(east_seeds, {1, 2, 3, 4})

        east_opener = next(s for s in slots if s["region"] == "East" and s["round"] == 1 and s["match_order"] == 1)
        self.assertEqual((east_opener["team1_name"], east_opener["team2_name"]), ("Team 1", "Team 52"))

    def test_semifinals_default_to_listed_region_order(self):
        layout = BracketLayout(regions=["A", "B", "C", "D"])
        self.assertEqual(layout.final_stage.semifinals, [("A", "B"), ("C", "D")])

        configured = BracketLayout(
            regions=["A", "B", "C", "D"],
            final_stage=FinalStageConfig(semifinals=[("A", "C"), ("B", "D")])
        )
        self.assertEqual(configured.final_stage.semifinals, [("A", "C"), ("B", "D")])

    def test_two_regions_without_configured_final_stage(self):
        """
        Scenario: two regions and no final_stage section. The regional
        champions meet in a single final instead of a slot stuck on TBD.
        """
        layout = BracketLayout(regions=["A", "B"])
        slots = build_bracket(make_teams(4), layout)
        finals = [s for s in slots if s["region"] == layout.final_region]
        self.assertEqual([(s["round"], s["match_order"]) for s in finals], [(2, 1)])

        matchups = [
            matchup(i, s["region"], s["round"], s["match_order"], s["team1_name"], s["team2_name"])
            for i, s in enumerate(slots, start=1)
        ]
        for m in matchups:
            if m.round == 1:
                m.winner = m.team1_name

        resolver = BracketResolver(matchups, layout=layout)
        final = next(m for m in matchups if m.region == layout.final_region)
        self.assertEqual(resolver.competitors(final), (Competitor("Team 1"), Competitor("Team 3")))

    def test_odd_region_count_needs_configured_final_stage(self):
        layout = BracketLayout(regions=["A", "B", "C"])
        self.assertEqual(layout.final_stage.semifinals, [])
        with self.assertRaises(ValueError):
            build_bracket(make_teams(6), layout)

    def test_random_mode_uses_every_team_once(self):
        slots = build_bracket(make_teams(16, seeded=False), FOUR_REGIONS, SeedingMode.RANDOM)
        names = [n for s in slots if s["round"] == 1 for n in (s["team1_name"], s["team2_name"])]
        self.assertEqual(sorted(names), sorted(f"Team {i}" for i in range(1, 17)))

    def test_rejects_bad_team_counts(self):
        with self.assertRaises(ValueError):
            build_bracket([], FOUR_REGIONS)
        with self.assertRaises(ValueError):
            build_bracket(make_teams(60), FOUR_REGIONS)
        with self.assertRaises(ValueError):
            build_bracket(make_teams(12), FOUR_REGIONS)
        with self.assertRaises(ValueError):
            build_bracket(make_teams(1), SINGLE_REGION)

if __name__ == '__main__':
    unittest.main()
