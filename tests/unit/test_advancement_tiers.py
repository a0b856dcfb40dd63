import math
import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from madra.domain.models.advancement import (
    ADVANCEMENT_TIER_LEVELS,
    AdvancementTier,
    base_madra_capacity,
    is_unbounded,
    next_tier,
    perception_range,
    tier_bonus,
    tier_level,
    travel_speed,
)


class AdvancementTierTests(unittest.TestCase):
    def test_twelve_tiers_map_onto_levels_zero_to_ten(self) -> None:
        self.assertEqual(12, len(AdvancementTier))
        self.assertEqual(set(AdvancementTier), set(ADVANCEMENT_TIER_LEVELS))
        self.assertEqual(0, tier_level(AdvancementTier.FOUNDATION))
        self.assertEqual(10, tier_level(AdvancementTier.MONARCH))
        self.assertEqual(tier_level(AdvancementTier.HERALD), tier_level(AdvancementTier.SAGE))

    def test_tier_bonus_is_antisymmetric(self) -> None:
        for first in AdvancementTier:
            self.assertEqual(0, tier_bonus(first, first))
            for second in AdvancementTier:
                self.assertEqual(-tier_bonus(second, first), tier_bonus(first, second))

    def test_tier_bonus_is_three_per_level(self) -> None:
        self.assertEqual(-3, tier_bonus(AdvancementTier.FOUNDATION, AdvancementTier.IRON))
        self.assertEqual(30, tier_bonus(AdvancementTier.MONARCH, AdvancementTier.FOUNDATION))
        self.assertEqual(0, tier_bonus(AdvancementTier.HERALD, AdvancementTier.SAGE))

    def test_perception_and_travel_share_one_schedule(self) -> None:
        for tier in AdvancementTier:
            self.assertEqual(perception_range(tier), travel_speed(tier))

    def test_reach_halves_per_step_below_monarch(self) -> None:
        self.assertEqual(1 / 256, travel_speed(AdvancementTier.FOUNDATION))
        self.assertEqual(1 / 128, travel_speed(AdvancementTier.IRON))
        self.assertEqual(1 / 32, travel_speed(AdvancementTier.LOW_GOLD))
        self.assertEqual(1 / 32, travel_speed(AdvancementTier.HIGH_GOLD))
        self.assertEqual(1 / 2, travel_speed(AdvancementTier.ARCHLORD))

    def test_monarch_is_unbounded(self) -> None:
        self.assertTrue(math.isinf(travel_speed(AdvancementTier.MONARCH)))
        self.assertTrue(is_unbounded(perception_range(AdvancementTier.MONARCH)))
        self.assertFalse(is_unbounded(perception_range(AdvancementTier.SAGE)))

    def test_perception_never_shrinks_with_tier(self) -> None:
        ordered = sorted(AdvancementTier, key=tier_level)
        for lower, higher in zip(ordered, ordered[1:]):
            self.assertLessEqual(perception_range(lower), perception_range(higher))

    def test_next_tier_skips_parallel_paths(self) -> None:
        self.assertEqual(AdvancementTier.IRON, next_tier(AdvancementTier.FOUNDATION))
        self.assertEqual(AdvancementTier.HERALD, next_tier(AdvancementTier.ARCHLORD))
        self.assertEqual(AdvancementTier.MONARCH, next_tier(AdvancementTier.HERALD))
        self.assertEqual(AdvancementTier.MONARCH, next_tier(AdvancementTier.SAGE))
        self.assertIsNone(next_tier(AdvancementTier.MONARCH))

    def test_base_capacity_doubles_per_level(self) -> None:
        self.assertEqual(100.0, base_madra_capacity(0))
        self.assertEqual(800.0, base_madra_capacity(3))

    def test_tier_accepts_string_values(self) -> None:
        self.assertIs(AdvancementTier.LOW_GOLD, AdvancementTier("LowGold"))
        with self.assertRaises(ValueError):
            AdvancementTier("Copper")


if __name__ == "__main__":
    unittest.main()
