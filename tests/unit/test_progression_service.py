import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from madra.application.services.progression_service import ProgressionService
from madra.domain.events import ScaleCycled
from madra.domain.models.advancement import AdvancementTier
from madra.domain.models.character import Character, Item, ItemType, Position
from madra.domain.models.madra import MadraCore, MadraNature
from madra.domain.models.stats import CharacterStats
from madra.domain.services.advancement_policy import NoAdvancementPolicy, TierThresholdPolicy
from madra.domain.services.dice import DiceEngine


def _character(
    character_id: str = "lindon",
    *,
    tier: AdvancementTier = AdvancementTier.IRON,
    nature: MadraNature = MadraNature.PURE,
    current_madra: float = 100,
    max_madra: float = 200,
    inventory=None,
) -> Character:
    return Character(
        id=character_id,
        name=character_id.title(),
        advancement_tier=tier,
        madra_core=MadraCore(nature=nature, current_madra=current_madra, max_madra=max_madra, tier=tier.value),
        stats=CharacterStats(max_hp=12, current_hp=12),
        position=Position(0, 0),
        inventory=list(inventory or []),
    )


def _scale(madra=30, item_id: str = "scale-1") -> Item:
    return Item(id=item_id, name="Shadow Scale", type=ItemType.SCALE, properties={"madra": madra, "nature": "Shadow"})


class ScaleDropTests(unittest.TestCase):
    def test_scale_charge_between_one_thirtieth_and_one_twentieth(self) -> None:
        service = ProgressionService(dice=DiceEngine(77), clock=lambda: 123)
        defeated = _character("remnant", nature=MadraNature.SHADOW, current_madra=300, max_madra=400)

        for _ in range(200):
            scale = service.generate_scale_drop(defeated)
            self.assertGreaterEqual(scale.properties["madra"], 10)
            self.assertLess(scale.properties["madra"], 15)

    def test_scale_describes_its_source(self) -> None:
        service = ProgressionService(dice=DiceEngine(77), clock=lambda: 123)
        defeated = _character("remnant", tier=AdvancementTier.JADE, nature=MadraNature.SHADOW, current_madra=300, max_madra=400)

        scale = service.generate_scale_drop(defeated)

        self.assertEqual("scale-remnant-123-1", scale.id)
        self.assertEqual("Shadow Scale", scale.name)
        self.assertIs(ItemType.SCALE, scale.type)
        self.assertEqual("Shadow", scale.properties["nature"])
        self.assertEqual("Jade", scale.properties["source_tier"])
        self.assertIn("Remnant", scale.description)

    def test_scale_charge_is_less_than_remaining_madra(self) -> None:
        service = ProgressionService(dice=DiceEngine(5))
        for remaining in (1, 19, 20, 31, 1000, 123456):
            defeated = _character(current_madra=remaining, max_madra=remaining)
            self.assertLess(service.generate_scale_drop(defeated).properties["madra"], remaining)

    def test_scale_drop_is_reproducible_for_seed(self) -> None:
        defeated = _character(current_madra=9000, max_madra=9000)

        first = ProgressionService(dice=DiceEngine(8), clock=lambda: 1).generate_scale_drop(defeated)
        second = ProgressionService(dice=DiceEngine(8), clock=lambda: 1).generate_scale_drop(defeated)

        self.assertEqual(first, second)

    def test_drops_in_the_same_millisecond_get_distinct_ids(self) -> None:
        service = ProgressionService(dice=DiceEngine(8), clock=lambda: 1)
        defeated = _character("remnant", current_madra=300, max_madra=400)

        ids = [service.generate_scale_drop(defeated).id for _ in range(3)]

        self.assertEqual(["scale-remnant-1-1", "scale-remnant-1-2", "scale-remnant-1-3"], ids)


class CycleScaleTests(unittest.TestCase):
    def test_cycling_one_of_two_same_clock_drops_keeps_the_other(self) -> None:
        service = ProgressionService(dice=DiceEngine(8), clock=lambda: 1)
        enemy = _character("remnant", current_madra=300, max_madra=400)
        first = service.generate_scale_drop(enemy)
        second = service.generate_scale_drop(enemy)
        victor = _character(current_madra=100, max_madra=200, inventory=[first, second])

        outcome = service.cycle_scale(victor, first)

        self.assertTrue(outcome.success)
        self.assertEqual([second], outcome.character.inventory)
        self.assertEqual(100 + first.properties["madra"], outcome.character.madra_core.current_madra)

    def test_duplicate_ids_only_remove_one_item(self) -> None:
        twin = _scale(madra=30, item_id="twin")
        character = _character(current_madra=100, max_madra=200, inventory=[twin, _scale(madra=30, item_id="twin")])

        outcome = ProgressionService(dice=DiceEngine(1)).cycle_scale(character, twin)

        self.assertEqual(1, len(outcome.character.inventory))
        self.assertEqual(130, outcome.character.madra_core.current_madra)

    def test_non_scale_item_is_rejected_without_changes(self) -> None:
        dagger = Item(id="dagger", name="Dagger", type=ItemType.WEAPON, properties={"madra": 30})
        character = _character(inventory=[dagger])

        outcome = ProgressionService(dice=DiceEngine(1)).cycle_scale(character, dagger)

        self.assertFalse(outcome.success)
        self.assertFalse(outcome.advanced)
        self.assertEqual("Invalid scale item", outcome.reason)
        self.assertIs(character, outcome.character)
        self.assertEqual(100, character.madra_core.current_madra)
        self.assertEqual([dagger], character.inventory)

    def test_scale_without_charge_is_rejected(self) -> None:
        empty = Item(id="husk", name="Husk", type=ItemType.SCALE)
        character = _character(inventory=[empty])

        outcome = ProgressionService(dice=DiceEngine(1)).cycle_scale(character, empty)

        self.assertFalse(outcome.success)
        self.assertEqual([empty], outcome.character.inventory)

    def test_scale_within_capacity_fills_core_and_is_consumed(self) -> None:
        scale = _scale(madra=30)
        character = _character(current_madra=100, max_madra=200, inventory=[scale])

        outcome = ProgressionService(dice=DiceEngine(1)).cycle_scale(character, scale)

        self.assertTrue(outcome.success)
        self.assertEqual(130, outcome.character.madra_core.current_madra)
        self.assertEqual(200, outcome.character.madra_core.max_madra)
        self.assertEqual([], outcome.character.inventory)
        self.assertEqual([scale], character.inventory)

    def test_overflow_becomes_permanent_capacity(self) -> None:
        scale = _scale(madra=70)
        character = _character(current_madra=180, max_madra=200, inventory=[scale])

        outcome = ProgressionService(dice=DiceEngine(1)).cycle_scale(character, scale)
        core = outcome.character.madra_core

        self.assertEqual(250, core.max_madra)
        self.assertEqual(core.max_madra, core.current_madra)
        self.assertEqual(50, outcome.capacity_gained)
        self.assertFalse(outcome.advanced)
        self.assertIsNone(outcome.new_tier)

    def test_default_policy_never_advances(self) -> None:
        scale = _scale(madra=10_000)
        character = _character(inventory=[scale])

        outcome = ProgressionService(dice=DiceEngine(1)).cycle_scale(character, scale)

        self.assertFalse(outcome.advanced)
        self.assertIs(AdvancementTier.IRON, outcome.character.advancement_tier)
        self.assertIsNone(NoAdvancementPolicy().evaluate(outcome.character))

    def test_threshold_policy_advances_when_capacity_reached(self) -> None:
        policy = TierThresholdPolicy({AdvancementTier.IRON: 250})
        scale = _scale(madra=70)
        character = _character(current_madra=180, max_madra=200, inventory=[scale])
        seen = []

        outcome = ProgressionService(
            dice=DiceEngine(1),
            advancement_policy=policy,
            event_publisher=seen.append,
        ).cycle_scale(character, scale)

        self.assertTrue(outcome.advanced)
        self.assertIs(AdvancementTier.JADE, outcome.new_tier)
        self.assertIs(AdvancementTier.JADE, outcome.character.advancement_tier)
        self.assertEqual("Jade", outcome.character.madra_core.tier)
        self.assertEqual([ScaleCycled("lindon", "scale-1", 70.0, 50.0, True, "Jade")], seen)

    def test_threshold_policy_stays_below_threshold(self) -> None:
        policy = TierThresholdPolicy({AdvancementTier.IRON: 1000})
        scale = _scale(madra=70)
        character = _character(current_madra=180, max_madra=200, inventory=[scale])

        outcome = ProgressionService(dice=DiceEngine(1), advancement_policy=policy).cycle_scale(character, scale)

        self.assertFalse(outcome.advanced)

    def test_threshold_policy_honours_explicit_promotion(self) -> None:
        policy = TierThresholdPolicy(
            {AdvancementTier.ARCHLORD: 100},
            promotions={AdvancementTier.ARCHLORD: AdvancementTier.SAGE},
        )

        self.assertIs(AdvancementTier.SAGE, policy.evaluate(_character(tier=AdvancementTier.ARCHLORD)))


if __name__ == "__main__":
    unittest.main()
