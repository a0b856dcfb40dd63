from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from madra.application.dtos import ScaleCycleOutcome, TurnSummary
from madra.application.mappers.payload_mapper import (
    character_from_payload,
    combat_action_from_payload,
    combat_result_to_payload,
    item_from_payload,
    item_to_payload,
    scale_cycle_outcome_to_payload,
    turn_summary_to_payload,
    world_from_payload,
)
from madra.application.services.combat_service import CombatService
from madra.application.services.event_bus import EventBus
from madra.application.services.progression_service import ProgressionService
from madra.application.services.turn_service import TurnService
from madra.domain.models.character import Character, Item
from madra.domain.models.combat import CombatAction, CombatResult
from madra.domain.models.world import World
from madra.domain.services.advancement_policy import AdvancementPolicy
from madra.domain.services.dice import DiceEngine


class SimulationService:
    """The engine's call surfaces on one object, sharing a single dice engine."""

    def __init__(
        self,
        dice: Optional[DiceEngine] = None,
        advancement_policy: Optional[AdvancementPolicy] = None,
        clock: Optional[Callable[[], int]] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.dice = dice or DiceEngine()
        self.event_bus = event_bus
        event_publisher = event_bus.publish if event_bus is not None else None
        self.combat = CombatService(dice=self.dice, event_publisher=event_publisher)
        self.turns = TurnService(clock=clock, event_publisher=event_publisher)
        self.progression = ProgressionService(
            dice=self.dice,
            advancement_policy=advancement_policy,
            clock=clock,
            event_publisher=event_publisher,
        )

    # --- model-level surfaces ---

    def resolve_combat_action(
        self,
        action: CombatAction,
        actor: Character,
        target: Optional[Character] = None,
    ) -> CombatResult:
        return self.combat.resolve_combat_action(action, actor, target)

    def calculate_initiative(self, characters: Sequence[Character]) -> List[str]:
        return self.combat.calculate_initiative(characters)

    def process_turn(self, world: World, characters: Sequence[Character]) -> TurnSummary:
        return self.turns.process_turn(world, characters)

    def cycle_scale(self, character: Character, scale: Item) -> ScaleCycleOutcome:
        return self.progression.cycle_scale(character, scale)

    def generate_scale_drop(self, defeated: Character) -> Item:
        return self.progression.generate_scale_drop(defeated)

    # --- payload surfaces ---

    def resolve_combat_action_payload(
        self,
        action: Mapping[str, Any],
        actor: Mapping[str, Any],
        target: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        result = self.resolve_combat_action(
            combat_action_from_payload(action),
            character_from_payload(actor),
            character_from_payload(target) if target is not None else None,
        )
        return combat_result_to_payload(result)

    def calculate_initiative_payload(self, characters: Sequence[Mapping[str, Any]]) -> List[str]:
        return self.calculate_initiative([character_from_payload(row) for row in characters])

    def process_turn_payload(self, world: Mapping[str, Any], characters: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
        summary = self.process_turn(world_from_payload(world), [character_from_payload(row) for row in characters])
        return turn_summary_to_payload(summary)

    def cycle_scale_payload(self, character: Mapping[str, Any], scale: Mapping[str, Any]) -> Dict[str, Any]:
        outcome = self.cycle_scale(character_from_payload(character), item_from_payload(scale))
        return scale_cycle_outcome_to_payload(outcome)

    def generate_scale_drop_payload(self, defeated: Mapping[str, Any]) -> Dict[str, Any]:
        return item_to_payload(self.generate_scale_drop(character_from_payload(defeated)))
