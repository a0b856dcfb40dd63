from __future__ import annotations

import copy
import itertools
import logging
import math
import time
from typing import Callable, List, Optional

from madra.application.dtos import ScaleCycleOutcome
from madra.domain.events import ScaleCycled
from madra.domain.models.character import Character, Item, ItemType
from madra.domain.models.madra import SCALE_MAX_FRACTION, SCALE_MIN_FRACTION
from madra.domain.services.advancement_policy import AdvancementPolicy, NoAdvancementPolicy
from madra.domain.services.dice import DiceEngine


class ProgressionService:
    def __init__(
        self,
        dice: Optional[DiceEngine] = None,
        advancement_policy: Optional[AdvancementPolicy] = None,
        clock: Optional[Callable[[], int]] = None,
        event_publisher: Optional[Callable[[object], None]] = None,
    ) -> None:
        self.dice = dice or DiceEngine()
        self.advancement_policy = advancement_policy or NoAdvancementPolicy()
        self.clock = clock or (lambda: int(time.time() * 1000))
        self.event_publisher = event_publisher
        self._drop_sequence = itertools.count(1)
        self._logger = logging.getLogger(__name__)

    def scale_madra(self, remaining_madra: float) -> int:
        """Madra held by a scale cut from a core with ``remaining_madra`` left."""
        fraction = self.dice.uniform(SCALE_MIN_FRACTION, SCALE_MAX_FRACTION)
        return math.floor(float(remaining_madra) * fraction)

    def generate_scale_drop(self, defeated: Character) -> Item:
        core = defeated.madra_core
        nature = core.nature.value
        return Item(
            id=f"scale-{defeated.id}-{self.clock()}-{next(self._drop_sequence)}",
            name=f"{nature} Scale",
            description=f"A scale containing {nature} madra from {defeated.name}",
            type=ItemType.SCALE,
            quantity=1,
            properties={
                "madra": self.scale_madra(core.current_madra),
                "nature": nature,
                "source_tier": defeated.advancement_tier.value,
            },
        )

    def cycle_scale(self, character: Character, scale: Item) -> ScaleCycleOutcome:
        """Absorb ``scale`` into ``character``'s core.

        Madra beyond the core's maximum raises the maximum instead of being
        lost. Invalid items leave the character untouched.
        """
        scale_madra = scale.properties.get("madra") if isinstance(scale.properties, dict) else None
        if not scale.is_scale or not isinstance(scale_madra, (int, float)) or scale_madra <= 0:
            self._logger.warning(
                "Rejected scale cycling",
                extra={"character_id": character.id, "item_id": scale.id, "item_type": scale.type.value},
            )
            return ScaleCycleOutcome(success=False, character=character, reason="Invalid scale item")

        updated = copy.deepcopy(character)
        core = updated.madra_core
        pooled = float(core.current_madra) + float(scale_madra)
        overflow = max(0.0, pooled - float(core.max_madra))
        core.max_madra = float(core.max_madra) + overflow
        core.current_madra = min(pooled, core.max_madra)
        updated.inventory = _without_first(updated.inventory, scale.id)

        new_tier = self.advancement_policy.evaluate(updated)
        if new_tier is not None:
            updated.advancement_tier = new_tier
            core.tier = new_tier.value

        outcome = ScaleCycleOutcome(
            success=True,
            character=updated,
            advanced=new_tier is not None,
            new_tier=new_tier,
            madra_absorbed=float(scale_madra),
            capacity_gained=overflow,
        )
        self._logger.debug(
            "Scale cycled",
            extra={"character_id": character.id, "madra": scale_madra, "overflow": overflow, "advanced": outcome.advanced},
        )
        if self.event_publisher is not None:
            self.event_publisher(
                ScaleCycled(
                    character_id=character.id,
                    scale_id=scale.id,
                    madra_absorbed=outcome.madra_absorbed,
                    capacity_gained=overflow,
                    advanced=outcome.advanced,
                    new_tier=new_tier.value if new_tier is not None else None,
                )
            )
        return outcome


def _without_first(inventory: List[Item], item_id: str) -> List[Item]:
    for index, item in enumerate(inventory):
        if item.id == item_id:
            return inventory[:index] + inventory[index + 1 :]
    return list(inventory)
