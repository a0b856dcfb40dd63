from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from madra.domain.events import TurnAdvanced
from madra.domain.models.advancement import AdvancementTier
from madra.domain.models.character import Character, TimelineEvent
from madra.domain.models.world import World, WorldEvent


@dataclass
class TurnSummary:
    world: World
    updated_characters: List[Character] = field(default_factory=list)
    triggered_events: List[TimelineEvent] = field(default_factory=list)
    world_events: List[WorldEvent] = field(default_factory=list)

    @property
    def turn(self) -> int:
        return self.world.current_turn


@dataclass
class ScaleCycleOutcome:
    success: bool
    character: Character
    advanced: bool = False
    new_tier: Optional[AdvancementTier] = None
    reason: str = ""
    madra_absorbed: float = 0
    capacity_gained: float = 0


@dataclass(frozen=True)
class TurnEventBatch:
    """Events published during one turn, closed by its ``TurnAdvanced``."""

    turn: TurnAdvanced
    events: Tuple[object, ...] = ()
