from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from madra.domain.models.character import Position


class CombatActionType(str, Enum):
    ATTACK = "attack"
    CAST_TECHNIQUE = "cast_technique"
    DEFEND = "defend"
    MOVE = "move"
    USE_ITEM = "use_item"
    DODGE = "dodge"
    END_TURN = "end_turn"


@dataclass(frozen=True)
class DiceRoll:
    """A finished roll.

    ``critical_hit``/``critical_fail`` are only ever set on a single d20.
    """

    dice_type: int
    num_dice: int
    results: tuple[int, ...]
    modifier: int
    total: int
    critical_hit: bool = False
    critical_fail: bool = False


@dataclass
class CombatAction:
    actor_id: str
    action_type: CombatActionType
    target_id: Optional[str] = None
    technique_id: Optional[str] = None
    item_id: Optional[str] = None
    position: Optional[Position] = None

    def __post_init__(self) -> None:
        self.action_type = CombatActionType(self.action_type)


@dataclass
class CombatResult:
    action: CombatAction
    success: bool
    description: str
    roll: Optional[DiceRoll] = None
    damage: int = 0
    madra_cost: float = 0
    effects: List[str] = field(default_factory=list)


@dataclass
class CombatRound:
    round_number: int
    results: List[CombatResult] = field(default_factory=list)
    participants: List[str] = field(default_factory=list)
    turn_order: List[str] = field(default_factory=list)
