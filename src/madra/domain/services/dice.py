from __future__ import annotations

import math
import time
from typing import Optional

from madra.domain.models.combat import DiceRoll
from madra.domain.models.stats import ability_modifier


_LCG_MULTIPLIER = 9301
_LCG_INCREMENT = 49297
_LCG_MODULUS = 233280


class DiceEngine:
    """
    Seeded dice roller.

    Two engines built with the same seed produce the same rolls for the same
    sequence of calls. Each simulation should own its own instance; nothing
    here is shared between instances.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._seed = int(seed) if seed is not None else int(time.time() * 1000)

    @property
    def seed(self) -> int:
        return self._seed

    def set_seed(self, seed: int) -> None:
        self._seed = int(seed)

    def random(self) -> float:
        """Advance the generator and return a value in [0, 1)."""
        self._seed = (self._seed * _LCG_MULTIPLIER + _LCG_INCREMENT) % _LCG_MODULUS
        return self._seed / _LCG_MODULUS

    def uniform(self, low: float, high: float) -> float:
        return low + self.random() * (high - low)

    def roll(self, dice_type: int, num_dice: int = 1, modifier: int = 0) -> DiceRoll:
        """
        Roll ``num_dice`` dice with ``dice_type`` sides and add ``modifier``.
        Die types are taken literally; a d1 always shows 1.
        """
        results = tuple(math.floor(self.random() * dice_type) + 1 for _ in range(num_dice))
        single_d20 = dice_type == 20 and num_dice == 1
        return DiceRoll(
            dice_type=dice_type,
            num_dice=num_dice,
            results=results,
            modifier=modifier,
            total=sum(results) + modifier,
            critical_hit=single_d20 and results[0] == 20,
            critical_fail=single_d20 and results[0] == 1,
        )

    # --- advantage / disadvantage ---

    def roll_with_advantage(self, dice_type: int, modifier: int = 0) -> DiceRoll:
        first = self.roll(dice_type, 1, 0)
        second = self.roll(dice_type, 1, 0)
        kept = first if first.results[0] > second.results[0] else second
        return self._with_modifier(kept, modifier)

    def roll_with_disadvantage(self, dice_type: int, modifier: int = 0) -> DiceRoll:
        first = self.roll(dice_type, 1, 0)
        second = self.roll(dice_type, 1, 0)
        kept = first if first.results[0] < second.results[0] else second
        return self._with_modifier(kept, modifier)

    @staticmethod
    def _with_modifier(kept: DiceRoll, modifier: int) -> DiceRoll:
        return DiceRoll(
            dice_type=kept.dice_type,
            num_dice=kept.num_dice,
            results=kept.results,
            modifier=modifier,
            total=kept.results[0] + modifier,
            critical_hit=kept.critical_hit,
            critical_fail=kept.critical_fail,
        )

    @staticmethod
    def ability_modifier(score: int) -> int:
        return ability_modifier(score)

    @staticmethod
    def format_roll(roll: DiceRoll) -> str:
        """
        Friendly string for logs, e.g. "1d20 => [15] +1 = 16".
        """
        notation = f"{roll.num_dice}d{roll.dice_type}"
        rolls_part = list(roll.results)
        if roll.modifier == 0:
            return f"{notation} => {rolls_part} = {roll.total}"
        sign = "+" if roll.modifier > 0 else "-"
        return f"{notation} => {rolls_part} {sign}{abs(roll.modifier)} = {roll.total}"
