from __future__ import annotations

import math
from dataclasses import dataclass, replace


ABILITY_NAMES: tuple[str, ...] = (
    "strength",
    "dexterity",
    "constitution",
    "intelligence",
    "wisdom",
    "charisma",
)


def ability_modifier(score: int | float) -> int:
    return math.floor((score - 10) / 2)


@dataclass
class CharacterStats:
    max_hp: int
    current_hp: int
    strength: int = 10
    dexterity: int = 10
    constitution: int = 10
    intelligence: int = 10
    wisdom: int = 10
    charisma: int = 10
    armor_class: int = 10
    initiative: int = 0
    tier_bonus: int = 0

    @property
    def strength_mod(self) -> int:
        return ability_modifier(self.strength)

    @property
    def dexterity_mod(self) -> int:
        return ability_modifier(self.dexterity)

    @property
    def constitution_mod(self) -> int:
        return ability_modifier(self.constitution)

    @property
    def intelligence_mod(self) -> int:
        return ability_modifier(self.intelligence)

    @property
    def wisdom_mod(self) -> int:
        return ability_modifier(self.wisdom)

    @property
    def charisma_mod(self) -> int:
        return ability_modifier(self.charisma)

    def with_hp(self, current_hp: int) -> "CharacterStats":
        """Return a copy with ``current_hp`` clamped to ``[0, max_hp]``."""

        return replace(self, current_hp=max(0, min(self.max_hp, int(current_hp))))
