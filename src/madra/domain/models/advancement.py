from __future__ import annotations

import math
from enum import Enum
from typing import Dict


class AdvancementTier(str, Enum):
    FOUNDATION = "Foundation"
    IRON = "Iron"
    JADE = "Jade"
    LOW_GOLD = "LowGold"
    HIGH_GOLD = "HighGold"
    TRUE_GOLD = "TrueGold"
    UNDERLORD = "Underlord"
    OVERLORD = "Overlord"
    ARCHLORD = "Archlord"
    HERALD = "Herald"
    SAGE = "Sage"
    MONARCH = "Monarch"


# Herald and Sage are parallel paths at the same level.
ADVANCEMENT_TIER_LEVELS: Dict[AdvancementTier, int] = {
    AdvancementTier.FOUNDATION: 0,
    AdvancementTier.IRON: 1,
    AdvancementTier.JADE: 2,
    AdvancementTier.LOW_GOLD: 3,
    AdvancementTier.HIGH_GOLD: 4,
    AdvancementTier.TRUE_GOLD: 5,
    AdvancementTier.UNDERLORD: 6,
    AdvancementTier.OVERLORD: 7,
    AdvancementTier.ARCHLORD: 8,
    AdvancementTier.HERALD: 9,
    AdvancementTier.SAGE: 9,
    AdvancementTier.MONARCH: 10,
}

UNBOUNDED = math.inf

# Fraction of the world diagonal covered per turn. Perception and travel both
# read this table so the two always scale on the same schedule.
REACH_FRACTION_BY_LEVEL: Dict[int, float] = {
    0: 1 / 256,
    1: 1 / 128,
    2: 1 / 64,
    3: 1 / 32,
    4: 1 / 32,
    5: 1 / 16,
    6: 1 / 8,
    7: 1 / 4,
    8: 1 / 2,
    9: 1 / 2,
    10: UNBOUNDED,
}

TIER_BONUS_PER_LEVEL = 3


def tier_level(tier: AdvancementTier) -> int:
    return ADVANCEMENT_TIER_LEVELS[tier]


def tier_bonus(tier: AdvancementTier, opponent: AdvancementTier) -> int:
    """Signed combat adjustment for ``tier`` fighting ``opponent``.

    +3 for every level above the opponent, -3 for every level below.
    """
    return (tier_level(tier) - tier_level(opponent)) * TIER_BONUS_PER_LEVEL


def reach_fraction(tier: AdvancementTier) -> float:
    return REACH_FRACTION_BY_LEVEL[tier_level(tier)]


def perception_range(tier: AdvancementTier) -> float:
    """How far a character of ``tier`` can sense, as a fraction of the map diagonal."""
    return reach_fraction(tier)


def travel_speed(tier: AdvancementTier) -> float:
    """Distance covered per turn, as a fraction of the map diagonal."""
    return reach_fraction(tier)


def is_unbounded(fraction: float) -> bool:
    return math.isinf(fraction)


def base_madra_capacity(level: int) -> float:
    return 100.0 * (2 ** int(level))


def next_tier(tier: AdvancementTier) -> AdvancementTier | None:
    """First tier strictly above ``tier``; parallel paths do not promote into each other."""
    level = tier_level(tier)
    for candidate in AdvancementTier:
        if tier_level(candidate) > level:
            return candidate
    return None
