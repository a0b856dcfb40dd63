from __future__ import annotations


# Flat proficiency bonus for every attack and technique cast.
PROFICIENCY_BONUS = 2

BASIC_ATTACK_DIE = 8
CRITICAL_EXTRA_DIE = 8
MINIMUM_HIT_DAMAGE = 1

TECHNIQUE_DAMAGE_DIE = 10
TECHNIQUE_DAMAGE_DICE = 2
TECHNIQUE_PROFICIENCY_DIVISOR = 10

INITIATIVE_DIE = 20

DEFEND_EFFECT = "AC +2 until next turn"
DODGE_EFFECT = "Attacks against you have disadvantage until next turn"

REST_MADRA_REGEN_FRACTION = 0.05
TRAINING_PROFICIENCY_STEP = 1
TRAINING_CAPACITY_GROWTH = 0.001


def technique_damage_bonus(proficiency: int) -> int:
    return int(proficiency) // TECHNIQUE_PROFICIENCY_DIVISOR


def rest_regen_amount(max_madra: float) -> int:
    return int(float(max_madra) * REST_MADRA_REGEN_FRACTION)


def training_capacity_gain(max_madra: float) -> float:
    return float(max_madra) * TRAINING_CAPACITY_GROWTH
