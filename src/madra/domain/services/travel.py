from __future__ import annotations

import math
from typing import List, Sequence

from madra.domain.models.advancement import is_unbounded, perception_range, travel_speed
from madra.domain.models.character import Character, Position


# Interaction radius is 1% of the map diagonal regardless of tier.
INTERACTION_FRACTION = 0.01


def distance(start: Position, end: Position) -> float:
    return math.hypot(end.x - start.x, end.y - start.y)


def can_perceive(observer: Character, target: Character, world_diagonal: float) -> bool:
    reach = perception_range(observer.advancement_tier)
    if is_unbounded(reach):
        return True
    return distance(observer.position, target.position) <= world_diagonal * reach


def max_step(character: Character, world_diagonal: float) -> float:
    return world_diagonal * travel_speed(character.advancement_tier)


def move_toward(character: Character, target_position: Position, world_diagonal: float) -> Position:
    """Position after one turn of travel toward ``target_position``.

    Never overshoots: when the target is within one step the result is the
    target itself.
    """
    if is_unbounded(travel_speed(character.advancement_tier)):
        return Position(target_position.x, target_position.y)

    step = max_step(character, world_diagonal)
    remaining = distance(character.position, target_position)
    if remaining <= step:
        return Position(target_position.x, target_position.y)

    dx = (target_position.x - character.position.x) / remaining
    dy = (target_position.y - character.position.y) / remaining
    return Position(character.position.x + dx * step, character.position.y + dy * step)


def can_interact(first: Character, second: Character, world_diagonal: float) -> bool:
    return distance(first.position, second.position) <= world_diagonal * INTERACTION_FRACTION


def find_nearby(character: Character, all_characters: Sequence[Character], world_diagonal: float) -> List[Character]:
    return [
        other
        for other in all_characters
        if other.id != character.id and can_interact(character, other, world_diagonal)
    ]


def travel_time(character: Character, start: Position, end: Position, world_diagonal: float) -> int:
    """Whole turns needed to cover ``start`` -> ``end``; 0 for unbounded travellers."""
    if is_unbounded(travel_speed(character.advancement_tier)):
        return 0
    return math.ceil(distance(start, end) / max_step(character, world_diagonal))
