from dataclasses import dataclass


@dataclass
class TurnAdvanced:
    world_id: str
    turn_after: int
    characters_processed: int
    world_event_count: int


@dataclass
class TimelineEventFired:
    character_id: str
    event_id: str
    action: str
    turn: int


@dataclass
class CombatActionResolved:
    actor_id: str
    target_id: str | None
    action_type: str
    success: bool
    damage: int


@dataclass
class ScaleCycled:
    character_id: str
    scale_id: str
    madra_absorbed: float
    capacity_gained: float
    advanced: bool
    new_tier: str | None = None
