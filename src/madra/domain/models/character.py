from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from madra.domain.models.advancement import AdvancementTier
from madra.domain.models.madra import MadraCore, Technique
from madra.domain.models.stats import CharacterStats


@dataclass(frozen=True)
class Position:
    x: float
    y: float


class Activity(str, Enum):
    IDLE = "idle"
    TRAVELING = "traveling"
    COMBAT = "combat"
    TRAINING = "training"
    RESTING = "resting"
    INTERACTING = "interacting"
    CUSTOM = "custom"


class ItemType(str, Enum):
    WEAPON = "weapon"
    ARMOR = "armor"
    CONSUMABLE = "consumable"
    QUEST = "quest"
    SCALE = "scale"
    OTHER = "other"


class TimelineAction(str, Enum):
    MOVE = "move"
    COMBAT = "combat"
    INTERACT = "interact"
    TRAIN = "train"
    CUSTOM = "custom"


@dataclass
class Item:
    id: str
    name: str
    type: ItemType
    description: str = ""
    quantity: int = 1
    properties: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.type = ItemType(self.type)
        if int(self.quantity) <= 0:
            raise ValueError("Item quantity must be positive")
        if not isinstance(self.properties, dict):
            self.properties = {}

    @property
    def is_scale(self) -> bool:
        return self.type is ItemType.SCALE


@dataclass
class TimelineEvent:
    id: str
    turn: int
    action: TimelineAction
    description: str = ""
    target_location: Optional[Position] = None
    target_character_id: Optional[str] = None
    completed: bool = False
    priority: int = 5

    def __post_init__(self) -> None:
        self.action = TimelineAction(self.action)
        if int(self.turn) <= 0:
            raise ValueError("Timeline events trigger on a positive turn")
        if not 1 <= int(self.priority) <= 10:
            raise ValueError("Timeline priority must be within 1..10")

    def is_due(self, turn: int) -> bool:
        return self.turn == turn and not self.completed


@dataclass
class Character:
    id: str
    name: str
    advancement_tier: AdvancementTier
    madra_core: MadraCore
    stats: CharacterStats
    position: Position
    techniques: List[Technique] = field(default_factory=list)
    inventory: List[Item] = field(default_factory=list)
    activity: Activity = Activity.IDLE
    current_goal: Optional[str] = None
    timeline: List[TimelineEvent] = field(default_factory=list)
    description: Optional[str] = None
    faction: Optional[str] = None
    is_player_character: bool = False
    is_in_player_party: bool = False
    discovered_by_player: bool = False
    teacher_id: Optional[str] = None
    created_at: int = 0
    last_updated: int = 0

    def __post_init__(self) -> None:
        # Unknown tiers and activities fail here, before the engine ever sees them.
        self.advancement_tier = AdvancementTier(self.advancement_tier)
        self.activity = Activity(self.activity)

    def find_technique(self, technique_id: Optional[str]) -> Optional[Technique]:
        if technique_id is None:
            return None
        return next((technique for technique in self.techniques if technique.id == technique_id), None)

    @property
    def is_defeated(self) -> bool:
        return self.stats.current_hp <= 0
