from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from madra.domain.models.character import Position


class LocationType(str, Enum):
    CITY = "city"
    TOWN = "town"
    DUNGEON = "dungeon"
    LANDMARK = "landmark"
    WILDERNESS = "wilderness"
    OTHER = "other"


class WorldEventType(str, Enum):
    COMBAT = "combat"
    DISCOVERY = "discovery"
    INTERACTION = "interaction"
    ADVANCEMENT = "advancement"
    DEATH = "death"
    CUSTOM = "custom"


@dataclass
class Location:
    id: str
    name: str
    position: Position
    type: LocationType = LocationType.OTHER
    description: str = ""
    discovered_by_player: bool = False
    faction: Optional[str] = None

    def __post_init__(self) -> None:
        self.type = LocationType(self.type)


@dataclass
class WorldMap:
    id: str
    name: str
    width: float
    height: float
    description: str = ""
    locations: List[Location] = field(default_factory=list)
    background_image_url: Optional[str] = None
    created_at: int = 0

    def __post_init__(self) -> None:
        if float(self.width) <= 0 or float(self.height) <= 0:
            raise ValueError("Map dimensions must be positive")

    @property
    def diagonal(self) -> float:
        return math.hypot(float(self.width), float(self.height))


@dataclass
class World:
    id: str
    name: str
    map: WorldMap
    description: str = ""
    current_turn: int = 0
    character_ids: List[str] = field(default_factory=list)
    factions: List[str] = field(default_factory=list)
    created_at: int = 0
    last_updated: int = 0

    def __post_init__(self) -> None:
        if int(self.current_turn) < 0:
            raise ValueError("current_turn cannot be negative")


@dataclass(frozen=True)
class WorldEvent:
    id: str
    turn: int
    type: WorldEventType
    involved_character_ids: tuple[str, ...]
    location: Position
    description: str
    timestamp: int
