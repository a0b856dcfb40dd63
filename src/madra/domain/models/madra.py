from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict

from madra.domain.models.advancement import AdvancementTier


class MadraNature(str, Enum):
    PURE = "Pure"
    EARTH = "Earth"
    WIND = "Wind"
    FIRE = "Fire"
    WATER = "Water"
    ICE = "Ice"
    CLOUD = "Cloud"
    FORCE = "Force"
    POISON = "Poison"
    LIFE = "Life"
    BLOOD = "Blood"
    HUNGER = "Hunger"
    LIGHT = "Light"
    HEAT = "Heat"
    DREAM = "Dream"
    SHADOW = "Shadow"
    SWORD = "Sword"
    DESTRUCTION = "Destruction"
    DEATH = "Death"
    CONNECTION = "Connection"


@dataclass(frozen=True)
class NatureProfile:
    description: str
    strengths: tuple[str, ...]
    weaknesses: tuple[str, ...]


MADRA_NATURE_EFFECTS: Dict[MadraNature, NatureProfile] = {
    MadraNature.PURE: NatureProfile(
        "Natural madra that everyone starts with. Highly versatile.",
        ("Disrupts enemy madra cycling", "Can overload channels", "Temporarily disable techniques"),
        ("Less specialized damage",),
    ),
    MadraNature.EARTH: NatureProfile(
        "Heavy, stable madra for defense and structure.",
        ("Strong reinforcement", "Barriers and fortifications", "Extreme durability"),
        ("Slow movement", "Limited offense"),
    ),
    MadraNature.WIND: NatureProfile(
        "Light, fast madra for speed and cutting force.",
        ("Enhanced agility", "Flight", "Difficult to track"),
        ("Low durability", "Less defensive power"),
    ),
    MadraNature.FIRE: NatureProfile(
        "Aggressive, volatile madra for destruction.",
        ("High offense", "Explosions", "Burning damage"),
        ("High madra consumption", "Difficult to control"),
    ),
    MadraNature.WATER: NatureProfile(
        "Fluid, adaptive madra for control and endurance.",
        ("Binding techniques", "Erosion", "Quick recovery"),
        ("Moderate direct damage",),
    ),
    MadraNature.ICE: NatureProfile(
        "Refined water madra emphasizing control and immobilization.",
        ("Slowing effects", "Battlefield denial", "Precision attacks"),
        ("Brittle under force attacks",),
    ),
    MadraNature.CLOUD: NatureProfile(
        "Diffuse madra for concealment and area control.",
        ("Obscuring senses", "Mobility", "Wide-range techniques"),
        ("Low direct damage",),
    ),
    MadraNature.FORCE: NatureProfile(
        "Direct kinetic madra for impact and momentum.",
        ("Blunt attacks", "Shockwaves", "Physical reinforcement"),
        ("Less effective against incorporeal targets",),
    ),
    MadraNature.POISON: NatureProfile(
        "Corrosive madra that weakens over time.",
        ("Disrupts channels", "Stacking damage", "Persistent effects"),
        ("Slow initial damage", "Can be resisted"),
    ),
    MadraNature.LIFE: NatureProfile(
        "Vital madra for healing and growth.",
        ("Regeneration", "Body strengthening", "Support abilities"),
        ("Limited offensive capability",),
    ),
    MadraNature.BLOOD: NatureProfile(
        "Madra tied to flesh and vitality.",
        ("Body reinforcement", "Regeneration", "Manipulate living targets"),
        ("Less effective vs non-living",),
    ),
    MadraNature.HUNGER: NatureProfile(
        "Forbidden madra that devours other madra.",
        ("Devours madra and essence", "Permanently weakens victims", "Empowers user"),
        ("Corrupting influence", "Forbidden/restricted"),
    ),
    MadraNature.LIGHT: NatureProfile(
        "Fast, precise madra for speed and clarity.",
        ("High velocity strikes", "Illusions", "Blinding techniques"),
        ("Less effective in darkness",),
    ),
    MadraNature.HEAT: NatureProfile(
        "Refined fire aspect focused on temperature.",
        ("Melting materials", "Bypasses defenses", "No explosive force"),
        ("Requires sustained contact",),
    ),
    MadraNature.DREAM: NatureProfile(
        "Mental madra affecting perception and consciousness.",
        ("Illusions", "Mind attacks", "Disrupts focus"),
        ("Less effective vs strong will", "No physical damage"),
    ),
    MadraNature.SHADOW: NatureProfile(
        "Subtle madra for concealment and indirect attacks.",
        ("Stealth", "Ambushes", "Avoids detection"),
        ("Less effective in bright light",),
    ),
    MadraNature.SWORD: NatureProfile(
        "Sharp madra specialized for cutting.",
        ("Precision strikes", "Clean cuts", "Overwhelming defenses"),
        ("Requires skill and focus",),
    ),
    MadraNature.DESTRUCTION: NatureProfile(
        "Chaotic madra that annihilates indiscriminately.",
        ("Extreme power", "Destroys matter and madra", "Bypasses most defenses"),
        ("Unstable", "Damages user", "Difficult to control"),
    ),
    MadraNature.DEATH: NatureProfile(
        "Entropic madra tied to decay and endings.",
        ("Weakens life", "Halts regeneration", "Kills techniques"),
        ("Less direct damage", "Long-term effects"),
    ),
    MadraNature.CONNECTION: NatureProfile(
        "Rare madra governing bonds and relationships.",
        ("Binding", "Power sharing", "Control constructs", "Fate manipulation"),
        ("Rare and difficult to learn",),
    ),
}

# A scale holds between 1/30 and 1/20 of the defeated core's remaining madra.
SCALE_MIN_FRACTION = 1 / 30
SCALE_MAX_FRACTION = 1 / 20

PROFICIENCY_CAP = 100


@dataclass
class MadraCore:
    nature: MadraNature
    current_madra: float
    max_madra: float
    tier: str = AdvancementTier.FOUNDATION.value

    def __post_init__(self) -> None:
        self.nature = MadraNature(self.nature)
        if float(self.max_madra) <= 0:
            raise ValueError("max_madra must be positive")
        if float(self.current_madra) < 0:
            raise ValueError("current_madra cannot be negative")
        if float(self.current_madra) > float(self.max_madra):
            raise ValueError("current_madra cannot exceed max_madra")

    def with_current(self, current_madra: float) -> "MadraCore":
        """Return a copy with ``current_madra`` clamped to ``[0, max_madra]``."""

        return replace(self, current_madra=max(0.0, min(float(self.max_madra), float(current_madra))))


@dataclass
class Technique:
    id: str
    name: str
    nature: MadraNature
    madra_cost: float
    required_tier: str = AdvancementTier.FOUNDATION.value
    description: str = ""
    proficiency: int = 0
    cooldown: int = 0

    def __post_init__(self) -> None:
        self.nature = MadraNature(self.nature)
        if float(self.madra_cost) <= 0:
            raise ValueError("madra_cost must be positive")
        if not 0 <= int(self.proficiency) <= PROFICIENCY_CAP:
            raise ValueError(f"proficiency must be within 0..{PROFICIENCY_CAP}")
        if int(self.cooldown) < 0:
            raise ValueError("cooldown cannot be negative")

    def trained(self, amount: int = 1) -> "Technique":
        return replace(self, proficiency=min(PROFICIENCY_CAP, int(self.proficiency) + int(amount)))


def nature_profile(nature: MadraNature) -> NatureProfile:
    return MADRA_NATURE_EFFECTS[MadraNature(nature)]
