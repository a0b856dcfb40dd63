from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Mapping, Optional

from madra.domain.models.advancement import AdvancementTier, next_tier
from madra.domain.models.character import Character


class AdvancementPolicy(ABC):
    @abstractmethod
    def evaluate(self, character: Character) -> Optional[AdvancementTier]:
        """Return the tier ``character`` advances to, or None to stay put."""
        raise NotImplementedError


class NoAdvancementPolicy(AdvancementPolicy):
    """Never advances. Capacity thresholds for tier-ups are not defined yet."""

    def evaluate(self, character: Character) -> Optional[AdvancementTier]:
        return None


class TierThresholdPolicy(AdvancementPolicy):
    """Advance once ``max_madra`` reaches a caller-supplied threshold for the current tier.

    Tiers without a threshold never advance. The promotion target is the next
    tier with a strictly higher level unless ``promotions`` names one.
    """

    def __init__(
        self,
        thresholds: Mapping[AdvancementTier, float],
        promotions: Mapping[AdvancementTier, AdvancementTier] | None = None,
    ) -> None:
        self._thresholds = {AdvancementTier(tier): float(value) for tier, value in thresholds.items()}
        self._promotions = {AdvancementTier(k): AdvancementTier(v) for k, v in (promotions or {}).items()}

    def evaluate(self, character: Character) -> Optional[AdvancementTier]:
        tier = character.advancement_tier
        threshold = self._thresholds.get(tier)
        if threshold is None or float(character.madra_core.max_madra) < threshold:
            return None
        return self._promotions.get(tier) or next_tier(tier)
