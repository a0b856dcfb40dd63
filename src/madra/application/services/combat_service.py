from __future__ import annotations

import copy
import logging
from dataclasses import replace
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from madra.application.services.balance_tables import (
    BASIC_ATTACK_DIE,
    CRITICAL_EXTRA_DIE,
    DEFEND_EFFECT,
    DODGE_EFFECT,
    INITIATIVE_DIE,
    MINIMUM_HIT_DAMAGE,
    PROFICIENCY_BONUS,
    TECHNIQUE_DAMAGE_DICE,
    TECHNIQUE_DAMAGE_DIE,
    technique_damage_bonus,
)
from madra.domain.events import CombatActionResolved
from madra.domain.models.advancement import tier_bonus
from madra.domain.models.character import Character
from madra.domain.models.combat import CombatAction, CombatActionType, CombatResult, CombatRound
from madra.domain.services.dice import DiceEngine


class CombatService:
    """Resolves single combat actions into results.

    Holds no combat state between calls; the only thing that changes is the
    dice engine's seed. Actor snapshots passed in are never modified.
    """

    def __init__(
        self,
        dice: Optional[DiceEngine] = None,
        event_publisher: Optional[Callable[[object], None]] = None,
    ) -> None:
        self.dice = dice or DiceEngine()
        self.event_publisher = event_publisher
        self._logger = logging.getLogger(__name__)

    def set_seed(self, seed: int) -> None:
        self.dice.set_seed(seed)

    def resolve_combat_action(
        self,
        action: CombatAction,
        actor: Character,
        target: Optional[Character] = None,
    ) -> CombatResult:
        action_type = action.action_type
        if action_type in (CombatActionType.ATTACK, CombatActionType.CAST_TECHNIQUE) and target is None:
            result = CombatResult(action=action, success=False, description=f"{actor.name} has no target")
        elif action_type is CombatActionType.ATTACK:
            result = self._resolve_attack(action, actor, target)
        elif action_type is CombatActionType.CAST_TECHNIQUE:
            result = self._resolve_technique(action, actor, target)
        elif action_type is CombatActionType.DEFEND:
            result = self._resolve_defend(action, actor)
        elif action_type is CombatActionType.DODGE:
            result = self._resolve_dodge(action, actor)
        else:
            result = CombatResult(action=action, success=False, description="Invalid action")

        self._logger.debug(
            "Combat action resolved",
            extra={
                "actor_id": actor.id,
                "action_type": action_type.value,
                "success": result.success,
                "damage": result.damage,
                "roll": DiceEngine.format_roll(result.roll) if result.roll is not None else None,
            },
        )
        if self.event_publisher is not None:
            self.event_publisher(
                CombatActionResolved(
                    actor_id=actor.id,
                    target_id=target.id if target is not None else None,
                    action_type=action_type.value,
                    success=result.success,
                    damage=result.damage,
                )
            )
        return result

    def _resolve_attack(self, action: CombatAction, attacker: Character, defender: Character) -> CombatResult:
        strength_mod = attacker.stats.strength_mod
        attack_modifier = strength_mod + PROFICIENCY_BONUS + tier_bonus(attacker.advancement_tier, defender.advancement_tier)

        attack_roll = self.dice.roll(20, 1, attack_modifier)
        armor_class = defender.stats.armor_class
        hits = attack_roll.total >= armor_class or attack_roll.critical_hit

        damage = 0
        if hits:
            damage = max(MINIMUM_HIT_DAMAGE, self.dice.roll(BASIC_ATTACK_DIE, 1, strength_mod).total)
            if attack_roll.critical_hit:
                damage += self.dice.roll(CRITICAL_EXTRA_DIE, 1, 0).total

        effects: List[str] = []
        if attack_roll.critical_hit:
            effects.append("Critical Hit!")
        if attack_roll.critical_fail:
            effects.append("Critical Failure!")

        if hits:
            description = (
                f"{attacker.name} hits {defender.name} for {damage} damage! "
                f"(Roll: {attack_roll.total} vs AC {armor_class})"
            )
        else:
            description = f"{attacker.name} misses {defender.name}! (Roll: {attack_roll.total} vs AC {armor_class})"

        return CombatResult(
            action=replace(action, actor_id=attacker.id, target_id=defender.id),
            success=hits,
            description=description,
            roll=attack_roll,
            damage=damage,
            effects=effects,
        )

    def _resolve_technique(self, action: CombatAction, caster: Character, target: Character) -> CombatResult:
        technique = caster.find_technique(action.technique_id)
        if technique is None:
            self._logger.warning(
                "Technique not found on caster",
                extra={"actor_id": caster.id, "technique_id": action.technique_id},
            )
            return CombatResult(action=action, success=False, description="Technique not found")

        current = caster.madra_core.current_madra
        if current < technique.madra_cost:
            return CombatResult(
                action=action,
                success=False,
                description=(
                    f"{caster.name} does not have enough madra! "
                    f"({_format_madra(current)}/{_format_madra(technique.madra_cost)} needed)"
                ),
            )

        casting_mod = caster.stats.intelligence_mod
        attack_modifier = casting_mod + PROFICIENCY_BONUS + tier_bonus(caster.advancement_tier, target.advancement_tier)
        attack_roll = self.dice.roll(20, 1, attack_modifier)
        hits = attack_roll.total >= target.stats.armor_class

        damage = 0
        effects: List[str] = []
        if hits:
            damage_roll = self.dice.roll(
                TECHNIQUE_DAMAGE_DIE,
                TECHNIQUE_DAMAGE_DICE,
                technique_damage_bonus(technique.proficiency),
            )
            damage = damage_roll.total
            effects.append(f"{technique.nature.value} technique effect")

        if hits:
            description = f"{caster.name} casts {technique.name} on {target.name} for {damage} damage!"
        else:
            description = f"{caster.name}'s {technique.name} misses {target.name}!"

        return CombatResult(
            action=action,
            success=hits,
            description=description,
            roll=attack_roll,
            damage=damage,
            madra_cost=technique.madra_cost,
            effects=effects,
        )

    @staticmethod
    def _resolve_defend(action: CombatAction, character: Character) -> CombatResult:
        return CombatResult(
            action=replace(action, actor_id=character.id),
            success=True,
            description=f"{character.name} takes a defensive stance!",
            effects=[DEFEND_EFFECT],
        )

    @staticmethod
    def _resolve_dodge(action: CombatAction, character: Character) -> CombatResult:
        return CombatResult(
            action=replace(action, actor_id=character.id),
            success=True,
            description=f"{character.name} prepares to dodge!",
            effects=[DODGE_EFFECT],
        )

    def calculate_initiative(self, characters: Sequence[Character]) -> List[str]:
        """Character ids ordered by 1d20 + DEX modifier, highest first.

        Ties keep the order the characters were supplied in.
        """
        rolls: List[Tuple[str, int]] = [
            (character.id, self.dice.roll(INITIATIVE_DIE, 1, character.stats.dexterity_mod).total)
            for character in characters
        ]
        # sorted() is stable, so equal rolls stay in input order.
        ordered = sorted(rolls, key=lambda row: -row[1])
        return [character_id for character_id, _ in ordered]

    def resolve_round(
        self,
        round_number: int,
        actions: Sequence[CombatAction],
        characters: Sequence[Character],
    ) -> CombatRound:
        """Roll initiative and resolve each participant's action in that order.

        Every action is resolved against the round's starting snapshots; applying
        results is left to the caller.
        """
        by_id: Dict[str, Character] = {character.id: character for character in characters}
        actions_by_actor: Mapping[str, CombatAction] = {action.actor_id: action for action in actions}
        turn_order = self.calculate_initiative(characters)

        results: List[CombatResult] = []
        for actor_id in turn_order:
            action = actions_by_actor.get(actor_id)
            if action is None:
                continue
            target = by_id.get(action.target_id) if action.target_id is not None else None
            results.append(self.resolve_combat_action(action, by_id[actor_id], target))

        return CombatRound(
            round_number=round_number,
            results=results,
            participants=[character.id for character in characters],
            turn_order=turn_order,
        )

    @staticmethod
    def apply_result(
        result: CombatResult,
        actor: Character,
        target: Optional[Character] = None,
    ) -> Tuple[Character, Optional[Character]]:
        """Return copies of ``actor``/``target`` with the result's cost and damage applied.

        A cast technique spends its madra whether or not it lands; a technique
        that never got cast (``roll`` is None) costs nothing.
        """
        updated_actor = copy.deepcopy(actor)
        if result.roll is not None and result.madra_cost:
            updated_actor.madra_core = updated_actor.madra_core.with_current(
                updated_actor.madra_core.current_madra - result.madra_cost
            )

        updated_target = copy.deepcopy(target) if target is not None else None
        if updated_target is not None and result.success and result.damage:
            updated_target.stats = updated_target.stats.with_hp(updated_target.stats.current_hp - result.damage)

        return updated_actor, updated_target


def _format_madra(amount: float) -> str:
    # Fixed point so large cores never print in exponent form.
    return f"{float(amount):.2f}".rstrip("0").rstrip(".")
