from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from madra.application.dtos import ScaleCycleOutcome, TurnSummary
from madra.domain.models.character import Character, Item, Position, TimelineEvent
from madra.domain.models.combat import CombatAction, CombatResult, DiceRoll
from madra.domain.models.madra import MadraCore, Technique
from madra.domain.models.stats import ABILITY_NAMES, CharacterStats
from madra.domain.models.world import Location, World, WorldEvent, WorldMap


class PayloadError(ValueError):
    pass


def _require(payload: Mapping[str, Any], key: str, context: str) -> Any:
    if not isinstance(payload, Mapping):
        raise PayloadError(f"{context} payload must be an object")
    if key not in payload or payload[key] is None:
        raise PayloadError(f"{context} payload is missing '{key}'")
    return payload[key]


def _build(context: str, factory, **kwargs):
    try:
        return factory(**kwargs)
    except (TypeError, ValueError) as exc:
        raise PayloadError(f"Invalid {context}: {exc}") from exc


_MISSING = object()


def _number(payload: Mapping[str, Any], key: str, context: str, convert, default: Any = _MISSING):
    raw = _require(payload, key, context) if default is _MISSING else payload.get(key, default)
    try:
        return convert(raw)
    except (TypeError, ValueError) as exc:
        raise PayloadError(f"Invalid {context}: '{key}' must be a number, got {raw!r}") from exc


def _int(payload: Mapping[str, Any], key: str, context: str, default: Any = _MISSING) -> int:
    return _number(payload, key, context, int, default)


def _float(payload: Mapping[str, Any], key: str, context: str, default: Any = _MISSING) -> float:
    return _number(payload, key, context, float, default)


def position_from_payload(payload: Optional[Mapping[str, Any]]) -> Optional[Position]:
    if payload is None:
        return None
    return _build(
        "position",
        Position,
        x=_float(payload, "x", "position"),
        y=_float(payload, "y", "position"),
    )


def position_to_payload(position: Optional[Position]) -> Optional[Dict[str, float]]:
    if position is None:
        return None
    return {"x": position.x, "y": position.y}


def item_from_payload(payload: Mapping[str, Any]) -> Item:
    return _build(
        "item",
        Item,
        id=str(_require(payload, "id", "item")),
        name=str(_require(payload, "name", "item")),
        type=_require(payload, "type", "item"),
        description=str(payload.get("description", "") or ""),
        quantity=_int(payload, "quantity", "item", 1),
        properties=dict(payload.get("properties") or {}),
    )


def item_to_payload(item: Item) -> Dict[str, Any]:
    return {
        "id": item.id,
        "name": item.name,
        "description": item.description,
        "type": item.type.value,
        "quantity": item.quantity,
        "properties": dict(item.properties),
    }


def _technique_from_payload(payload: Mapping[str, Any]) -> Technique:
    return _build(
        "technique",
        Technique,
        id=str(_require(payload, "id", "technique")),
        name=str(_require(payload, "name", "technique")),
        nature=_require(payload, "nature", "technique"),
        madra_cost=_float(payload, "madra_cost", "technique"),
        required_tier=str(payload.get("required_tier", "Foundation")),
        description=str(payload.get("description", "") or ""),
        proficiency=_int(payload, "proficiency", "technique", 0),
        cooldown=_int(payload, "cooldown", "technique", 0),
    )


def _technique_to_payload(technique: Technique) -> Dict[str, Any]:
    return {
        "id": technique.id,
        "name": technique.name,
        "description": technique.description,
        "nature": technique.nature.value,
        "required_tier": technique.required_tier,
        "madra_cost": technique.madra_cost,
        "proficiency": technique.proficiency,
        "cooldown": technique.cooldown,
    }


def _timeline_event_from_payload(payload: Mapping[str, Any]) -> TimelineEvent:
    return _build(
        "timeline event",
        TimelineEvent,
        id=str(_require(payload, "id", "timeline event")),
        turn=_int(payload, "turn", "timeline event"),
        action=_require(payload, "action", "timeline event"),
        description=str(payload.get("description", "") or ""),
        target_location=position_from_payload(payload.get("target_location")),
        target_character_id=payload.get("target_character_id"),
        completed=bool(payload.get("completed", False)),
        priority=_int(payload, "priority", "timeline event", 5),
    )


def timeline_event_to_payload(event: TimelineEvent) -> Dict[str, Any]:
    return {
        "id": event.id,
        "turn": event.turn,
        "description": event.description,
        "action": event.action.value,
        "target_location": position_to_payload(event.target_location),
        "target_character_id": event.target_character_id,
        "completed": event.completed,
        "priority": event.priority,
    }


def _stats_from_payload(payload: Mapping[str, Any]) -> CharacterStats:
    max_hp = _int(payload, "max_hp", "stats")
    if max_hp <= 0:
        raise PayloadError("Invalid stats: max_hp must be positive")
    current_hp = _int(payload, "current_hp", "stats", max_hp)
    if not 0 <= current_hp <= max_hp:
        raise PayloadError("Invalid stats: current_hp must be within 0..max_hp")
    scores = {}
    for name in ABILITY_NAMES:
        score = _int(payload, name, "stats", 10)
        if not 1 <= score <= 30:
            raise PayloadError(f"Invalid stats: {name} must be within 1..30")
        scores[name] = score
    return CharacterStats(
        max_hp=max_hp,
        current_hp=current_hp,
        armor_class=_int(payload, "armor_class", "stats", 10),
        initiative=_int(payload, "initiative", "stats", 0),
        tier_bonus=_int(payload, "tier_bonus", "stats", 0),
        **scores,
    )


def _stats_to_payload(stats: CharacterStats) -> Dict[str, Any]:
    payload: Dict[str, Any] = {name: getattr(stats, name) for name in ABILITY_NAMES}
    payload.update({
        "max_hp": stats.max_hp,
        "current_hp": stats.current_hp,
        "armor_class": stats.armor_class,
        "initiative": stats.initiative,
        "tier_bonus": stats.tier_bonus,
    })
    return payload


def _madra_core_from_payload(payload: Mapping[str, Any]) -> MadraCore:
    return _build(
        "madra core",
        MadraCore,
        nature=_require(payload, "nature", "madra core"),
        current_madra=_float(payload, "current_madra", "madra core"),
        max_madra=_float(payload, "max_madra", "madra core"),
        tier=str(payload.get("tier", "Foundation")),
    )


def character_from_payload(payload: Mapping[str, Any]) -> Character:
    return _build(
        "character",
        Character,
        id=str(_require(payload, "id", "character")),
        name=str(_require(payload, "name", "character")),
        advancement_tier=_require(payload, "advancement_tier", "character"),
        madra_core=_madra_core_from_payload(_require(payload, "madra_core", "character")),
        stats=_stats_from_payload(_require(payload, "stats", "character")),
        position=position_from_payload(_require(payload, "position", "character")),
        techniques=[_technique_from_payload(row) for row in payload.get("techniques") or []],
        inventory=[item_from_payload(row) for row in payload.get("inventory") or []],
        activity=payload.get("activity", "idle"),
        current_goal=payload.get("current_goal"),
        timeline=[_timeline_event_from_payload(row) for row in payload.get("timeline") or []],
        description=payload.get("description"),
        faction=payload.get("faction"),
        is_player_character=bool(payload.get("is_player_character", False)),
        is_in_player_party=bool(payload.get("is_in_player_party", False)),
        discovered_by_player=bool(payload.get("discovered_by_player", False)),
        teacher_id=payload.get("teacher_id"),
        created_at=_int(payload, "created_at", "character", 0),
        last_updated=_int(payload, "last_updated", "character", 0),
    )


def character_to_payload(character: Character) -> Dict[str, Any]:
    core = character.madra_core
    return {
        "id": character.id,
        "name": character.name,
        "description": character.description,
        "advancement_tier": character.advancement_tier.value,
        "madra_core": {
            "nature": core.nature.value,
            "current_madra": core.current_madra,
            "max_madra": core.max_madra,
            "tier": core.tier,
        },
        "techniques": [_technique_to_payload(technique) for technique in character.techniques],
        "stats": _stats_to_payload(character.stats),
        "inventory": [item_to_payload(item) for item in character.inventory],
        "position": position_to_payload(character.position),
        "activity": character.activity.value,
        "current_goal": character.current_goal,
        "timeline": [timeline_event_to_payload(event) for event in character.timeline],
        "faction": character.faction,
        "is_player_character": character.is_player_character,
        "is_in_player_party": character.is_in_player_party,
        "discovered_by_player": character.discovered_by_player,
        "teacher_id": character.teacher_id,
        "created_at": character.created_at,
        "last_updated": character.last_updated,
    }


def _location_from_payload(payload: Mapping[str, Any]) -> Location:
    return _build(
        "location",
        Location,
        id=str(_require(payload, "id", "location")),
        name=str(_require(payload, "name", "location")),
        position=position_from_payload(_require(payload, "position", "location")),
        type=payload.get("type", "other"),
        description=str(payload.get("description", "") or ""),
        discovered_by_player=bool(payload.get("discovered_by_player", False)),
        faction=payload.get("faction"),
    )


def world_from_payload(payload: Mapping[str, Any]) -> World:
    map_payload = _require(payload, "map", "world")
    world_map = _build(
        "world map",
        WorldMap,
        id=str(_require(map_payload, "id", "world map")),
        name=str(_require(map_payload, "name", "world map")),
        width=_float(map_payload, "width", "world map"),
        height=_float(map_payload, "height", "world map"),
        description=str(map_payload.get("description", "") or ""),
        locations=[_location_from_payload(row) for row in map_payload.get("locations") or []],
        background_image_url=map_payload.get("background_image_url"),
        created_at=_int(map_payload, "created_at", "world map", 0),
    )
    return _build(
        "world",
        World,
        id=str(_require(payload, "id", "world")),
        name=str(_require(payload, "name", "world")),
        map=world_map,
        description=str(payload.get("description", "") or ""),
        current_turn=_int(payload, "current_turn", "world", 0),
        character_ids=[str(value) for value in payload.get("character_ids") or []],
        factions=[str(value) for value in payload.get("factions") or []],
        created_at=_int(payload, "created_at", "world", 0),
        last_updated=_int(payload, "last_updated", "world", 0),
    )


def world_to_payload(world: World) -> Dict[str, Any]:
    world_map = world.map
    return {
        "id": world.id,
        "name": world.name,
        "description": world.description,
        "map": {
            "id": world_map.id,
            "name": world_map.name,
            "description": world_map.description,
            "width": world_map.width,
            "height": world_map.height,
            "locations": [
                {
                    "id": location.id,
                    "name": location.name,
                    "description": location.description,
                    "position": position_to_payload(location.position),
                    "type": location.type.value,
                    "discovered_by_player": location.discovered_by_player,
                    "faction": location.faction,
                }
                for location in world_map.locations
            ],
            "background_image_url": world_map.background_image_url,
            "created_at": world_map.created_at,
        },
        "current_turn": world.current_turn,
        "character_ids": list(world.character_ids),
        "factions": list(world.factions),
        "created_at": world.created_at,
        "last_updated": world.last_updated,
    }


def world_event_to_payload(event: WorldEvent) -> Dict[str, Any]:
    return {
        "id": event.id,
        "turn": event.turn,
        "type": event.type.value,
        "involved_character_ids": list(event.involved_character_ids),
        "location": position_to_payload(event.location),
        "description": event.description,
        "timestamp": event.timestamp,
    }


def combat_action_from_payload(payload: Mapping[str, Any]) -> CombatAction:
    return _build(
        "combat action",
        CombatAction,
        actor_id=str(_require(payload, "actor_id", "combat action")),
        action_type=_require(payload, "action_type", "combat action"),
        target_id=payload.get("target_id"),
        technique_id=payload.get("technique_id"),
        item_id=payload.get("item_id"),
        position=position_from_payload(payload.get("position")),
    )


def combat_action_to_payload(action: CombatAction) -> Dict[str, Any]:
    return {
        "actor_id": action.actor_id,
        "action_type": action.action_type.value,
        "target_id": action.target_id,
        "technique_id": action.technique_id,
        "item_id": action.item_id,
        "position": position_to_payload(action.position),
    }


def dice_roll_to_payload(roll: Optional[DiceRoll]) -> Optional[Dict[str, Any]]:
    if roll is None:
        return None
    return {
        "dice_type": roll.dice_type,
        "num_dice": roll.num_dice,
        "results": list(roll.results),
        "modifier": roll.modifier,
        "total": roll.total,
        "critical_hit": roll.critical_hit,
        "critical_fail": roll.critical_fail,
    }


def combat_result_to_payload(result: CombatResult) -> Dict[str, Any]:
    return {
        "action": combat_action_to_payload(result.action),
        "roll": dice_roll_to_payload(result.roll),
        "success": result.success,
        "damage": result.damage,
        "madra_cost": result.madra_cost,
        "effects": list(result.effects),
        "description": result.description,
    }


def turn_summary_to_payload(summary: TurnSummary) -> Dict[str, Any]:
    return {
        "world": world_to_payload(summary.world),
        "updated_characters": [character_to_payload(character) for character in summary.updated_characters],
        "triggered_events": [timeline_event_to_payload(event) for event in summary.triggered_events],
        "world_events": [world_event_to_payload(event) for event in summary.world_events],
    }


def scale_cycle_outcome_to_payload(outcome: ScaleCycleOutcome) -> Dict[str, Any]:
    return {
        "success": outcome.success,
        "character": character_to_payload(outcome.character),
        "advanced": outcome.advanced,
        "new_tier": outcome.new_tier.value if outcome.new_tier is not None else None,
        "reason": outcome.reason,
    }
