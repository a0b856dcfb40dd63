from __future__ import annotations

import copy
import logging
import time
from dataclasses import replace
from typing import Callable, List, Optional, Sequence

from madra.application.dtos import TurnSummary
from madra.application.services.balance_tables import (
    TRAINING_PROFICIENCY_STEP,
    rest_regen_amount,
    training_capacity_gain,
)
from madra.domain.events import TimelineEventFired, TurnAdvanced
from madra.domain.models.character import Activity, Character, TimelineAction, TimelineEvent
from madra.domain.models.world import World, WorldEvent, WorldEventType
from madra.domain.services.travel import find_nearby, move_toward


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class TurnService:
    """Advances a world by exactly one turn per call.

    Nothing is kept between calls: the caller supplies the world and the
    characters each time and stores whatever comes back.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], int]] = None,
        event_publisher: Optional[Callable[[object], None]] = None,
    ) -> None:
        self.clock = clock or _epoch_millis
        self.event_publisher = event_publisher
        self._logger = logging.getLogger(__name__)

    def process_turn(self, world: World, characters: Sequence[Character]) -> TurnSummary:
        current_turn = world.current_turn + 1
        diagonal = world.map.diagonal

        triggered_events: List[TimelineEvent] = []
        world_events: List[WorldEvent] = []
        updated_characters: List[Character] = []

        for character in characters:
            updated = copy.deepcopy(character)

            for event in updated.timeline:
                if not event.is_due(current_turn):
                    continue
                updated = self._dispatch(updated, event, diagonal)
                event.completed = True
                triggered_events.append(event)
                world_events.append(
                    WorldEvent(
                        id=f"event-{current_turn}-{character.id}-{event.id}",
                        turn=current_turn,
                        type=WorldEventType.COMBAT if event.action is TimelineAction.COMBAT else WorldEventType.CUSTOM,
                        involved_character_ids=(character.id,),
                        location=updated.position,
                        description=event.description,
                        timestamp=self.clock(),
                    )
                )
                if self.event_publisher is not None:
                    self.event_publisher(
                        TimelineEventFired(
                            character_id=character.id,
                            event_id=event.id,
                            action=event.action.value,
                            turn=current_turn,
                        )
                    )

            if updated.activity is Activity.RESTING:
                core = updated.madra_core
                updated.madra_core = core.with_current(core.current_madra + rest_regen_amount(core.max_madra))

            # Other characters are compared at their start-of-turn positions.
            nearby = find_nearby(updated, characters, diagonal)
            if nearby and updated.activity is not Activity.COMBAT:
                world_events.append(
                    WorldEvent(
                        id=f"encounter-{current_turn}-{character.id}",
                        turn=current_turn,
                        type=WorldEventType.INTERACTION,
                        involved_character_ids=(character.id, *(other.id for other in nearby)),
                        location=updated.position,
                        description=f"{character.name} encounters {', '.join(other.name for other in nearby)}",
                        timestamp=self.clock(),
                    )
                )

            updated.last_updated = self.clock()
            updated_characters.append(updated)

        advanced_world = replace(world, current_turn=current_turn, last_updated=self.clock())
        self._logger.info(
            "Turn processed",
            extra={
                "world_id": world.id,
                "turn": current_turn,
                "characters": len(updated_characters),
                "triggered_events": len(triggered_events),
                "world_events": len(world_events),
            },
        )
        if self.event_publisher is not None:
            self.event_publisher(
                TurnAdvanced(
                    world_id=world.id,
                    turn_after=current_turn,
                    characters_processed=len(updated_characters),
                    world_event_count=len(world_events),
                )
            )

        return TurnSummary(
            world=advanced_world,
            updated_characters=updated_characters,
            triggered_events=triggered_events,
            world_events=world_events,
        )

    def _dispatch(self, character: Character, event: TimelineEvent, diagonal: float) -> Character:
        if event.action is TimelineAction.MOVE:
            if event.target_location is None:
                return character
            return self._process_movement(character, event, diagonal)
        if event.action is TimelineAction.TRAIN:
            return self._process_training(character)
        # combat / interact / custom are handled by the caller.
        return character

    @staticmethod
    def _process_movement(character: Character, event: TimelineEvent, diagonal: float) -> Character:
        character.position = move_toward(character, event.target_location, diagonal)
        character.activity = Activity.TRAVELING
        return character

    @staticmethod
    def _process_training(character: Character) -> Character:
        character.techniques = [technique.trained(TRAINING_PROFICIENCY_STEP) for technique in character.techniques]
        core = character.madra_core
        character.madra_core = replace(core, max_madra=core.max_madra + training_capacity_gain(core.max_madra))
        character.activity = Activity.TRAINING
        return character
