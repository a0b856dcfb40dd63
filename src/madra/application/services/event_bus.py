from __future__ import annotations

import bisect
import itertools
import logging
from typing import Callable, Dict, List, Tuple, Type

from madra.application.dtos import TurnEventBatch
from madra.domain.events import CombatActionResolved, ScaleCycled, TimelineEventFired, TurnAdvanced

ENGINE_EVENT_TYPES: Tuple[Type[object], ...] = (
    TurnAdvanced,
    TimelineEventFired,
    CombatActionResolved,
    ScaleCycled,
)

Handler = Callable[[object], None]


class EventBus:
    """Routes engine events to handlers subscribed per event class.

    Everything published since the previous ``TurnAdvanced`` is held back as
    one batch; turn listeners receive that batch when the closing
    ``TurnAdvanced`` arrives. Combat and scale events published between turns
    therefore land in the batch of the turn that follows them.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[object], List[Tuple[int, int, Handler]]] = {
            event_type: [] for event_type in ENGINE_EVENT_TYPES
        }
        self._turn_listeners: List[Callable[[TurnEventBatch], None]] = []
        self._sequence = itertools.count()
        self._pending: List[object] = []
        self._errors: List[Exception] = []
        self._published = 0
        self._logger = logging.getLogger(__name__)

    def subscribe(self, event_type: Type[object], handler: Handler, *, priority: int = 100) -> None:
        """Lower ``priority`` runs first; equal priorities run in subscription order."""
        if event_type not in self._handlers:
            raise ValueError(f"{getattr(event_type, '__name__', event_type)!s} is not an engine event")
        bisect.insort(self._handlers[event_type], (int(priority), next(self._sequence), handler))

    def subscribe_turn(self, listener: Callable[[TurnEventBatch], None]) -> None:
        self._turn_listeners.append(listener)

    def publish(self, event: object) -> None:
        handlers = self._handlers.get(type(event))
        if handlers is None:
            raise ValueError(f"{type(event).__name__} is not an engine event")

        self._errors = []
        self._published += 1
        for _, _, handler in list(handlers):
            self._deliver(handler, event)

        if not isinstance(event, TurnAdvanced):
            self._pending.append(event)
            return

        batch = TurnEventBatch(turn=event, events=tuple(self._pending))
        self._pending = []
        for listener in list(self._turn_listeners):
            self._deliver(listener, batch)

    def _deliver(self, handler: Callable[[object], None], payload: object) -> None:
        try:
            handler(payload)
        except Exception as exc:
            self._errors.append(exc)
            self._logger.exception(
                "Engine event handler failed",
                extra={
                    "event_type": type(payload).__name__,
                    "handler": getattr(handler, "__qualname__", repr(handler)),
                },
            )

    def pending_events(self) -> Tuple[object, ...]:
        return tuple(self._pending)

    def last_publish_errors(self) -> List[Exception]:
        return list(self._errors)

    @property
    def published_count(self) -> int:
        return self._published
