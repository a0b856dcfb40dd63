import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from madra.application.services.event_bus import EventBus
from madra.application.services.seed_policy import world_seed
from madra.application.services.simulation_service import SimulationService
from madra.domain.services.advancement_policy import AdvancementPolicy
from madra.domain.services.dice import DiceEngine


def _is_truthy(value: str | None, *, default: str) -> bool:
    normalized = str(value if value is not None else default).strip().lower()
    return normalized in {"1", "true", "yes"}


@dataclass(frozen=True)
class EngineSettings:
    dice_seed: Optional[int] = None
    log_level: str = "WARNING"
    event_bus_enabled: bool = False

    @classmethod
    def from_env(cls) -> "EngineSettings":
        load_dotenv()
        raw_seed = os.getenv("MADRA_DICE_SEED", "").strip()
        try:
            dice_seed = int(raw_seed) if raw_seed else None
        except ValueError as exc:
            raise ValueError(f"MADRA_DICE_SEED must be an integer, got {raw_seed!r}") from exc
        return cls(
            dice_seed=dice_seed,
            log_level=os.getenv("MADRA_LOG_LEVEL", "WARNING").strip().upper() or "WARNING",
            event_bus_enabled=_is_truthy(os.getenv("MADRA_EVENT_BUS_ENABLED"), default="0"),
        )


def configure_logging(level: str) -> None:
    logging.getLogger("madra").setLevel(level)


def create_simulation(
    settings: Optional[EngineSettings] = None,
    *,
    world_id: Optional[str] = None,
    advancement_policy: Optional[AdvancementPolicy] = None,
    event_bus: Optional[EventBus] = None,
) -> SimulationService:
    """Wire a SimulationService from settings.

    Seed precedence: the configured seed, then one derived from ``world_id``,
    then the clock.
    """
    settings = settings or EngineSettings.from_env()
    configure_logging(settings.log_level)

    if settings.dice_seed is not None:
        seed: Optional[int] = settings.dice_seed
    elif world_id is not None:
        seed = world_seed(world_id)
    else:
        seed = None

    if event_bus is None and settings.event_bus_enabled:
        event_bus = EventBus()

    return SimulationService(
        dice=DiceEngine(seed),
        advancement_policy=advancement_policy,
        event_bus=event_bus,
    )
