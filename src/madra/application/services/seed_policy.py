from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any, Mapping

from madra.domain.services.dice import DiceEngine

SIMULATION_DICE_NAMESPACE = "simulation.dice"


def _canonical(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), allow_nan=False, default=_encode)


def _encode(value: Any) -> Any:
    # json calls this only for values it cannot serialise itself.
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=_canonical)
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    return str(value)


def derive_seed(namespace: str, context: Mapping[str, Any]) -> int:
    """32-bit seed for ``namespace`` and ``context``.

    Mapping key order and set iteration order do not affect the result.
    Non-finite floats anywhere in ``context`` raise ``ValueError``.
    """
    material = f"{namespace}\n{_canonical(dict(context))}".encode("utf-8")
    return int.from_bytes(hashlib.sha256(material).digest()[:4], "big")


def derive_dice(namespace: str, context: Mapping[str, Any]) -> DiceEngine:
    return DiceEngine(derive_seed(namespace, context))


def world_seed(world_id: str) -> int:
    """Seed a world's simulation dice from its id alone."""
    return derive_seed(SIMULATION_DICE_NAMESPACE, {"world_id": world_id})
