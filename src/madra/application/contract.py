CONTRACT_VERSION = "1.0.0"

COMMAND_INTENTS = (
    "resolve_combat_action",
    "process_turn",
    "cycle_scale",
    "generate_scale_drop",
)

QUERY_INTENTS = (
    "calculate_initiative",
)

PAYLOAD_INTENTS = tuple(f"{name}_payload" for name in COMMAND_INTENTS + QUERY_INTENTS)

CONTRACT_DTO_TYPES = (
    "TurnSummary",
    "ScaleCycleOutcome",
    "TurnEventBatch",
)
