from .race import (
    CommandOutcome,
    RaceSession,
    apply_command,
    current_round,
    default_state,
    total_rounds,
)
from .types import CommandPayload, RaceState
from .config import RaceConfig
from .validation import InputSanitizer, ValidatedCmd
from .engine import (
    AnimationPayload,
    Horse,
    Placement,
    Round,
    calculate_results,
    generate_horses,
    generate_rounds,
    participants_for_round,
    select_round_horses,
)
from .rng import mulberry32, wall_clock_seed

__all__ = [
    "CommandOutcome",
    "CommandPayload",
    "RaceState",
    "RaceSession",
    "apply_command",
    "current_round",
    "default_state",
    "total_rounds",
    "RaceConfig",
    "ValidatedCmd",
    "InputSanitizer",
    "AnimationPayload",
    "Horse",
    "Placement",
    "Round",
    "calculate_results",
    "generate_horses",
    "generate_rounds",
    "participants_for_round",
    "select_round_horses",
    "mulberry32",
    "wall_clock_seed",
]
