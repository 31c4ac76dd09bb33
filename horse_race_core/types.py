"""Type definitions for race session state and commands."""
from __future__ import annotations

from typing import List, Literal, Optional, TypedDict

from .engine import AnimationPayload, Horse, Round

RaceStatus = Literal["idle", "running", "finished"]
CommandType = Literal["GENERATE_PROGRAM", "START_ROUND", "FINISH_ROUND"]


class RaceState(TypedDict, total=False):
    """
    TypedDict representing one race session.

    All fields are optional (total=False) so partial snapshots type-check,
    but default_state() always fills every key.
    """
    # Program (replaced wholesale on GENERATE_PROGRAM)
    horses: List[Horse]
    rounds: List[Round]
    seed: Optional[int]

    # Horses running the round at current_round_index, roster order
    active_horses: List[Horse]

    # Progress
    current_round_index: int  # 0-based pointer into rounds
    status: RaceStatus
    results: List[AnimationPayload]  # committed rounds, in order
    current_animation: Optional[AnimationPayload]  # in-flight round


class CommandPayload(TypedDict, total=False):
    """
    TypedDict for command payloads sent to apply_command().
    """
    type: CommandType
    # GENERATE_PROGRAM only; wall clock is used when absent
    seed: Optional[int]

