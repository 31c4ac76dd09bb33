"""Race session state transitions (pure, no UI/timers).

This module drives one race program from generation to the final round.
Transitions are deterministic for a given seed and side-effect free.

Architecture:
- State is a plain dict (see types.RaceState) holding roster, rounds, pointer,
  history, status, seed and the in-flight animation.
- Commands are plain dicts with a 'type' field (GENERATE_PROGRAM, START_ROUND,
  FINISH_ROUND).
- apply_command() takes (state, cmd) and returns CommandOutcome with updated state
- Mutations are performed on a deepcopy to preserve functional purity
- The UI layer paces START_ROUND / FINISH_ROUND with its own animation timers

Status lifecycle:
- idle -> running (START_ROUND) -> idle (FINISH_ROUND, rounds remain)
- running -> finished (FINISH_ROUND on the last round); terminal until the next
  GENERATE_PROGRAM

Misuse (starting twice, finishing with nothing in flight, commands before any
program exists) is ignored: the outcome reports changed=False and the state is
returned untouched.
"""
from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from .config import RaceConfig, resolve_config
from .engine import (
    AnimationPayload,
    Horse,
    Round,
    calculate_results,
    generate_horses,
    generate_rounds,
    participants_for_round,
)
from .rng import wall_clock_seed
from .validation import InputSanitizer

logger = logging.getLogger(__name__)


@dataclass
class CommandOutcome:
    """Result of applying a race command."""

    state: Dict[str, Any]
    cmd_payload: Dict[str, Any]
    changed: bool


def default_state() -> Dict[str, Any]:
    """Create an empty session: no program, status idle, no seed."""
    return {
        "horses": [],
        "active_horses": [],
        "rounds": [],
        "current_round_index": 0,
        "results": [],
        "status": "idle",
        "seed": None,
        "current_animation": None,
    }


def current_round(state: Dict[str, Any]) -> Round | None:
    """Round at the pointer, or None when no program exists."""
    rounds = state.get("rounds") or []
    idx = state.get("current_round_index", 0)
    if 0 <= idx < len(rounds):
        return rounds[idx]
    return None


def total_rounds(state: Dict[str, Any]) -> int:
    return len(state.get("rounds") or [])


def _active_horses(state: Dict[str, Any]) -> List[Horse]:
    return participants_for_round(state.get("horses") or [], current_round(state))


def _apply_transition(
    state: Dict[str, Any],
    cmd: Dict[str, Any],
    config: RaceConfig | None = None,
) -> CommandOutcome:
    """Apply pure state transition without side effects.

    Args:
        state: Current session state dict (not mutated)
        cmd: Command dict with 'type' field
        config: Program shape; defaults to the classic 20-horse, 6-round program

    Returns:
        CommandOutcome with:
        - state: Updated state dict (deepcopy with changes applied)
        - cmd_payload: Command enriched with resolved fields (seed, round)
        - changed: False when the command was ignored
    """
    new_state: Dict[str, Any] = deepcopy(state)
    ctype = cmd.get("type")
    changed = False
    payload = dict(cmd)

    if ctype == "GENERATE_PROGRAM":
        cfg = resolve_config(config)
        seed = cmd.get("seed")
        if seed is None:
            seed = wall_clock_seed()
        payload["seed"] = seed

        new_state = default_state()
        new_state["seed"] = seed
        new_state["horses"] = generate_horses(seed, cfg)
        new_state["rounds"] = generate_rounds(new_state["horses"], seed, cfg)
        new_state["active_horses"] = _active_horses(new_state)
        logger.debug(
            f"Generated program seed={seed}: {len(new_state['horses'])} horses, "
            f"{len(new_state['rounds'])} rounds"
        )
        changed = True

    elif ctype == "START_ROUND":
        status = new_state.get("status")
        round_ = current_round(new_state)
        if status == "running":
            logger.debug("START_ROUND ignored: round already running")
        elif status == "finished":
            logger.debug("START_ROUND ignored: program finished")
        elif round_ is None:
            logger.debug("START_ROUND ignored: no round at pointer")
        else:
            cfg = resolve_config(config)
            runners = participants_for_round(new_state.get("horses") or [], round_)
            placements = calculate_results(runners, round_.distance, new_state["seed"], cfg)
            animation = AnimationPayload(
                round_index=new_state.get("current_round_index", 0) + 1,
                distance=round_.distance,
                placements=tuple(placements),
            )
            new_state["current_animation"] = animation
            new_state["status"] = "running"
            payload["round"] = animation.round_index
            changed = True

    elif ctype == "FINISH_ROUND":
        animation = new_state.get("current_animation")
        if animation is None:
            logger.debug("FINISH_ROUND ignored: nothing in flight")
        else:
            new_state["results"] = list(new_state.get("results") or []) + [animation]
            new_state["current_animation"] = None
            payload["round"] = animation.round_index

            is_last_round = new_state.get("current_round_index", 0) + 1 >= total_rounds(new_state)
            if not is_last_round:
                new_state["current_round_index"] = new_state.get("current_round_index", 0) + 1
                new_state["active_horses"] = _active_horses(new_state)
                new_state["status"] = "idle"
            else:
                # Pointer stays on the last round so the UI can keep showing it.
                new_state["status"] = "finished"
            changed = True

    else:
        logger.debug(f"Unknown command type ignored: {ctype!r}")

    return CommandOutcome(state=new_state, cmd_payload=payload, changed=changed)


def apply_command(
    state: Dict[str, Any],
    cmd: Dict[str, Any],
    config: RaceConfig | None = None,
) -> CommandOutcome:
    """Apply a race command to in-memory state.

    Args:
        state: Current session state dict (updated in place)
        cmd: Command dict with 'type' field
        config: Program shape used by GENERATE_PROGRAM and START_ROUND

    Returns:
        CommandOutcome with updated state, enriched command payload and change flag

    Note:
        - Internally uses _apply_transition which works on a deepcopy (pure)
        - The caller's dict is cleared and refilled only when the command applied
    """
    outcome = _apply_transition(state, cmd, config)

    if outcome.changed:
        state.clear()
        state.update(outcome.state)

    return outcome


class RaceSession:
    """Single owner of one session state dict.

    The UI store calls these methods; every change goes through apply_command.
    ``seed_source`` picks the seed for each new program (wall clock by default).
    """

    def __init__(
        self,
        seed_source: Callable[[], int] = wall_clock_seed,
        config: RaceConfig | None = None,
    ) -> None:
        self.seed_source = seed_source
        self.config = resolve_config(config)
        self.state: Dict[str, Any] = default_state()

    def dispatch(self, cmd: Dict[str, Any]) -> CommandOutcome:
        """Validate a raw command dict and apply it.

        Raises:
            ValueError: If the command fails validation
        """
        validated = InputSanitizer.validate_and_sanitize_cmd(cmd).to_command()
        if validated["type"] == "GENERATE_PROGRAM" and "seed" not in validated:
            validated["seed"] = self.seed_source()
        return apply_command(self.state, validated, self.config)

    def generate_program(self) -> CommandOutcome:
        return apply_command(
            self.state, {"type": "GENERATE_PROGRAM", "seed": self.seed_source()}, self.config
        )

    def start_current_round(self) -> CommandOutcome:
        return apply_command(self.state, {"type": "START_ROUND"}, self.config)

    def finish_current_round(self) -> CommandOutcome:
        return apply_command(self.state, {"type": "FINISH_ROUND"}, self.config)

    def current_round(self) -> Round | None:
        return current_round(self.state)

    def total_rounds(self) -> int:
        return total_rounds(self.state)
