"""Race engine: roster generation, race program and per-round results.

Everything here is a pure function of its inputs and a seed:
- Roster: one horse per catalog name, condition 1..100 and an HSL color.
- Program: one round per configured distance, each picking a subset of the roster.
- Results: finish time = distance / (condition + 50), with bounded surprise noise.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence, TypeVar

from .config import HORSE_NAMES, RaceConfig, resolve_config
from .rng import derive_seed, mulberry32

CONDITION_OFFSET = 50

T = TypeVar("T")


@dataclass(frozen=True)
class Horse:
    id: int
    name: str
    # Performance factor (1..100); higher runs faster.
    condition: int
    # HSL color string for the UI.
    color: str


@dataclass(frozen=True)
class Round:
    # 1-based position in the program.
    index: int
    distance: int
    horse_ids: tuple[int, ...]


@dataclass(frozen=True)
class Placement:
    horse: Horse
    # Simulated finish time; lower is better.
    time: float


@dataclass(frozen=True)
class AnimationPayload:
    round_index: int
    distance: int
    placements: tuple[Placement, ...]


def random_color(rand: Callable[[], float]) -> str:
    hue = int(rand() * 360)
    return f"hsl({hue}, 70%, 55%)"


def generate_horses(seed: int, config: RaceConfig | None = None) -> list[Horse]:
    """Generate the session roster.

    One RNG is consumed sequentially: condition then color for each catalog
    name in order. Ids follow catalog position, starting at 1.
    """
    cfg = resolve_config(config)
    rand = mulberry32(seed)

    horses: list[Horse] = []
    for i, name in enumerate(HORSE_NAMES[: cfg.roster_size]):
        condition = int(rand() * 100) + 1
        horses.append(
            Horse(id=i + 1, name=name, condition=condition, color=random_color(rand))
        )
    return horses


def comparator_sort(items: Sequence[T], compare: Callable[[T, T], float]) -> list[T]:
    """Sort a copy of ``items`` with a fixed, documented comparison order.

    Same steps as V8's Timsort on arrays shorter than 64 (a single run):
    1. Count the leading run: compare(items[1], items[0]), then
       compare(items[i], items[i-1]) while the run continues. A run is
       strictly descending (order < 0) or non-descending (order >= 0);
       a descending run is reversed in place.
    2. Binary-insert every remaining item: compare(pivot, items[mid]),
       going left when order < 0, right otherwise.

    With a random-sign comparator the result depends only on this order, so
    it does not change with the interpreter's own list.sort internals.
    """
    work = list(items)
    n = len(work)
    if n < 2:
        return work

    run = 2
    descending = compare(work[1], work[0]) < 0
    for i in range(2, n):
        order = compare(work[i], work[i - 1])
        if descending:
            if order >= 0:
                break
        elif order < 0:
            break
        run += 1
    if descending:
        work[:run] = work[run - 1 :: -1]

    for start in range(run, n):
        pivot = work[start]
        left, right = 0, start
        while left < right:
            mid = left + ((right - left) >> 1)
            if compare(pivot, work[mid]) < 0:
                right = mid
            else:
                left = mid + 1
        work[left + 1 : start + 1] = work[left:start]
        work[left] = pivot
    return work


def select_round_horses(
    horses: Sequence[Horse],
    seed: int,
    round_index: int,
    config: RaceConfig | None = None,
) -> list[Horse]:
    """Pick the field for one round.

    Sorts a copy of the roster with a comparator returning a random sign and
    keeps the head. This shuffle is biased (not uniform over permutations) but
    deterministic: comparator_sort fixes the order of comparisons.
    """
    cfg = resolve_config(config)
    rand = mulberry32(derive_seed(seed, round_index * cfg.round_seed_offset))
    shuffled = comparator_sort(horses, lambda a, b: rand() - 0.5)
    return shuffled[: cfg.participants_per_round]


def generate_rounds(
    horses: Sequence[Horse], seed: int, config: RaceConfig | None = None
) -> list[Round]:
    """Build the race program, one round per configured distance."""
    cfg = resolve_config(config)
    rounds: list[Round] = []
    for index, distance in enumerate(cfg.round_distances):
        round_index = index + 1
        selected = select_round_horses(horses, seed, round_index, cfg)
        rounds.append(
            Round(
                index=round_index,
                distance=distance,
                horse_ids=tuple(h.id for h in selected),
            )
        )
    return rounds


def participants_for_round(horses: Sequence[Horse], round_: Round | None) -> list[Horse]:
    """Roster horses running ``round_``, in roster order."""
    if round_ is None:
        return []
    ids = set(round_.horse_ids)
    return [h for h in horses if h.id in ids]


def calculate_results(
    horses: Sequence[Horse],
    distance: int,
    seed: int,
    config: RaceConfig | None = None,
) -> list[Placement]:
    """Simulate one round and return placements, fastest first.

    The RNG is keyed on ``seed + distance``, so a round replays identically
    regardless of call order. One draw per horse, in input order. Equal times
    keep input order (stable sort).
    """
    cfg = resolve_config(config)
    rand = mulberry32(derive_seed(seed, distance))

    placements: list[Placement] = []
    for horse in horses:
        base = distance / (horse.condition + CONDITION_OFFSET)
        surprise = (rand() - 0.5) * cfg.surprise_spread
        placements.append(Placement(horse=horse, time=round(base * (1 + surprise), 3)))

    return sorted(placements, key=lambda p: p.time)
