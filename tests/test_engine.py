from __future__ import annotations

from horse_race_core import (
    Horse,
    RaceConfig,
    calculate_results,
    generate_horses,
    generate_rounds,
    participants_for_round,
    select_round_horses,
)
from horse_race_core.engine import comparator_sort
from horse_race_core import engine
from horse_race_core.config import HORSE_NAMES, ROUND_DISTANCES


def _horse(id_: int, condition: int, name: str | None = None) -> Horse:
    return Horse(id=id_, name=name or f"H{id_}", condition=condition, color="hsl(0, 70%, 55%)")


def test_generate_horses_seed_one_fixture():
    horses = generate_horses(1)
    assert len(horses) == 20
    first = horses[0]
    assert first.id == 1
    assert first.name == "Silver Tempest"
    assert first.condition == 63
    assert first.color == "hsl(0, 70%, 55%)"
    assert (horses[1].name, horses[1].condition, horses[1].color) == (
        "Crimson Hoof",
        53,
        "hsl(353, 70%, 55%)",
    )
    assert (horses[2].condition, horses[2].color) == (97, "hsl(101, 70%, 55%)")
    assert [h.condition for h in horses] == [
        63, 53, 97, 62, 43, 46, 14, 25, 49, 40,
        29, 5, 60, 30, 66, 76, 73, 78, 24, 16,
    ]


def test_generate_horses_is_deterministic_and_catalog_ordered():
    a = generate_horses(987654)
    b = generate_horses(987654)
    assert a == b
    assert [h.id for h in a] == list(range(1, 21))
    assert [h.name for h in a] == list(HORSE_NAMES)
    for horse in a:
        assert 1 <= horse.condition <= 100
        assert horse.color.startswith("hsl(") and horse.color.endswith(", 70%, 55%)")


def test_different_seeds_give_different_rosters():
    assert generate_horses(1) != generate_horses(2)


def test_generate_rounds_shape_and_subset():
    horses = generate_horses(77)
    rounds = generate_rounds(horses, 77)
    roster_ids = {h.id for h in horses}
    assert [r.index for r in rounds] == [1, 2, 3, 4, 5, 6]
    assert [r.distance for r in rounds] == list(ROUND_DISTANCES)
    for r in rounds:
        assert len(r.horse_ids) == 10
        assert len(set(r.horse_ids)) == 10
        assert set(r.horse_ids) <= roster_ids


def test_generate_rounds_is_deterministic():
    horses = generate_horses(31337)
    assert generate_rounds(horses, 31337) == generate_rounds(horses, 31337)


def test_rounds_use_independent_streams():
    horses = generate_horses(5)
    rounds = generate_rounds(horses, 5)
    # Six identical fields out of 20 horses would mean the streams collapsed.
    assert len({r.horse_ids for r in rounds}) > 1
    assert select_round_horses(horses, 5, 3) == [
        h for hid in rounds[2].horse_ids for h in horses if h.id == hid
    ]


def test_participants_for_round_keeps_roster_order():
    horses = generate_horses(8)
    round_ = generate_rounds(horses, 8)[0]
    runners = participants_for_round(horses, round_)
    assert [h.id for h in runners] == sorted(round_.horse_ids)
    assert participants_for_round(horses, None) == []


def test_calculate_results_fixture():
    a = _horse(1, 80, "A")
    b = _horse(2, 20, "B")
    placements = calculate_results([a, b], 1600, 42)
    assert [p.horse.name for p in placements] == ["A", "B"]
    assert [p.time for p in placements] == [13.067, 22.235]


def test_strong_horse_beats_weak_horse_across_seeds():
    # 80 vs 20 condition at 1600m: the noise band (+/-15%) cannot close the gap.
    a = _horse(1, 80)
    b = _horse(2, 20)
    for seed in range(200):
        assert calculate_results([b, a], 1600, seed)[0].horse == a


def test_calculate_results_is_deterministic_and_sorted():
    horses = generate_horses(99)[:10]
    first = calculate_results(horses, 2000, 99)
    second = calculate_results(horses, 2000, 99)
    assert first == second
    times = [p.time for p in first]
    assert times == sorted(times)
    assert {p.horse.id for p in first} == {h.id for h in horses}
    for p in first:
        assert round(p.time, 3) == p.time


def test_time_stays_within_surprise_band():
    horses = generate_horses(4)
    for p in calculate_results(horses, 1800, 4):
        base = 1800 / (p.horse.condition + 50)
        assert base * 0.85 - 0.001 <= p.time <= base * 1.15 + 0.001


def test_equal_times_keep_input_order(monkeypatch):
    monkeypatch.setattr(engine, "mulberry32", lambda seed: (lambda: 0.5))
    horses = [_horse(3, 40), _horse(1, 40), _horse(2, 40)]
    placements = calculate_results(horses, 1200, 0)
    assert [p.horse.id for p in placements] == [3, 1, 2]
    assert len({p.time for p in placements}) == 1


def test_custom_config_shapes_program():
    cfg = RaceConfig(roster_size=8, participants_per_round=4, round_distances=(1000, 1500))
    horses = generate_horses(12, cfg)
    rounds = generate_rounds(horses, 12, cfg)
    assert len(horses) == 8
    assert [r.distance for r in rounds] == [1000, 1500]
    assert all(len(r.horse_ids) == 4 for r in rounds)
    # Roster prefix is unchanged by a smaller roster size.
    assert horses == generate_horses(12)[:8]


def test_result_stream_is_keyed_on_seed_plus_distance(monkeypatch):
    seen = []
    real = engine.mulberry32

    def spy(seed):
        seen.append(seed)
        return real(seed)

    monkeypatch.setattr(engine, "mulberry32", spy)
    calculate_results([_horse(1, 50)], 1400, 10)
    select_round_horses(generate_horses(10), 10, 4)
    assert seen == [1410, 10, 4010]


def test_generate_rounds_seed_one_fixture():
    rounds = generate_rounds(generate_horses(1), 1)
    assert [r.horse_ids for r in rounds] == [
        (8, 5, 20, 4, 17, 3, 16, 2, 1, 6),
        (11, 20, 6, 7, 5, 4, 18, 8, 19, 14),
        (4, 9, 1, 14, 17, 16, 6, 20, 15, 13),
        (19, 12, 6, 16, 1, 8, 2, 13, 14, 18),
        (11, 15, 1, 19, 8, 5, 13, 3, 4, 18),
        (19, 14, 6, 10, 20, 4, 1, 11, 5, 18),
    ]


def test_comparator_sort_fixed_comparison_order():
    calls = []

    def compare(a, b):
        calls.append((a, b))
        return -1 if len(calls) <= 2 else 1

    # Leading run 3 > 2 > 1 is descending, broken by (4, 3); then 4 and 5 insert.
    assert comparator_sort([1, 2, 3, 4, 5], compare) == [3, 2, 1, 4, 5]
    assert calls == [(2, 1), (3, 2), (4, 3), (4, 2), (4, 1), (5, 1), (5, 4)]


def test_comparator_sort_orders_with_real_comparator():
    values = [5, 3, 9, 1, 7, 3, 0, 8, 2, 6]
    assert comparator_sort(values, lambda a, b: a - b) == sorted(values)
    assert comparator_sort(values[::-1], lambda a, b: a - b) == sorted(values)
    assert comparator_sort([], lambda a, b: 0) == []
    assert comparator_sort([4], lambda a, b: 0) == [4]
    assert values == [5, 3, 9, 1, 7, 3, 0, 8, 2, 6]
