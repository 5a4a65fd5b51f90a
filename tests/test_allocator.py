import random

import pytest

from codeassess.services.allocator import (
    ProblemDistribution,
    allocate,
    compute_distribution,
    estimate_minutes,
    midpoint_minutes,
    select_problems,
    trim_to_budget,
)
from conftest import make_problem


def _dist(easy=0, medium=0, hard=0):
    return ProblemDistribution(easy_count=easy, medium_count=medium, hard_count=hard)


def _pool():
    return [
        make_problem("e1", "easy", "t1"),
        make_problem("e2", "easy", "t2"),
        make_problem("e3", "easy", "t3"),
        make_problem("m1", "medium", "t1"),
        make_problem("m2", "medium", "t4"),
        make_problem("m3", "medium", "t5"),
        make_problem("h1", "hard", "t2"),
        make_problem("h2", "hard", "t6"),
    ]


def test_midpoints():
    assert midpoint_minutes("easy") == 17.5
    assert midpoint_minutes("medium") == 22.5
    assert midpoint_minutes("hard") == 27.5


@pytest.mark.parametrize("hours", [0.1, 0.5, 0.74])
def test_short_sessions_get_one_easy_problem(hours):
    assert compute_distribution(hours) == _dist(easy=1)


@pytest.mark.parametrize("hours", [0.75, 1, 1.49])
def test_medium_sessions_get_easy_and_medium(hours):
    assert compute_distribution(hours) == _dist(easy=1, medium=1)


def test_ninety_minutes_drops_medium_after_hard_floor():
    # seed 2/2/1 = 107.5 min, one medium dropped -> 85 min
    assert compute_distribution(1.5) == _dist(easy=2, medium=1, hard=1)


def test_two_hours_drops_one_hard():
    # seed 2/2/2 = 135 min, one hard dropped -> 107.5 min
    assert compute_distribution(2) == _dist(easy=2, medium=2, hard=1)


def test_three_hours_reduces_hard_then_medium():
    # seed 4/4/2 = 215 min, hard -> 1 (187.5), medium -> 3 (165)
    dist = compute_distribution(3)
    assert dist == _dist(easy=4, medium=3, hard=1)
    assert dist.hard_count >= 1


@pytest.mark.parametrize("hours", [1.5, 2, 2.5, 3, 4, 6, 10, 24])
def test_long_sessions_respect_caps(hours):
    dist = compute_distribution(hours)
    assert 3 <= dist.total <= 10
    assert dist.hard_count >= 1
    minutes = sum(dist.count_for(d) * midpoint_minutes(d) for d in ("easy", "medium", "hard"))
    assert minutes <= hours * 60


def test_very_long_session_is_capped_at_ten():
    assert compute_distribution(24) == _dist(easy=4, medium=4, hard=2)


def test_distribution_is_deterministic():
    for hours in (0.25, 1, 1.5, 2.75, 5):
        assert compute_distribution(hours) == compute_distribution(hours)


def test_select_respects_tier_counts_and_difficulty():
    pool = _pool()
    requested = _dist(easy=2, medium=1, hard=1)
    for seed in range(30):
        picked = select_problems(pool, requested, rng=random.Random(seed))
        for difficulty in ("easy", "medium", "hard"):
            tier = [p for p in picked if p["difficulty"] == difficulty]
            assert len(tier) == requested.count_for(difficulty)
            source = {p["problem_id"] for p in pool if p["difficulty"] == difficulty}
            assert {p["problem_id"] for p in tier} <= source


def test_select_prefers_fresh_topics():
    pool = [
        make_problem("e1", "easy", "A"),
        make_problem("m_dup", "medium", "A"),
        make_problem("m_new", "medium", "B"),
    ]
    for seed in range(20):
        picked = select_problems(pool, _dist(easy=1, medium=1), rng=random.Random(seed))
        ids = {p["problem_id"] for p in picked}
        assert ids == {"e1", "m_new"}


def test_select_falls_back_to_used_topics():
    pool = [
        make_problem("e1", "easy", "A"),
        make_problem("m1", "medium", "A"),
        make_problem("m2", "medium", "A"),
    ]
    picked = select_problems(pool, _dist(easy=1, medium=2), rng=random.Random(1))
    assert sorted(p["problem_id"] for p in picked) == ["e1", "m1", "m2"]


def test_select_returns_what_a_short_tier_has():
    pool = [make_problem("e1", "easy", "A"), make_problem("h1", "hard", "B")]
    picked = select_problems(pool, _dist(easy=3, medium=2, hard=1), rng=random.Random(0))
    assert sorted(p["problem_id"] for p in picked) == ["e1", "h1"]


def test_select_never_duplicates_problems():
    pool = _pool()
    for seed in range(30):
        picked = select_problems(pool, _dist(easy=3, medium=3, hard=2), rng=random.Random(seed))
        ids = [p["problem_id"] for p in picked]
        assert len(ids) == len(set(ids))


def test_select_treats_topic_ids_as_strings():
    pool = [make_problem("e1", "easy", 7), make_problem("m1", "medium", "7"), make_problem("m2", "medium", "8")]
    for seed in range(10):
        picked = select_problems(pool, _dist(easy=1, medium=1), rng=random.Random(seed))
        assert {p["problem_id"] for p in picked} == {"e1", "m2"}


def test_select_shuffles_combined_order():
    pool = _pool()
    orders = set()
    for seed in range(40):
        picked = select_problems(pool, _dist(easy=2, medium=2, hard=1), rng=random.Random(seed))
        orders.add(tuple(p["difficulty"] for p in picked))
    assert len(orders) > 1


def test_trim_pops_from_the_end():
    selection = [make_problem("h1", "hard", "a"), make_problem("h2", "hard", "b"), make_problem("h3", "hard", "c")]
    trimmed = trim_to_budget(selection, 1)
    assert [p["problem_id"] for p in trimmed] == ["h1", "h2"]
    assert len(selection) == 3


def test_trim_can_empty_the_selection():
    assert trim_to_budget([make_problem("e1", "easy", "a")], 0.1) == []


def test_half_hour_allocation_is_one_easy_problem():
    allocation = allocate(0.5, _pool(), rng=random.Random(3))
    assert len(allocation.selection) == 1
    assert allocation.selection[0]["difficulty"] == "easy"
    assert allocation.total_estimated_time == 17.5


def test_allocation_fits_budget():
    for hours in (0.5, 1, 1.5, 2, 3):
        for seed in range(10):
            allocation = allocate(hours, _pool(), rng=random.Random(seed))
            assert allocation.total_estimated_time <= hours * 60
            assert allocation.total_estimated_time == estimate_minutes(allocation.selection)
            assert len(allocation.selection) <= allocation.distribution.total


def test_allocation_reports_post_trim_total():
    allocation = allocate(0.1, _pool(), rng=random.Random(0))
    assert allocation.distribution == _dist(easy=1)
    assert allocation.selection == []
    assert allocation.total_estimated_time == 0


def test_allocation_from_empty_pool():
    allocation = allocate(2, [])
    assert allocation.selection == []
    assert allocation.total_estimated_time == 0
