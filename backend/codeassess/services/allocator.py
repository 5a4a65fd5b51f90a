"""
Problem allocation for timed assessments.

Sizes an easy/medium/hard mix to fit the requested duration, picks problems
with a preference for unseen topics, then trims the shuffled selection until
its estimated time fits the budget.

Problems are plain Mongo documents; only ``difficulty`` and ``topic_id`` are
read here.
"""

import math
import random
from typing import Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel

# Estimated solving time per difficulty (in minutes)
DIFFICULTY_BANDS: Dict[str, Dict[str, int]] = {
    "easy": {"min": 15, "max": 20},
    "medium": {"min": 20, "max": 25},
    "hard": {"min": 25, "max": 30},
}

DIFFICULTIES = ("easy", "medium", "hard")

MAX_PROBLEMS = 10
MIN_BALANCED_PROBLEMS = 3
SINGLE_PROBLEM_CUTOFF_MINUTES = 45
PAIR_CUTOFF_MINUTES = 90


class ProblemDistribution(BaseModel):
    easy_count: int = 0
    medium_count: int = 0
    hard_count: int = 0

    @property
    def total(self) -> int:
        return self.easy_count + self.medium_count + self.hard_count

    def count_for(self, difficulty: str) -> int:
        return getattr(self, f"{difficulty}_count")


class Allocation(BaseModel):
    selection: List[dict]
    distribution: ProblemDistribution
    total_estimated_time: float


def midpoint_minutes(difficulty: str) -> float:
    """Single scalar used for all budget arithmetic."""
    band = DIFFICULTY_BANDS[difficulty]
    return (band["min"] + band["max"]) / 2


def estimate_minutes(problems: Sequence[Mapping]) -> float:
    return sum(midpoint_minutes(p["difficulty"]) for p in problems)


def _distribution_minutes(easy: int, medium: int, hard: int) -> float:
    return (
        easy * midpoint_minutes("easy")
        + medium * midpoint_minutes("medium")
        + hard * midpoint_minutes("hard")
    )


def compute_distribution(duration_hours: float) -> ProblemDistribution:
    """
    How many easy/medium/hard problems to target for a duration.

    Short sessions stay simple (one easy, or one easy plus one medium).
    Longer ones get a 40/40/rest split capped at 10 problems, with at least
    one hard problem; when the mix overruns the time, hard problems are
    dropped first, then medium, then easy, never going below 3 in total.
    """
    total_minutes = duration_hours * 60

    if total_minutes < SINGLE_PROBLEM_CUTOFF_MINUTES:
        return ProblemDistribution(easy_count=1)

    if total_minutes < PAIR_CUTOFF_MINUTES:
        return ProblemDistribution(easy_count=1, medium_count=1)

    max_by_time = math.floor(total_minutes / midpoint_minutes("easy"))
    max_problems = min(max_by_time, MAX_PROBLEMS)

    if max_problems < MIN_BALANCED_PROBLEMS:
        # May slightly overrun; one of each is still preferred here
        return ProblemDistribution(easy_count=1, medium_count=1, hard_count=1)

    easy = math.floor(max_problems * 0.4)
    medium = math.floor(max_problems * 0.4)
    hard = max(1, max_problems - easy - medium)

    total_time = _distribution_minutes(easy, medium, hard)
    while total_time > total_minutes and (easy + medium + hard) > MIN_BALANCED_PROBLEMS:
        if hard > 1:
            hard -= 1
        elif medium > 1:
            medium -= 1
        elif easy > 1:
            easy -= 1
        total_time = _distribution_minutes(easy, medium, hard)

    return ProblemDistribution(easy_count=easy, medium_count=medium, hard_count=hard)


def select_problems(
    pool: Sequence[dict],
    distribution: ProblemDistribution,
    rng: Optional[random.Random] = None,
) -> List[dict]:
    """
    Pick problems per tier, preferring topics not used by an earlier pick.

    When every problem of a tier sits on an already-used topic the whole tier
    is sampled instead, so topics may repeat. A tier with fewer problems than
    requested returns what it has.
    """
    rng = rng or random.Random()
    used_topics = set()
    selected: List[dict] = []

    for difficulty in DIFFICULTIES:
        count = distribution.count_for(difficulty)
        if count <= 0:
            continue

        tier = [p for p in pool if p.get("difficulty") == difficulty]
        fresh = [p for p in tier if str(p.get("topic_id")) not in used_topics]

        if fresh:
            rng.shuffle(fresh)
            picked = fresh[:count]
            used_topics.update(str(p.get("topic_id")) for p in picked)
        else:
            candidates = list(tier)
            rng.shuffle(candidates)
            picked = candidates[:count]

        selected.extend(picked)

    # Hide the difficulty ordering from the test-taker
    rng.shuffle(selected)
    return selected


def trim_to_budget(selection: List[dict], duration_hours: float) -> List[dict]:
    """Drop problems from the end until the estimated time fits."""
    budget = duration_hours * 60
    trimmed = list(selection)
    while trimmed and estimate_minutes(trimmed) > budget:
        trimmed.pop()
    return trimmed


def allocate(
    duration_hours: float,
    pool: Sequence[dict],
    rng: Optional[random.Random] = None,
) -> Allocation:
    distribution = compute_distribution(duration_hours)
    selection = select_problems(pool, distribution, rng=rng)
    selection = trim_to_budget(selection, duration_hours)
    return Allocation(
        selection=selection,
        distribution=distribution,
        total_estimated_time=estimate_minutes(selection),
    )
