"""
Duet Backend — Content Rotation
=================================

What:  Picks rotating content: one "question of the day" from a fixed pool,
       and random batches of sub-topics for the home screen.
How:   The daily pick is `days since epoch mod pool size`, so every caller
       sees the same question for a whole UTC day and the next one after
       midnight. The random batch is a sample without replacement; the
       stored batch is only replaced once it is exhausted.
Who:   HomeService.
"""

import random
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, TypeVar

from app.core.dates import DateLike, days_between

T = TypeVar("T")


def rotation_index(pool_size: int, epoch: date, today: DateLike) -> Optional[int]:
    """Index into a pool of `pool_size` for `today`, or None for an empty pool."""
    if pool_size <= 0:
        return None
    # Python's modulo is already non-negative for a positive divisor.
    return days_between(epoch, today) % pool_size


def select_daily_question(pool: Sequence[T], epoch: date, today: DateLike) -> Optional[T]:
    """
    Today's item from an ordered pool.

    Returns None when the pool is empty; callers treat that as "no daily
    question configured".
    """
    index = rotation_index(len(pool), epoch, today)
    if index is None:
        return None
    return pool[index]


def sample_without_replacement(
    pool: Sequence[T],
    size: int,
    rng: Optional[random.Random] = None,
) -> List[T]:
    """Up to `size` distinct items of `pool` in random order."""
    rng = rng or random.Random()
    return rng.sample(list(pool), min(size, len(pool)))


def is_selection_exhausted(
    question_counts: Mapping[int, int],
    completed_counts: Mapping[int, Mapping[int, int]],
    user_ids: Iterable[int],
) -> bool:
    """
    Whether every sub-topic of a stored selection is finished by every user.

    Args:
        question_counts:  sub-topic id → number of active questions.
        completed_counts: sub-topic id → {user id → completed answers}.
        user_ids:         Users sharing the selection (one or two).

    Sub-topics without questions are ignored.
    """
    user_ids = list(user_ids)
    for subtopic_id, total in question_counts.items():
        if total == 0:
            continue
        per_user: Dict[int, int] = dict(completed_counts.get(subtopic_id, {}))
        for user_id in user_ids:
            if per_user.get(user_id, 0) < total:
                return False
    return True
