"""
Duet Backend — Progress Calculator
====================================

What:  Turns (total questions, answered questions) into a completion percentage.
How:   Integer arithmetic only, so `round half up` is exact and never hits
       floating point ties (e.g. 1/8 of 100 = 12.5 rounds to 13).
Who:   Progress, home and random sub-topic services.

Caller contract:
    `answered_count` already counts distinct (user, question) pairs.
    Negative counts are not defended against, and `answered_count` larger
    than `total_questions` is reported as-is (no clamp to 100).
"""

from dataclasses import dataclass


def round_half_up_ratio(numerator: int, denominator: int) -> int:
    """floor(numerator / denominator + 0.5) for non-negative integers."""
    return (2 * numerator + denominator) // (2 * denominator)


def completion_percent(total_questions: int, answered_count: int) -> int:
    """
    Percentage of `total_questions` covered by `answered_count`.

    Returns 0 when there are no questions at all.
    """
    if total_questions == 0:
        return 0
    return round_half_up_ratio(answered_count * 100, total_questions)


def average_progress(user_progress: int, partner_progress: int) -> int:
    """Mean of two percentages, rounded half up."""
    return round_half_up_ratio(user_progress + partner_progress, 2)


def pair_completion_percent(total_questions: int, user_answered: int, partner_answered: int) -> int:
    """
    Share of the pair's combined answers out of `2 * total_questions`.

    Rounds once from the raw counts, so it can differ by a point from
    `average_progress` of the two already-rounded percentages.
    """
    return completion_percent(2 * total_questions, user_answered + partner_answered)


@dataclass(frozen=True)
class ProgressSnapshot:
    total_questions: int
    answered_count: int
    percent: int

    @classmethod
    def compute(cls, total_questions: int, answered_count: int) -> "ProgressSnapshot":
        return cls(
            total_questions=total_questions,
            answered_count=answered_count,
            percent=completion_percent(total_questions, answered_count),
        )
