"""
Duet Backend — Pair Match Scorer
==================================

What:  Compares two partners' free-text answers over one sub-topic and
       reports how many of them agree.
How:   A question counts only when both partners answered it. Two answers
       agree when their trimmed, lower-cased text is identical; there is no
       fuzzy or numeric comparison.
Who:   ResultService (GET /api/results/by-relationship-and-subtopic).

Example:
    user1: ["tea", "Mountains"], user2: ["Tea ", "mountains"]
    → MatchResult(matches=2, total_compared=2, similarity_percent="100.00")
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Mapping, Optional, Sequence, Tuple

AnswerKey = Tuple[int, int]  # (user_id, question_id)

_TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class MatchResult:
    matches: int
    total_compared: int
    similarity_percent: str


def normalize_answer(text: str) -> str:
    return text.strip().lower()


def format_similarity(matches: int, total_compared: int) -> str:
    """`matches / total_compared` as a percentage string with two decimals."""
    if total_compared == 0:
        return "0.00"
    value = Decimal(matches * 100) / Decimal(total_compared)
    return str(value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def score_answers(
    question_ids: Sequence[int],
    answers: Mapping[AnswerKey, Optional[str]],
    user1_id: int,
    user2_id: Optional[int],
) -> MatchResult:
    """
    Score two users' answers to the same ordered question set.

    Args:
        question_ids: The sub-topic's questions.
        answers:      Answer text keyed by (user_id, question_id).
        user1_id:     The primary user.
        user2_id:     The partner, or None for a disconnected/solo pairing.
                      With no partner nothing is compared and the score
                      is "0.00".
    """
    matches = 0
    total_compared = 0

    for question_id in question_ids:
        first = answers.get((user1_id, question_id))
        second = answers.get((user2_id, question_id)) if user2_id is not None else None
        # Empty strings count as unanswered.
        if not first or not second:
            continue
        total_compared += 1
        if normalize_answer(first) == normalize_answer(second):
            matches += 1

    return MatchResult(
        matches=matches,
        total_compared=total_compared,
        similarity_percent=format_similarity(matches, total_compared),
    )
