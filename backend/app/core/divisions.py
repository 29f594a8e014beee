"""
Duet Backend — Division Classifier
====================================

What:  Buckets a content unit (sub-topic or category) by how far the user,
       and optionally their partner, have got through it.
Who:   ProgressService and HomeService.

Rules:
    Solo:
        user at 100%              → complete
        user answered anything    → answered
        otherwise                 → your_turn
    Paired:
        both at 100%              → complete
        user answered anything    → answered   (the user's own answers win)
        only partner answered     → your_turn  (partner is waiting)
        nobody answered           → unanswered
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, TypeVar

from app.core.progress import average_progress

T = TypeVar("T")


class Division(str, Enum):
    UNANSWERED = "unanswered"
    YOUR_TURN = "your_turn"
    ANSWERED = "answered"
    COMPLETE = "complete"


ALL_DIVISIONS = "all"


def classify_division(
    user_progress: int,
    user_answered_count: int,
    has_partner: bool,
    partner_progress: int = 0,
    partner_answered_count: int = 0,
) -> Division:
    if not has_partner:
        if user_progress == 100:
            return Division.COMPLETE
        if user_answered_count > 0:
            return Division.ANSWERED
        return Division.YOUR_TURN

    if user_progress == 100 and partner_progress == 100:
        return Division.COMPLETE
    if user_answered_count > 0:
        return Division.ANSWERED
    if partner_answered_count > 0:
        return Division.YOUR_TURN
    return Division.UNANSWERED


@dataclass(frozen=True)
class DivisionStatus:
    division: Division
    overall_progress: int

    @property
    def is_completed(self) -> bool:
        return self.division is Division.COMPLETE


def division_status(
    user_progress: int,
    user_answered_count: int,
    has_partner: bool,
    partner_progress: int = 0,
    partner_answered_count: int = 0,
) -> DivisionStatus:
    """Division plus the overall progress shown next to it."""
    division = classify_division(
        user_progress, user_answered_count, has_partner,
        partner_progress, partner_answered_count,
    )
    if division is Division.COMPLETE:
        overall = 100
    elif not has_partner:
        overall = user_progress
    elif division is Division.UNANSWERED:
        overall = 0
    else:
        overall = average_progress(user_progress, partner_progress)
    return DivisionStatus(division=division, overall_progress=overall)


def filter_by_division(
    items: Iterable[T],
    division: str,
    key: Callable[[T], Division],
) -> List[T]:
    """Keep items in `division`; the special value `all` keeps everything."""
    items = list(items)
    if division == ALL_DIVISIONS:
        return items
    wanted = Division(division)
    return [item for item in items if key(item) is wanted]


def summarize_divisions(labels: Iterable[Division]) -> Dict[Division, int]:
    counts = {d: 0 for d in Division}
    for label in labels:
        counts[label] += 1
    return counts


def parse_division(value: Optional[str]) -> str:
    """Validate a division filter; raises ValueError for unknown names."""
    if value is None or value == ALL_DIVISIONS:
        return ALL_DIVISIONS
    return Division(value).value
