"""
Duet Backend — Progress & Division Schemas
============================================

Read-only shapes produced from `app.core.progress` and
`app.core.divisions`. Progress values are integer percents.
"""

from typing import Dict, List, Literal, Optional

from pydantic import Field

from app.core.divisions import Division
from app.schemas.common import CamelModel


class ProgressEntry(CamelModel):
    """Completion of one category, topic or sub-topic by one user."""

    id: int
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    total_questions: int
    answered_count: int
    progress: int


class SubTopicProgressEntry(ProgressEntry):
    topic_id: Optional[int] = None
    category_id: Optional[int] = None
    adult: bool = False


class DivisionEntry(CamelModel):
    """A category or sub-topic with its solo division label."""

    id: int
    kind: Literal["category", "sub_topic"]
    name: str
    icon: Optional[str] = None
    color: Optional[str] = None
    category_id: Optional[int] = None
    topic_id: Optional[int] = None
    total_questions: int
    answered_count: int
    progress: int
    division: Division


class DivisionsResponse(CamelModel):
    user_id: int
    division: str = Field(description="The filter applied: `all` or a division label")
    categories: List[DivisionEntry]
    sub_topics: List[DivisionEntry]
    category_count: int
    sub_topic_count: int
    total: int
    summary: Dict[Division, int] = Field(description="Sub-topic counts per division, before filtering")


class RelationshipInfo(CamelModel):
    relationship_id: Optional[int] = None
    partner_user_id: Optional[int] = None
    has_partner: bool


class SubtopicDivisionEntry(CamelModel):
    """A sub-topic classified for a user, paired with the partner when there is one."""

    id: int
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    topic_id: Optional[int] = None
    category_id: Optional[int] = None
    topic_name: Optional[str] = None
    category_name: Optional[str] = None
    total_questions: int
    user_answered_count: int
    user_progress: int
    partner_answered_count: Optional[int] = None
    partner_progress: Optional[int] = None
    overall_progress: int
    division: Division
    is_completed: bool


class SubtopicDivisionsResponse(CamelModel):
    user_id: int
    division: str
    relationship: RelationshipInfo
    sub_topics: List[SubtopicDivisionEntry]
    summary: Dict[Division, int] = Field(description="Counts per division, before filtering")
    total: int
