"""
Duet Backend — Streak Schemas
===============================
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import Field

from app.schemas.common import CamelModel


class AppOpenRecord(CamelModel):
    user_id: int = Field(gt=0)


class AppOpenResponse(CamelModel):
    user_id: int
    message: str
    already_opened_today: bool = Field(description="True when today's open was already on file")
    opened_at: datetime = Field(description="The open counted for today")
    streak: int


class WeekDay(CamelModel):
    date: date
    day_of_week: str
    opened: bool
    can_answer_today: bool = Field(description="No open recorded for that day yet")
    is_today: bool
    is_future: bool


class SingleUserStreakResponse(CamelModel):
    user_id: int
    message: str
    streak: int
    already_opened_today: bool
    week: List[WeekDay]


class UserStreak(CamelModel):
    user_id: int
    name: Optional[str] = None
    profile_img: Optional[str] = None
    streak: int
    opened_today: bool


class CalendarDay(CamelModel):
    date: date
    day_of_month: int
    day_of_week: str
    user1_opened: bool
    user2_opened: Optional[bool] = None
    both_opened: bool
    is_today: bool
    is_future: bool


class StreakCalendar(CamelModel):
    month: str = Field(description="Month name, e.g. October")
    year: int
    days: List[CalendarDay]


class RelationshipStreakResponse(CamelModel):
    relationship_id: Optional[int] = None
    current_streak: int = Field(description="The weaker partner's streak, or the solo streak")
    user1: UserStreak
    user2: Optional[UserStreak] = None
    freeze_available: int = 0
    today_completed: bool
    calendar: StreakCalendar
