"""
Duet Backend — Streak Service
===============================

What:  Records daily app opens and reports streaks with week and month
       calendars.
How:   At most one `daily_app_opens` row exists per user per UTC day, held
       by a unique constraint; concurrent opens insert with ON CONFLICT DO
       NOTHING.
       Streak counting itself is `app.core.streak.streak_from_days`, so
       every endpoint (this one and home) uses the same grace rule: a
       streak that reached yesterday still counts until today ends.
"""

import calendar
import logging
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Set

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dates import to_utc_date, utc_now
from app.core.streak import combined_streak, month_dates, parse_month, streak_from_days, week_dates
from app.exceptions import ValidationError
from app.models.activity import DailyAppOpen
from app.models.user import User
from app.schemas.streak import (
    AppOpenResponse,
    CalendarDay,
    RelationshipStreakResponse,
    SingleUserStreakResponse,
    StreakCalendar,
    UserStreak,
    WeekDay,
)
from app.services.base import translate_db_errors
from app.services.pairing import resolve_pairing
from app.services.user_service import user_service

logger = logging.getLogger(__name__)

OPEN_RECORDED = "App open recorded successfully"
ALREADY_OPENED = "Already opened app today"


def day_name(d: date) -> str:
    return calendar.day_abbr[d.weekday()]


def dialect_insert(db: AsyncSession):
    """The bound dialect's `insert`, which supports ON CONFLICT DO NOTHING."""
    if db.get_bind().dialect.name == "sqlite":
        return sqlite_insert
    return pg_insert


class StreakService:
    async def open_days(self, db: AsyncSession, user_ids: Iterable[int]) -> Dict[int, Set[date]]:
        """user_id → distinct UTC days with at least one recorded open."""
        user_ids = list(user_ids)
        days: Dict[int, Set[date]] = {uid: set() for uid in user_ids}
        if not user_ids:
            return days
        with translate_db_errors("load app opens"):
            result = await db.execute(
                select(DailyAppOpen.user_id, DailyAppOpen.opened_at).where(
                    DailyAppOpen.user_id.in_(user_ids)
                )
            )
            for user_id, opened_at in result.all():
                days[user_id].add(to_utc_date(opened_at))
        return days

    async def streaks(
        self, db: AsyncSession, user_ids: Iterable[int], now: Optional[datetime] = None
    ) -> Dict[int, int]:
        today = to_utc_date(now or utc_now())
        days = await self.open_days(db, user_ids)
        return {uid: streak_from_days(d, today) for uid, d in days.items()}

    async def record_app_open(
        self, db: AsyncSession, user_id: int, now: Optional[datetime] = None
    ) -> AppOpenResponse:
        """
        Count today's open for the user, once.

        Raises:
            NotFoundError: Unknown or soft-deleted user.
        """
        await user_service.get_active(db, user_id)
        now = now or utc_now()
        today = to_utc_date(now)

        with translate_db_errors("record app open", user_id=user_id):
            stmt = (
                dialect_insert(db)(DailyAppOpen)
                .values(user_id=user_id, opened_at=now, opened_on=today)
                .on_conflict_do_nothing(index_elements=["user_id", "opened_on"])
                .returning(DailyAppOpen.id)
            )
            inserted_id = (await db.execute(stmt)).scalar_one_or_none()

        already_opened = inserted_id is None
        opened_at = now
        if already_opened:
            with translate_db_errors("load today's app open", user_id=user_id):
                result = await db.execute(
                    select(DailyAppOpen.opened_at).where(
                        DailyAppOpen.user_id == user_id, DailyAppOpen.opened_on == today
                    )
                )
                opened_at = result.scalar_one()
        else:
            logger.info("Recorded app open for user %s on %s", user_id, today.isoformat())

        days = (await self.open_days(db, [user_id]))[user_id]
        days.add(today)
        return AppOpenResponse(
            user_id=user_id,
            message=ALREADY_OPENED if already_opened else OPEN_RECORDED,
            already_opened_today=already_opened,
            opened_at=opened_at,
            streak=streak_from_days(days, today),
        )

    async def single_user(
        self, db: AsyncSession, user_id: int, now: Optional[datetime] = None
    ) -> SingleUserStreakResponse:
        """Records today's open, then reports the Monday-Sunday week around it."""
        now = now or utc_now()
        today = to_utc_date(now)
        recorded = await self.record_app_open(db, user_id, now=now)
        days = (await self.open_days(db, [user_id]))[user_id]
        days.add(today)

        week = [
            WeekDay(
                date=d,
                day_of_week=day_name(d),
                opened=d in days,
                can_answer_today=d not in days,
                is_today=d == today,
                is_future=d > today,
            )
            for d in week_dates(today)
        ]
        return SingleUserStreakResponse(
            user_id=user_id,
            message=recorded.message,
            streak=recorded.streak,
            already_opened_today=recorded.already_opened_today,
            week=week,
        )

    async def relationship_streak(
        self,
        db: AsyncSession,
        relationship_id: Optional[int] = None,
        user_id: Optional[int] = None,
        month: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> RelationshipStreakResponse:
        """
        Streaks of a pair (or one user) plus a month calendar of opens.

        `month` is `MM-YYYY`; the current UTC month when omitted.

        Raises:
            ValidationError: Neither id given, or a malformed month.
            NotFoundError:   Unknown relationship or user.
        """
        now = now or utc_now()
        today = to_utc_date(now)
        try:
            year, month_num = parse_month(month, today)
        except ValueError as e:
            raise ValidationError(str(e), field="month", context={"month": month}) from None

        pairing = await resolve_pairing(db, relationship_id, user_id)
        days = await self.open_days(db, pairing.user_ids)
        users = await self._users_by_id(db, pairing.user_ids)

        def user_streak(uid: int) -> UserStreak:
            user = users.get(uid)
            return UserStreak(
                user_id=uid,
                name=user.name if user else None,
                profile_img=user.profile_img if user else None,
                streak=streak_from_days(days[uid], today),
                opened_today=today in days[uid],
            )

        user1 = user_streak(pairing.user1_id)
        user2 = user_streak(pairing.user2_id) if pairing.has_partner else None
        today_completed = user1.opened_today and (user2 is None or user2.opened_today)

        calendar_days: List[CalendarDay] = []
        for d in month_dates(year, month_num):
            user1_opened = d in days[pairing.user1_id]
            user2_opened = d in days[pairing.user2_id] if pairing.has_partner else None
            calendar_days.append(
                CalendarDay(
                    date=d,
                    day_of_month=d.day,
                    day_of_week=day_name(d),
                    user1_opened=user1_opened,
                    user2_opened=user2_opened,
                    both_opened=user1_opened and (user2_opened is None or user2_opened),
                    is_today=d == today,
                    is_future=d > today,
                )
            )

        return RelationshipStreakResponse(
            relationship_id=pairing.relationship_id,
            current_streak=combined_streak(user1.streak, user2.streak if user2 else None),
            user1=user1,
            user2=user2,
            freeze_available=0,
            today_completed=today_completed,
            calendar=StreakCalendar(
                month=calendar.month_name[month_num],
                year=year,
                days=calendar_days,
            ),
        )

    async def _users_by_id(self, db: AsyncSession, user_ids: List[int]) -> Dict[int, User]:
        with translate_db_errors("load users"):
            result = await db.execute(select(User).where(User.id.in_(user_ids)))
            return {user.id: user for user in result.scalars().all()}


streak_service = StreakService()
