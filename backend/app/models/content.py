"""
Duet Backend — Question Bank Models
=====================================

What:  The content hierarchy: category → topic → sub-topic → question.
How:   A sub-topic belongs to a topic and/or a category (both nullable).
       Sub-topics are the unit progress, divisions and rotation work on.
       `is_active = False` hides a row from the derived views without
       deleting answers that reference it.
"""

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.common import TimestampMixin


class _Presentable:
    """Display columns shared by categories, topics and sub-topics."""

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    icon: Mapped[Optional[str]] = mapped_column(String(100))
    color: Mapped[Optional[str]] = mapped_column(String(50))  # hex code
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text("0"))
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=text("true"))


class Category(_Presentable, TimestampMixin, Base):
    """e.g. "Never Have I Ever", "This or That"."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)


class Topic(_Presentable, TimestampMixin, Base):
    """e.g. "Icebreakers", "Us & Love"."""

    __tablename__ = "topics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)


class SubTopic(_Presentable, TimestampMixin, Base):
    """e.g. "Daily Life". Leaf grouping of questions."""

    __tablename__ = "sub_topics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    topic_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("topics.id", ondelete="CASCADE"), index=True
    )
    category_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="CASCADE"), index=True
    )
    adult: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=text("false"))


class Question(TimestampMixin, Base):
    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sub_topic_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("sub_topics.id"), index=True
    )
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    # yes_no | multiple_choice | photo | text
    question_type: Mapped[str] = mapped_column(
        String(30), nullable=False, default="yes_no", server_default=text("'yes_no'")
    )
    option_text: Mapped[Optional[str]] = mapped_column(String(500))
    option_img: Mapped[Optional[str]] = mapped_column(Text)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text("0"))
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=text("true"))
