"""
Duet Backend — User Answer Model
==================================

What:  ORM model for `user_answers`, one row per submitted answer.
How:   `answer_status` is `complete` or `skipped`; only complete answers
       count towards finishing a random sub-topic batch.

Index on (user_id, question_id):
    Every progress and match query filters answers by a user and a set of
    question ids.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.common import utcnow


class UserAnswer(Base):
    __tablename__ = "user_answers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    question_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False
    )
    answer_text: Mapped[Optional[str]] = mapped_column(Text)
    answer_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="complete", server_default=text("'complete'")
    )
    answered_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_user_answers_user_question", "user_id", "question_id"),
    )

    def __repr__(self) -> str:
        return f"<UserAnswer(id={self.id}, user_id={self.user_id}, question_id={self.question_id})>"
