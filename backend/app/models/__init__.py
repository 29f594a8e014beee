"""
Duet Backend — ORM Models
===========================

Importing this package registers every table with `Base.metadata`
(Alembic's env.py and the test database setup rely on that).
"""

from app.models.activity import ActiveRandomSubtopicSet, DailyAppOpen
from app.models.answer import UserAnswer
from app.models.content import Category, Question, SubTopic, Topic
from app.models.journal import JournalComment, JournalEntry
from app.models.relationship import Relationship
from app.models.user import User

__all__ = [
    "ActiveRandomSubtopicSet",
    "Category",
    "DailyAppOpen",
    "JournalComment",
    "JournalEntry",
    "Question",
    "Relationship",
    "SubTopic",
    "Topic",
    "User",
    "UserAnswer",
]
