"""
Duet Backend — Journal & Answer Service Tests
===============================================

What we test:
    ✅ Entries list newest first, optionally by type
    ✅ Partial update through the id-in-body form
    ✅ At most two different commenters per entry
    ✅ Home counters (by type, distinct locations)
    ✅ Bulk answers require an active user
    ✅ Latest answer wins; answered ids are distinct
"""

from datetime import datetime, timezone

import pytest

from app.exceptions import NotFoundError, ValidationError
from app.schemas.answer import BulkAnswerCreate
from app.schemas.journal import CommentCreate, JournalCreate, JournalUpdate
from app.services.answer_service import answer_service
from app.services.journal_service import journal_service


@pytest.fixture
def when():
    return lambda day: datetime(2025, 10, day, 12, tzinfo=timezone.utc)


class TestJournalEntries:
    @pytest.mark.asyncio
    async def test_create_requires_relationship(self, db_session):
        with pytest.raises(NotFoundError):
            await journal_service.add_entry(
                db_session, JournalCreate(relationship_id=404, type="memory")
            )

    @pytest.mark.asyncio
    async def test_list_newest_first_and_by_type(self, db_session, seed, when):
        pair = await seed.relationship(await seed.user(), await seed.user())
        old = await seed.journal(pair, "memory", date_time=when(1))
        new = await seed.journal(pair, "memory", date_time=when(9))
        special = await seed.journal(pair, "special_day", date_time=when(5))

        entries = await journal_service.list_for_relationship(db_session, pair.id)
        assert [e.id for e in entries] == [new.id, special.id, old.id]

        memories = await journal_service.list_for_relationship(db_session, pair.id, "memory")
        assert [e.id for e in memories] == [new.id, old.id]

    @pytest.mark.asyncio
    async def test_edit_only_touches_given_fields(self, db_session, seed):
        pair = await seed.relationship(await seed.user(), await seed.user())
        entry = await seed.journal(pair, title="Paris", location="Paris")

        updated = await journal_service.edit_entry(
            db_session, JournalUpdate(id=entry.id, title="Paris, again")
        )

        assert updated.title == "Paris, again"
        assert updated.location == "Paris"
        assert updated.type == "memory"

    @pytest.mark.asyncio
    async def test_counters(self, db_session, seed):
        pair = await seed.relationship(await seed.user(), await seed.user())
        await seed.journal(pair, "memory", location="Paris")
        await seed.journal(pair, "memory", location="Paris")
        await seed.journal(pair, "memory", location="Rome")
        await seed.journal(pair, "special_day", location="")
        await seed.journal(pair, "special_day")

        assert await journal_service.count_by_type(db_session, pair.id, "memory") == 3
        assert await journal_service.count_by_type(db_session, pair.id, "special_day") == 2
        assert await journal_service.count_locations(db_session, pair.id) == 2


class TestJournalComments:
    @pytest.mark.asyncio
    async def test_third_commenter_is_rejected(self, db_session, seed):
        first, second, third = await seed.user(), await seed.user(), await seed.user()
        entry = await seed.journal(await seed.relationship(first, second))

        await journal_service.add_comment(db_session, entry.id, CommentCreate(user_id=first.id, comment="Best day"))
        await journal_service.add_comment(db_session, entry.id, CommentCreate(user_id=second.id, comment="Agreed"))

        with pytest.raises(ValidationError):
            await journal_service.add_comment(
                db_session, entry.id, CommentCreate(user_id=third.id, comment="Hi")
            )

    @pytest.mark.asyncio
    async def test_existing_commenter_may_comment_again(self, db_session, seed):
        first, second = await seed.user(), await seed.user()
        entry = await seed.journal(await seed.relationship(first, second))

        for text in ("one", "two", "three"):
            await journal_service.add_comment(db_session, entry.id, CommentCreate(user_id=first.id, comment=text))
        await journal_service.add_comment(db_session, entry.id, CommentCreate(user_id=second.id, comment="four"))

        comments = await journal_service.list_comments(db_session, entry.id)
        assert [c.comment for c in comments] == ["one", "two", "three", "four"]

    @pytest.mark.asyncio
    async def test_comment_on_missing_entry(self, db_session, seed):
        user = await seed.user()
        with pytest.raises(NotFoundError):
            await journal_service.add_comment(db_session, 999, CommentCreate(user_id=user.id, comment="?"))


class TestAnswers:
    @pytest.mark.asyncio
    async def test_bulk_for_soft_deleted_user(self, db_session, seed):
        user = await seed.user(deleted=True)
        questions = await seed.questions(await seed.sub_topic(), 1)

        with pytest.raises(NotFoundError):
            await answer_service.submit_bulk(
                db_session,
                BulkAnswerCreate(user_id=user.id, answers=[{"questionId": questions[0].id, "answerText": "yes"}]),
            )

    @pytest.mark.asyncio
    async def test_bulk_stores_every_answer(self, db_session, seed):
        user = await seed.user()
        questions = await seed.questions(await seed.sub_topic(), 3)

        stored = await answer_service.submit_bulk(
            db_session,
            BulkAnswerCreate(
                user_id=user.id,
                answers=[{"questionId": q.id, "answerText": "yes"} for q in questions],
            ),
        )

        assert len(stored) == 3
        assert all(a.id is not None and a.answer_status == "complete" for a in stored)

    @pytest.mark.asyncio
    async def test_latest_answer_wins(self, db_session, seed, when):
        user = await seed.user()
        question = (await seed.questions(await seed.sub_topic(), 1))[0]
        await seed.answer(user, question, "no", answered_at=when(1))
        await seed.answer(user, question, "yes", answered_at=when(2))

        latest = await answer_service.latest_answers(db_session, [user.id], [question.id])
        assert latest[(user.id, question.id)].answer_text == "yes"

    @pytest.mark.asyncio
    async def test_answered_ids_are_distinct(self, db_session, seed):
        user = await seed.user()
        questions = await seed.questions(await seed.sub_topic(), 3)
        await seed.answer(user, questions[0])
        await seed.answer(user, questions[0])
        await seed.answer(user, questions[1], answer_status="skipped")

        all_ids = [q.id for q in questions]
        answered = await answer_service.answered_question_ids(db_session, [user.id], all_ids)
        completed = await answer_service.answered_question_ids(
            db_session, [user.id], all_ids, complete_only=True
        )

        assert answered[user.id] == {questions[0].id, questions[1].id}
        assert completed[user.id] == {questions[0].id}
        assert await answer_service.count_answered(db_session, [user.id]) == 2
