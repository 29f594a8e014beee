"""
Duet Backend — Progress Service Tests
=======================================

What we test:
    ✅ Per sub-topic / topic / category progress over active questions only
    ✅ Adult sub-topics hidden for users with hide_content
    ✅ Repeat answers count once
    ✅ Solo divisions with filters and summary
    ✅ Paired sub-topic divisions against the partner
    ✅ Unknown division filter → ValidationError
"""

import pytest
import pytest_asyncio

from app.core.divisions import Division
from app.exceptions import NotFoundError, ValidationError
from app.services.progress_service import progress_service


@pytest_asyncio.fixture
async def bank(seed):
    """
    Topic "Icebreakers" → A (4 active + 1 inactive question), B (2)
    Category "This or That" → A, X (adult, 2)
    An inactive sub-topic under the topic is never counted.
    """
    topic = await seed.topic()
    category = await seed.category()
    a = await seed.sub_topic("A", topic=topic, category=category, sort_order=1)
    b = await seed.sub_topic("B", topic=topic, sort_order=2)
    x = await seed.sub_topic("X", category=category, adult=True, sort_order=3)
    hidden = await seed.sub_topic("Retired", topic=topic, is_active=False, sort_order=4)
    questions = {
        "A": await seed.questions(a, 4),
        "B": await seed.questions(b, 2),
        "X": await seed.questions(x, 2),
    }
    await seed.questions(a, 1, is_active=False)
    await seed.questions(hidden, 1)
    return {"topic": topic, "category": category, "A": a, "B": b, "X": x, "questions": questions}


@pytest_asyncio.fixture
async def user_with_answers(seed, bank):
    user = await seed.user()
    q = bank["questions"]
    for question in q["A"][:2] + q["B"]:
        await seed.answer(user, question)
    await seed.answer(user, q["A"][0], "changed my mind")
    return user


class TestProgressViews:
    @pytest.mark.asyncio
    async def test_by_subtopic(self, db_session, bank, user_with_answers):
        entries = await progress_service.by_subtopic(db_session, user_with_answers.id)

        summary = [(e.name, e.total_questions, e.answered_count, e.progress) for e in entries]
        assert summary == [("A", 4, 2, 50), ("B", 2, 2, 100), ("X", 2, 0, 0)]

    @pytest.mark.asyncio
    async def test_hide_content_drops_adult(self, db_session, seed, bank):
        user = await seed.user(hide_content=True)

        entries = await progress_service.by_subtopic(db_session, user.id)
        assert [e.name for e in entries] == ["A", "B"]

        categories = await progress_service.by_category(db_session, user.id)
        assert categories[0].total_questions == 4

    @pytest.mark.asyncio
    async def test_filters_combine(self, db_session, bank, user_with_answers):
        entries = await progress_service.by_subtopic(
            db_session,
            user_with_answers.id,
            topic_id=bank["topic"].id,
            category_id=bank["category"].id,
        )
        assert [e.name for e in entries] == ["A"]

    @pytest.mark.asyncio
    async def test_by_topic_and_category(self, db_session, bank, user_with_answers):
        topics = await progress_service.by_topic(db_session, user_with_answers.id)
        categories = await progress_service.by_category(db_session, user_with_answers.id)

        assert [(t.total_questions, t.answered_count, t.progress) for t in topics] == [(6, 4, 67)]
        assert [(c.total_questions, c.answered_count, c.progress) for c in categories] == [(6, 2, 33)]

    @pytest.mark.asyncio
    async def test_unknown_user(self, db_session, bank):
        with pytest.raises(NotFoundError):
            await progress_service.by_subtopic(db_session, 12345)


class TestDivisions:
    @pytest.mark.asyncio
    async def test_solo_divisions(self, db_session, bank, user_with_answers):
        result = await progress_service.divisions(db_session, user_with_answers.id)

        labels = {e.name: e.division for e in result.sub_topics}
        assert labels == {"A": Division.ANSWERED, "B": Division.COMPLETE, "X": Division.YOUR_TURN}
        assert result.categories[0].division is Division.ANSWERED
        assert result.total == 4
        assert result.summary[Division.COMPLETE] == 1

    @pytest.mark.asyncio
    async def test_division_filter(self, db_session, bank, user_with_answers):
        result = await progress_service.divisions(db_session, user_with_answers.id, division="complete")

        assert [e.name for e in result.sub_topics] == ["B"]
        assert result.categories == []
        assert result.total == 1
        # Summary still covers every sub-topic
        assert sum(result.summary.values()) == 3

    @pytest.mark.asyncio
    async def test_unknown_division(self, db_session, bank, user_with_answers):
        with pytest.raises(ValidationError):
            await progress_service.divisions(db_session, user_with_answers.id, division="halfway")

    @pytest.mark.asyncio
    async def test_subtopic_divisions_paired(self, db_session, seed, bank, user_with_answers):
        partner = await seed.user()
        relationship = await seed.relationship(user_with_answers, partner)
        q = bank["questions"]
        for question in q["B"] + q["X"][:1]:
            await seed.answer(partner, question)

        result = await progress_service.subtopic_divisions(db_session, user_with_answers.id)

        assert result.relationship.has_partner is True
        assert result.relationship.relationship_id == relationship.id
        assert result.relationship.partner_user_id == partner.id
        rows = {e.name: (e.division, e.overall_progress, e.is_completed) for e in result.sub_topics}
        assert rows == {
            "A": (Division.ANSWERED, 25, False),
            "B": (Division.COMPLETE, 100, True),
            "X": (Division.YOUR_TURN, 25, False),
        }

    @pytest.mark.asyncio
    async def test_subtopic_divisions_partner_side(self, db_session, seed, bank, user_with_answers):
        partner = await seed.user()
        await seed.relationship(user_with_answers, partner)

        result = await progress_service.subtopic_divisions(db_session, partner.id, division="your_turn")

        assert result.relationship.partner_user_id == user_with_answers.id
        assert {e.name for e in result.sub_topics} == {"A", "B"}

    @pytest.mark.asyncio
    async def test_subtopic_divisions_solo(self, db_session, bank, user_with_answers):
        result = await progress_service.subtopic_divisions(db_session, user_with_answers.id)

        assert result.relationship.has_partner is False
        assert result.relationship.relationship_id is None
        assert all(e.partner_progress is None for e in result.sub_topics)
        assert result.summary[Division.UNANSWERED] == 0
