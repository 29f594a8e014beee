"""
Duet Backend — Result Service Tests
=====================================

What we test:
    ✅ Per-question comparison with the latest answers
    ✅ Disconnected relationship compares nothing ("0.00")
    ✅ Single question: pair, user, and no answers → 404
"""

from datetime import datetime, timezone

import pytest
import pytest_asyncio

from app.exceptions import NotFoundError
from app.services.result_service import result_service


@pytest_asyncio.fixture
async def couple(seed):
    first, second = await seed.user(), await seed.user()
    relationship = await seed.relationship(first, second)
    sub_topic = await seed.sub_topic("Favourites")
    drink, place = await seed.questions(sub_topic, 2)
    return {
        "first": first,
        "second": second,
        "relationship": relationship,
        "sub_topic": sub_topic,
        "drink": drink,
        "place": place,
    }


class TestSubtopicResults:
    @pytest.mark.asyncio
    async def test_answers_match_loosely(self, db_session, seed, couple):
        earlier = datetime(2025, 1, 1, tzinfo=timezone.utc)
        await seed.answer(couple["first"], couple["drink"], "coffee", answered_at=earlier)
        await seed.answer(couple["first"], couple["drink"], "tea")
        await seed.answer(couple["first"], couple["place"], "Mountains")
        await seed.answer(couple["second"], couple["drink"], "Tea ")
        await seed.answer(couple["second"], couple["place"], "mountains")

        result = await result_service.by_relationship_and_subtopic(
            db_session, couple["relationship"].id, couple["sub_topic"].id
        )

        assert result.match.matches == 2
        assert result.match.total_compared == 2
        assert result.match.similarity_percent == "100.00"
        assert [r.user1_answer for r in result.results] == ["tea", "Mountains"]
        assert all(r.is_match for r in result.results)

    @pytest.mark.asyncio
    async def test_unanswered_question_has_no_verdict(self, db_session, seed, couple):
        await seed.answer(couple["first"], couple["drink"], "tea")
        await seed.answer(couple["second"], couple["drink"], "coffee")
        await seed.answer(couple["first"], couple["place"], "beach")

        result = await result_service.by_relationship_and_subtopic(
            db_session, couple["relationship"].id, couple["sub_topic"].id
        )

        assert [r.is_match for r in result.results] == [False, None]
        assert result.match.similarity_percent == "0.00"
        assert result.match.total_compared == 1

    @pytest.mark.asyncio
    async def test_disconnected(self, db_session, seed, couple):
        couple["relationship"].deleted = True
        await db_session.flush()
        await seed.answer(couple["first"], couple["drink"], "tea")
        await seed.answer(couple["second"], couple["drink"], "tea")

        result = await result_service.by_relationship_and_subtopic(
            db_session, couple["relationship"].id, couple["sub_topic"].id
        )

        assert result.user2_id is None
        assert result.match.similarity_percent == "0.00"
        assert result.match.total_compared == 0

    @pytest.mark.asyncio
    async def test_unknown_sub_topic(self, db_session, couple):
        with pytest.raises(NotFoundError):
            await result_service.by_relationship_and_subtopic(db_session, couple["relationship"].id, 999)


class TestSingleQuestion:
    @pytest.mark.asyncio
    async def test_pair(self, db_session, seed, couple):
        await seed.answer(couple["second"], couple["drink"], "tea")

        result = await result_service.single_question(
            db_session, couple["drink"].id, relationship_id=couple["relationship"].id
        )

        assert result.user1_answer is None
        assert result.user2_answer.answer_text == "tea"

    @pytest.mark.asyncio
    async def test_user(self, db_session, seed, couple):
        await seed.answer(couple["first"], couple["drink"], "tea")

        result = await result_service.single_question(
            db_session, couple["drink"].id, user_id=couple["first"].id
        )

        assert result.user2_id is None
        assert result.user1_answer.answer_text == "tea"

    @pytest.mark.asyncio
    async def test_no_answers(self, db_session, couple):
        with pytest.raises(NotFoundError) as exc_info:
            await result_service.single_question(
                db_session, couple["place"].id, relationship_id=couple["relationship"].id
            )
        assert exc_info.value.message == "No answers found for this question"
