"""
Duet Backend — API Endpoint Tests
===================================

What we test:
    ✅ /health reports version and database status
    ✅ Success envelope with camelCase keys
    ✅ Error bodies: 400, 404, 409, 422 and the request id
    ✅ One round trip per derived-state endpoint family
"""

import pytest

from app import __version__


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["version"] == __version__
        assert "X-Request-ID" in response.headers


class TestUsersApi:
    @pytest.mark.asyncio
    async def test_create_and_fetch(self, api_client):
        created = await api_client.post(
            "/api/users", json={"uuid": "device-1", "name": "Sam", "hideContent": True}
        )

        assert created.status_code == 201
        body = created.json()
        assert body["success"] is True
        user = body["data"]
        assert user["hideContent"] is True
        assert user["distanceUnit"] == "km"

        fetched = await api_client.get(f"/api/users/{user['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["data"]["name"] == "Sam"

    @pytest.mark.asyncio
    async def test_duplicate_is_409(self, api_client, seed):
        existing = await seed.user(uuid="device-1")

        response = await api_client.post("/api/users", json={"uuid": "device-1"})

        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "conflict"
        assert body["details"]["existing_user_id"] == existing.id

    @pytest.mark.asyncio
    async def test_missing_user_is_404(self, api_client):
        response = await api_client.get("/api/users/4242", headers={"X-Request-ID": "trace-1"})

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert body["request_id"] == "trace-1"

    @pytest.mark.asyncio
    async def test_soft_delete_round_trip(self, api_client, seed):
        user = await seed.user()

        deleted = await api_client.delete(f"/api/users/{user.id}/soft")
        listed = await api_client.get("/api/users/deleted")
        restored = await api_client.put(f"/api/users/{user.id}/restore")

        assert deleted.json()["data"]["deleted"] is True
        assert [u["id"] for u in listed.json()["data"]] == [user.id]
        assert restored.json()["data"]["deleted"] is False

    @pytest.mark.asyncio
    async def test_schema_error_is_422(self, api_client):
        response = await api_client.post("/api/users", json={"uuid": "x", "distanceUnit": "parsecs"})
        assert response.status_code == 422


class TestRelationshipsApi:
    @pytest.mark.asyncio
    async def test_invite_unknown_code(self, api_client, seed):
        user = await seed.user()

        response = await api_client.post(
            "/api/relationships/invite", json={"user1Id": user.id, "inviteCode": "NOPE"}
        )

        assert response.status_code == 404
        assert response.json()["message"] == "No user found with this invite code"

    @pytest.mark.asyncio
    async def test_get_connected_only(self, api_client, seed):
        relationship = await seed.relationship(await seed.user(), await seed.user(), deleted=True)

        response = await api_client.get("/api/relationships/get", params={"id": relationship.id})
        assert response.status_code == 404


class TestJournalsApi:
    @pytest.mark.asyncio
    async def test_create_comment_and_limit(self, api_client, seed):
        first, second, third = await seed.user(), await seed.user(), await seed.user()
        relationship = await seed.relationship(first, second)

        created = await api_client.post(
            "/api/journal-create",
            json={"relationshipId": relationship.id, "type": "memory", "title": "Paris"},
        )
        assert created.status_code == 201
        entry_id = created.json()["data"]["id"]

        for user in (first, second):
            ok = await api_client.post(
                f"/api/journals/{entry_id}/comment", json={"userId": user.id, "comment": "<3"}
            )
            assert ok.status_code == 201
        rejected = await api_client.post(
            f"/api/journals/{entry_id}/comment", json={"userId": third.id, "comment": "hi"}
        )

        assert rejected.status_code == 400
        assert rejected.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_update_with_id_in_body(self, api_client, seed):
        relationship = await seed.relationship(await seed.user(), await seed.user())
        entry = await seed.journal(relationship, title="Draft")

        response = await api_client.post("/api/journals", json={"id": entry.id, "title": "Final"})

        assert response.status_code == 200
        assert response.json()["data"]["title"] == "Final"


class TestDerivedStateApi:
    @pytest.mark.asyncio
    async def test_home_needs_an_id(self, api_client):
        response = await api_client.get("/api/home")

        assert response.status_code == 400
        assert response.json()["message"] == "Either relationshipId or userId must be provided"

    @pytest.mark.asyncio
    async def test_home_for_user(self, api_client, seed):
        user = await seed.user()

        response = await api_client.get("/api/home", params={"userId": user.id})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["questionAnsweredPercentage"] == 0
        assert data["dailyStreak"]["combined"] == 0

    @pytest.mark.asyncio
    async def test_progress_by_subtopic(self, api_client, seed):
        user = await seed.user()
        questions = await seed.questions(await seed.sub_topic("Daily Life"), 4)
        await seed.answer(user, questions[0])

        response = await api_client.get("/api/user-progress/by-subtopic", params={"userId": user.id})

        assert response.status_code == 200
        entry = response.json()["data"][0]
        assert (entry["totalQuestions"], entry["answeredCount"], entry["progress"]) == (4, 1, 25)

    @pytest.mark.asyncio
    async def test_bad_division_is_400(self, api_client, seed):
        user = await seed.user()

        response = await api_client.get(
            "/api/user-progress/divisions", params={"userId": user.id, "division": "halfway"}
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize("month", ["2025-10", "01-10000"])
    async def test_streak_bad_month_is_400(self, api_client, seed, month):
        user = await seed.user()

        response = await api_client.get(
            "/api/streak/relationship", params={"userId": user.id, "month": month}
        )

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "month"

    @pytest.mark.asyncio
    async def test_record_app_open(self, api_client, seed):
        user = await seed.user()

        first = await api_client.post("/api/streak/record-app-open", json={"userId": user.id})
        second = await api_client.post("/api/streak/record-app-open", json={"userId": user.id})

        assert first.json()["data"]["alreadyOpenedToday"] is False
        assert second.json()["data"]["alreadyOpenedToday"] is True
        assert second.json()["data"]["streak"] == 1

    @pytest.mark.asyncio
    async def test_results_similarity(self, api_client, seed):
        first, second = await seed.user(), await seed.user()
        relationship = await seed.relationship(first, second)
        sub_topic = await seed.sub_topic("Favourites")
        drink, place = await seed.questions(sub_topic, 2)
        await seed.answer(first, drink, "tea")
        await seed.answer(first, place, "Mountains")
        await seed.answer(second, drink, "Tea ")
        await seed.answer(second, place, "mountains")

        response = await api_client.get(
            "/api/results/by-relationship-and-subtopic",
            params={"relationshipId": relationship.id, "subTopicId": sub_topic.id},
        )

        assert response.status_code == 200
        assert response.json()["data"]["match"]["similarityPercent"] == "100.00"
