"""
Duet Backend — User & Relationship Service Tests
==================================================

What we test:
    ✅ Duplicate uuid / social id → ConflictError with the existing id
    ✅ Soft-deleted users are hidden from active lookups
    ✅ Soft delete, list deleted, restore
    ✅ Pairing by invite code (found, unknown code, own code)
    ✅ Disconnected relationships are not "active"
"""

from unittest.mock import MagicMock

import pytest

from app.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.user import User
from app.schemas.relationship import RelationshipCreate, RelationshipInvite, RelationshipUpdate
from app.schemas.user import UserCreate
from app.services.relationship_service import relationship_service
from app.services.user_service import UserService, user_service


def scalar_result(value):
    """A mocked `db.execute()` result whose scalar_one_or_none() is `value`."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


class TestUserServiceMocked:
    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_register_duplicate_uuid(self, mock_db_session):
        existing = User(id=7, uuid="device-abc", social_id=None)
        mock_db_session.execute.return_value = scalar_result(existing)

        with pytest.raises(ConflictError) as exc_info:
            await self.service.register(mock_db_session, UserCreate(uuid="device-abc"))

        assert exc_info.value.context == {"field": "uuid", "existing_user_id": 7}
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_register_duplicate_social_id(self, mock_db_session):
        existing = User(id=3, uuid="other-device", social_id="google-42")
        mock_db_session.execute.return_value = scalar_result(existing)

        with pytest.raises(ConflictError) as exc_info:
            await self.service.register(
                mock_db_session, UserCreate(uuid="new-device", social_id="google-42")
            )

        assert exc_info.value.context["field"] == "socialId"
        assert exc_info.value.context["existing_user_id"] == 3

    @pytest.mark.asyncio
    async def test_get_missing_user(self, mock_db_session):
        mock_db_session.execute.return_value = scalar_result(None)

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get(mock_db_session, 99)
        assert "99" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_get_active_hides_soft_deleted(self, mock_db_session):
        mock_db_session.execute.return_value = scalar_result(User(id=5, uuid="x", deleted=True))

        with pytest.raises(NotFoundError):
            await self.service.get_active(mock_db_session, 5)


class TestUserLifecycle:
    @pytest.mark.asyncio
    async def test_register_applies_defaults(self, db_session):
        user = await user_service.register(db_session, UserCreate(uuid="device-1", name="Sam"))

        assert user.id is not None
        assert user.lang == "en"
        assert user.distance_unit == "km"
        assert user.hide_content is False
        assert user.deleted is False

    @pytest.mark.asyncio
    async def test_soft_delete_and_restore(self, db_session, seed):
        user = await seed.user()

        deleted = await user_service.soft_delete(db_session, user.id)
        assert deleted.deleted is True
        assert deleted.is_active is False
        assert [u.id for u in await user_service.list_deleted(db_session)] == [user.id]
        with pytest.raises(NotFoundError):
            await user_service.get_active(db_session, user.id)

        restored = await user_service.restore(db_session, user.id)
        assert restored.deleted is False
        assert restored.is_active is True
        assert await user_service.list_deleted(db_session) == []

    @pytest.mark.asyncio
    async def test_hard_delete(self, db_session, seed):
        user = await seed.user()
        assert await user_service.delete(db_session, user.id) == user.id
        with pytest.raises(NotFoundError):
            await user_service.get(db_session, user.id)


class TestRelationships:
    @pytest.mark.asyncio
    async def test_pair_by_invite_code(self, db_session, seed):
        inviter = await seed.user()
        owner = await seed.user(invite_code="LOVE42")

        relationship = await relationship_service.pair_by_invite_code(
            db_session, RelationshipInvite(user1_id=inviter.id, invite_code="LOVE42")
        )

        assert relationship.user1_id == inviter.id
        assert relationship.user2_id == owner.id
        assert relationship.deleted is False

    @pytest.mark.asyncio
    async def test_unknown_invite_code(self, db_session, seed):
        inviter = await seed.user()

        with pytest.raises(NotFoundError) as exc_info:
            await relationship_service.pair_by_invite_code(
                db_session, RelationshipInvite(user1_id=inviter.id, invite_code="NOPE")
            )
        assert exc_info.value.message == "No user found with this invite code"

    @pytest.mark.asyncio
    async def test_own_invite_code(self, db_session, seed):
        user = await seed.user(invite_code="SELF")

        with pytest.raises(ValidationError):
            await relationship_service.pair_by_invite_code(
                db_session, RelationshipInvite(user1_id=user.id, invite_code="SELF")
            )

    @pytest.mark.asyncio
    async def test_pair_requires_active_users(self, db_session, seed):
        first = await seed.user()
        gone = await seed.user(deleted=True)

        with pytest.raises(NotFoundError):
            await relationship_service.pair(
                db_session, RelationshipCreate(user1_id=first.id, user2_id=gone.id)
            )

    def test_pair_with_self_is_rejected(self):
        with pytest.raises(ValueError):
            RelationshipCreate(user1_id=1, user2_id=1)

    @pytest.mark.asyncio
    async def test_disconnect(self, db_session, seed):
        first, second = await seed.user(), await seed.user()
        relationship = await seed.relationship(first, second)
        assert (await relationship_service.find_active_for_user(db_session, second.id)).id == relationship.id

        updated = await relationship_service.modify(
            db_session, relationship.id, RelationshipUpdate(deleted=True)
        )

        assert updated.deleted is True
        assert updated.partner_user_id is None
        assert await relationship_service.find_active_for_user(db_session, first.id) is None
        with pytest.raises(NotFoundError):
            await relationship_service.get_connected(db_session, relationship.id)
        assert len(await relationship_service.list_all(db_session, user_id=first.id)) == 1
        assert await relationship_service.list_all(db_session, user_id=first.id, include_deleted=False) == []
