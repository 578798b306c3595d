import uuid

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError

from models.enums import NotificationType
from schemas.schema import NotificationCreate
from services.notification_service import NotificationService


@pytest.fixture
def service(db):
    return NotificationService(db)


class TestNotifications:
    async def test_send_list_and_count(self, service, make_profile):
        user = await make_profile()
        sent = await service.send_notification(
            NotificationCreate(
                user_id=user.id,
                title="Hello",
                message="Welcome aboard",
                properties={"propertyId": "abc"},
            )
        )
        await service.notify(user.id, "Second", "Another one", type=NotificationType.REWARD)

        assert sent.read is False
        assert sent.type == NotificationType.INFO
        listed = await service.list_notifications(user)
        assert {n.title for n in listed} == {"Hello", "Second"}
        assert (await service.unread_count(user)).count == 2

    async def test_mark_read_and_read_all(self, service, make_profile):
        user = await make_profile()
        for title in ("One", "Two", "Three"):
            await service.notify(user.id, title, "body")
        first = (await service.list_notifications(user))[0]

        marked = await service.mark_read(user, first.id)
        assert marked.read is True
        assert (await service.unread_count(user)).count == 2

        assert (await service.mark_all_read(user)).count == 2
        assert (await service.unread_count(user)).count == 0

    async def test_other_users_notifications_are_invisible(self, service, make_profile):
        owner = await make_profile()
        stranger = await make_profile()
        await service.notify(owner.id, "Private", "body")
        note = (await service.list_notifications(owner))[0]

        with pytest.raises(HTTPException) as exc:
            await service.mark_read(stranger, note.id)
        assert exc.value.status_code == 404
        with pytest.raises(HTTPException):
            await service.delete(stranger, note.id)

        assert await service.delete(owner, note.id) == {"message": "Notification deleted"}
        assert await service.list_notifications(owner) == []

    async def test_notify_failure_is_logged_not_raised(self, service, monkeypatch):
        async def boom(data):
            raise SQLAlchemyError("database is gone")

        monkeypatch.setattr(service.repo, "create", boom)
        assert await service.notify(uuid.uuid4(), "Title", "body") is False
