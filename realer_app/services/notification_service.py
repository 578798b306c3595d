import logging
import uuid

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError

from core.breaker import CircuitBreaker
from core.mapper import ORMMapper
from models.enums import NotificationType
from repos.notification_repo import NotificationRepo
from schemas.schema import CountOut, NotificationCreate, NotificationOut

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, db):
        self.db = db
        self.repo: NotificationRepo = NotificationRepo(db)
        self.breaker: CircuitBreaker = CircuitBreaker()
        self.mapper: ORMMapper = ORMMapper()

    async def send_notification(self, data: NotificationCreate) -> NotificationOut:
        async def handler():
            item = await self.repo.create(data.model_dump())
            return self.mapper.one(item=item, schema=NotificationOut)

        return await self.breaker.call(handler)

    async def notify(
        self,
        user_id: uuid.UUID,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        properties: dict | None = None,
    ) -> bool:
        """Follow-up write after a primary write; failure is logged, not raised."""
        try:
            await self.repo.create(
                {
                    "user_id": user_id,
                    "title": title,
                    "message": message,
                    "type": type,
                    "properties": properties,
                }
            )
            return True
        except SQLAlchemyError:
            logger.exception(f"Failed to write notification '{title}' for {user_id}")
            return False

    async def list_notifications(self, current_user) -> list[NotificationOut]:
        async def handler():
            items = await self.repo.list_for_user(current_user.id)
            return self.mapper.many(items=items, schema=NotificationOut)

        return await self.breaker.call(handler)

    async def unread_count(self, current_user) -> CountOut:
        async def handler():
            return CountOut(count=await self.repo.unread_count(current_user.id))

        return await self.breaker.call(handler)

    async def mark_read(self, current_user, notification_id: uuid.UUID) -> NotificationOut:
        async def handler():
            item = await self.repo.get_for_user(current_user.id, notification_id)
            if not item:
                raise HTTPException(404, "Notification not found")
            if not item.read:
                item = await self.repo.mark_read(item)
            return self.mapper.one(item=item, schema=NotificationOut)

        return await self.breaker.call(handler)

    async def mark_all_read(self, current_user) -> CountOut:
        async def handler():
            return CountOut(count=await self.repo.mark_all_read(current_user.id))

        return await self.breaker.call(handler)

    async def delete(self, current_user, notification_id: uuid.UUID):
        async def handler():
            deleted = await self.repo.delete_for_user(current_user.id, notification_id)
            if not deleted:
                raise HTTPException(404, "Notification not found")
            return {"message": "Notification deleted"}

        return await self.breaker.call(handler)
