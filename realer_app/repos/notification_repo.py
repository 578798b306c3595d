import uuid
from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError

from models.models import Notification


class NotificationRepo:
    def __init__(self, db):
        self.db = db

    async def create(self, data: dict) -> Notification:
        item = Notification(**data)
        self.db.add(item)
        try:
            await self.db.commit()
            await self.db.refresh(item)
            return item
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def get_for_user(
        self, user_id: uuid.UUID, notification_id: uuid.UUID
    ) -> Optional[Notification]:
        result = await self.db.execute(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: uuid.UUID, limit: int = 100) -> List[Notification]:
        result = await self.db.execute(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
            .limit(limit)
        )
        return result.scalars().all()

    async def unread_count(self, user_id: uuid.UUID) -> int:
        result = await self.db.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.read.is_(False),
            )
        )
        return result.scalar_one()

    async def mark_read(self, notification: Notification) -> Notification:
        notification.read = True
        self.db.add(notification)
        try:
            await self.db.commit()
            await self.db.refresh(notification)
            return notification
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def mark_all_read(self, user_id: uuid.UUID) -> int:
        try:
            result = await self.db.execute(
                update(Notification)
                .where(Notification.user_id == user_id, Notification.read.is_(False))
                .values(read=True)
            )
            await self.db.commit()
            return result.rowcount
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def delete_for_user(self, user_id: uuid.UUID, notification_id: uuid.UUID) -> int:
        try:
            result = await self.db.execute(
                delete(Notification).where(
                    Notification.id == notification_id,
                    Notification.user_id == user_id,
                )
            )
            await self.db.commit()
            return result.rowcount
        except SQLAlchemyError:
            await self.db.rollback()
            raise
