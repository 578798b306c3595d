from typing import List
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from models.models import Conversation, Message


class MessageRepository:
    def __init__(self, db):
        self.db = db

    async def create(
        self,
        conversation_id: UUID,
        sender_id: UUID,
        content: str,
        related_offer_id: UUID | None = None,
        property_id: UUID | None = None,
    ) -> Message:
        msg = Message(
            conversation_id=conversation_id,
            sender_id=sender_id,
            content=content,
            related_offer_id=related_offer_id,
            property_id=property_id,
        )
        self.db.add(msg)
        try:
            await self.db.commit()
            await self.db.refresh(msg)
            return msg
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def get_by_id(self, message_id: UUID) -> Message | None:
        result = await self.db.execute(select(Message).where(Message.id == message_id))
        return result.scalar_one_or_none()

    async def list_for_conversation(self, conversation_id: UUID) -> List[Message]:
        stmt = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at)
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def latest_for_conversations(
        self, conversation_ids: list[UUID]
    ) -> dict[UUID, Message]:
        if not conversation_ids:
            return {}
        stmt = (
            select(Message)
            .options(selectinload(Message.related_offer))
            .where(Message.conversation_id.in_(conversation_ids))
            .order_by(Message.conversation_id, Message.created_at.desc())
        )
        result = await self.db.execute(stmt)
        latest: dict[UUID, Message] = {}
        for msg in result.scalars().all():
            latest.setdefault(msg.conversation_id, msg)
        return latest

    async def mark_conversation_as_read(self, conversation_id: UUID, reader_id: UUID) -> int:
        try:
            stmt = (
                update(Message)
                .where(
                    Message.conversation_id == conversation_id,
                    Message.sender_id != reader_id,
                    Message.is_read.is_(False),
                )
                .values(is_read=True)
            )
            result = await self.db.execute(stmt)
            await self.db.commit()
            return result.rowcount
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def mark_read(self, message_id: UUID, reader_id: UUID) -> int:
        try:
            result = await self.db.execute(
                update(Message)
                .where(
                    Message.id == message_id,
                    Message.sender_id != reader_id,
                    Message.is_read.is_(False),
                )
                .values(is_read=True)
            )
            await self.db.commit()
            return result.rowcount
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def unread_count_for_user(self, user_id: UUID) -> int:
        stmt = (
            select(func.count(Message.id))
            .join(Conversation, Conversation.id == Message.conversation_id)
            .where(
                (Conversation.participant1 == user_id)
                | (Conversation.participant2 == user_id),
                Message.sender_id != user_id,
                Message.is_read.is_(False),
            )
        )
        result = await self.db.execute(stmt)
        return result.scalar_one()
