from datetime import datetime
from typing import List
from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models.models import Conversation
from models.utils import ordered_pair, utcnow


class ConversationRepo:
    def __init__(self, db):
        self.db = db

    def _pair_stmt(self, user_a: UUID, user_b: UUID):
        first, second = ordered_pair(user_a, user_b)
        return select(Conversation).where(
            Conversation.participant1 == first,
            Conversation.participant2 == second,
        )

    async def find_between(self, user_a: UUID, user_b: UUID) -> Conversation | None:
        result = await self.db.execute(self._pair_stmt(user_a, user_b))
        return result.scalar_one_or_none()

    async def get_or_create(self, user_a: UUID, user_b: UUID) -> Conversation:
        stmt = self._pair_stmt(user_a, user_b)
        result = await self.db.execute(stmt)
        convo = result.scalars().one_or_none()

        if convo:
            return convo

        first, second = ordered_pair(user_a, user_b)
        convo = Conversation(participant1=first, participant2=second)
        self.db.add(convo)

        try:
            await self.db.commit()
            await self.db.refresh(convo)
            return convo
        except IntegrityError:
            await self.db.rollback()
            result = await self.db.execute(stmt)
            return result.scalars().one()

    async def get_conversation_by_id(self, conversation_id: UUID) -> Conversation | None:
        stmt = select(Conversation).where(Conversation.id == conversation_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_conversations_for_user(self, user_id: UUID) -> List[Conversation]:
        stmt = (
            select(Conversation)
            .where(
                or_(
                    Conversation.participant1 == user_id,
                    Conversation.participant2 == user_id,
                )
            )
            .order_by(Conversation.updated_at.desc())
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def touch(self, conversation_id: UUID, when: datetime | None = None):
        try:
            await self.db.execute(
                update(Conversation)
                .where(Conversation.id == conversation_id)
                .values(updated_at=when or utcnow())
            )
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
