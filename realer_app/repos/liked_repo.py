import uuid
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload

from models.models import LikedProperty


class LikedPropertyRepo:
    def __init__(self, db):
        self.db = db

    async def get(
        self, user_id: uuid.UUID, property_id: uuid.UUID
    ) -> Optional[LikedProperty]:
        result = await self.db.execute(
            select(LikedProperty).where(
                LikedProperty.user_id == user_id,
                LikedProperty.property_id == property_id,
            )
        )
        return result.scalar_one_or_none()

    async def add(self, user_id: uuid.UUID, property_id: uuid.UUID) -> None:
        self.db.add(LikedProperty(user_id=user_id, property_id=property_id))
        try:
            await self.db.commit()
        except IntegrityError:
            # Already liked by a concurrent request.
            await self.db.rollback()

    async def remove(self, user_id: uuid.UUID, property_id: uuid.UUID) -> None:
        try:
            await self.db.execute(
                delete(LikedProperty).where(
                    LikedProperty.user_id == user_id,
                    LikedProperty.property_id == property_id,
                )
            )
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def list_for_user(self, user_id: uuid.UUID) -> List[LikedProperty]:
        result = await self.db.execute(
            select(LikedProperty)
            .options(selectinload(LikedProperty.listing))
            .where(LikedProperty.user_id == user_id)
            .order_by(LikedProperty.created_at.desc())
        )
        return result.scalars().all()
