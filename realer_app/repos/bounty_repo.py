import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload

from models.enums import BountyStatus
from models.models import BountyClaim


class BountyClaimRepo:
    def __init__(self, db):
        self.db = db

    async def get_by_id(self, claim_id: uuid.UUID) -> Optional[BountyClaim]:
        result = await self.db.execute(
            select(BountyClaim)
            .options(selectinload(BountyClaim.listing))
            .where(BountyClaim.id == claim_id)
        )
        return result.scalar_one_or_none()

    async def get_for_user(
        self, user_id: uuid.UUID, property_id: uuid.UUID
    ) -> Optional[BountyClaim]:
        result = await self.db.execute(
            select(BountyClaim).where(
                BountyClaim.user_id == user_id,
                BountyClaim.property_id == property_id,
            )
        )
        return result.scalar_one_or_none()

    async def create(self, data: dict) -> BountyClaim | None:
        """Insert a claim; returns None when the (user, property) pair is taken."""
        claim = BountyClaim(**data)
        self.db.add(claim)
        try:
            await self.db.commit()
            await self.db.refresh(claim)
            return claim
        except IntegrityError:
            await self.db.rollback()
            return None

    async def save(self, claim: BountyClaim) -> BountyClaim:
        self.db.add(claim)
        try:
            await self.db.commit()
            await self.db.refresh(claim)
            return claim
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def list_for_user(self, user_id: uuid.UUID) -> List[BountyClaim]:
        result = await self.db.execute(
            select(BountyClaim)
            .options(selectinload(BountyClaim.listing))
            .where(BountyClaim.user_id == user_id)
            .order_by(BountyClaim.created_at.desc())
        )
        return result.scalars().all()

    async def list_by_status(
        self, user_id: uuid.UUID, statuses: list[BountyStatus]
    ) -> List[BountyClaim]:
        result = await self.db.execute(
            select(BountyClaim).where(
                BountyClaim.user_id == user_id,
                BountyClaim.status.in_(statuses),
            )
        )
        return result.scalars().all()
