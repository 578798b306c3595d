import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from models.models import PropertyOffer


class OfferRepo:
    def __init__(self, db):
        self.db = db

    async def create(self, data: dict) -> PropertyOffer:
        offer = PropertyOffer(**data)
        self.db.add(offer)
        try:
            await self.db.commit()
            await self.db.refresh(offer)
            return offer
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def get_by_id(self, offer_id: uuid.UUID) -> Optional[PropertyOffer]:
        result = await self.db.execute(
            select(PropertyOffer)
            .options(selectinload(PropertyOffer.listing))
            .where(PropertyOffer.id == offer_id)
        )
        return result.scalar_one_or_none()

    async def save(self, offer: PropertyOffer) -> PropertyOffer:
        self.db.add(offer)
        try:
            await self.db.commit()
            await self.db.refresh(offer)
            return offer
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def list_interested(self, property_id: uuid.UUID) -> List[PropertyOffer]:
        result = await self.db.execute(
            select(PropertyOffer)
            .where(
                PropertyOffer.property_id == property_id,
                PropertyOffer.is_interested.is_(True),
            )
            .order_by(PropertyOffer.offer_amount.desc())
        )
        return result.scalars().all()

    async def list_for_seller(self, seller_id: uuid.UUID) -> List[PropertyOffer]:
        result = await self.db.execute(
            select(PropertyOffer)
            .where(PropertyOffer.seller_id == seller_id)
            .order_by(PropertyOffer.created_at.desc())
        )
        return result.scalars().all()

    async def list_for_buyer(self, buyer_id: uuid.UUID) -> List[PropertyOffer]:
        result = await self.db.execute(
            select(PropertyOffer)
            .where(PropertyOffer.user_id == buyer_id)
            .order_by(PropertyOffer.created_at.desc())
        )
        return result.scalars().all()
