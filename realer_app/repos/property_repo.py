import uuid
from typing import List, Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import SQLAlchemyError

from models.models import PropertyListing
from schemas.schema import ListingFilters


class PropertyRepo:
    def __init__(self, db):
        self.db = db

    async def get_by_id(self, property_id: uuid.UUID) -> Optional[PropertyListing]:
        result = await self.db.execute(
            select(PropertyListing).where(PropertyListing.id == property_id)
        )
        return result.scalar_one_or_none()

    async def get_many(self, property_ids) -> dict[uuid.UUID, PropertyListing]:
        ids = list({pid for pid in property_ids if pid})
        if not ids:
            return {}
        result = await self.db.execute(
            select(PropertyListing).where(PropertyListing.id.in_(ids))
        )
        return {p.id: p for p in result.scalars().all()}

    async def create(self, data: dict) -> PropertyListing:
        item = PropertyListing(**data)
        self.db.add(item)
        try:
            await self.db.commit()
            await self.db.refresh(item)
            return item
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def save(self, listing: PropertyListing) -> PropertyListing:
        self.db.add(listing)
        try:
            await self.db.commit()
            await self.db.refresh(listing)
            return listing
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def delete_listing(self, user_id: uuid.UUID, property_id: uuid.UUID) -> int:
        try:
            result = await self.db.execute(
                delete(PropertyListing).where(
                    PropertyListing.id == property_id,
                    PropertyListing.user_id == user_id,
                )
            )
            await self.db.commit()
            return result.rowcount
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def get_all_by_user(self, user_id: uuid.UUID) -> List[PropertyListing]:
        result = await self.db.execute(
            select(PropertyListing)
            .where(PropertyListing.user_id == user_id)
            .order_by(PropertyListing.created_at.desc())
        )
        return result.scalars().all()

    async def search(self, filters: ListingFilters) -> List[PropertyListing]:
        stmt = select(PropertyListing)

        if filters.location:
            loc = filters.location.strip()
            stmt = stmt.where(
                or_(
                    PropertyListing.location.ilike(loc),
                    PropertyListing.location.ilike(f"{loc},%"),
                    PropertyListing.location.ilike(f"%, {loc}"),
                )
            )
        if filters.min_price is not None:
            stmt = stmt.where(PropertyListing.price >= filters.min_price)
        if filters.max_price is not None:
            stmt = stmt.where(PropertyListing.price <= filters.max_price)
        if filters.min_beds is not None:
            stmt = stmt.where(PropertyListing.beds >= filters.min_beds)
        if filters.min_baths is not None:
            stmt = stmt.where(PropertyListing.baths >= filters.min_baths)
        if filters.property_type:
            stmt = stmt.where(PropertyListing.property_type == filters.property_type)

        stmt = stmt.order_by(PropertyListing.created_at.desc())
        if not filters.min_below_market:
            stmt = stmt.limit(filters.limit)

        result = await self.db.execute(stmt)
        return result.scalars().all()
