import uuid

from core.breaker import CircuitBreaker
from fastapi import HTTPException
from repos.liked_repo import LikedPropertyRepo
from repos.property_repo import PropertyRepo
from schemas.schema import LikeStateOut, ListingSummary
from services.waitlist_service import listing_summary


class LikedPropertyService:
    def __init__(self, db):
        self.repo: LikedPropertyRepo = LikedPropertyRepo(db)
        self.listings: PropertyRepo = PropertyRepo(db)
        self.breaker: CircuitBreaker = CircuitBreaker()

    async def toggle_like(self, current_user, property_id: uuid.UUID) -> LikeStateOut:
        async def handler():
            if not await self.listings.get_by_id(property_id):
                raise HTTPException(404, "Listing not found")

            if await self.repo.get(current_user.id, property_id):
                await self.repo.remove(current_user.id, property_id)
                return LikeStateOut(property_id=property_id, liked=False)

            await self.repo.add(current_user.id, property_id)
            return LikeStateOut(property_id=property_id, liked=True)

        return await self.breaker.call(handler)

    async def is_liked(self, current_user, property_id: uuid.UUID) -> LikeStateOut:
        async def handler():
            liked = await self.repo.get(current_user.id, property_id) is not None
            return LikeStateOut(property_id=property_id, liked=liked)

        return await self.breaker.call(handler)

    async def list_liked(self, current_user) -> list[ListingSummary]:
        async def handler():
            items = await self.repo.list_for_user(current_user.id)
            return [listing_summary(item.listing) for item in items if item.listing]

        return await self.breaker.call(handler)
