import logging
import uuid

from core.breaker import CircuitBreaker
from core.cloudinary_setup import CloudinaryClient, cloudinary_client
from core.listing_text import ListingTextParser
from core.mapper import ORMMapper
from core.settings import settings
from fastapi import HTTPException
from models.enums import NotificationType
from models.utils import build_location, build_title
from policy.model_policy import ModelPolicy
from repos.property_repo import PropertyRepo
from schemas.schema import (
    ListingCreate,
    ListingDraftOut,
    ListingFilters,
    ListingOut,
    ListingTextIn,
    ListingUpdate,
)
from services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class PropertyService:
    def __init__(self, db, storage: CloudinaryClient | None = None):
        self.db = db
        self.repo: PropertyRepo = PropertyRepo(db)
        self.notifications: NotificationService = NotificationService(db)
        self.storage: CloudinaryClient = storage or cloudinary_client
        self.breaker: CircuitBreaker = CircuitBreaker()
        self.mapper: ORMMapper = ORMMapper()

    async def create_listing(self, current_user, data: ListingCreate) -> ListingOut:
        async def handler():
            images = [url for url in data.images if url and url.strip()]
            listing = await self.repo.create(
                {
                    "user_id": current_user.id,
                    "title": build_title(data.property_type, data.city, data.state),
                    "location": build_location(data.city, data.state, data.zip_code),
                    "full_address": data.address,
                    "city": data.city,
                    "state": data.state,
                    "zip_code": data.zip_code,
                    "price": data.price,
                    "market_price": data.market_price,
                    "description": data.description,
                    "beds": data.beds,
                    "baths": data.baths,
                    "sqft": data.sqft,
                    "property_type": data.property_type,
                    "images": images or [settings.DEFAULT_LISTING_IMAGE],
                    "reward": data.reward,
                    "after_repair_value": data.after_repair_value,
                    "estimated_rehab": data.estimated_rehab,
                    "comparable_addresses": data.comparable_addresses,
                    "additional_images_link": data.additional_images_link,
                }
            )

            await self.notifications.notify(
                user_id=current_user.id,
                title="Listing Published",
                message=f"Your listing \"{listing.title}\" is now live.",
                type=NotificationType.SUCCESS,
                properties={"propertyId": str(listing.id)},
            )
            return self.mapper.one(item=listing, schema=ListingOut)

        return await self.breaker.call(handler)

    async def get_listing(self, property_id: uuid.UUID) -> ListingOut:
        async def handler():
            listing = await self.repo.get_by_id(property_id)
            if not listing:
                raise HTTPException(404, "Listing not found")
            return self.mapper.one(item=listing, schema=ListingOut)

        return await self.breaker.call(handler)

    async def list_listings(self, filters: ListingFilters) -> list[ListingOut]:
        async def handler():
            listings = await self.repo.search(filters)
            if filters.min_below_market:
                listings = [
                    item
                    for item in listings
                    if item.below_market >= filters.min_below_market
                ][: filters.limit]
            return self.mapper.many(items=listings, schema=ListingOut)

        return await self.breaker.call(handler)

    async def list_owner_listings(self, current_user) -> list[ListingOut]:
        async def handler():
            listings = await self.repo.get_all_by_user(current_user.id)
            return self.mapper.many(items=listings, schema=ListingOut)

        return await self.breaker.call(handler)

    async def _owned_listing(self, current_user, property_id: uuid.UUID):
        listing = await self.repo.get_by_id(property_id)
        if not listing:
            raise HTTPException(404, "Listing not found")
        if not ModelPolicy.owns_listing(listing, current_user.id):
            raise HTTPException(403, "You are not allowed to modify this listing")
        return listing

    async def update_listing(
        self, current_user, property_id: uuid.UUID, data: ListingUpdate
    ) -> ListingOut:
        async def handler():
            listing = await self._owned_listing(current_user, property_id)
            changes = data.model_dump(exclude_unset=True)

            if "address" in changes and changes["address"]:
                listing.full_address = changes.pop("address").strip()
            else:
                changes.pop("address", None)

            if "reward" in changes:
                reward = changes.pop("reward")
                listing.reward = reward if reward and reward > 0 else None

            if "images" in changes:
                images = [url for url in changes.pop("images") or [] if url]
                listing.images = images or [settings.DEFAULT_LISTING_IMAGE]

            for field, value in changes.items():
                if value is not None:
                    setattr(listing, field, value)

            listing = await self.repo.save(listing)
            return self.mapper.one(item=listing, schema=ListingOut)

        return await self.breaker.call(handler)

    async def delete_listing(self, current_user, property_id: uuid.UUID):
        async def handler():
            await self._owned_listing(current_user, property_id)
            await self.repo.delete_listing(current_user.id, property_id)
            await self.storage.safe_delete_by_prefix(
                self.storage.property_folder(property_id)
            )
            return {"message": "Listing deleted"}

        return await self.breaker.call(handler)

    async def draft_from_text(self, current_user, data: ListingTextIn) -> ListingDraftOut:
        async def handler():
            draft = ListingTextParser.parse(data.text)
            logger.info(f"Listing draft for {current_user.id} missing {draft.missing}")
            return draft

        return await self.breaker.call(handler)
