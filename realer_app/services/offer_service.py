import logging
import uuid

from core.breaker import CircuitBreaker
from core.mapper import ORMMapper
from fastapi import HTTPException
from models.enums import NotificationType, OfferStatus
from models.utils import display_name
from policy.transitions import ensure_offer_transition
from repos.offer_repo import OfferRepo
from repos.property_repo import PropertyRepo
from schemas.schema import OfferCreate, OfferDecision, OfferOut
from services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class OfferService:
    def __init__(self, db):
        self.db = db
        self.repo: OfferRepo = OfferRepo(db)
        self.listings: PropertyRepo = PropertyRepo(db)
        self.notifications: NotificationService = NotificationService(db)
        self.breaker: CircuitBreaker = CircuitBreaker()
        self.mapper: ORMMapper = ORMMapper()

    async def make_offer(
        self, current_user, property_id: uuid.UUID, data: OfferCreate
    ) -> OfferOut:
        async def handler():
            listing = await self.listings.get_by_id(property_id)
            if not listing:
                raise HTTPException(404, "Listing not found")
            if listing.user_id == current_user.id:
                raise HTTPException(400, "You cannot make an offer on your own listing")

            amount = data.offer_amount or listing.price
            offer = await self.repo.create(
                {
                    "property_id": listing.id,
                    "user_id": current_user.id,
                    "seller_id": listing.user_id,
                    "offer_amount": amount,
                    "status": OfferStatus.PENDING,
                    "is_interested": True,
                    "proof_of_funds_url": data.proof_of_funds_url,
                }
            )

            buyer_name = display_name(current_user.name, current_user.email)
            await self.notifications.notify(
                user_id=current_user.id,
                title="Offer Submitted!",
                message=f'Your offer of ${amount:,.0f} for "{listing.title}" has been sent.',
                type=NotificationType.SUCCESS,
                properties={"propertyId": str(listing.id), "offerId": str(offer.id)},
            )
            await self.notifications.notify(
                user_id=listing.user_id,
                title="New Offer Received",
                message=f'You received a new offer from {buyer_name} for your property "{listing.title}".',
                type=NotificationType.OFFER,
                properties={
                    "propertyId": str(listing.id),
                    "offerId": str(offer.id),
                    "buyerName": buyer_name,
                    "amount": float(amount),
                },
            )
            return self.mapper.one(item=offer, schema=OfferOut)

        return await self.breaker.call(handler)

    async def list_interested_offers(self, property_id: uuid.UUID) -> list[OfferOut]:
        async def handler():
            items = await self.repo.list_interested(property_id)
            return self.mapper.many(items=items, schema=OfferOut)

        return await self.breaker.call(handler)

    async def list_received_offers(self, current_user) -> list[OfferOut]:
        async def handler():
            items = await self.repo.list_for_seller(current_user.id)
            return self.mapper.many(items=items, schema=OfferOut)

        return await self.breaker.call(handler)

    async def list_my_offers(self, current_user) -> list[OfferOut]:
        async def handler():
            items = await self.repo.list_for_buyer(current_user.id)
            return self.mapper.many(items=items, schema=OfferOut)

        return await self.breaker.call(handler)

    async def respond(
        self, current_user, offer_id: uuid.UUID, data: OfferDecision
    ) -> OfferOut:
        async def handler():
            offer = await self.repo.get_by_id(offer_id)
            if not offer:
                raise HTTPException(404, "Offer not found")
            if offer.seller_id != current_user.id:
                raise HTTPException(403, "Only the seller can respond to this offer")

            ensure_offer_transition(offer.status, data.status)
            title = offer.listing.title if offer.listing else "the property"
            offer.status = data.status
            offer = await self.repo.save(offer)

            accepted = data.status == OfferStatus.ACCEPTED
            await self.notifications.notify(
                user_id=offer.user_id,
                title="Offer Accepted!" if accepted else "Offer Declined",
                message=(
                    f'Your offer for "{title}" was accepted.'
                    if accepted
                    else f'Your offer for "{title}" was declined.'
                ),
                type=NotificationType.OFFER if accepted else NotificationType.WARNING,
                properties={
                    "propertyId": str(offer.property_id),
                    "offerId": str(offer.id),
                    "status": data.status.value,
                },
            )
            return self.mapper.one(item=offer, schema=OfferOut)

        return await self.breaker.call(handler)
