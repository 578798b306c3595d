import logging
import uuid

from core.breaker import CircuitBreaker
from core.functions_client import FunctionsClient, functions_client
from core.mapper import ORMMapper
from email_notify.email_service import send_waitlist_decision_email
from fastapi import HTTPException
from models.enums import NotificationType, WaitlistStatus
from policy.model_policy import ModelPolicy
from policy.transitions import ensure_waitlist_transition
from repos.profile_repo import ProfileRepo
from repos.property_repo import PropertyRepo
from repos.waitlist_repo import WaitlistRepo
from schemas.schema import (
    ListingSummary,
    SellerContactOut,
    WaitlistCreate,
    WaitlistDecision,
    WaitlistOut,
    WaitlistStatusOut,
    WaitlistWithListingOut,
)
from services.notification_service import NotificationService

logger = logging.getLogger(__name__)


def listing_summary(listing) -> ListingSummary | None:
    if listing is None:
        return None
    return ListingSummary(
        id=listing.id,
        title=listing.title,
        location=listing.location,
        price=listing.price,
        market_price=listing.market_price,
        below_market=listing.below_market,
        image=listing.first_image,
        reward=listing.reward,
    )


class WaitlistService:
    def __init__(self, db, functions: FunctionsClient | None = None):
        self.db = db
        self.repo: WaitlistRepo = WaitlistRepo(db)
        self.listings: PropertyRepo = PropertyRepo(db)
        self.profiles: ProfileRepo = ProfileRepo(db)
        self.notifications: NotificationService = NotificationService(db)
        self.functions: FunctionsClient = functions or functions_client
        self.breaker: CircuitBreaker = CircuitBreaker()
        self.mapper: ORMMapper = ORMMapper()

    async def request_access(
        self, current_user, property_id: uuid.UUID, data: WaitlistCreate
    ) -> WaitlistOut:
        async def handler():
            listing = await self.listings.get_by_id(property_id)
            if not listing:
                raise HTTPException(404, "Listing not found")
            if ModelPolicy.owns_listing(listing, current_user.id):
                raise HTTPException(400, "You cannot join the waitlist for your own listing")

            request, created = await self.repo.get_or_create(
                user_id=current_user.id,
                property_id=property_id,
                name=data.name,
                email=data.email,
                phone=data.phone,
            )

            if created:
                await self.notifications.notify(
                    user_id=listing.user_id,
                    title="New Waitlist Request",
                    message=f"{data.name} wants to join the waitlist for {listing.title}.",
                    type=NotificationType.INFO,
                    properties={
                        "propertyId": str(listing.id),
                        "requestId": str(request.id),
                    },
                )
            return self.mapper.one(item=request, schema=WaitlistOut)

        return await self.breaker.call(handler)

    async def get_waitlist_status(self, current_user, property_id: uuid.UUID) -> WaitlistStatusOut:
        async def handler():
            request = await self.repo.get_for_user(current_user.id, property_id)
            return WaitlistStatusOut(
                property_id=property_id, status=request.status if request else None
            )

        return await self.breaker.call(handler)

    async def contact_visibility(
        self,
        property_id: uuid.UUID,
        requester_id: uuid.UUID | None,
        owner_id: uuid.UUID,
    ) -> tuple[bool, WaitlistStatus | None]:
        if requester_id is not None and requester_id == owner_id:
            return True, None
        request = (
            await self.repo.get_for_user(requester_id, property_id)
            if requester_id is not None
            else None
        )
        visible = ModelPolicy.contact_visible(request, requester_id, owner_id)
        return visible, request.status if request else None

    async def get_seller_contact(self, current_user, property_id: uuid.UUID) -> SellerContactOut:
        async def handler():
            listing = await self.listings.get_by_id(property_id)
            if not listing:
                raise HTTPException(404, "Listing not found")

            visible, status = await self.contact_visibility(
                property_id, current_user.id, listing.user_id
            )
            if not visible:
                return SellerContactOut(property_id=property_id, visible=False, status=status)

            seller = await self.profiles.get_by_id(listing.user_id)
            return SellerContactOut(
                property_id=property_id,
                visible=True,
                status=status,
                name=seller.name if seller else None,
                email=seller.email if seller else None,
                phone=seller.phone if seller else None,
            )

        return await self.breaker.call(handler)

    async def decide(
        self, current_user, request_id: uuid.UUID, data: WaitlistDecision
    ) -> WaitlistOut:
        async def handler():
            request = await self.repo.get_by_id(request_id)
            if not request:
                raise HTTPException(404, "Waitlist request not found")
            listing = request.listing
            if not listing or not ModelPolicy.owns_listing(listing, current_user.id):
                raise HTTPException(403, "Only the listing owner can decide on requests")

            ensure_waitlist_transition(request.status, data.status)
            request = await self.repo.set_status(request, data.status)

            accepted = data.status == WaitlistStatus.ACCEPTED
            if accepted:
                title = "Waitlist Request Approved!"
                message = (
                    f"Great news! Your waitlist request for {listing.title} has been "
                    "approved. You can now view the full property details."
                )
            else:
                title = "Waitlist Request Declined"
                message = (
                    f"Unfortunately, your waitlist request for {listing.title} has been declined."
                )

            await self.notifications.notify(
                user_id=request.user_id,
                title=title,
                message=message,
                type=NotificationType.SUCCESS if accepted else NotificationType.ERROR,
                properties={
                    "propertyId": str(listing.id),
                    "propertyTitle": listing.title,
                    "status": data.status.value,
                },
            )
            await send_waitlist_decision_email(
                email=request.email,
                name=request.name,
                property_title=listing.title,
                accepted=accepted,
                client=self.functions,
            )
            return self.mapper.one(item=request, schema=WaitlistOut)

        return await self.breaker.call(handler)

    async def list_requests_for_owner(self, current_user) -> list[WaitlistWithListingOut]:
        async def handler():
            items = await self.repo.list_for_owner(current_user.id)
            return [self._with_listing(item) for item in items]

        return await self.breaker.call(handler)

    async def list_my_requests(self, current_user) -> list[WaitlistWithListingOut]:
        async def handler():
            items = await self.repo.list_for_user(current_user.id)
            return [self._with_listing(item) for item in items]

        return await self.breaker.call(handler)

    def _with_listing(self, request) -> WaitlistWithListingOut:
        return self.mapper.one(
            item=request,
            schema=WaitlistWithListingOut,
            listing=listing_summary(request.listing),
        )
