import logging
import uuid
from decimal import Decimal

from core.breaker import CircuitBreaker
from core.mapper import ORMMapper
from fastapi import HTTPException
from models.enums import BOUNTY_STEP_LABELS, BountyStatus, NotificationType
from models.utils import utcnow
from policy.transitions import bounty_progress, ensure_bounty_transition, next_bounty_status
from repos.bounty_repo import BountyClaimRepo
from repos.property_repo import PropertyRepo
from schemas.schema import (
    BountyAdvance,
    BountyClaimDetailOut,
    BountyClaimOut,
    PayoutSummaryOut,
)
from services.notification_service import NotificationService
from services.waitlist_service import listing_summary

logger = logging.getLogger(__name__)


class BountyService:
    def __init__(self, db):
        self.db = db
        self.repo: BountyClaimRepo = BountyClaimRepo(db)
        self.listings: PropertyRepo = PropertyRepo(db)
        self.notifications: NotificationService = NotificationService(db)
        self.breaker: CircuitBreaker = CircuitBreaker()
        self.mapper: ORMMapper = ORMMapper()

    async def claim(self, current_user, property_id: uuid.UUID) -> BountyClaimOut:
        async def handler():
            listing = await self.listings.get_by_id(property_id)
            if not listing:
                raise HTTPException(404, "Listing not found")
            if not listing.reward or listing.reward <= 0:
                raise HTTPException(400, "This listing does not carry a bounty")
            if listing.user_id == current_user.id:
                raise HTTPException(400, "You cannot claim the bounty on your own listing")
            if await self.repo.get_for_user(current_user.id, property_id):
                raise HTTPException(409, "You have already claimed this bounty")

            claim = await self.repo.create(
                {
                    "user_id": current_user.id,
                    "property_id": property_id,
                    "status": BountyStatus.CLAIMED,
                    "reward_amount": listing.reward,
                    "status_details": {"claimed_at": utcnow().isoformat()},
                }
            )
            if claim is None:
                raise HTTPException(409, "You have already claimed this bounty")

            await self.notifications.notify(
                user_id=listing.user_id,
                title="Bounty Claimed",
                message=f"A wholesaler claimed the ${listing.reward:,.0f} bounty on {listing.title}.",
                type=NotificationType.REWARD,
                properties={"propertyId": str(listing.id), "claimId": str(claim.id)},
            )
            return self.mapper.one(item=claim, schema=BountyClaimOut)

        return await self.breaker.call(handler)

    async def advance(
        self, current_user, claim_id: uuid.UUID, data: BountyAdvance | None = None
    ) -> BountyClaimOut:
        data = data or BountyAdvance()

        async def handler():
            claim = await self.repo.get_by_id(claim_id)
            if not claim:
                raise HTTPException(404, "Bounty claim not found")
            if claim.user_id != current_user.id:
                raise HTTPException(403, "Only the claimant can update this bounty")

            target = ensure_bounty_transition(claim.status, data.target)

            details = dict(claim.status_details or {})
            details[f"{target.value}_at"] = utcnow().isoformat()
            if target == BountyStatus.FOUND_BUYER:
                if data.buyer_name:
                    details["buyer_name"] = data.buyer_name.strip()
                if data.buyer_id:
                    claim.buyer_id = data.buyer_id

            claim.status = target
            claim.status_details = details
            claim = await self.repo.save(claim)

            if target == BountyStatus.CLOSED:
                await self.notifications.notify(
                    user_id=current_user.id,
                    title="Bounty Closed",
                    message=f"Your ${claim.reward_amount:,.0f} bounty is ready for payout.",
                    type=NotificationType.REWARD,
                    properties={"claimId": str(claim.id)},
                )
            logger.info(f"Bounty {claim.id} moved to {BOUNTY_STEP_LABELS[target]}")
            return self.mapper.one(item=claim, schema=BountyClaimOut)

        return await self.breaker.call(handler)

    async def list_claims(self, current_user) -> list[BountyClaimDetailOut]:
        async def handler():
            items = await self.repo.list_for_user(current_user.id)
            results = []
            for claim in items:
                index, percent = bounty_progress(claim.status)
                results.append(
                    self.mapper.one(
                        item=claim,
                        schema=BountyClaimDetailOut,
                        listing=listing_summary(claim.listing),
                        progress_index=index,
                        progress_percent=percent,
                        next_status=next_bounty_status(claim.status),
                    )
                )
            return results

        return await self.breaker.call(handler)

    async def payout_summary(self, current_user) -> PayoutSummaryOut:
        async def handler():
            closed = await self.repo.list_by_status(current_user.id, [BountyStatus.CLOSED])
            open_claims = await self.repo.list_by_status(
                current_user.id,
                [s for s in BountyStatus if s != BountyStatus.CLOSED],
            )
            total_paid = sum((Decimal(c.reward_amount) for c in closed), Decimal(0))
            total_pending = sum(
                (Decimal(c.reward_amount) for c in open_claims), Decimal(0)
            )
            return PayoutSummaryOut(
                total_paid=total_paid,
                total_pending=total_pending,
                closed_count=len(closed),
                open_count=len(open_claims),
            )

        return await self.breaker.call(handler)
