from decimal import Decimal

import pytest
from fastapi import HTTPException

from models.enums import AccountType, BountyStatus
from repos.notification_repo import NotificationRepo
from schemas.schema import BountyAdvance
from services.bounty_service import BountyService


@pytest.fixture
async def setup(db, make_profile, make_listing):
    seller = await make_profile("Sam Seller", account_type=AccountType.SELLER)
    wholesaler = await make_profile("Wes", account_type=AccountType.WHOLESALER)
    listing = await make_listing(seller, reward=Decimal("5000"))
    return BountyService(db), seller, wholesaler, listing


class TestClaim:
    async def test_claim_copies_reward(self, db, setup):
        service, seller, wholesaler, listing = setup
        claim = await service.claim(wholesaler, listing.id)

        assert claim.status == BountyStatus.CLAIMED
        assert claim.reward_amount == 5000
        assert "claimed_at" in claim.status_details

        notes = await NotificationRepo(db).list_for_user(seller.id)
        assert notes[0].title == "Bounty Claimed"

    async def test_second_claim_conflicts(self, setup):
        service, seller, wholesaler, listing = setup
        await service.claim(wholesaler, listing.id)
        with pytest.raises(HTTPException) as exc:
            await service.claim(wholesaler, listing.id)
        assert exc.value.status_code == 409

    async def test_listing_without_bounty_cannot_be_claimed(
        self, db, make_profile, make_listing
    ):
        seller = await make_profile(account_type=AccountType.SELLER)
        wholesaler = await make_profile(account_type=AccountType.WHOLESALER)
        listing = await make_listing(seller)
        assert listing.reward is None

        with pytest.raises(HTTPException) as exc:
            await BountyService(db).claim(wholesaler, listing.id)
        assert exc.value.status_code == 400


class TestAdvance:
    async def test_full_progression_pays_out(self, setup):
        service, seller, wholesaler, listing = setup
        claim = await service.claim(wholesaler, listing.id)

        claim = await service.advance(
            wholesaler, claim.id, BountyAdvance(buyer_name=" Carl Cash ")
        )
        assert claim.status == BountyStatus.FOUND_BUYER
        assert claim.status_details["buyer_name"] == "Carl Cash"

        for expected in (
            BountyStatus.SUBMITTED_OFFER,
            BountyStatus.ACCEPTED_OFFER,
            BountyStatus.CLOSED,
        ):
            claim = await service.advance(wholesaler, claim.id)
            assert claim.status == expected
            assert f"{expected.value}_at" in claim.status_details

        summary = await service.payout_summary(wholesaler)
        assert summary.total_paid == 5000
        assert summary.total_pending == 0
        assert summary.closed_count == 1

        listed = await service.list_claims(wholesaler)
        assert listed[0].next_status is None
        assert listed[0].progress_percent == 100

        with pytest.raises(HTTPException) as exc:
            await service.advance(wholesaler, claim.id)
        assert exc.value.status_code == 409

    async def test_skipping_a_step_is_rejected(self, setup):
        service, seller, wholesaler, listing = setup
        claim = await service.claim(wholesaler, listing.id)
        with pytest.raises(HTTPException) as exc:
            await service.advance(
                wholesaler, claim.id, BountyAdvance(target=BountyStatus.CLOSED)
            )
        assert exc.value.status_code == 409

    async def test_only_claimant_advances(self, setup):
        service, seller, wholesaler, listing = setup
        claim = await service.claim(wholesaler, listing.id)
        with pytest.raises(HTTPException) as exc:
            await service.advance(seller, claim.id)
        assert exc.value.status_code == 403

    async def test_open_claims_count_as_pending(self, setup):
        service, seller, wholesaler, listing = setup
        await service.claim(wholesaler, listing.id)
        summary = await service.payout_summary(wholesaler)
        assert summary.total_paid == 0
        assert summary.total_pending == 5000
        assert summary.open_count == 1

        listed = await service.list_claims(wholesaler)
        assert listed[0].listing.reward == 5000
        assert listed[0].next_status == BountyStatus.FOUND_BUYER
