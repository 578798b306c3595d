import httpx
import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from conftest import VALID_PHONE
from core.functions_client import FunctionsClient
from models.enums import AccountType, WaitlistStatus
from repos.notification_repo import NotificationRepo
from schemas.schema import WaitlistCreate, WaitlistDecision
from services.waitlist_service import WaitlistService


def join_form(name="Bea Buyer"):
    return WaitlistCreate(name=name, email="bea@example.com", phone=VALID_PHONE)


@pytest.fixture
async def setup(db, make_profile, make_listing, functions):
    seller = await make_profile("Sam Seller", account_type=AccountType.SELLER, email="sam@example.com")
    buyer = await make_profile("Bea Buyer")
    listing = await make_listing(seller)
    return WaitlistService(db, functions=functions), seller, buyer, listing


class TestRequestAccess:
    async def test_repeat_request_returns_existing(self, db, setup):
        service, seller, buyer, listing = setup
        first = await service.request_access(buyer, listing.id, join_form())
        second = await service.request_access(buyer, listing.id, join_form("Other Name"))

        assert first.id == second.id
        assert second.status == WaitlistStatus.PENDING
        assert first.phone == "+16502530000"

        owner_notes = await NotificationRepo(db).list_for_user(seller.id)
        assert [n.title for n in owner_notes] == ["New Waitlist Request"]

    async def test_owner_cannot_join_own_waitlist(self, setup):
        service, seller, buyer, listing = setup
        with pytest.raises(HTTPException) as exc:
            await service.request_access(seller, listing.id, join_form())
        assert exc.value.status_code == 400

    def test_invalid_phone_rejected(self):
        with pytest.raises(ValidationError):
            WaitlistCreate(name="Bea", email="bea@example.com", phone="12")

    async def test_status_is_null_without_request(self, setup):
        service, seller, buyer, listing = setup
        status = await service.get_waitlist_status(buyer, listing.id)
        assert status.status is None


class TestDecisionAndContactGate:
    async def test_contact_hidden_until_accepted(self, db, setup, functions_calls):
        service, seller, buyer, listing = setup
        request = await service.request_access(buyer, listing.id, join_form())

        hidden = await service.get_seller_contact(buyer, listing.id)
        assert hidden.visible is False
        assert hidden.status == WaitlistStatus.PENDING
        assert hidden.email is None and hidden.phone is None

        decided = await service.decide(
            seller, request.id, WaitlistDecision(status=WaitlistStatus.ACCEPTED)
        )
        assert decided.status == WaitlistStatus.ACCEPTED

        shown = await service.get_seller_contact(buyer, listing.id)
        assert shown.visible is True
        assert shown.name == "Sam Seller"
        assert shown.email == "sam@example.com"

        notes = await NotificationRepo(db).list_for_user(buyer.id)
        assert notes[0].title == "Waitlist Request Approved!"
        assert notes[0].properties["status"] == "accepted"

        path, body = functions_calls[-1]
        assert path == "/functions/v1/send-email"
        assert body["to"] == "bea@example.com"
        assert "approved" in body["subject"]

    async def test_declined_stays_hidden_and_is_final(self, setup):
        service, seller, buyer, listing = setup
        request = await service.request_access(buyer, listing.id, join_form())
        await service.decide(seller, request.id, WaitlistDecision(status=WaitlistStatus.DECLINED))

        verdict = await service.get_seller_contact(buyer, listing.id)
        assert verdict.visible is False

        with pytest.raises(HTTPException) as exc:
            await service.decide(
                seller, request.id, WaitlistDecision(status=WaitlistStatus.ACCEPTED)
            )
        assert exc.value.status_code == 409

    async def test_only_owner_decides(self, setup):
        service, seller, buyer, listing = setup
        request = await service.request_access(buyer, listing.id, join_form())
        with pytest.raises(HTTPException) as exc:
            await service.decide(
                buyer, request.id, WaitlistDecision(status=WaitlistStatus.ACCEPTED)
            )
        assert exc.value.status_code == 403

    def test_pending_is_not_a_decision(self):
        with pytest.raises(ValidationError):
            WaitlistDecision(status=WaitlistStatus.PENDING)

    async def test_owner_sees_own_contact(self, setup):
        service, seller, buyer, listing = setup
        visible, status = await service.contact_visibility(listing.id, seller.id, seller.id)
        assert visible is True
        assert status is None

    async def test_email_failure_does_not_fail_decision(self, db, make_profile, make_listing):
        broken = FunctionsClient(
            base_url="http://functions.test",
            transport=httpx.MockTransport(lambda r: httpx.Response(500, json={"error": "down"})),
        )
        seller = await make_profile(account_type=AccountType.SELLER)
        buyer = await make_profile()
        listing = await make_listing(seller)
        service = WaitlistService(db, functions=broken)
        request = await service.request_access(buyer, listing.id, join_form())

        decided = await service.decide(
            seller, request.id, WaitlistDecision(status=WaitlistStatus.ACCEPTED)
        )
        assert decided.status == WaitlistStatus.ACCEPTED


class TestListings:
    async def test_owner_and_requester_lists(self, setup):
        service, seller, buyer, listing = setup
        await service.request_access(buyer, listing.id, join_form())

        received = await service.list_requests_for_owner(seller)
        mine = await service.list_my_requests(buyer)

        assert len(received) == 1 and len(mine) == 1
        assert mine[0].listing.id == listing.id
        assert mine[0].listing.below_market == 10
        assert await service.list_my_requests(seller) == []
