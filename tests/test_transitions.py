import pytest
from fastapi import HTTPException

from models.enums import BOUNTY_STEPS, BountyStatus, OfferStatus, WaitlistStatus
from policy.model_policy import ModelPolicy
from policy.transitions import (
    bounty_progress,
    ensure_bounty_transition,
    ensure_offer_transition,
    ensure_waitlist_transition,
    next_bounty_status,
)


class TestWaitlistTransitions:
    @pytest.mark.parametrize("target", [WaitlistStatus.ACCEPTED, WaitlistStatus.DECLINED])
    def test_pending_can_be_decided(self, target):
        ensure_waitlist_transition(WaitlistStatus.PENDING, target)

    @pytest.mark.parametrize(
        "current, target",
        [
            (WaitlistStatus.ACCEPTED, WaitlistStatus.DECLINED),
            (WaitlistStatus.DECLINED, WaitlistStatus.ACCEPTED),
            (WaitlistStatus.ACCEPTED, WaitlistStatus.PENDING),
            (WaitlistStatus.PENDING, WaitlistStatus.PENDING),
        ],
    )
    def test_decided_requests_are_final(self, current, target):
        with pytest.raises(HTTPException) as exc:
            ensure_waitlist_transition(current, target)
        assert exc.value.status_code == 409


class TestOfferTransitions:
    def test_only_pending_offers_move(self):
        ensure_offer_transition(OfferStatus.PENDING, OfferStatus.ACCEPTED)
        with pytest.raises(HTTPException):
            ensure_offer_transition(OfferStatus.DECLINED, OfferStatus.ACCEPTED)


class TestBountyTransitions:
    def test_steps_follow_fixed_order(self):
        status = BountyStatus.CLAIMED
        visited = [status]
        while next_bounty_status(status) is not None:
            status = ensure_bounty_transition(status)
            visited.append(status)
        assert visited == BOUNTY_STEPS

    def test_closed_is_terminal(self):
        assert next_bounty_status(BountyStatus.CLOSED) is None
        with pytest.raises(HTTPException) as exc:
            ensure_bounty_transition(BountyStatus.CLOSED)
        assert exc.value.status_code == 409

    @pytest.mark.parametrize(
        "current, target",
        [
            (BountyStatus.CLAIMED, BountyStatus.SUBMITTED_OFFER),
            (BountyStatus.ACCEPTED_OFFER, BountyStatus.FOUND_BUYER),
            (BountyStatus.FOUND_BUYER, BountyStatus.FOUND_BUYER),
        ],
    )
    def test_skipping_or_going_back_is_rejected(self, current, target):
        with pytest.raises(HTTPException) as exc:
            ensure_bounty_transition(current, target)
        assert exc.value.status_code == 409

    def test_progress(self):
        assert bounty_progress(BountyStatus.CLAIMED) == (0, 0)
        assert bounty_progress(BountyStatus.SUBMITTED_OFFER) == (2, 50)
        assert bounty_progress(BountyStatus.CLOSED) == (4, 100)


class _Request:
    def __init__(self, status):
        self.status = status


class TestContactGate:
    def test_owner_always_sees_contact(self):
        owner = object()
        assert ModelPolicy.contact_visible(None, owner, owner)

    def test_no_request_hides_contact(self):
        assert not ModelPolicy.contact_visible(None, object(), object())

    @pytest.mark.parametrize(
        "status, visible",
        [
            (WaitlistStatus.PENDING, False),
            (WaitlistStatus.DECLINED, False),
            (WaitlistStatus.ACCEPTED, True),
        ],
    )
    def test_only_accepted_requests_reveal_contact(self, status, visible):
        assert ModelPolicy.contact_visible(_Request(status), object(), object()) is visible
