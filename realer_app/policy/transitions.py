from fastapi import HTTPException

from models.enums import BOUNTY_STEPS, BountyStatus, OfferStatus, WaitlistStatus

WAITLIST_TRANSITIONS: dict[WaitlistStatus, frozenset[WaitlistStatus]] = {
    WaitlistStatus.PENDING: frozenset(
        {WaitlistStatus.ACCEPTED, WaitlistStatus.DECLINED}
    ),
    WaitlistStatus.ACCEPTED: frozenset(),
    WaitlistStatus.DECLINED: frozenset(),
}

OFFER_TRANSITIONS: dict[OfferStatus, frozenset[OfferStatus]] = {
    OfferStatus.PENDING: frozenset({OfferStatus.ACCEPTED, OfferStatus.DECLINED}),
    OfferStatus.ACCEPTED: frozenset(),
    OfferStatus.DECLINED: frozenset(),
}

BOUNTY_TRANSITIONS: dict[BountyStatus, BountyStatus | None] = {
    current: (BOUNTY_STEPS[i + 1] if i + 1 < len(BOUNTY_STEPS) else None)
    for i, current in enumerate(BOUNTY_STEPS)
}


def ensure_waitlist_transition(current: WaitlistStatus, target: WaitlistStatus):
    if target not in WAITLIST_TRANSITIONS[current]:
        raise HTTPException(
            status_code=409,
            detail=f"Cannot move waitlist request from {current.value} to {target.value}",
        )


def ensure_offer_transition(current: OfferStatus, target: OfferStatus):
    if target not in OFFER_TRANSITIONS[current]:
        raise HTTPException(
            status_code=409,
            detail=f"Cannot move offer from {current.value} to {target.value}",
        )


def next_bounty_status(current: BountyStatus) -> BountyStatus | None:
    return BOUNTY_TRANSITIONS[current]


def ensure_bounty_transition(
    current: BountyStatus, target: BountyStatus | None = None
) -> BountyStatus:
    allowed = next_bounty_status(current)
    if allowed is None:
        raise HTTPException(
            status_code=409, detail="Bounty is closed and cannot advance further"
        )
    if target is not None and target != allowed:
        raise HTTPException(
            status_code=409,
            detail=f"Cannot move bounty from {current.value} to {target.value}; "
            f"next step is {allowed.value}",
        )
    return allowed


def bounty_progress(status: BountyStatus) -> tuple[int, int]:
    index = BOUNTY_STEPS.index(status)
    percent = round(index / (len(BOUNTY_STEPS) - 1) * 100)
    return index, percent
