from enum import Enum


class AccountType(str, Enum):
    BUYER = "buyer"
    SELLER = "seller"
    WHOLESALER = "wholesaler"


class WaitlistStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class BountyStatus(str, Enum):
    CLAIMED = "claimed"
    FOUND_BUYER = "found_buyer"
    SUBMITTED_OFFER = "submitted_offer"
    ACCEPTED_OFFER = "accepted_offer"
    CLOSED = "closed"


class NotificationType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    REWARD = "reward"
    OFFER = "offer"


class OfferStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


BOUNTY_STEPS = [
    BountyStatus.CLAIMED,
    BountyStatus.FOUND_BUYER,
    BountyStatus.SUBMITTED_OFFER,
    BountyStatus.ACCEPTED_OFFER,
    BountyStatus.CLOSED,
]

BOUNTY_STEP_LABELS = {
    BountyStatus.CLAIMED: "Claimed",
    BountyStatus.FOUND_BUYER: "Found Buyer",
    BountyStatus.SUBMITTED_OFFER: "Submitted Offer",
    BountyStatus.ACCEPTED_OFFER: "Accepted Offer",
    BountyStatus.CLOSED: "Closed",
}
