import uuid

from models.models import Conversation, PropertyListing, WaitlistRequest
from models.enums import WaitlistStatus


class ModelPolicy:
    @staticmethod
    def owns_listing(listing: PropertyListing, user_id: uuid.UUID) -> bool:
        return listing.user_id == user_id

    @staticmethod
    def in_conversation(conversation: Conversation, user_id: uuid.UUID) -> bool:
        return conversation.has_participant(user_id)

    @staticmethod
    def contact_visible(
        request: WaitlistRequest | None,
        requester_id: uuid.UUID | None,
        owner_id: uuid.UUID,
    ) -> bool:
        """Seller contact is shown to the owner, or to a requester whose waitlist
        request has been accepted. Everyone else sees nothing."""
        if requester_id is not None and requester_id == owner_id:
            return True
        if request is None:
            return False
        return request.status == WaitlistStatus.ACCEPTED
