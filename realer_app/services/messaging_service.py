import logging
from uuid import UUID

from core.breaker import CircuitBreaker
from core.mapper import ORMMapper
from fastapi import HTTPException
from models.utils import display_name, normalize_role
from policy.model_policy import ModelPolicy
from realtime.subscription_manager import (
    SubscriptionManager,
    insert_event,
    subscriptions as default_subscriptions,
)
from repos.conversation_repo import ConversationRepo
from repos.message_repo import MessageRepository
from repos.offer_repo import OfferRepo
from repos.profile_repo import ProfileRepo
from repos.property_repo import PropertyRepo
from schemas.schema import (
    ConversationIdOut,
    ConversationListOut,
    ConversationOut,
    ConversationPropertyOut,
    ConversationSummaryOut,
    CountOut,
    LatestMessageOut,
    MessageCreate,
    MessageGroupOut,
    MessageOut,
)

logger = logging.getLogger(__name__)

NO_MESSAGES_PLACEHOLDER = "No messages yet"


class MessagingService:
    def __init__(self, db, subscriptions: SubscriptionManager | None = None):
        self.db = db
        self.convos: ConversationRepo = ConversationRepo(db)
        self.messages: MessageRepository = MessageRepository(db)
        self.profiles: ProfileRepo = ProfileRepo(db)
        self.listings: PropertyRepo = PropertyRepo(db)
        self.offers: OfferRepo = OfferRepo(db)
        self.subscriptions: SubscriptionManager = subscriptions or default_subscriptions
        self.breaker: CircuitBreaker = CircuitBreaker()
        self.mapper: ORMMapper = ORMMapper()

    async def _participant_conversation(self, current_user, conversation_id: UUID):
        convo = await self.convos.get_conversation_by_id(conversation_id)
        if not convo:
            raise HTTPException(404, "Conversation not found")
        if not ModelPolicy.in_conversation(convo, current_user.id):
            raise HTTPException(403, "Not a participant in this conversation")
        return convo

    async def get_or_create_conversation(
        self, current_user, other_user_id: UUID
    ) -> ConversationIdOut:
        async def handler():
            if other_user_id == current_user.id:
                raise HTTPException(400, "You cannot start a conversation with yourself")
            if not await self.profiles.get_by_id(other_user_id):
                raise HTTPException(404, "User not found")

            convo = await self.convos.get_or_create(current_user.id, other_user_id)
            return ConversationIdOut(id=convo.id)

        return await self.breaker.call(handler)

    async def get_conversation(self, current_user, conversation_id: UUID) -> ConversationOut:
        async def handler():
            convo = await self._participant_conversation(current_user, conversation_id)
            return self.mapper.one(item=convo, schema=ConversationOut)

        return await self.breaker.call(handler)

    async def list_conversations(self, current_user) -> ConversationListOut:
        async def handler():
            convos = await self.convos.list_conversations_for_user(current_user.id)
            if not convos:
                return ConversationListOut(conversations=[], unread_count=0)

            others = {c.id: c.other_participant(current_user.id) for c in convos}
            profiles = await self.profiles.get_many(others.values())
            latest = await self.messages.latest_for_conversations([c.id for c in convos])

            property_ids = {}
            for convo_id, msg in latest.items():
                pid = msg.property_id
                if not pid and msg.related_offer is not None:
                    pid = msg.related_offer.property_id
                if pid:
                    property_ids[convo_id] = pid
            listings = await self.listings.get_many(property_ids.values())

            summaries = []
            unread = 0
            for convo in convos:
                other_id = others[convo.id]
                profile = profiles.get(other_id)
                msg = latest.get(convo.id)

                if msg:
                    latest_out = LatestMessageOut(
                        content=msg.content,
                        created_at=msg.created_at,
                        is_read=msg.is_read,
                        sender_id=msg.sender_id,
                    )
                    if not msg.is_read and msg.sender_id != current_user.id:
                        unread += 1
                else:
                    latest_out = LatestMessageOut(
                        content=NO_MESSAGES_PLACEHOLDER,
                        created_at=convo.created_at,
                        is_read=True,
                    )

                listing = listings.get(property_ids.get(convo.id))
                summaries.append(
                    ConversationSummaryOut(
                        id=convo.id,
                        other_user_id=other_id,
                        other_user_name=display_name(
                            profile.name if profile else None,
                            profile.email if profile else None,
                        ),
                        other_user_role=normalize_role(
                            profile.account_type if profile else None
                        ),
                        latest_message=latest_out,
                        property=(
                            ConversationPropertyOut(
                                id=listing.id,
                                title=listing.title,
                                image=listing.first_image,
                            )
                            if listing
                            else None
                        ),
                        updated_at=convo.updated_at,
                    )
                )

            return ConversationListOut(conversations=summaries, unread_count=unread)

        return await self.breaker.call(handler)

    def _message_out(self, msg, current_user) -> MessageOut:
        return self.mapper.one(
            item=msg, schema=MessageOut, is_mine=msg.sender_id == current_user.id
        )

    async def _check_references(self, convo, data: MessageCreate):
        if data.property_id and not await self.listings.get_by_id(data.property_id):
            raise HTTPException(404, "Listing not found")
        if data.related_offer_id:
            offer = await self.offers.get_by_id(data.related_offer_id)
            if not offer:
                raise HTTPException(404, "Offer not found")
            if not (
                ModelPolicy.in_conversation(convo, offer.user_id)
                or ModelPolicy.in_conversation(convo, offer.seller_id)
            ):
                raise HTTPException(403, "Offer does not belong to this conversation")

    async def send_message(
        self, current_user, conversation_id: UUID, data: MessageCreate
    ) -> MessageOut:
        async def handler():
            convo = await self._participant_conversation(current_user, conversation_id)
            await self._check_references(convo, data)
            msg = await self.messages.create(
                conversation_id=convo.id,
                sender_id=current_user.id,
                content=data.content,
                related_offer_id=data.related_offer_id,
                property_id=data.property_id,
            )
            await self.convos.touch(convo.id, msg.created_at)
            await self.subscriptions.publish(convo.id, insert_event(msg))
            return self._message_out(msg, current_user)

        return await self.breaker.call(handler)

    async def list_messages(self, current_user, conversation_id: UUID) -> list[MessageOut]:
        async def handler():
            await self._participant_conversation(current_user, conversation_id)
            items = await self.messages.list_for_conversation(conversation_id)
            return [self._message_out(msg, current_user) for msg in items]

        return await self.breaker.call(handler)

    async def list_messages_grouped(
        self, current_user, conversation_id: UUID
    ) -> list[MessageGroupOut]:
        items = await self.list_messages(current_user, conversation_id)
        groups: list[MessageGroupOut] = []
        for item in items:
            day = item.created_at.date() if item.created_at else None
            if groups and groups[-1].day == day:
                groups[-1].messages.append(item)
            else:
                groups.append(MessageGroupOut(day=day, messages=[item]))
        return groups

    async def mark_conversation_as_read(self, current_user, conversation_id: UUID) -> CountOut:
        async def handler():
            await self._participant_conversation(current_user, conversation_id)
            updated = await self.messages.mark_conversation_as_read(
                conversation_id, current_user.id
            )
            return CountOut(count=updated)

        return await self.breaker.call(handler)

    async def unread_message_count(self, current_user) -> CountOut:
        async def handler():
            return CountOut(count=await self.messages.unread_count_for_user(current_user.id))

        return await self.breaker.call(handler)
