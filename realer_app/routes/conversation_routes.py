import uuid
from typing import List

from fastapi import APIRouter, Depends
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from models.models import Profile
from realtime.subscription_manager import SubscriptionManager, get_subscription_manager
from schemas.schema import (
    ConversationCreate,
    ConversationIdOut,
    ConversationListOut,
    ConversationOut,
    CountOut,
    MessageCreate,
    MessageGroupOut,
    MessageOut,
)
from services.messaging_service import MessagingService

router = APIRouter(tags=["Messaging"])


@cbv(router)
class ConversationRoutes:
    @router.post("/conversations", response_model=ConversationIdOut)
    @safe_handler
    async def start(
        self,
        data: ConversationCreate,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await MessagingService(db).get_or_create_conversation(
            current_user, data.other_user_id
        )

    @router.get("/conversations", response_model=ConversationListOut)
    @safe_handler
    async def list_conversations(
        self,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await MessagingService(db).list_conversations(current_user)

    @router.get("/conversations/{conversation_id}", response_model=ConversationOut)
    @safe_handler
    async def get(
        self,
        conversation_id: uuid.UUID,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await MessagingService(db).get_conversation(current_user, conversation_id)

    @router.get(
        "/conversations/{conversation_id}/messages", response_model=List[MessageOut]
    )
    @safe_handler
    async def messages(
        self,
        conversation_id: uuid.UUID,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await MessagingService(db).list_messages(current_user, conversation_id)

    @router.get(
        "/conversations/{conversation_id}/messages/grouped",
        response_model=List[MessageGroupOut],
    )
    @safe_handler
    async def grouped_messages(
        self,
        conversation_id: uuid.UUID,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await MessagingService(db).list_messages_grouped(
            current_user, conversation_id
        )

    @router.post(
        "/conversations/{conversation_id}/messages",
        response_model=MessageOut,
        status_code=201,
    )
    @safe_handler
    async def send(
        self,
        conversation_id: uuid.UUID,
        data: MessageCreate,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
        subscriptions: SubscriptionManager = Depends(get_subscription_manager),
    ):
        return await MessagingService(db, subscriptions=subscriptions).send_message(
            current_user, conversation_id, data
        )

    @router.post("/conversations/{conversation_id}/read", response_model=CountOut)
    @safe_handler
    async def mark_read(
        self,
        conversation_id: uuid.UUID,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await MessagingService(db).mark_conversation_as_read(
            current_user, conversation_id
        )

    @router.get("/messages/unread-count", response_model=CountOut)
    @safe_handler
    async def unread_count(
        self,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await MessagingService(db).unread_message_count(current_user)
