import logging
from uuid import UUID

from fastapi import WebSocket
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from repos.message_repo import MessageRepository
from schemas.schema import MessageCreate
from services.messaging_service import MessagingService

from .subscription_manager import SubscriptionManager

logger = logging.getLogger(__name__)


class ChatService:
    def __init__(
        self,
        db: AsyncSession,
        current_user,
        manager: SubscriptionManager,
        session_factory: async_sessionmaker,
    ):
        self.db = db
        self.current_user = current_user
        self.manager = manager
        self.session_factory = session_factory
        self.messaging = MessagingService(db, subscriptions=manager)
        self.subscriber_id: str | None = None

    async def on_connect(self, websocket: WebSocket, conversation_id: UUID):
        await self.messaging.get_conversation(self.current_user, conversation_id)
        await websocket.accept()

        self.subscriber_id = f"{self.current_user.id}:{id(websocket)}"
        self.manager.subscribe(
            conversation_id, self.subscriber_id, self._deliver_to(websocket)
        )
        await self.messaging.mark_conversation_as_read(self.current_user, conversation_id)

    def _deliver_to(self, websocket: WebSocket):
        reader_id = self.current_user.id

        async def deliver(event: dict):
            new = dict(event.get("new") or {})
            if new.get("sender_id") and new["sender_id"] != str(reader_id):
                async with self.session_factory() as session:
                    updated = await MessageRepository(session).mark_read(
                        UUID(new["id"]), reader_id
                    )
                if updated:
                    new["is_read"] = True
            new["is_mine"] = new.get("sender_id") == str(reader_id)
            await websocket.send_json({**event, "new": new})

        return deliver

    async def on_message(self, conversation_id: UUID, payload: dict):
        data = MessageCreate.model_validate(payload)
        return await self.messaging.send_message(self.current_user, conversation_id, data)

    def on_disconnect(self, conversation_id: UUID):
        if self.subscriber_id:
            self.manager.unsubscribe(conversation_id, self.subscriber_id)
            self.subscriber_id = None
