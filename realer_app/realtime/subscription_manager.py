import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Awaitable, Callable
from uuid import UUID

logger = logging.getLogger(__name__)

Handler = Callable[[dict], Awaitable[None]]


def insert_event(message) -> dict:
    return {"event": "INSERT", "table": "messages", "new": message.as_dict()}


@dataclass
class Subscriber:
    handler: Handler
    seen: "OrderedDict[str, None]" = field(default_factory=OrderedDict)

    def already_seen(self, message_id: str, limit: int) -> bool:
        if message_id in self.seen:
            return True
        self.seen[message_id] = None
        while len(self.seen) > limit:
            self.seen.popitem(last=False)
        return False


class SubscriptionManager:
    """Per-conversation fan-out of message events.

    Each subscriber id holds at most one handler per conversation, and every
    subscriber drops an event whose message id it has already handled.
    """

    def __init__(self, seen_limit: int = 500):
        self.channels: dict[UUID, dict[str, Subscriber]] = {}
        self.seen_limit = seen_limit

    def subscribe(self, conversation_id: UUID, subscriber_id: str, handler: Handler):
        channel = self.channels.setdefault(conversation_id, {})
        existing = channel.get(subscriber_id)
        if existing:
            existing.handler = handler
            return
        channel[subscriber_id] = Subscriber(handler=handler)
        logger.debug(f"{subscriber_id} subscribed to conversation {conversation_id}")

    def unsubscribe(self, conversation_id: UUID, subscriber_id: str) -> bool:
        channel = self.channels.get(conversation_id)
        if not channel or subscriber_id not in channel:
            return False
        channel.pop(subscriber_id)
        if not channel:
            self.channels.pop(conversation_id, None)
        logger.debug(f"{subscriber_id} left conversation {conversation_id}")
        return True

    def subscribers(self, conversation_id: UUID) -> list[str]:
        return list(self.channels.get(conversation_id, {}))

    def is_subscribed(self, conversation_id: UUID, subscriber_id: str) -> bool:
        return subscriber_id in self.channels.get(conversation_id, {})

    async def publish(self, conversation_id: UUID, event: dict) -> int:
        message_id = str((event.get("new") or {}).get("id") or "")
        delivered = 0

        for subscriber_id, subscriber in list(self.channels.get(conversation_id, {}).items()):
            if message_id and subscriber.already_seen(message_id, self.seen_limit):
                continue
            try:
                await subscriber.handler(event)
                delivered += 1
            except Exception:
                logger.exception(
                    f"Subscriber {subscriber_id} failed on conversation {conversation_id}; unsubscribing"
                )
                self.unsubscribe(conversation_id, subscriber_id)

        return delivered


subscriptions = SubscriptionManager()


def get_subscription_manager() -> SubscriptionManager:
    return subscriptions
