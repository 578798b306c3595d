import uuid

from realtime.subscription_manager import SubscriptionManager


def event(message_id):
    return {"event": "INSERT", "table": "messages", "new": {"id": str(message_id)}}


class TestSubscriptionManager:
    async def test_subscribing_twice_replaces_the_handler(self):
        manager = SubscriptionManager()
        convo = uuid.uuid4()
        first, second = [], []

        async def h1(evt):
            first.append(evt)

        async def h2(evt):
            second.append(evt)

        manager.subscribe(convo, "user-1", h1)
        manager.subscribe(convo, "user-1", h2)
        assert manager.subscribers(convo) == ["user-1"]

        delivered = await manager.publish(convo, event(uuid.uuid4()))
        assert delivered == 1
        assert first == []
        assert len(second) == 1

    async def test_redelivered_event_is_dropped(self):
        manager = SubscriptionManager()
        convo = uuid.uuid4()
        received = []

        async def handler(evt):
            received.append(evt)

        manager.subscribe(convo, "user-1", handler)
        message_id = uuid.uuid4()
        await manager.publish(convo, event(message_id))
        await manager.publish(convo, event(message_id))
        assert len(received) == 1

    async def test_failing_handler_is_unsubscribed(self):
        manager = SubscriptionManager()
        convo = uuid.uuid4()
        received = []

        async def broken(evt):
            raise RuntimeError("socket gone")

        async def healthy(evt):
            received.append(evt)

        manager.subscribe(convo, "broken", broken)
        manager.subscribe(convo, "healthy", healthy)

        delivered = await manager.publish(convo, event(uuid.uuid4()))
        assert delivered == 1
        assert not manager.is_subscribed(convo, "broken")
        assert manager.is_subscribed(convo, "healthy")
        assert len(received) == 1

    async def test_unsubscribe_and_isolation(self):
        manager = SubscriptionManager()
        convo, other = uuid.uuid4(), uuid.uuid4()
        received = []

        async def handler(evt):
            received.append(evt)

        manager.subscribe(convo, "user-1", handler)
        assert await manager.publish(other, event(uuid.uuid4())) == 0
        assert manager.unsubscribe(convo, "user-1")
        assert not manager.unsubscribe(convo, "user-1")
        assert await manager.publish(convo, event(uuid.uuid4())) == 0
        assert received == []

    async def test_seen_ids_are_bounded(self):
        manager = SubscriptionManager(seen_limit=2)
        convo = uuid.uuid4()
        received = []

        async def handler(evt):
            received.append(evt)

        manager.subscribe(convo, "user-1", handler)
        first = uuid.uuid4()
        for message_id in (first, uuid.uuid4(), uuid.uuid4()):
            await manager.publish(convo, event(message_id))
        # the oldest id fell out of the window
        await manager.publish(convo, event(first))
        assert len(received) == 4
