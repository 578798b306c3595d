import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import NullPool
from starlette.websockets import WebSocketDisconnect

import models.models  # noqa: F401
from app import app
from core.get_db import Base, build_engine, build_session_factory, get_db_async, get_session_factory
from core.validators import create_access_token
from models.models import Profile
from realtime.subscription_manager import SubscriptionManager, get_subscription_manager
from repos.conversation_repo import ConversationRepo


@pytest.fixture
def chat(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'chat.db'}", poolclass=NullPool)
    factory = build_session_factory(engine)

    async def seed():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        async with factory() as session:
            people = [
                Profile(email=f"{name}@example.com", name=name.title())
                for name in ("ana", "ben", "cat")
            ]
            for person in people:
                person.set_password("secret123")
                session.add(person)
            await session.commit()
            ids = [person.id for person in people]
            convo = await ConversationRepo(session).get_or_create(ids[0], ids[1])
            return ids, convo.id

    ids, conversation_id = asyncio.run(seed())

    async def override_db():
        async with factory() as session:
            yield session

    manager = SubscriptionManager()
    app.dependency_overrides[get_db_async] = override_db
    app.dependency_overrides[get_session_factory] = lambda: factory
    app.dependency_overrides[get_subscription_manager] = lambda: manager

    tokens = [create_access_token(user_id) for user_id in ids]
    with TestClient(app) as client:
        yield client, tokens, ids, conversation_id, manager

    app.dependency_overrides.clear()
    asyncio.run(engine.dispose())


class TestConversationSocket:
    def test_bad_token_is_refused(self, chat):
        client, tokens, ids, conversation_id, manager = chat
        with pytest.raises(WebSocketDisconnect) as exc:
            with client.websocket_connect(
                f"/v1/ws/conversations/{conversation_id}?token=not-a-jwt"
            ):
                pass
        assert exc.value.code == 4401

    def test_outsider_is_refused(self, chat):
        client, tokens, ids, conversation_id, manager = chat
        with pytest.raises(WebSocketDisconnect) as exc:
            with client.websocket_connect(
                f"/v1/ws/conversations/{conversation_id}?token={tokens[2]}"
            ):
                pass
        assert exc.value.code == 4403

    def test_message_reaches_both_participants(self, chat):
        client, tokens, ids, conversation_id, manager = chat
        url = f"/v1/ws/conversations/{conversation_id}?token="

        with client.websocket_connect(url + tokens[0]) as ws_a, client.websocket_connect(
            url + tokens[1]
        ) as ws_b:
            # a reply on ws_b proves its subscription is live
            ws_b.send_json({"content": "  "})
            assert ws_b.receive_json()["event"] == "ERROR"

            ws_a.send_json({"content": "Is the house still available?"})

            mine = ws_a.receive_json()
            assert mine["event"] == "INSERT"
            assert mine["new"]["content"] == "Is the house still available?"
            assert mine["new"]["is_mine"] is True
            assert mine["new"]["is_read"] is False

            theirs = ws_b.receive_json()
            assert theirs["new"]["id"] == mine["new"]["id"]
            assert theirs["new"]["is_mine"] is False
            assert theirs["new"]["is_read"] is True

        assert manager.subscribers(conversation_id) == []

    def test_malformed_frames_get_error_replies(self, chat):
        client, tokens, ids, conversation_id, manager = chat
        url = f"/v1/ws/conversations/{conversation_id}?token={tokens[0]}"

        with client.websocket_connect(url) as ws:
            ws.send_json(["not", "an", "object"])
            assert ws.receive_json()["event"] == "ERROR"

            ws.send_text("this is not json")
            reply = ws.receive_json()
            assert reply == {"event": "ERROR", "detail": "Frames must be JSON"}

            ws.send_json({"content": "still connected"})
            event = ws.receive_json()
            assert event["event"] == "INSERT"
            assert event["new"]["content"] == "still connected"
