import logging
from uuid import UUID

from core.get_current_user import get_current_user_ws
from core.get_db import get_db_async, get_session_factory
from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .chat_service import ChatService
from .subscription_manager import SubscriptionManager, get_subscription_manager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Realtime Conversations"])


@router.websocket("/ws/conversations/{conversation_id}")
async def conversation_socket(
    websocket: WebSocket,
    conversation_id: UUID,
    db: AsyncSession = Depends(get_db_async),
    session_factory: async_sessionmaker = Depends(get_session_factory),
    manager: SubscriptionManager = Depends(get_subscription_manager),
):
    current_user = await get_current_user_ws(websocket, db)
    if current_user is None:
        return

    chat_service = ChatService(db, current_user, manager, session_factory)
    try:
        await chat_service.on_connect(websocket, conversation_id)
    except HTTPException as e:
        logger.warning(f"Websocket refused for {current_user.id}: {e.detail}")
        await websocket.close(code=4403 if e.status_code == 403 else 4404)
        return

    try:
        while True:
            try:
                data = await websocket.receive_json()
            except ValueError:
                await websocket.send_json({"event": "ERROR", "detail": "Frames must be JSON"})
                continue
            try:
                await chat_service.on_message(conversation_id, data)
            except ValidationError as e:
                await websocket.send_json(
                    {"event": "ERROR", "detail": e.errors(include_url=False, include_context=False)}
                )
            except HTTPException as e:
                await websocket.send_json({"event": "ERROR", "detail": e.detail})
    except WebSocketDisconnect:
        pass
    finally:
        chat_service.on_disconnect(conversation_id)
