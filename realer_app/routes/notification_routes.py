import uuid
from typing import List

from fastapi import APIRouter, Depends
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from models.models import Profile
from schemas.schema import CountOut, NotificationOut
from services.notification_service import NotificationService

router = APIRouter(tags=["Notifications"])


@cbv(router)
class NotificationRoutes:
    @router.get("/notifications", response_model=List[NotificationOut])
    @safe_handler
    async def list_notifications(
        self,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await NotificationService(db).list_notifications(current_user)

    @router.get("/notifications/unread-count", response_model=CountOut)
    @safe_handler
    async def unread_count(
        self,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await NotificationService(db).unread_count(current_user)

    @router.post("/notifications/read-all", response_model=CountOut)
    @safe_handler
    async def mark_all_read(
        self,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await NotificationService(db).mark_all_read(current_user)

    @router.post("/notifications/{notification_id}/read", response_model=NotificationOut)
    @safe_handler
    async def mark_read(
        self,
        notification_id: uuid.UUID,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await NotificationService(db).mark_read(current_user, notification_id)

    @router.delete("/notifications/{notification_id}")
    @safe_handler
    async def delete(
        self,
        notification_id: uuid.UUID,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await NotificationService(db).delete(current_user, notification_id)
