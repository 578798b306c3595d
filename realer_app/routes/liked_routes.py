import uuid
from typing import List

from fastapi import APIRouter, Depends
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from models.models import Profile
from schemas.schema import LikeStateOut, ListingSummary
from services.liked_service import LikedPropertyService

router = APIRouter(tags=["Liked Properties"])


@cbv(router)
class LikedRoutes:
    @router.post("/listings/{property_id}/like", response_model=LikeStateOut)
    @safe_handler
    async def toggle(
        self,
        property_id: uuid.UUID,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await LikedPropertyService(db).toggle_like(current_user, property_id)

    @router.get("/listings/{property_id}/like", response_model=LikeStateOut)
    @safe_handler
    async def state(
        self,
        property_id: uuid.UUID,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await LikedPropertyService(db).is_liked(current_user, property_id)

    @router.get("/liked", response_model=List[ListingSummary])
    @safe_handler
    async def liked(
        self,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await LikedPropertyService(db).list_liked(current_user)
