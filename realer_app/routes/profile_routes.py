import uuid

from fastapi import APIRouter, Depends
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from models.models import Profile
from schemas.schema import ProfileOut, ProfileUpdate
from services.profile_service import ProfileService

router = APIRouter(tags=["User Profile"])


@cbv(router)
class ProfileRoutes:
    @router.get("/me", response_model=ProfileOut)
    @safe_handler
    async def me(
        self,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await ProfileService(db).me(current_user)

    @router.patch("/me", response_model=ProfileOut)
    @safe_handler
    async def update(
        self,
        data: ProfileUpdate,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await ProfileService(db).update_profile(current_user, data)

    @router.get("/{profile_id}", response_model=ProfileOut)
    @safe_handler
    async def get(
        self,
        profile_id: uuid.UUID,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await ProfileService(db).get_profile(profile_id)
