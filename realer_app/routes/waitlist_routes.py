import uuid
from typing import List

from fastapi import APIRouter, Depends
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.functions_client import FunctionsClient, get_functions_client
from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from models.models import Profile
from schemas.schema import (
    SellerContactOut,
    WaitlistCreate,
    WaitlistDecision,
    WaitlistOut,
    WaitlistStatusOut,
    WaitlistWithListingOut,
)
from services.waitlist_service import WaitlistService

router = APIRouter(tags=["Waitlist"])


@cbv(router)
class WaitlistRoutes:
    @router.post(
        "/listings/{property_id}/waitlist", response_model=WaitlistOut, status_code=201
    )
    @safe_handler
    async def request_access(
        self,
        property_id: uuid.UUID,
        data: WaitlistCreate,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await WaitlistService(db).request_access(current_user, property_id, data)

    @router.get(
        "/listings/{property_id}/waitlist/status", response_model=WaitlistStatusOut
    )
    @safe_handler
    async def status(
        self,
        property_id: uuid.UUID,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await WaitlistService(db).get_waitlist_status(current_user, property_id)

    @router.get("/listings/{property_id}/contact", response_model=SellerContactOut)
    @safe_handler
    async def seller_contact(
        self,
        property_id: uuid.UUID,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await WaitlistService(db).get_seller_contact(current_user, property_id)

    @router.get("/waitlist/received", response_model=List[WaitlistWithListingOut])
    @safe_handler
    async def received(
        self,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await WaitlistService(db).list_requests_for_owner(current_user)

    @router.get("/waitlist/mine", response_model=List[WaitlistWithListingOut])
    @safe_handler
    async def mine(
        self,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await WaitlistService(db).list_my_requests(current_user)

    @router.patch("/waitlist/{request_id}", response_model=WaitlistOut)
    @safe_handler
    async def decide(
        self,
        request_id: uuid.UUID,
        data: WaitlistDecision,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
        functions: FunctionsClient = Depends(get_functions_client),
    ):
        return await WaitlistService(db, functions=functions).decide(
            current_user, request_id, data
        )
