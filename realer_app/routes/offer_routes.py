import uuid
from typing import List

from fastapi import APIRouter, Depends
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from models.models import Profile
from schemas.schema import OfferCreate, OfferDecision, OfferOut
from services.offer_service import OfferService

router = APIRouter(tags=["Offers"])


@cbv(router)
class OfferRoutes:
    @router.post(
        "/listings/{property_id}/offers", response_model=OfferOut, status_code=201
    )
    @safe_handler
    async def make_offer(
        self,
        property_id: uuid.UUID,
        data: OfferCreate,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await OfferService(db).make_offer(current_user, property_id, data)

    @router.get("/listings/{property_id}/offers", response_model=List[OfferOut])
    @safe_handler
    async def interested(
        self,
        property_id: uuid.UUID,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await OfferService(db).list_interested_offers(property_id)

    @router.get("/offers/received", response_model=List[OfferOut])
    @safe_handler
    async def received(
        self,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await OfferService(db).list_received_offers(current_user)

    @router.get("/offers/mine", response_model=List[OfferOut])
    @safe_handler
    async def mine(
        self,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await OfferService(db).list_my_offers(current_user)

    @router.patch("/offers/{offer_id}", response_model=OfferOut)
    @safe_handler
    async def respond(
        self,
        offer_id: uuid.UUID,
        data: OfferDecision,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await OfferService(db).respond(current_user, offer_id, data)
