import uuid
from typing import List, Optional

from fastapi import APIRouter, Body, Depends
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from models.models import Profile
from schemas.schema import (
    BountyAdvance,
    BountyClaimDetailOut,
    BountyClaimOut,
    PayoutSummaryOut,
)
from services.bounty_service import BountyService

router = APIRouter(tags=["Bounty Claims"])


@cbv(router)
class BountyRoutes:
    @router.post(
        "/listings/{property_id}/bounty-claims",
        response_model=BountyClaimOut,
        status_code=201,
    )
    @safe_handler
    async def claim(
        self,
        property_id: uuid.UUID,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await BountyService(db).claim(current_user, property_id)

    @router.get("/bounty-claims", response_model=List[BountyClaimDetailOut])
    @safe_handler
    async def list_claims(
        self,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await BountyService(db).list_claims(current_user)

    @router.get("/bounty-claims/payouts", response_model=PayoutSummaryOut)
    @safe_handler
    async def payouts(
        self,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await BountyService(db).payout_summary(current_user)

    @router.post("/bounty-claims/{claim_id}/advance", response_model=BountyClaimOut)
    @safe_handler
    async def advance(
        self,
        claim_id: uuid.UUID,
        data: Optional[BountyAdvance] = Body(default=None),
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await BountyService(db).advance(current_user, claim_id, data)
