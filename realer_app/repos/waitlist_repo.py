import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload

from models.enums import WaitlistStatus
from models.models import PropertyListing, WaitlistRequest


class WaitlistRepo:
    def __init__(self, db):
        self.db = db

    def _by_user_property(self, user_id: uuid.UUID, property_id: uuid.UUID):
        return select(WaitlistRequest).where(
            WaitlistRequest.user_id == user_id,
            WaitlistRequest.property_id == property_id,
        )

    async def get_for_user(
        self, user_id: uuid.UUID, property_id: uuid.UUID
    ) -> Optional[WaitlistRequest]:
        result = await self.db.execute(self._by_user_property(user_id, property_id))
        return result.scalar_one_or_none()

    async def get_by_id(self, request_id: uuid.UUID) -> Optional[WaitlistRequest]:
        result = await self.db.execute(
            select(WaitlistRequest)
            .options(selectinload(WaitlistRequest.listing))
            .where(WaitlistRequest.id == request_id)
        )
        return result.scalar_one_or_none()

    async def get_or_create(
        self,
        user_id: uuid.UUID,
        property_id: uuid.UUID,
        name: str,
        email: str,
        phone: str,
    ) -> tuple[WaitlistRequest, bool]:
        stmt = self._by_user_property(user_id, property_id)
        existing = (await self.db.execute(stmt)).scalar_one_or_none()
        if existing:
            return existing, False

        request = WaitlistRequest(
            user_id=user_id,
            property_id=property_id,
            name=name,
            email=email,
            phone=phone,
            status=WaitlistStatus.PENDING,
        )
        self.db.add(request)
        try:
            await self.db.commit()
            await self.db.refresh(request)
            return request, True
        except IntegrityError:
            await self.db.rollback()
            result = await self.db.execute(stmt)
            return result.scalars().one(), False

    async def set_status(
        self, request: WaitlistRequest, status: WaitlistStatus
    ) -> WaitlistRequest:
        request.status = status
        self.db.add(request)
        try:
            await self.db.commit()
            await self.db.refresh(request)
            return request
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def list_for_owner(self, owner_id: uuid.UUID) -> List[WaitlistRequest]:
        stmt = (
            select(WaitlistRequest)
            .join(PropertyListing, PropertyListing.id == WaitlistRequest.property_id)
            .options(selectinload(WaitlistRequest.listing))
            .where(PropertyListing.user_id == owner_id)
            .order_by(WaitlistRequest.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def list_for_user(self, user_id: uuid.UUID) -> List[WaitlistRequest]:
        stmt = (
            select(WaitlistRequest)
            .options(selectinload(WaitlistRequest.listing))
            .where(WaitlistRequest.user_id == user_id)
            .order_by(WaitlistRequest.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()
