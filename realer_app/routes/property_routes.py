import uuid
from typing import List

from fastapi import APIRouter, Depends, Request
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.cloudinary_setup import CloudinaryClient, get_storage_client
from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from models.models import Profile
from schemas.schema import (
    ListingCreate,
    ListingDraftOut,
    ListingFilters,
    ListingOut,
    ListingTextIn,
    ListingUpdate,
)
from services.property_service import PropertyService

router = APIRouter(tags=["Property Listings"])


@cbv(router)
class PropertyRoutes:
    @router.post("/listings", response_model=ListingOut, status_code=201)
    @safe_handler
    async def create(
        self,
        data: ListingCreate,
        request: Request,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PropertyService(db).create_listing(current_user, data)

    @router.post("/listings/extract", response_model=ListingDraftOut)
    @safe_handler
    async def extract(
        self,
        data: ListingTextIn,
        request: Request,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PropertyService(db).draft_from_text(current_user, data)

    @router.get("/listings", response_model=List[ListingOut])
    @safe_handler
    async def search(
        self,
        filters: ListingFilters = Depends(),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PropertyService(db).list_listings(filters)

    @router.get("/listings/mine", response_model=List[ListingOut])
    @safe_handler
    async def mine(
        self,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PropertyService(db).list_owner_listings(current_user)

    @router.get("/listings/{property_id}", response_model=ListingOut)
    @safe_handler
    async def get(
        self,
        property_id: uuid.UUID,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PropertyService(db).get_listing(property_id)

    @router.patch("/listings/{property_id}", response_model=ListingOut)
    @safe_handler
    async def update(
        self,
        property_id: uuid.UUID,
        data: ListingUpdate,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PropertyService(db).update_listing(current_user, property_id, data)

    @router.delete("/listings/{property_id}")
    @safe_handler
    async def delete(
        self,
        property_id: uuid.UUID,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
        storage: CloudinaryClient = Depends(get_storage_client),
    ):
        return await PropertyService(db, storage=storage).delete_listing(
            current_user, property_id
        )
