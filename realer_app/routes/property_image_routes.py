import uuid
from typing import List

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.cloudinary_setup import CloudinaryClient, get_storage_client
from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from models.models import Profile
from schemas.schema import ContractUrlOut, ImageOut
from services.property_image_service import PropertyImageService

router = APIRouter(tags=["Property Images"])


@cbv(router)
class PropertyImageRoutes:
    @router.post("/listings/{property_id}/images", response_model=List[ImageOut])
    @safe_handler
    async def upload(
        self,
        property_id: uuid.UUID,
        files: List[UploadFile] = File(...),
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
        storage: CloudinaryClient = Depends(get_storage_client),
    ):
        return await PropertyImageService(db, storage=storage).upload_listing_images(
            current_user, property_id, files
        )

    @router.get("/listings/{property_id}/images", response_model=List[ImageOut])
    @safe_handler
    async def list_images(
        self,
        property_id: uuid.UUID,
        db: AsyncSession = Depends(get_db_async),
        storage: CloudinaryClient = Depends(get_storage_client),
    ):
        return await PropertyImageService(db, storage=storage).list_listing_images(
            property_id
        )

    @router.delete("/listings/{property_id}/images")
    @safe_handler
    async def remove(
        self,
        property_id: uuid.UUID,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
        storage: CloudinaryClient = Depends(get_storage_client),
    ):
        return await PropertyImageService(db, storage=storage).remove_listing_images(
            current_user, property_id
        )

    @router.get("/contracts/template", response_model=ContractUrlOut)
    @safe_handler
    async def contract_template(
        self,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
        storage: CloudinaryClient = Depends(get_storage_client),
    ):
        return await PropertyImageService(db, storage=storage).contract_template_url()
