import logging
import uuid

from core.breaker import CircuitBreaker
from core.cloudinary_setup import CloudinaryClient, cloudinary_client
from core.settings import settings
from fastapi import HTTPException, UploadFile
from policy.model_policy import ModelPolicy
from repos.property_repo import PropertyRepo
from schemas.schema import ContractUrlOut, ImageOut

logger = logging.getLogger(__name__)

MAX_IMAGES_PER_UPLOAD = 10


class PropertyImageService:
    def __init__(self, db, storage: CloudinaryClient | None = None):
        self.repo: PropertyRepo = PropertyRepo(db)
        self.storage: CloudinaryClient = storage or cloudinary_client
        self.breaker: CircuitBreaker = CircuitBreaker()

    async def _owned_listing(self, current_user, property_id: uuid.UUID):
        listing = await self.repo.get_by_id(property_id)
        if not listing:
            raise HTTPException(404, "Listing not found")
        if not ModelPolicy.owns_listing(listing, current_user.id):
            raise HTTPException(403, "You are not allowed to modify this listing")
        return listing

    async def upload_listing_images(
        self, current_user, property_id: uuid.UUID, files: list[UploadFile]
    ) -> list[ImageOut]:
        async def handler():
            if not files:
                raise HTTPException(400, "No files provided")
            if len(files) > MAX_IMAGES_PER_UPLOAD:
                raise HTTPException(
                    400, f"At most {MAX_IMAGES_PER_UPLOAD} images per upload"
                )

            listing = await self._owned_listing(current_user, property_id)
            folder = self.storage.property_folder(property_id)

            uploaded = []
            for file in files:
                content = await file.read()
                result = await self.storage.upload_image(
                    content,
                    folder=folder,
                    file_name=file.filename or "image",
                    content_type=file.content_type,
                )
                uploaded.append(result)

            existing = [
                url for url in listing.images if url != settings.DEFAULT_LISTING_IMAGE
            ]
            listing.images = existing + [item["url"] for item in uploaded]
            await self.repo.save(listing)
            logger.info(f"Uploaded {len(uploaded)} image(s) for listing {property_id}")
            return [ImageOut(**item) for item in uploaded]

        return await self.breaker.call(handler)

    async def list_listing_images(self, property_id: uuid.UUID) -> list[ImageOut]:
        async def handler():
            items = await self.storage.list_resources(
                prefix=self.storage.property_folder(property_id)
            )
            return [ImageOut(**item) for item in items]

        return await self.breaker.call(handler)

    async def remove_listing_images(self, current_user, property_id: uuid.UUID):
        async def handler():
            listing = await self._owned_listing(current_user, property_id)
            folder = self.storage.property_folder(property_id)
            result = await self.storage.delete_by_prefix(folder)

            remaining = [url for url in listing.images if f"/{folder}/" not in url]
            listing.images = remaining or [settings.DEFAULT_LISTING_IMAGE]
            await self.repo.save(listing)
            return {"deleted": len(result.get("deleted") or {})}

        return await self.breaker.call(handler)

    async def contract_template_url(self) -> ContractUrlOut:
        return ContractUrlOut(url=self.storage.contract_template_url())
