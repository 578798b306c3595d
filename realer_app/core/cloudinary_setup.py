import asyncio
import functools
import logging
import uuid
from concurrent.futures import ThreadPoolExecutor

import cloudinary
import cloudinary.api
import cloudinary.uploader
from cloudinary.utils import cloudinary_url
from fastapi import HTTPException

from .settings import settings

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif"}

_sdk_executor = ThreadPoolExecutor(max_workers=5, thread_name_prefix="cloudinary")


async def run_blocking(func, *args, **kwargs):
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        _sdk_executor, functools.partial(func, *args, **kwargs)
    )


class CloudinaryClient:
    def __init__(self):
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_SECRET_KEY,
            secure=True,
        )

    async def connect(self) -> bool:
        try:
            info = await run_blocking(cloudinary.api.ping)
            return info.get("status") == "ok"
        except Exception as e:
            raise HTTPException(500, f"Cloudinary connection failed: {e}")

    @staticmethod
    def property_folder(property_id) -> str:
        return f"{settings.PROPERTY_IMAGES_FOLDER}/{property_id}"

    def validate_image(self, content: bytes, content_type: str | None, file_name: str):
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise HTTPException(
                status_code=400,
                detail=f"File '{file_name}' is not a supported image type.",
            )
        if len(content) > settings.MAX_IMAGE_SIZE:
            raise HTTPException(
                status_code=400,
                detail=f"File '{file_name}' exceeds maximum allowed size.",
            )

    async def upload_image(
        self,
        content: bytes,
        *,
        folder: str,
        file_name: str = "image",
        content_type: str | None = None,
    ) -> dict:
        self.validate_image(content, content_type, file_name)
        public_id = uuid.uuid4().hex
        try:
            result = await run_blocking(
                cloudinary.uploader.upload,
                content,
                folder=folder,
                public_id=public_id,
                resource_type="image",
            )
        except Exception as e:
            logger.error(f"Cloudinary upload failed for {file_name}", exc_info=e)
            raise HTTPException(500, f"Image upload failed: {e}")

        return {
            "public_id": result.get("public_id"),
            "url": result.get("secure_url") or result.get("url"),
        }

    async def list_resources(
        self,
        *,
        prefix: str,
        resource_type: str = "image",
        max_results: int = 100,
    ) -> list[dict]:
        try:
            result = await run_blocking(
                cloudinary.api.resources,
                type="upload",
                resource_type=resource_type,
                prefix=prefix,
                max_results=max_results,
            )
        except Exception as e:
            raise HTTPException(
                status_code=500,
                detail=f"Failed to list Cloudinary resources: {e}",
            )

        return [
            {
                "public_id": item.get("public_id"),
                "url": item.get("secure_url") or item.get("url"),
                "created_at": item.get("created_at"),
                "bytes": item.get("bytes"),
            }
            for item in result.get("resources", [])
        ]

    async def delete_by_prefix(self, prefix: str, resource_type: str = "image") -> dict:
        try:
            result = await run_blocking(
                cloudinary.api.delete_resources_by_prefix,
                prefix,
                resource_type=resource_type,
                invalidate=True,
            )
        except Exception as e:
            raise HTTPException(
                status_code=500,
                detail=f"Failed to delete images: {str(e)}",
            )

        return {"deleted": result.get("deleted", {}), "partial": result.get("partial")}

    async def safe_delete_by_prefix(self, prefix: str, resource_type: str = "image"):
        try:
            await self.delete_by_prefix(prefix, resource_type=resource_type)
        except HTTPException as e:
            logger.warning(f"Could not remove stored files under {prefix}: {e.detail}")

    def contract_template_url(self) -> str:
        name = settings.CONTRACT_TEMPLATE_NAME
        public_id = f"{settings.CONTRACTS_FOLDER}/{name}"
        url, _ = cloudinary_url(
            public_id,
            resource_type="raw",
            flags="attachment",
            secure=True,
        )
        return url


cloudinary_client = CloudinaryClient()


def get_storage_client() -> CloudinaryClient:
    return cloudinary_client
