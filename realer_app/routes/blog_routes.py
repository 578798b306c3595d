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
from schemas.schema import BlogPostCreate, BlogPostOut
from services.blog_service import BlogService

router = APIRouter(tags=["Blog"])


@cbv(router)
class BlogRoutes:
    @router.post(
        "/listings/{property_id}/blog", response_model=BlogPostOut, status_code=201
    )
    @safe_handler
    async def generate(
        self,
        property_id: uuid.UUID,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
        functions: FunctionsClient = Depends(get_functions_client),
    ):
        return await BlogService(db, functions=functions).generate_post(
            current_user, property_id
        )

    @router.post("/blog", response_model=BlogPostOut, status_code=201)
    @safe_handler
    async def create(
        self,
        data: BlogPostCreate,
        current_user: Profile = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await BlogService(db).create_post(current_user, data)

    @router.get("/blog", response_model=List[BlogPostOut])
    @safe_handler
    async def list_posts(self, db: AsyncSession = Depends(get_db_async)):
        return await BlogService(db).list_posts()

    @router.get("/blog/{post_id}", response_model=BlogPostOut)
    @safe_handler
    async def get(
        self,
        post_id: uuid.UUID,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await BlogService(db).get_post(post_id)
