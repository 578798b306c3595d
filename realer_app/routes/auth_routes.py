from fastapi import APIRouter, Depends, Request
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_db import get_db_async
from core.safe_handler import safe_handler
from schemas.schema import ProfileCreate, ProfileOut, UserLoginInput
from services.auth_service import AuthService

router = APIRouter(tags=["User Authentication"])


@cbv(router)
class UserRoutes:
    @router.post("/signup", response_model=ProfileOut, status_code=201)
    @safe_handler
    async def register(
        self,
        data: ProfileCreate,
        request: Request,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await AuthService(db).register(data)

    @router.post("/signin")
    @safe_handler
    async def login(
        self,
        data: UserLoginInput,
        request: Request,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await AuthService(db).login(data)

    @router.post("/signout")
    @safe_handler
    async def logout(
        self,
        request: Request,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await AuthService(db).logout()
