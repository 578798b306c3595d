from core.breaker import CircuitBreaker
from core.mapper import ORMMapper
from core.settings import settings
from core.validators import create_access_token
from fastapi import HTTPException
from fastapi.responses import JSONResponse
from models.models import Profile
from repos.profile_repo import ProfileRepo
from schemas.schema import ProfileCreate, ProfileOut, UserLoginInput

ACCESS_EXPIRE_MINUTES = settings.ACCESS_EXPIRE_MINUTES
SECURE_COOKIES = settings.SECURE_COOKIES


class AuthService:
    def __init__(self, db):
        self.repo: ProfileRepo = ProfileRepo(db)
        self.breaker: CircuitBreaker = CircuitBreaker()
        self.mapper: ORMMapper = ORMMapper()

    async def register(self, data: ProfileCreate):
        async def handler():
            if await self.repo.get_by_email(email=data.email):
                raise HTTPException(status_code=400, detail="Email already registered")

            profile = Profile(
                email=data.email,
                name=data.name,
                phone=data.phone,
                account_type=data.account_type,
            )
            profile.set_password(raw_password=data.password)
            profile = await self.repo.create(profile)
            return self.mapper.one(item=profile, schema=ProfileOut)

        return await self.breaker.call(handler)

    async def login(self, data: UserLoginInput):
        async def handler():
            profile = await self.repo.get_by_email(data.email)
            if not profile or not profile.check_password(raw_password=data.password):
                raise HTTPException(status_code=401, detail="Invalid credentials")

            access_token = create_access_token(profile.id)
            response = JSONResponse(
                {
                    "message": "Login successful",
                    "id": str(profile.id),
                    "account_type": profile.account_type.value,
                    "access_token": access_token,
                },
                status_code=200,
            )
            response.set_cookie(
                key="access_token",
                value=access_token,
                httponly=True,
                secure=SECURE_COOKIES,
                samesite="lax",
                max_age=ACCESS_EXPIRE_MINUTES * 60,
            )
            return response

        return await self.breaker.call(handler)

    async def logout(self):
        async def handler():
            response = JSONResponse({"message": "Logged out successfully"})
            for cookie in ("access_token", "session"):
                response.delete_cookie(
                    key=cookie,
                    path="/",
                    secure=SECURE_COOKIES,
                    httponly=True,
                    samesite="lax",
                )
            return response

        return await self.breaker.call(handler)
