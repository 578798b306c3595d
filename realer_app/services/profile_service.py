import uuid

from core.breaker import CircuitBreaker
from core.mapper import ORMMapper
from fastapi import HTTPException
from repos.profile_repo import ProfileRepo
from schemas.schema import ProfileOut, ProfileUpdate


class ProfileService:
    def __init__(self, db):
        self.repo: ProfileRepo = ProfileRepo(db)
        self.breaker: CircuitBreaker = CircuitBreaker()
        self.mapper: ORMMapper = ORMMapper()

    async def me(self, current_user) -> ProfileOut:
        return self.mapper.one(item=current_user, schema=ProfileOut)

    async def get_profile(self, user_id: uuid.UUID) -> ProfileOut:
        async def handler():
            profile = await self.repo.get_by_id(user_id)
            if not profile:
                raise HTTPException(404, "Profile not found")
            return self.mapper.one(item=profile, schema=ProfileOut)

        return await self.breaker.call(handler)

    async def update_profile(self, current_user, data: ProfileUpdate) -> ProfileOut:
        async def handler():
            profile = await self.repo.get_by_id(current_user.id)
            if not profile:
                raise HTTPException(404, "Profile not found")

            changes = data.model_dump(exclude_unset=True)
            for field in ("name", "phone", "account_type"):
                if field in changes and changes[field] is not None:
                    setattr(profile, field, changes[field])

            profile = await self.repo.update(profile)
            return self.mapper.one(item=profile, schema=ProfileOut)

        return await self.breaker.call(handler)
