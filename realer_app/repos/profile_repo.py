import uuid
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from models.models import Profile


class ProfileRepo:
    def __init__(self, db):
        self.db = db

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[Profile]:
        result = await self.db.execute(select(Profile).where(Profile.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Profile | None:
        result = await self.db.execute(
            select(Profile).where(Profile.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def get_many(self, user_ids: Iterable[uuid.UUID]) -> dict[uuid.UUID, Profile]:
        ids = list(set(user_ids))
        if not ids:
            return {}
        result = await self.db.execute(select(Profile).where(Profile.id.in_(ids)))
        return {p.id: p for p in result.scalars().all()}

    async def create(self, profile: Profile) -> Profile:
        if profile.id is not None:
            raise ValueError(
                "create() called with existing profile, use update() instead"
            )
        self.db.add(profile)
        return await self._commit_and_refresh(profile)

    async def update(self, profile: Profile) -> Profile:
        if profile.id is None:
            raise ValueError("update() called with no ID, use create() instead")

        self.db.add(profile)
        return await self._commit_and_refresh(profile)

    async def _commit_and_refresh(self, profile: Profile) -> Profile:
        try:
            await self.db.commit()
            await self.db.refresh(profile)
            return profile
        except SQLAlchemyError:
            await self.db.rollback()
            raise
