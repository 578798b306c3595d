import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from models.models import BlogPost


class BlogRepo:
    def __init__(self, db):
        self.db = db

    async def create(self, data: dict) -> BlogPost:
        post = BlogPost(**data)
        self.db.add(post)
        try:
            await self.db.commit()
            await self.db.refresh(post)
            return post
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def get_by_id(self, post_id: uuid.UUID) -> Optional[BlogPost]:
        result = await self.db.execute(select(BlogPost).where(BlogPost.id == post_id))
        return result.scalar_one_or_none()

    async def list_posts(self, limit: int = 50) -> List[BlogPost]:
        result = await self.db.execute(
            select(BlogPost).order_by(BlogPost.created_at.desc()).limit(limit)
        )
        return result.scalars().all()
