import logging
import uuid

from core.breaker import CircuitBreaker
from core.functions_client import FunctionsClient, functions_client
from core.mapper import ORMMapper
from fastapi import HTTPException
from repos.blog_repo import BlogRepo
from repos.property_repo import PropertyRepo
from schemas.schema import BlogPostCreate, BlogPostOut

logger = logging.getLogger(__name__)


class BlogService:
    def __init__(self, db, functions: FunctionsClient | None = None):
        self.repo: BlogRepo = BlogRepo(db)
        self.listings: PropertyRepo = PropertyRepo(db)
        self.functions: FunctionsClient = functions or functions_client
        self.breaker: CircuitBreaker = CircuitBreaker()
        self.mapper: ORMMapper = ORMMapper()

    @staticmethod
    def author_name(current_user) -> str:
        name = (current_user.name or "").strip()
        return name or "Anonymous"

    async def generate_post(self, current_user, property_id: uuid.UUID) -> BlogPostOut:
        async def handler():
            listing = await self.listings.get_by_id(property_id)
            if not listing:
                raise HTTPException(404, "Listing not found")

            generated = await self.functions.generate_property_blog(
                {
                    "title": listing.title,
                    "price": float(listing.price),
                    "marketPrice": float(listing.market_price),
                    "belowMarket": listing.below_market,
                    "location": listing.location,
                    "beds": listing.beds,
                    "baths": float(listing.baths),
                    "sqft": listing.sqft,
                    "description": listing.description,
                }
            )

            post = await self.repo.create(
                {
                    "user_id": current_user.id,
                    "property_id": listing.id,
                    "title": generated["title"],
                    "content": generated["content"],
                    "excerpt": generated["excerpt"],
                    "author": self.author_name(current_user),
                    "image": listing.first_image,
                }
            )
            logger.info(f"Generated blog post {post.id} for listing {listing.id}")
            return self.mapper.one(item=post, schema=BlogPostOut)

        return await self.breaker.call(handler)

    async def create_post(self, current_user, data: BlogPostCreate) -> BlogPostOut:
        async def handler():
            post = await self.repo.create(
                {**data.model_dump(), "user_id": current_user.id, "author": self.author_name(current_user)}
            )
            return self.mapper.one(item=post, schema=BlogPostOut)

        return await self.breaker.call(handler)

    async def list_posts(self) -> list[BlogPostOut]:
        async def handler():
            return self.mapper.many(items=await self.repo.list_posts(), schema=BlogPostOut)

        return await self.breaker.call(handler)

    async def get_post(self, post_id: uuid.UUID) -> BlogPostOut:
        async def handler():
            post = await self.repo.get_by_id(post_id)
            if not post:
                raise HTTPException(404, "Blog post not found")
            return self.mapper.one(item=post, schema=BlogPostOut)

        return await self.breaker.call(handler)
