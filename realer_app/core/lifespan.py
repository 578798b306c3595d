import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import text

from .cache import cache
from .cloudinary_setup import cloudinary_client
from .get_db import async_engine

logger = logging.getLogger("startup")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Waiting for application startup...")

    try:
        async with async_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database reachable. Run `alembic upgrade head` for schema changes.")
    except Exception:
        logger.exception("Database connection failed")

    try:
        logger.info("Connecting to Cloudinary")
        await cloudinary_client.connect()
    except Exception:
        logger.exception("Cannot connect to Cloudinary")

    try:
        await cache.connect()
        logger.info("Upstash Redis connected.")
    except Exception:
        logger.exception("Upstash Redis connection failed")

    logger.info("Application startup complete.")

    yield

    await async_engine.dispose()
