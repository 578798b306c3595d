import json
import logging
import urllib.parse
from typing import Any, Optional, Protocol

import httpx
from tenacity import retry, stop_after_attempt, wait_exponential

from .breaker import breaker
from .settings import settings

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    async def get_json(self, key: str) -> Optional[Any]: ...

    async def set_json(self, key: str, value: Any, ttl: int = 3600) -> bool: ...

    async def delete(self, key: str) -> bool: ...


class Cache:
    """Upstash Redis over its REST API."""

    def __init__(self, redis_url: str | None = None, redis_token: str | None = None):
        self.redis_url = (redis_url or settings.UPSTASH_REDIS_URL or "").rstrip("/")
        self.redis_token = redis_token or settings.UPSTASH_REDIS_TOKEN

        self.headers = {
            "Authorization": f"Bearer {self.redis_token}",
            "Content-Type": "application/json",
        }

    @property
    def configured(self) -> bool:
        return bool(self.redis_url and self.redis_token)

    @retry(
        stop=stop_after_attempt(2), wait=wait_exponential(multiplier=1, min=1, max=10)
    )
    async def connect(self):
        if not self.configured:
            raise ValueError("Missing Upstash Redis environment variables")

        async def handler():
            async with httpx.AsyncClient() as client:
                logger.info("Connecting to Upstash Redis...")
                res = await client.get(f"{self.redis_url}/ping", headers=self.headers)
                if res.status_code == 200 and res.json().get("result") == "PONG":
                    logger.info("Connected to Upstash Redis.")
                else:
                    raise ConnectionError("Upstash Redis ping failed.")

        await breaker.call(handler)

    async def get(self, key: str) -> Optional[str]:
        async def handler():
            try:
                encoded_key = urllib.parse.quote(str(key))
                async with httpx.AsyncClient() as client:
                    res = await client.get(
                        f"{self.redis_url}/get/{encoded_key}", headers=self.headers
                    )
                    if res.status_code == 200:
                        return res.json().get("result")
                    if res.status_code == 404:
                        return None
                    raise ConnectionError(f"Redis GET failed ({res.status_code})")
            except httpx.RequestError as e:
                logger.error("Network error during Redis GET:", exc_info=e)
            except ConnectionError as e:
                logger.error("Connection error during Redis GET:", exc_info=e)
            return None

        return await breaker.call(handler)

    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        if key is None or value is None:
            raise ValueError("Cache key and value cannot be None")

        async def handler():
            try:
                encoded_key = urllib.parse.quote(str(key))
                async with httpx.AsyncClient() as client:
                    url = f"{self.redis_url}/set/{encoded_key}?ex={ttl}"

                    res = await client.post(url, headers=self.headers, content=value)
                    if res.status_code == 200:
                        logger.debug("Cache set successfully for key: %s", key)
                        return True
                    raise ConnectionError(f"Redis SET failed ({res.status_code})")
            except httpx.RequestError as e:
                logger.error("Network error during Redis SET:", exc_info=e)
            except ConnectionError as e:
                logger.error("Connection error during Redis SET:", exc_info=e)
            return False

        return await breaker.call(handler)

    async def delete(self, key: str) -> bool:
        async def handler():
            try:
                encoded_key = urllib.parse.quote(str(key))
                async with httpx.AsyncClient() as client:
                    res = await client.post(
                        f"{self.redis_url}/del/{encoded_key}", headers=self.headers
                    )
                    return res.status_code == 200
            except httpx.RequestError as e:
                logger.error("Redis DELETE error:", exc_info=e)
                return False

        return await breaker.call(handler)

    async def get_json(self, key: str) -> Optional[Any]:
        data = await self.get(key)
        if not data:
            return None
        try:
            return json.loads(data)
        except json.JSONDecodeError:
            logger.error("Invalid JSON format in key: %s", key)
            return None

    async def set_json(self, key: str, value: Any, ttl: int = 3600) -> bool:
        logger.debug("Setting JSON cache for key: %s", key)
        return await self.set(key, json.dumps(value), ttl)


cache = Cache()


def get_view_state_store() -> KeyValueStore:
    return cache
