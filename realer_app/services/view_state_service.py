from typing import Any

from core.breaker import CircuitBreaker
from core.cache import KeyValueStore
from core.settings import settings
from fastapi import HTTPException
from schemas.schema import VIEW_STATE_NAME, ViewStateOut


class ViewStateService:
    """Per-user UI selections (dashboard tab and the like) kept in a key-value store."""

    def __init__(self, store: KeyValueStore, ttl: int | None = None):
        self.store = store
        self.ttl = ttl or settings.VIEW_STATE_TTL
        self.breaker: CircuitBreaker = CircuitBreaker()

    @staticmethod
    def key(user_id, name: str) -> str:
        if not VIEW_STATE_NAME.match(name):
            raise HTTPException(400, "Invalid view-state name")
        return f"view_state:{user_id}:{name}"

    async def get(self, current_user, name: str) -> ViewStateOut:
        key = self.key(current_user.id, name)

        async def handler():
            return ViewStateOut(name=name, value=await self.store.get_json(key))

        return await self.breaker.call(handler)

    async def put(self, current_user, name: str, value: Any) -> ViewStateOut:
        key = self.key(current_user.id, name)

        async def handler():
            if not await self.store.set_json(key, value, ttl=self.ttl):
                raise HTTPException(503, "View state could not be saved")
            return ViewStateOut(name=name, value=value)

        return await self.breaker.call(handler)

    async def delete(self, current_user, name: str):
        key = self.key(current_user.id, name)

        async def handler():
            await self.store.delete(key)
            return {"message": "View state cleared"}

        return await self.breaker.call(handler)
