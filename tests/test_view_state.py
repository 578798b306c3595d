import uuid

import pytest
from fastapi import HTTPException

from services.view_state_service import ViewStateService


class _User:
    def __init__(self):
        self.id = uuid.uuid4()


class TestViewStateService:
    async def test_put_then_get_round_trip(self, store):
        user = _User()
        service = ViewStateService(store, ttl=60)

        saved = await service.put(user, "dashboard_tab", "waitlist")
        assert saved.value == "waitlist"
        assert store.ttls[f"view_state:{user.id}:dashboard_tab"] == 60

        loaded = await service.get(user, "dashboard_tab")
        assert loaded.value == "waitlist"

    async def test_state_is_per_user(self, store):
        service = ViewStateService(store)
        alice, bob = _User(), _User()
        await service.put(alice, "dashboard_tab", "bounties")
        assert (await service.get(bob, "dashboard_tab")).value is None

    async def test_delete_clears_value(self, store):
        user = _User()
        service = ViewStateService(store)
        await service.put(user, "dashboard_tab", "offers")
        await service.delete(user, "dashboard_tab")
        assert (await service.get(user, "dashboard_tab")).value is None

    @pytest.mark.parametrize("name", ["Dashboard", "a-b", "", "x" * 41, "../etc"])
    async def test_invalid_names_rejected(self, store, name):
        with pytest.raises(HTTPException) as exc:
            await ViewStateService(store).get(_User(), name)
        assert exc.value.status_code == 400

    async def test_failed_write_is_reported(self, store):
        store.fail_writes = True
        with pytest.raises(HTTPException) as exc:
            await ViewStateService(store).put(_User(), "dashboard_tab", "x")
        assert exc.value.status_code == 503
