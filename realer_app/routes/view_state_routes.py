from fastapi import APIRouter, Depends
from fastapi_utils.cbv import cbv

from core.cache import KeyValueStore, get_view_state_store
from core.get_current_user import get_current_user
from core.safe_handler import safe_handler
from models.models import Profile
from schemas.schema import ViewStateIn, ViewStateOut
from services.view_state_service import ViewStateService

router = APIRouter(tags=["View State"])


@cbv(router)
class ViewStateRoutes:
    @router.get("/view-state/{name}", response_model=ViewStateOut)
    @safe_handler
    async def get(
        self,
        name: str,
        current_user: Profile = Depends(get_current_user),
        store: KeyValueStore = Depends(get_view_state_store),
    ):
        return await ViewStateService(store).get(current_user, name)

    @router.put("/view-state/{name}", response_model=ViewStateOut)
    @safe_handler
    async def put(
        self,
        name: str,
        data: ViewStateIn,
        current_user: Profile = Depends(get_current_user),
        store: KeyValueStore = Depends(get_view_state_store),
    ):
        return await ViewStateService(store).put(current_user, name, data.value)

    @router.delete("/view-state/{name}")
    @safe_handler
    async def delete(
        self,
        name: str,
        current_user: Profile = Depends(get_current_user),
        store: KeyValueStore = Depends(get_view_state_store),
    ):
        return await ViewStateService(store).delete(current_user, name)
