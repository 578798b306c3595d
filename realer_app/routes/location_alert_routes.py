from fastapi import APIRouter, Depends
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_db import get_db_async
from core.safe_handler import safe_handler
from schemas.schema import LocationAlertCreate, LocationAlertOut
from services.location_alert_service import LocationAlertService

router = APIRouter(tags=["Location Alerts"])


@cbv(router)
class LocationAlertRoutes:
    @router.post("/location-alerts", response_model=LocationAlertOut, status_code=201)
    @safe_handler
    async def subscribe(
        self,
        data: LocationAlertCreate,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await LocationAlertService(db).create_alert(data)
