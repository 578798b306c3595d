from core.breaker import CircuitBreaker
from core.mapper import ORMMapper
from repos.location_alert_repo import LocationAlertRepo
from schemas.schema import LocationAlertCreate, LocationAlertOut


class LocationAlertService:
    def __init__(self, db):
        self.repo: LocationAlertRepo = LocationAlertRepo(db)
        self.breaker: CircuitBreaker = CircuitBreaker()
        self.mapper: ORMMapper = ORMMapper()

    async def create_alert(self, data: LocationAlertCreate) -> LocationAlertOut:
        async def handler():
            alert = await self.repo.create(
                {**data.model_dump(), "location": data.location.strip(), "active": True}
            )
            return self.mapper.one(item=alert, schema=LocationAlertOut)

        return await self.breaker.call(handler)
