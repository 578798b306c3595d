from sqlalchemy.exc import SQLAlchemyError

from models.models import LocationAlert


class LocationAlertRepo:
    def __init__(self, db):
        self.db = db

    async def create(self, data: dict) -> LocationAlert:
        alert = LocationAlert(**data)
        self.db.add(alert)
        try:
            await self.db.commit()
            await self.db.refresh(alert)
            return alert
        except SQLAlchemyError:
            await self.db.rollback()
            raise
