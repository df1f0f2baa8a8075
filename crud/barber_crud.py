from typing import List, Optional
from config.database import Database, store_errors
from schemas.barber import Barber, BarberCreate, generate_barber_id


class BarberStore:
    def __init__(self, db: Database):
        self.db = db

    async def create(self, barber: BarberCreate) -> Barber:
        new_barber = Barber(barber_id=generate_barber_id(barber.name), **barber.model_dump())
        with store_errors("create barber"):
            await self.db.barbers.insert_one(new_barber.model_dump())
        return new_barber

    async def get(self, barber_id: str) -> Optional[Barber]:
        with store_errors("load barber"):
            barber = await self.db.barbers.find_one({"barber_id": barber_id})
        return Barber(**barber) if barber else None

    async def list_active(self) -> List[Barber]:
        with store_errors("load barbers"):
            barbers = await self.db.barbers.find({"is_active": True}).sort("name", 1).to_list(length=None)
        return [Barber(**barber) for barber in barbers]
