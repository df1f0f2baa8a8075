from typing import List, Optional
from config.database import Database, store_errors
from schemas.service import Service, ServiceCreate, generate_service_id


class ServiceStore:
    def __init__(self, db: Database):
        self.db = db

    async def create(self, service: ServiceCreate) -> Service:
        """Create a new service"""
        new_service = Service(service_id=generate_service_id(service.name), **service.model_dump())
        with store_errors("create service"):
            await self.db.services.insert_one(new_service.model_dump())
        return new_service

    async def get(self, service_id: str) -> Optional[Service]:
        with store_errors("load service"):
            service = await self.db.services.find_one({"service_id": service_id})
        return Service(**service) if service else None

    async def list_active(self) -> List[Service]:
        """Active services, cheapest first"""
        with store_errors("load services"):
            services = await self.db.services.find({"is_active": True}).sort("price", 1).to_list(length=None)
        return [Service(**service) for service in services]
