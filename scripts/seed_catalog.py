from motor.motor_asyncio import AsyncIOMotorClient
import asyncio
import logging
from datetime import datetime
from config.settings import configure_logging, get_settings

logger = logging.getLogger(__name__)

SERVICES = [
    {"service_id": "SVCUT0001", "name": "Classic Cut", "description": "Scissor or clipper cut with wash and style", "price": 15.0},
    {"service_id": "SVBEA0001", "name": "Beard Trim", "description": "Shape-up and hot towel finish", "price": 10.0},
    {"service_id": "SVFAD0001", "name": "Skin Fade", "description": "Fade down to the skin, styled on top", "price": 18.0},
    {"service_id": "SVKID0001", "name": "Kids Cut", "description": "For customers under 12", "price": 12.0},
]

BARBERS = [
    {"barber_id": "BRMAR0001", "name": "Marko", "bio": "Fades and classic cuts", "specialties": ["Fade", "Classic"]},
    {"barber_id": "BRIVA0001", "name": "Ivan", "bio": "Beards and hot towel shaves", "specialties": ["Beard", "Shave"]},
]


async def seed_catalog():
    settings = get_settings()
    client = AsyncIOMotorClient(settings.mongodb_url)
    db = client[settings.database_name]

    try:
        for service in SERVICES:
            result = await db.services.update_one(
                {"service_id": service["service_id"]},
                {"$setOnInsert": {**service, "duration_minutes": 30, "is_active": True, "created_at": datetime.utcnow()}},
                upsert=True
            )
            if result.upserted_id:
                logger.info(f"Created service: {service['name']}")
            else:
                logger.info(f"Service already exists: {service['name']}")

        for barber in BARBERS:
            result = await db.barbers.update_one(
                {"barber_id": barber["barber_id"]},
                {"$setOnInsert": {**barber, "avatar_url": None, "is_active": True, "created_at": datetime.utcnow()}},
                upsert=True
            )
            if result.upserted_id:
                logger.info(f"Created barber: {barber['name']}")
            else:
                logger.info(f"Barber already exists: {barber['name']}")

        logger.info(f"Active services: {await db.services.count_documents({'is_active': True})}")
        logger.info(f"Active barbers: {await db.barbers.count_documents({'is_active': True})}")
    finally:
        client.close()


if __name__ == "__main__":
    configure_logging()
    asyncio.run(seed_catalog())
