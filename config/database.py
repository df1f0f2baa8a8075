from motor.motor_asyncio import AsyncIOMotorClient
from typing import AsyncGenerator, Iterator, Optional
from contextlib import contextmanager
import logging
import asyncio
from pymongo import ASCENDING
from pymongo.errors import (
    AutoReconnect,
    ConnectionFailure,
    DuplicateKeyError,
    ExecutionTimeout,
    NetworkTimeout,
    ServerSelectionTimeoutError,
    WTimeoutError,
)
from config.settings import Settings, get_settings
from schemas.appointment import ACTIVE_STATUSES
from services.errors import ConflictError, TransientStoreError

logger = logging.getLogger('database')

SLOT_INDEX_NAME = "unique_active_slot"


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Translate driver failures raised inside the block into booking errors."""
    try:
        yield
    except DuplicateKeyError as e:
        logger.warning(f"Duplicate slot rejected by the database while trying to {action}")
        raise ConflictError("That time slot has just been taken. Please pick another one.") from e
    except (AutoReconnect, ConnectionFailure, NetworkTimeout, ExecutionTimeout, WTimeoutError) as e:
        logger.error(f"Database unavailable while trying to {action}: {str(e)}")
        raise TransientStoreError("The booking service is temporarily unavailable. Please try again.") from e


class Database:
    client = None
    db = None
    MAX_RETRIES = 3
    RETRY_DELAY = 1  # seconds
    REQUIRED_COLLECTIONS = ['services', 'barbers', 'appointments', 'profiles', 'user_roles']

    @classmethod
    async def connect_db(cls, settings: Optional[Settings] = None):
        """Create database connection with retries."""
        settings = settings or get_settings()
        retries = 0
        last_error = None

        if not settings.mongodb_url:
            raise ValueError("MONGODB_URL environment variable is not set")

        while retries < cls.MAX_RETRIES:
            try:
                logger.info(f"Attempting to connect to MongoDB (Attempt {retries + 1}/{cls.MAX_RETRIES})")

                cls.client = AsyncIOMotorClient(
                    settings.mongodb_url,
                    serverSelectionTimeoutMS=settings.store_timeout_ms,
                    connectTimeoutMS=settings.store_timeout_ms,
                    socketTimeoutMS=settings.store_timeout_ms,
                    maxPoolSize=50,
                    retryWrites=True,
                    retryReads=True
                )
                cls.db = cls.client[settings.database_name]

                # Test the connection
                await cls.db.command('ping')

                logger.info(f"Successfully connected to MongoDB database: {settings.database_name}")

                collections = await cls.db.list_collection_names()
                for collection in cls.REQUIRED_COLLECTIONS:
                    if collection not in collections:
                        await cls.db.create_collection(collection)
                        logger.info(f"Created collection: {collection}")

                if settings.enforce_unique_slots:
                    await cls.ensure_slot_index()
                else:
                    logger.warning("Unique slot index disabled; concurrent bookings may double-book a slot")

                return

            except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                last_error = e
                retries += 1
                if retries < cls.MAX_RETRIES:
                    logger.warning(f"Failed to connect to MongoDB (Attempt {retries}/{cls.MAX_RETRIES}). Retrying in {cls.RETRY_DELAY} seconds...")
                    await asyncio.sleep(cls.RETRY_DELAY)
                continue
            except Exception as e:
                logger.error(f"Unexpected error connecting to MongoDB: {str(e)}")
                raise

        logger.error(f"Failed to connect to MongoDB after {cls.MAX_RETRIES} attempts")
        raise last_error

    @classmethod
    async def ensure_slot_index(cls):
        """One active appointment per barber, date and time. Cancelled rows are exempt."""
        await cls.db.appointments.create_index(
            [("barber_id", ASCENDING), ("appointment_date", ASCENDING), ("appointment_time", ASCENDING)],
            name=SLOT_INDEX_NAME,
            unique=True,
            partialFilterExpression={"status": {"$in": [status.value for status in ACTIVE_STATUSES]}}
        )
        await cls.db.appointments.create_index("appointment_id", unique=True)
        await cls.db.appointments.create_index([("user_id", ASCENDING), ("appointment_date", ASCENDING)])
        logger.info("Appointment indexes ensured")

    @classmethod
    async def close_db(cls):
        """Close database connection."""
        if cls.client is not None:
            cls.client.close()
            cls.client = None
            cls.db = None
            logger.info("MongoDB connection closed.")

    def __init__(self):
        if self.db is None:
            raise Exception("Database not initialized. Call connect_db() first.")

        self.services = self.db.services
        self.barbers = self.db.barbers
        self.appointments = self.db.appointments
        self.profiles = self.db.profiles
        self.user_roles = self.db.user_roles


async def get_db() -> AsyncGenerator[Database, None]:
    """FastAPI dependency for getting database instance."""
    if Database.db is None:
        await Database.connect_db()

    yield Database()
