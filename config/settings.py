from dotenv import load_dotenv
import logging
import os
from typing import List, Optional

# Load environment variables
load_dotenv()

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    def __init__(self):
        self.mongodb_url: Optional[str] = os.getenv('MONGODB_URL')
        self.database_name: str = os.getenv('DATABASE_NAME', 'salon_booking')
        self.store_timeout_ms: int = int(os.getenv('STORE_TIMEOUT_MS', '5000'))
        self.store_read_retries: int = int(os.getenv('STORE_READ_RETRIES', '2'))
        self.enforce_unique_slots: bool = _get_bool('ENFORCE_UNIQUE_SLOTS', True)
        self.log_level: str = os.getenv('LOG_LEVEL', 'INFO').upper()
        self.log_file: Optional[str] = os.getenv('LOG_FILE')
        self.port: int = int(os.getenv('PORT', '10000'))
        self.cors_origins: List[str] = [
            origin.strip() for origin in os.getenv('CORS_ORIGINS', '*').split(',') if origin.strip()
        ]


def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure root logging once, the same way for the app and the scripts."""
    settings = settings or get_settings()
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file))

    logging.basicConfig(
        level=settings.log_level,
        format=LOG_FORMAT,
        handlers=handlers
    )
