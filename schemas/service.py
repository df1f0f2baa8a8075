from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
import re
import random
import string

SERVICE_DURATION_MINUTES = 30


class ServiceBase(BaseModel):
    name: str
    description: Optional[str] = None
    price: float = Field(gt=0)
    # Every service in this venue takes one 30 minute slot
    duration_minutes: int = Field(SERVICE_DURATION_MINUTES, ge=SERVICE_DURATION_MINUTES, le=SERVICE_DURATION_MINUTES)
    is_active: bool = True


class ServiceCreate(ServiceBase):
    pass


class Service(ServiceBase):
    model_config = ConfigDict(from_attributes=True)

    service_id: str
    created_at: datetime = Field(default_factory=datetime.utcnow)


class ServiceSummary(BaseModel):
    """Service fields carried on a joined appointment."""
    service_id: str
    name: str
    price: float
    duration_minutes: int = SERVICE_DURATION_MINUTES


def generate_service_id(name: str) -> str:
    # Remove special characters and spaces from name
    clean_name = re.sub(r'[^a-zA-Z0-9]', '', name)

    # Take first 3 characters of the name (or pad with 'X' if shorter)
    name_part = clean_name[:3].upper().ljust(3, 'X')

    # Generate 4 random alphanumeric characters
    random_part = ''.join(random.choices(string.ascii_uppercase + string.digits, k=4))

    return f"SV{name_part}{random_part}"
