from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
import re
import random
import string


class BarberBase(BaseModel):
    name: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    specialties: List[str] = []
    is_active: bool = True


class BarberCreate(BarberBase):
    pass


class Barber(BarberBase):
    model_config = ConfigDict(from_attributes=True)

    barber_id: str
    created_at: datetime = Field(default_factory=datetime.utcnow)


class BarberSummary(BaseModel):
    """Barber fields carried on a joined appointment."""
    barber_id: str
    name: str
    avatar_url: Optional[str] = None


def generate_barber_id(name: str) -> str:
    clean_name = re.sub(r'[^a-zA-Z0-9]', '', name)
    name_part = clean_name[:3].upper().ljust(3, 'X')
    random_part = ''.join(random.choices(string.ascii_uppercase + string.digits, k=4))
    return f"BR{name_part}{random_part}"
