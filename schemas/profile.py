from pydantic import BaseModel, ConfigDict, EmailStr
from typing import List, Optional
from enum import Enum


class Role(str, Enum):
    CUSTOMER = "customer"
    BARBER = "barber"
    ADMIN = "admin"


STAFF_ROLES = {Role.BARBER, Role.ADMIN}


class Profile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    email: Optional[EmailStr] = None
    full_name: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None


class ProfileSummary(BaseModel):
    """Customer fields carried on a joined appointment."""
    full_name: Optional[str] = None
    phone: Optional[str] = None


class CurrentUser(BaseModel):
    user_id: str
    email: Optional[EmailStr] = None
    roles: List[Role] = []

    @property
    def is_staff(self) -> bool:
        return any(role in STAFF_ROLES for role in self.roles)
