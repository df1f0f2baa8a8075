from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import date, datetime
from enum import Enum
from typing import List, Optional
import random
import string
from schemas.barber import BarberSummary
from schemas.profile import ProfileSummary
from schemas.service import ServiceSummary
from scripts.time_parse import normalize_time


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Statuses that occupy a slot
ACTIVE_STATUSES = [AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED, AppointmentStatus.COMPLETED]
FINAL_STATUSES = {AppointmentStatus.CANCELLED, AppointmentStatus.COMPLETED}
OPEN_STATUSES = [AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED]

ALLOWED_TRANSITIONS = {
    AppointmentStatus.PENDING: {AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED},
    AppointmentStatus.CONFIRMED: {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED},
    AppointmentStatus.COMPLETED: set(),
    AppointmentStatus.CANCELLED: set(),
}


class AppointmentBase(BaseModel):
    user_id: str
    barber_id: str
    service_id: str
    appointment_date: date
    appointment_time: str = Field(..., description="Format: HH:MM in 24-hour format")
    notes: Optional[str] = Field(None, description="Any additional notes for the appointment")

    @field_validator("appointment_time")
    @classmethod
    def _normalize_time(cls, value: str) -> str:
        return normalize_time(value)


class Appointment(AppointmentBase):
    model_config = ConfigDict(from_attributes=True)

    appointment_id: str
    status: AppointmentStatus = AppointmentStatus.CONFIRMED
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def to_document(self) -> dict:
        doc = self.model_dump()
        doc["appointment_date"] = self.appointment_date.isoformat()
        doc["status"] = self.status.value
        return doc


class BookingAppointment(Appointment):
    """Appointment joined with the barber, service and customer it refers to."""
    barber: BarberSummary
    service: ServiceSummary
    profile: ProfileSummary = ProfileSummary()


class BookingRequest(BaseModel):
    # Optional so that an incomplete selection reaches the booking checks
    # and gets a specific message instead of a generic 422.
    service_id: Optional[str] = None
    barber_id: Optional[str] = None
    appointment_date: Optional[date] = None
    appointment_time: Optional[str] = None
    notes: Optional[str] = None


class WalkInRequest(BookingRequest):
    customer_name: Optional[str] = None


class RescheduleRequest(BaseModel):
    barber_id: Optional[str] = None
    appointment_date: Optional[date] = None
    appointment_time: Optional[str] = None


class CustomerAppointments(BaseModel):
    upcoming: List[BookingAppointment] = []
    past: List[BookingAppointment] = []
    cancelled: List[BookingAppointment] = []


class AvailabilityResponse(BaseModel):
    barber_id: str
    appointment_date: date
    closed: bool
    slots: List[str]
    booked: List[str]
    available: List[str]


def generate_appointment_id(barber_id: str, user_id: str) -> str:
    barber_part = barber_id[:2].upper()
    user_part = user_id[:2].upper()
    random_part = ''.join(random.choices(string.ascii_uppercase + string.digits, k=8))
    return f"AP{barber_part}{user_part}{random_part}"
