from pydantic import BaseModel, Field
from datetime import date
from typing import Optional
from schemas.appointment import BookingRequest
from schemas.barber import Barber
from schemas.service import Service

FIRST_STEP = 1
LAST_STEP = 4

STEP_TITLES = {
    1: "Choose a service",
    2: "Choose a barber",
    3: "Date and time",
    4: "Confirm",
}


class BookingDraft(BaseModel):
    """
    Selections made while walking through the booking steps. Lives with the
    caller only; it is turned into a BookingRequest on confirmation and then
    thrown away.
    """
    step: int = Field(FIRST_STEP, ge=FIRST_STEP, le=LAST_STEP)
    service: Optional[Service] = None
    barber: Optional[Barber] = None
    appointment_date: Optional[date] = None
    appointment_time: Optional[str] = None

    @property
    def title(self) -> str:
        return STEP_TITLES[self.step]

    def select_service(self, service: Service) -> "BookingDraft":
        return self.model_copy(update={"service": service})

    def select_barber(self, barber: Barber) -> "BookingDraft":
        # Booked slots differ per barber, so the picked time no longer holds
        return self.model_copy(update={"barber": barber, "appointment_time": None})

    def select_date(self, day: date) -> "BookingDraft":
        return self.model_copy(update={"appointment_date": day, "appointment_time": None})

    def select_time(self, slot: str) -> "BookingDraft":
        return self.model_copy(update={"appointment_time": slot})

    def can_proceed(self) -> bool:
        if self.step == 1:
            return self.service is not None
        if self.step == 2:
            return self.barber is not None
        if self.step == 3:
            return self.appointment_date is not None and self.appointment_time is not None
        return self.step == LAST_STEP

    def advance(self) -> "BookingDraft":
        if self.step >= LAST_STEP or not self.can_proceed():
            return self
        return self.model_copy(update={"step": self.step + 1})

    def back(self) -> "BookingDraft":
        if self.step <= FIRST_STEP:
            return self
        return self.model_copy(update={"step": self.step - 1})

    def to_request(self, notes: Optional[str] = None) -> BookingRequest:
        return BookingRequest(
            service_id=self.service.service_id if self.service else None,
            barber_id=self.barber.barber_id if self.barber else None,
            appointment_date=self.appointment_date,
            appointment_time=self.appointment_time,
            notes=notes
        )
