from datetime import date, datetime
from typing import Awaitable, Callable, List, Optional, Tuple, TypeVar
from weakref import WeakValueDictionary
import asyncio
import logging
from crud.appointment_crud import AppointmentStore
from crud.barber_crud import BarberStore
from crud.service_crud import ServiceStore
from schemas.appointment import (
    ALLOWED_TRANSITIONS,
    FINAL_STATUSES,
    OPEN_STATUSES,
    Appointment,
    AppointmentStatus,
    AvailabilityResponse,
    BookingAppointment,
    CustomerAppointments,
    generate_appointment_id,
)
from scripts.time_parse import normalize_time
from services.business_hours import hours_for
from services.errors import ConflictError, NotFoundError, TransientStoreError, ValidationError
from services.slot_generator import generate_slots

logger = logging.getLogger(__name__)

T = TypeVar("T")

WALK_IN_NOTE = "Walk-in appointment"


class SlotLocks:
    """
    One asyncio.Lock per (barber, date) so that the check-then-write sequences
    of a single process run one at a time. Other processes are kept out by the
    unique slot index in the database.
    """

    def __init__(self):
        self._locks: "WeakValueDictionary[Tuple[str, str], asyncio.Lock]" = WeakValueDictionary()

    def for_slot(self, barber_id: str, day: date) -> asyncio.Lock:
        key = (barber_id, day.isoformat())
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock


class AvailabilityResolver:
    """Works out which slots are free and arbitrates bookings, reschedules and cancellations."""

    def __init__(
        self,
        appointments: AppointmentStore,
        services: ServiceStore,
        barbers: BarberStore,
        clock: Callable[[], datetime] = datetime.now,
        locks: Optional[SlotLocks] = None,
        max_read_retries: int = 2,
        retry_delay: float = 0.2
    ):
        self.appointments = appointments
        self.services = services
        self.barbers = barbers
        self.clock = clock
        self.locks = locks or SlotLocks()
        self.max_read_retries = max_read_retries
        self.retry_delay = retry_delay

    async def _read(self, fetch: Callable[[], Awaitable[T]]) -> T:
        attempt = 0
        while True:
            try:
                return await fetch()
            except TransientStoreError:
                attempt += 1
                if attempt > self.max_read_retries:
                    raise
                logger.warning(f"Store read failed, retrying ({attempt}/{self.max_read_retries})")
                await asyncio.sleep(self.retry_delay)

    async def booked_slots(self, barber_id: str, day: date, exclude_id: Optional[str] = None) -> List[str]:
        times = await self._read(lambda: self.appointments.booked_times(barber_id, day, exclude_id))
        return sorted({normalize_time(t) for t in times})

    async def available_slots(self, barber_id: str, day: date) -> List[str]:
        slots = generate_slots(hours_for(day))
        if not slots:
            return []
        booked = set(await self.booked_slots(barber_id, day))
        return [slot for slot in slots if slot not in booked]

    async def availability(self, barber_id: str, day: date) -> AvailabilityResponse:
        policy = hours_for(day)
        slots = generate_slots(policy)
        booked = await self.booked_slots(barber_id, day) if slots else []
        return AvailabilityResponse(
            barber_id=barber_id,
            appointment_date=day,
            closed=not policy.is_open,
            slots=slots,
            booked=[slot for slot in booked if slot in slots],
            available=[slot for slot in slots if slot not in booked]
        )

    def _check_slot(self, day: date, time_value: str) -> str:
        try:
            slot = normalize_time(time_value)
        except ValueError:
            raise ValidationError(f"Invalid time format: {time_value}. Use HH:MM")

        if day < self.clock().date():
            raise ValidationError(f"Cannot book a date in the past: {day.isoformat()}")

        policy = hours_for(day)
        if not policy.is_open:
            raise ValidationError(f"The salon is closed on {day.strftime('%A')}s")
        if slot not in generate_slots(policy):
            raise ValidationError(f"{slot} is not a bookable time on {day.isoformat()}")
        return slot

    async def _check_barber(self, barber_id: str) -> None:
        barber = await self._read(lambda: self.barbers.get(barber_id))
        if not barber or not barber.is_active:
            raise ValidationError(f"Barber with ID {barber_id} not found")

    async def _check_service(self, service_id: str) -> None:
        service = await self._read(lambda: self.services.get(service_id))
        if not service or not service.is_active:
            raise ValidationError(f"Service with ID {service_id} not found")

    async def _ensure_free(self, barber_id: str, day: date, slot: str, exclude_id: Optional[str] = None) -> None:
        booked = await self.booked_slots(barber_id, day, exclude_id)
        if slot in booked:
            logger.warning(f"Slot {day.isoformat()} {slot} for barber {barber_id} is already taken")
            raise ConflictError(f"{slot} on {day.isoformat()} has just been taken. Please pick another time.")

    async def submit_booking(
        self,
        customer_id: str,
        service_id: Optional[str],
        barber_id: Optional[str],
        day: Optional[date],
        time_value: Optional[str],
        notes: Optional[str] = None
    ) -> Appointment:
        """Book a confirmed appointment after re-checking that the slot is still free."""
        missing = [
            name for name, value in (
                ("service", service_id),
                ("barber", barber_id),
                ("date", day),
                ("time", time_value),
            ) if not value
        ]
        if missing:
            raise ValidationError(f"Please choose a {', '.join(missing)} before confirming")

        slot = self._check_slot(day, time_value)
        await self._check_service(service_id)
        await self._check_barber(barber_id)

        async with self.locks.for_slot(barber_id, day):
            await self._ensure_free(barber_id, day, slot)

            now = datetime.utcnow()
            appointment = Appointment(
                appointment_id=generate_appointment_id(barber_id, customer_id),
                user_id=customer_id,
                barber_id=barber_id,
                service_id=service_id,
                appointment_date=day,
                appointment_time=slot,
                notes=notes,
                status=AppointmentStatus.CONFIRMED,
                created_at=now,
                updated_at=now
            )
            await self.appointments.insert(appointment)

        logger.info(f"Booked {appointment.appointment_id}: barber {barber_id} on {day.isoformat()} at {slot}")
        return appointment

    async def add_walk_in(
        self,
        staff_id: str,
        service_id: Optional[str],
        barber_id: Optional[str],
        day: Optional[date],
        time_value: Optional[str],
        customer_name: Optional[str] = None
    ) -> Appointment:
        """Staff entry for a customer without an account; the staff member owns the record."""
        notes = f"Walk-in: {customer_name.strip()}" if customer_name and customer_name.strip() else WALK_IN_NOTE
        return await self.submit_booking(staff_id, service_id, barber_id, day, time_value, notes)

    async def _get_open(self, appointment_id: str) -> Appointment:
        appointment = await self._read(lambda: self.appointments.get(appointment_id))
        if not appointment:
            raise NotFoundError(f"Appointment {appointment_id} not found")
        if appointment.status in FINAL_STATUSES:
            raise NotFoundError(f"Appointment {appointment_id} is already {appointment.status.value}")
        return appointment

    async def reschedule(
        self,
        appointment_id: str,
        new_barber_id: Optional[str],
        new_date: Optional[date],
        new_time: Optional[str]
    ) -> Appointment:
        """Move an appointment to a new barber, date and time. It never conflicts with itself."""
        appointment = await self._get_open(appointment_id)

        if not new_date or not new_time:
            raise ValidationError("Please choose a new date and time")
        barber_id = new_barber_id or appointment.barber_id

        slot = self._check_slot(new_date, new_time)
        if barber_id != appointment.barber_id:
            await self._check_barber(barber_id)

        async with self.locks.for_slot(barber_id, new_date):
            await self._ensure_free(barber_id, new_date, slot, exclude_id=appointment_id)
            updated = await self.appointments.update(appointment_id, {
                "barber_id": barber_id,
                "appointment_date": new_date,
                "appointment_time": slot
            }, expected_statuses=OPEN_STATUSES)

        # Cancelled or completed by someone else since it was read
        if not updated:
            raise NotFoundError(f"Appointment {appointment_id} is no longer open")
        logger.info(f"Rescheduled {appointment_id} to barber {barber_id} on {new_date.isoformat()} at {slot}")
        return updated

    async def _transition(self, appointment_id: str, target: AppointmentStatus) -> Appointment:
        """
        Move an appointment along the status machine. The write only lands if
        the status is still the one that was checked; when another request got
        there first the record is read again and judged from its new status.
        """
        # Every lost race moves the record forward, so this is bounded by the number of statuses
        for _ in range(len(AppointmentStatus)):
            appointment = await self._read(lambda: self.appointments.get(appointment_id))
            if not appointment:
                raise NotFoundError(f"Appointment {appointment_id} not found")
            if appointment.status == target:
                return appointment
            if appointment.status in FINAL_STATUSES:
                raise NotFoundError(f"Appointment {appointment_id} is already {appointment.status.value}")
            if target not in ALLOWED_TRANSITIONS[appointment.status]:
                raise ValidationError(
                    f"Cannot change appointment {appointment_id} from {appointment.status.value} to {target.value}"
                )

            updated = await self.appointments.update(
                appointment_id, {"status": target}, expected_statuses=[appointment.status]
            )
            if updated:
                logger.info(f"Appointment {appointment_id} is now {target.value}")
                return updated
            logger.warning(f"Appointment {appointment_id} changed while moving it to {target.value}, re-checking")

        raise ConflictError(f"Appointment {appointment_id} keeps changing. Please reload it and try again.")

    async def cancel(self, appointment_id: str) -> Appointment:
        return await self._transition(appointment_id, AppointmentStatus.CANCELLED)

    async def confirm(self, appointment_id: str) -> Appointment:
        return await self._transition(appointment_id, AppointmentStatus.CONFIRMED)

    async def complete(self, appointment_id: str) -> Appointment:
        return await self._transition(appointment_id, AppointmentStatus.COMPLETED)

    async def get(self, appointment_id: str) -> Appointment:
        appointment = await self._read(lambda: self.appointments.get(appointment_id))
        if not appointment:
            raise NotFoundError(f"Appointment {appointment_id} not found")
        return appointment

    async def day_schedule(self, day: date) -> List[BookingAppointment]:
        return await self._read(lambda: self.appointments.list_for_day(day))

    async def customer_appointments(self, user_id: str) -> CustomerAppointments:
        """Split a customer's appointments the way the reservations page shows them."""
        rows = await self._read(lambda: self.appointments.list_for_customer(user_id))
        now = self.clock()
        today = now.date()
        current_time = now.strftime("%H:%M")

        result = CustomerAppointments()
        for appointment in rows:
            if appointment.status == AppointmentStatus.CANCELLED:
                result.cancelled.append(appointment)
            elif appointment.appointment_date > today or (
                appointment.appointment_date == today and appointment.appointment_time >= current_time
            ):
                result.upcoming.append(appointment)
            else:
                result.past.append(appointment)
        return result
