from fastapi import APIRouter, HTTPException, Depends, Query
from fastapi.responses import StreamingResponse
from datetime import date
from typing import List
from schemas.appointment import (
    Appointment,
    AvailabilityResponse,
    BookingAppointment,
    BookingRequest,
    CustomerAppointments,
    RescheduleRequest,
    WalkInRequest,
)
from schemas.profile import CurrentUser
from services.availability_service import AvailabilityResolver
from services.change_feed import AppointmentChangeFeed
from routes.dependencies import get_change_feed, get_current_user, get_resolver, require_staff

router = APIRouter(tags=["appointments"])


async def _load_owned(appointment_id: str, user: CurrentUser, resolver: AvailabilityResolver) -> Appointment:
    appointment = await resolver.get(appointment_id)
    if appointment.user_id != user.user_id and not user.is_staff:
        raise HTTPException(status_code=403, detail="Not authorized to manage this appointment")
    return appointment


@router.get("/availability", response_model=AvailabilityResponse)
async def get_availability(
    barber_id: str = Query(...),
    day: date = Query(..., alias="date"),
    resolver: AvailabilityResolver = Depends(get_resolver)
):
    """All slots for the day with the booked ones marked, so clients can show them crossed out."""
    return await resolver.availability(barber_id, day)


@router.post("/", response_model=Appointment, status_code=201)
async def book_appointment(
    request: BookingRequest,
    user: CurrentUser = Depends(get_current_user),
    resolver: AvailabilityResolver = Depends(get_resolver)
):
    return await resolver.submit_booking(
        customer_id=user.user_id,
        service_id=request.service_id,
        barber_id=request.barber_id,
        day=request.appointment_date,
        time_value=request.appointment_time,
        notes=request.notes
    )


@router.post("/walk-in", response_model=Appointment, status_code=201)
async def add_walk_in(
    request: WalkInRequest,
    staff: CurrentUser = Depends(require_staff),
    resolver: AvailabilityResolver = Depends(get_resolver)
):
    return await resolver.add_walk_in(
        staff_id=staff.user_id,
        service_id=request.service_id,
        barber_id=request.barber_id,
        day=request.appointment_date,
        time_value=request.appointment_time,
        customer_name=request.customer_name
    )


@router.get("/day/{day}", response_model=List[BookingAppointment], dependencies=[Depends(require_staff)])
async def get_day_schedule(day: date, resolver: AvailabilityResolver = Depends(get_resolver)):
    return await resolver.day_schedule(day)


@router.get("/mine", response_model=CustomerAppointments)
async def get_my_appointments(
    user: CurrentUser = Depends(get_current_user),
    resolver: AvailabilityResolver = Depends(get_resolver)
):
    return await resolver.customer_appointments(user.user_id)


@router.get("/changes", dependencies=[Depends(require_staff)])
async def stream_changes(feed: AppointmentChangeFeed = Depends(get_change_feed)):
    """Server-sent events telling dashboards to re-fetch. Not a source of truth."""
    # Opened before responding so a failure is still a 503
    events = await feed.server_sent_events()
    return StreamingResponse(events, media_type="text/event-stream")


@router.get("/{appointment_id}", response_model=Appointment)
async def get_appointment(
    appointment_id: str,
    user: CurrentUser = Depends(get_current_user),
    resolver: AvailabilityResolver = Depends(get_resolver)
):
    return await _load_owned(appointment_id, user, resolver)


@router.put("/{appointment_id}/reschedule", response_model=Appointment, dependencies=[Depends(require_staff)])
async def reschedule_appointment(
    appointment_id: str,
    request: RescheduleRequest,
    resolver: AvailabilityResolver = Depends(get_resolver)
):
    return await resolver.reschedule(
        appointment_id,
        new_barber_id=request.barber_id,
        new_date=request.appointment_date,
        new_time=request.appointment_time
    )


@router.post("/{appointment_id}/cancel", response_model=Appointment)
async def cancel_appointment(
    appointment_id: str,
    user: CurrentUser = Depends(get_current_user),
    resolver: AvailabilityResolver = Depends(get_resolver)
):
    await _load_owned(appointment_id, user, resolver)
    return await resolver.cancel(appointment_id)


@router.post("/{appointment_id}/confirm", response_model=Appointment, dependencies=[Depends(require_staff)])
async def confirm_appointment(appointment_id: str, resolver: AvailabilityResolver = Depends(get_resolver)):
    return await resolver.confirm(appointment_id)


@router.post("/{appointment_id}/complete", response_model=Appointment, dependencies=[Depends(require_staff)])
async def complete_appointment(appointment_id: str, resolver: AvailabilityResolver = Depends(get_resolver)):
    return await resolver.complete(appointment_id)
