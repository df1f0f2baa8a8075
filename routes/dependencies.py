from fastapi import Depends, Header, HTTPException
from typing import Optional
from config.database import Database, get_db
from config.settings import get_settings
from crud.appointment_crud import AppointmentStore
from crud.barber_crud import BarberStore
from crud.profile_crud import ProfileStore
from crud.service_crud import ServiceStore
from schemas.profile import CurrentUser
from services.availability_service import AvailabilityResolver, SlotLocks
from services.change_feed import AppointmentChangeFeed

# Shared by every request served by this process
slot_locks = SlotLocks()


async def get_service_store(db: Database = Depends(get_db)) -> ServiceStore:
    return ServiceStore(db)


async def get_barber_store(db: Database = Depends(get_db)) -> BarberStore:
    return BarberStore(db)


async def get_profile_store(db: Database = Depends(get_db)) -> ProfileStore:
    return ProfileStore(db)


async def get_change_feed(db: Database = Depends(get_db)) -> AppointmentChangeFeed:
    return AppointmentChangeFeed(db)


async def get_resolver(
    db: Database = Depends(get_db),
    services: ServiceStore = Depends(get_service_store),
    barbers: BarberStore = Depends(get_barber_store)
) -> AvailabilityResolver:
    return AvailabilityResolver(
        AppointmentStore(db),
        services,
        barbers,
        locks=slot_locks,
        max_read_retries=get_settings().store_read_retries
    )


async def get_current_user(
    x_user_id: Optional[str] = Header(None),
    profiles: ProfileStore = Depends(get_profile_store)
) -> CurrentUser:
    """The signed-in user, as identified by the session layer in front of this API."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    user = await profiles.current_user(x_user_id)
    if not user:
        raise HTTPException(status_code=401, detail="Unknown user")
    return user


async def require_staff(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_staff:
        raise HTTPException(status_code=403, detail="Staff access required")
    return user
