from typing import Dict, Iterable, List, Optional
from datetime import date, datetime
import logging
from config.database import Database, store_errors
from schemas.appointment import Appointment, AppointmentStatus, BookingAppointment
from schemas.barber import BarberSummary
from schemas.profile import ProfileSummary
from schemas.service import ServiceSummary

logger = logging.getLogger(__name__)

MISSING_BARBER_NAME = "Unknown barber"
MISSING_SERVICE_NAME = "Unknown service"


class AppointmentStore:
    """Reads and writes appointment documents. Dates are stored as YYYY-MM-DD strings."""

    def __init__(self, db: Database):
        self.db = db

    async def booked_times(self, barber_id: str, appointment_date: date, exclude_id: Optional[str] = None) -> List[str]:
        query = {
            "barber_id": barber_id,
            "appointment_date": appointment_date.isoformat(),
            "status": {"$ne": AppointmentStatus.CANCELLED.value}
        }
        if exclude_id:
            query["appointment_id"] = {"$ne": exclude_id}

        with store_errors("load booked slots"):
            rows = await self.db.appointments.find(query, {"appointment_time": 1}).to_list(length=None)
        return [row["appointment_time"] for row in rows]

    async def get(self, appointment_id: str) -> Optional[Appointment]:
        with store_errors("load appointment"):
            appointment = await self.db.appointments.find_one({"appointment_id": appointment_id})
        return Appointment(**appointment) if appointment else None

    async def insert(self, appointment: Appointment) -> Appointment:
        with store_errors("create appointment"):
            await self.db.appointments.insert_one(appointment.to_document())
        return appointment

    async def update(
        self,
        appointment_id: str,
        patch: dict,
        expected_statuses: Optional[Iterable[AppointmentStatus]] = None
    ) -> Optional[Appointment]:
        """
        Apply patch to one appointment. With expected_statuses the write only
        happens while the stored status is still one of them; None is returned
        when nothing matched.
        """
        patch = dict(patch)
        if isinstance(patch.get("appointment_date"), date):
            patch["appointment_date"] = patch["appointment_date"].isoformat()
        if isinstance(patch.get("status"), AppointmentStatus):
            patch["status"] = patch["status"].value
        patch["updated_at"] = datetime.utcnow()

        query = {"appointment_id": appointment_id}
        if expected_statuses is not None:
            query["status"] = {"$in": [status.value for status in expected_statuses]}

        with store_errors("update appointment"):
            result = await self.db.appointments.update_one(query, {"$set": patch})
        if result.matched_count:
            return await self.get(appointment_id)
        return None

    async def list_for_day(self, appointment_date: date) -> List[BookingAppointment]:
        """Non-cancelled appointments of one day in time order, for the staff dashboard."""
        with store_errors("load the day's appointments"):
            rows = await self.db.appointments.find({
                "appointment_date": appointment_date.isoformat(),
                "status": {"$ne": AppointmentStatus.CANCELLED.value}
            }).sort("appointment_time", 1).to_list(length=None)
        return await self._join(rows)

    async def list_for_customer(self, user_id: str) -> List[BookingAppointment]:
        """All of a customer's appointments, newest first."""
        with store_errors("load customer appointments"):
            rows = await self.db.appointments.find({"user_id": user_id}).sort(
                [("appointment_date", -1), ("appointment_time", -1)]
            ).to_list(length=None)
        return await self._join(rows)

    async def _join(self, rows: List[dict]) -> List[BookingAppointment]:
        if not rows:
            return []

        barbers = await self._index("barbers", "barber_id", {row["barber_id"] for row in rows})
        services = await self._index("services", "service_id", {row["service_id"] for row in rows})
        profiles = await self._index("profiles", "user_id", {row["user_id"] for row in rows})

        joined = []
        for row in rows:
            barber = barbers.get(row["barber_id"])
            service = services.get(row["service_id"])
            # The booking still holds its slot, so it stays listed
            if not barber or not service:
                logger.warning(f"Appointment {row.get('appointment_id')} references a missing barber or service")
            profile = profiles.get(row["user_id"], {})
            joined.append(BookingAppointment(
                **row,
                barber=BarberSummary(**barber) if barber else BarberSummary(
                    barber_id=row["barber_id"], name=MISSING_BARBER_NAME
                ),
                service=ServiceSummary(**service) if service else ServiceSummary(
                    service_id=row["service_id"], name=MISSING_SERVICE_NAME, price=0
                ),
                profile=ProfileSummary(
                    full_name=profile.get("full_name"),
                    phone=profile.get("phone")
                )
            ))
        return joined

    async def _index(self, collection: str, key: str, ids: Iterable[str]) -> Dict[str, dict]:
        with store_errors(f"load {collection}"):
            docs = await getattr(self.db, collection).find({key: {"$in": list(ids)}}).to_list(length=None)
        return {doc[key]: doc for doc in docs}
