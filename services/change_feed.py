from pydantic import BaseModel
from typing import AsyncIterator, Optional
import json
import logging
from pymongo.errors import OperationFailure
from config.database import Database, store_errors
from services.errors import TransientStoreError

logger = logging.getLogger(__name__)


class AppointmentChange(BaseModel):
    """
    A hint that appointments changed. Consumers must re-query availability or
    the day's list before acting on it; the event itself is advisory.
    """
    operation: str
    appointment_id: Optional[str] = None
    barber_id: Optional[str] = None
    appointment_date: Optional[str] = None


def change_from_event(event: dict) -> AppointmentChange:
    document = event.get("fullDocument") or {}
    return AppointmentChange(
        operation=event.get("operationType", "unknown"),
        appointment_id=document.get("appointment_id"),
        barber_id=document.get("barber_id"),
        appointment_date=document.get("appointment_date")
    )


def to_server_sent_event(change: AppointmentChange) -> str:
    return f"event: appointments\ndata: {json.dumps(change.model_dump())}\n\n"


class AppointmentChangeFeed:
    """Change stream over the appointments collection. Needs a replica set or Atlas cluster."""

    def __init__(self, db: Database):
        self.db = db

    async def open(self) -> AsyncIterator[AppointmentChange]:
        """
        Start watching and return the change iterator. The first server round
        trip happens here, so an unreachable or standalone server is reported
        before any response has been sent.
        """
        try:
            with store_errors("open the appointment change stream"):
                stream = self.db.appointments.watch(full_document="updateLookup")
                first = await stream.try_next()
        except OperationFailure as e:
            logger.error(f"Cannot watch appointments: {str(e)}")
            raise TransientStoreError("Live appointment updates are not available on this database.") from e

        logger.info("Appointment change stream opened")
        return self._follow(stream, first)

    async def _follow(self, stream, first: Optional[dict]) -> AsyncIterator[AppointmentChange]:
        try:
            if first is not None:
                yield change_from_event(first)
            with store_errors("watch appointment changes"):
                async for event in stream:
                    yield change_from_event(event)
        finally:
            await stream.close()
            logger.info("Appointment change stream closed")

    async def server_sent_events(self) -> AsyncIterator[str]:
        changes = await self.open()
        return (to_server_sent_event(change) async for change in changes)
