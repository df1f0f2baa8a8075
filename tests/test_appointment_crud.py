"""Tests for crud/appointment_crud.py against an in-memory stand-in for the Motor collections."""

import unittest
from types import SimpleNamespace

from crud.appointment_crud import MISSING_BARBER_NAME, MISSING_SERVICE_NAME, AppointmentStore
from schemas.appointment import AppointmentStatus
from tests.fakes import MONDAY


def matches(document, query):
    for key, condition in query.items():
        value = document.get(key)
        if isinstance(condition, dict):
            if "$in" in condition and value not in condition["$in"]:
                return False
            if "$ne" in condition and value == condition["$ne"]:
                return False
        elif value != condition:
            return False
    return True


class MemoryCursor:

    def __init__(self, documents):
        self.documents = documents

    def sort(self, key, direction=None):
        keys = key if isinstance(key, list) else [(key, direction)]
        for field, order in reversed(keys):
            self.documents.sort(key=lambda doc: doc[field], reverse=order == -1)
        return self

    async def to_list(self, length=None):
        return list(self.documents)


class MemoryCollection:

    def __init__(self, documents=None):
        self.documents = [dict(doc) for doc in documents or []]

    def find(self, query, projection=None):
        return MemoryCursor([dict(doc) for doc in self.documents if matches(doc, query)])

    async def find_one(self, query):
        for doc in self.documents:
            if matches(doc, query):
                return dict(doc)
        return None

    async def update_one(self, query, update):
        for doc in self.documents:
            if matches(doc, query):
                doc.update(update["$set"])
                return SimpleNamespace(matched_count=1)
        return SimpleNamespace(matched_count=0)


def appointment_document(appointment_id, status="confirmed", barber_id="A", service_id="SVCUT0001", time_value="10:00"):
    return {
        "appointment_id": appointment_id,
        "user_id": "customer-1",
        "barber_id": barber_id,
        "service_id": service_id,
        "appointment_date": MONDAY.isoformat(),
        "appointment_time": time_value,
        "status": status,
    }


class AppointmentStoreTestCase(unittest.IsolatedAsyncioTestCase):

    def make_store(self, appointments):
        db = SimpleNamespace(
            appointments=MemoryCollection(appointments),
            barbers=MemoryCollection([{"barber_id": "A", "name": "Marko"}]),
            services=MemoryCollection([{"service_id": "SVCUT0001", "name": "Classic Cut", "price": 15.0}]),
            profiles=MemoryCollection([{"user_id": "customer-1", "full_name": "Ana Horvat"}]),
        )
        return AppointmentStore(db), db


class TestConditionalUpdate(AppointmentStoreTestCase):

    async def test_update_applies_while_status_matches(self):
        store, db = self.make_store([appointment_document("AP1")])
        updated = await store.update("AP1", {"status": AppointmentStatus.CANCELLED},
                                     expected_statuses=[AppointmentStatus.CONFIRMED])
        self.assertEqual(updated.status, AppointmentStatus.CANCELLED)
        self.assertEqual(db.appointments.documents[0]["status"], "cancelled")

    async def test_update_skips_a_row_whose_status_moved_on(self):
        store, db = self.make_store([appointment_document("AP1", status="cancelled")])
        updated = await store.update("AP1", {"status": AppointmentStatus.COMPLETED},
                                     expected_statuses=[AppointmentStatus.CONFIRMED])
        self.assertIsNone(updated)
        self.assertEqual(db.appointments.documents[0]["status"], "cancelled")

    async def test_reschedule_patch_stores_dates_as_strings(self):
        store, db = self.make_store([appointment_document("AP1")])
        await store.update("AP1", {"appointment_date": MONDAY, "appointment_time": "11:00"})
        self.assertEqual(db.appointments.documents[0]["appointment_date"], "2024-06-10")
        self.assertEqual(db.appointments.documents[0]["appointment_time"], "11:00")


class TestJoinedListings(AppointmentStoreTestCase):

    async def test_day_list_is_joined_and_ordered(self):
        store, _ = self.make_store([
            appointment_document("AP2", time_value="11:00"),
            appointment_document("AP1", time_value="09:00"),
            appointment_document("AP3", time_value="10:00", status="cancelled"),
        ])
        rows = await store.list_for_day(MONDAY)
        self.assertEqual([row.appointment_id for row in rows], ["AP1", "AP2"])
        self.assertEqual(rows[0].barber.name, "Marko")
        self.assertEqual(rows[0].service.price, 15.0)
        self.assertEqual(rows[0].profile.full_name, "Ana Horvat")

    async def test_booking_with_a_deleted_barber_or_service_stays_listed(self):
        store, _ = self.make_store([
            appointment_document("AP1", barber_id="GONE", time_value="09:00"),
            appointment_document("AP2", service_id="SVGONE0001", time_value="10:00"),
        ])
        rows = await store.list_for_day(MONDAY)
        self.assertEqual([row.appointment_id for row in rows], ["AP1", "AP2"])
        self.assertEqual(rows[0].barber.barber_id, "GONE")
        self.assertEqual(rows[0].barber.name, MISSING_BARBER_NAME)
        self.assertEqual(rows[1].service.service_id, "SVGONE0001")
        self.assertEqual(rows[1].service.name, MISSING_SERVICE_NAME)

        mine = await store.list_for_customer("customer-1")
        self.assertEqual(len(mine), 2)
