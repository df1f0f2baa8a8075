"""Tests for schemas/booking_draft.py"""

import unittest

from schemas.barber import Barber
from schemas.booking_draft import BookingDraft
from schemas.service import Service
from tests.fakes import MONDAY

SERVICE = Service(service_id="SVCUT0001", name="Classic Cut", price=15.0)
BARBER = Barber(barber_id="A", name="Marko")


class TestBookingDraft(unittest.TestCase):

    def test_starts_empty_on_first_step(self):
        draft = BookingDraft()
        self.assertEqual(draft.step, 1)
        self.assertEqual(draft.title, "Choose a service")
        self.assertFalse(draft.can_proceed())

    def test_cannot_advance_without_a_selection(self):
        draft = BookingDraft().advance()
        self.assertEqual(draft.step, 1)

    def test_walks_through_all_steps(self):
        draft = BookingDraft().select_service(SERVICE).advance()
        self.assertEqual(draft.step, 2)
        draft = draft.select_barber(BARBER).advance()
        self.assertEqual(draft.step, 3)
        draft = draft.select_date(MONDAY)
        self.assertFalse(draft.can_proceed())
        draft = draft.select_time("10:00").advance()
        self.assertEqual(draft.step, 4)
        self.assertTrue(draft.can_proceed())
        self.assertEqual(draft.advance().step, 4)

    def test_back_stops_at_first_step(self):
        draft = BookingDraft().select_service(SERVICE).advance().back().back()
        self.assertEqual(draft.step, 1)
        self.assertEqual(draft.service, SERVICE)

    def test_changing_barber_or_date_clears_the_time(self):
        draft = BookingDraft().select_barber(BARBER).select_date(MONDAY).select_time("10:00")
        self.assertIsNone(draft.select_barber(Barber(barber_id="B", name="Ivan")).appointment_time)
        self.assertIsNone(draft.select_date(MONDAY).appointment_time)

    def test_selections_do_not_mutate_the_original(self):
        draft = BookingDraft()
        draft.select_service(SERVICE)
        self.assertIsNone(draft.service)

    def test_to_request(self):
        draft = BookingDraft().select_service(SERVICE).select_barber(BARBER).select_date(MONDAY).select_time("10:00")
        request = draft.to_request(notes="Short on the sides")
        self.assertEqual(request.service_id, "SVCUT0001")
        self.assertEqual(request.barber_id, "A")
        self.assertEqual(request.appointment_date, MONDAY)
        self.assertEqual(request.appointment_time, "10:00")
        self.assertEqual(request.notes, "Short on the sides")

    def test_incomplete_draft_gives_incomplete_request(self):
        request = BookingDraft().select_service(SERVICE).to_request()
        self.assertIsNone(request.barber_id)
        self.assertIsNone(request.appointment_time)
