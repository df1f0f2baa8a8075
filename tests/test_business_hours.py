"""Tests for services/business_hours.py"""

import unittest
from datetime import date, time, timedelta

from services.business_hours import ClosedPolicy, OpenPolicy, hours_for
from tests.fakes import MONDAY, SATURDAY, SUNDAY


class TestBusinessHours(unittest.TestCase):

    def test_sunday_is_closed(self):
        policy = hours_for(SUNDAY)
        self.assertIsInstance(policy, ClosedPolicy)
        self.assertFalse(policy.is_open)

    def test_saturday_short_hours(self):
        policy = hours_for(SATURDAY)
        self.assertIsInstance(policy, OpenPolicy)
        self.assertEqual(policy.start_time, time(8, 0))
        self.assertEqual(policy.end_time, time(14, 0))
        self.assertEqual(policy.slot_minutes, 30)

    def test_weekdays_share_the_same_hours(self):
        for offset in range(5):
            policy = hours_for(MONDAY + timedelta(days=offset))
            self.assertTrue(policy.is_open)
            self.assertEqual(policy.start_time, time(8, 30))
            self.assertEqual(policy.end_time, time(18, 0))
            self.assertEqual(policy.slot_minutes, 30)

    def test_every_sunday_of_a_year_is_closed(self):
        day = date(2025, 1, 5)
        while day.year == 2025:
            self.assertFalse(hours_for(day).is_open, day)
            day += timedelta(days=7)

    def test_same_weekday_returns_same_policy(self):
        self.assertIs(hours_for(MONDAY), hours_for(MONDAY + timedelta(days=7)))
