from typing import List
from services.business_hours import HoursPolicy


def generate_slots(policy: HoursPolicy) -> List[str]:
    """
    Bookable start times for one day, as zero-padded "HH:MM" strings.

    Slots start at the opening time and step by the policy's slot length.
    A slot landing exactly on a top-of-hour closing time is still offered,
    so on weekdays the last slot is 18:00 and on Saturdays 14:00.
    """
    if not policy.is_open:
        return []

    slots: List[str] = []
    hour = policy.start_time.hour
    minute = policy.start_time.minute
    end_hour = policy.end_time.hour

    while hour < end_hour or (hour == end_hour and minute == 0):
        slots.append(f"{hour:02d}:{minute:02d}")
        minute += policy.slot_minutes
        while minute >= 60:
            minute -= 60
            hour += 1

    return slots
