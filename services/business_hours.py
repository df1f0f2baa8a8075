from pydantic import BaseModel, ConfigDict
from datetime import date, time
from functools import lru_cache
from typing import Literal, Union

SLOT_MINUTES = 30

WEEKDAY_OPENING = time(8, 30)
WEEKDAY_CLOSING = time(18, 0)
SATURDAY_OPENING = time(8, 0)
SATURDAY_CLOSING = time(14, 0)

SATURDAY = 5
SUNDAY = 6


class ClosedPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_open: Literal[False] = False


class OpenPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_open: Literal[True] = True
    start_time: time
    end_time: time
    slot_minutes: int = SLOT_MINUTES


HoursPolicy = Union[ClosedPolicy, OpenPolicy]


@lru_cache(maxsize=7)
def _hours_for_weekday(weekday: int) -> HoursPolicy:
    if weekday == SUNDAY:
        return ClosedPolicy()
    if weekday == SATURDAY:
        return OpenPolicy(start_time=SATURDAY_OPENING, end_time=SATURDAY_CLOSING)
    return OpenPolicy(start_time=WEEKDAY_OPENING, end_time=WEEKDAY_CLOSING)


def hours_for(day: date) -> HoursPolicy:
    """Opening hours for a calendar date. Closed on Sundays, short hours on Saturdays."""
    return _hours_for_weekday(day.weekday())
