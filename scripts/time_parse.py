from datetime import date, datetime, time
from typing import Union


def parse_time_str(t: str) -> time:
    """Parse "HH:MM" or "HH:MM:SS" into a time of day."""
    t = t.strip()
    fmt = "%H:%M:%S" if t.count(":") == 2 else "%H:%M"
    return datetime.strptime(t, fmt).time()


def format_time(t: time) -> str:
    return f"{t.hour:02d}:{t.minute:02d}"


def normalize_time(value: Union[str, time]) -> str:
    """Canonical zero-padded "HH:MM" form used for slots and stored appointments."""
    if isinstance(value, time):
        return format_time(value)
    return format_time(parse_time_str(value))


def parse_date_str(d: str) -> date:
    return datetime.strptime(d.strip(), "%Y-%m-%d").date()
