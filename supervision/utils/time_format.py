# supervision/utils/time_format.py
"""
Conversion between 24-hour ("HH:MM") and 12-hour ("HH:MM" + AM/PM) times.

Schedules are stored in 24-hour form and presented in both forms.
"""

import re
from typing import NamedTuple, Tuple

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_TIME24_RE = re.compile(r"^(\d{2}):(\d{2})$")
_DISPLAY_RE = re.compile(r"^(\d{1,2}:\d{2})\s+(AM|PM)$", re.IGNORECASE)

PERIODS = ("AM", "PM")


class TimeFormatError(ValueError):
    pass


class TimeFormat12Hour(NamedTuple):
    time: str  # "HH:MM"
    period: str  # "AM" | "PM"
    display: str  # "HH:MM AM"


def _split(value: str, pattern=_TIME_RE) -> Tuple[int, int]:
    match = pattern.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise TimeFormatError(f"Invalid time format '{value}'. Expected HH:MM")
    return int(match.group(1)), int(match.group(2))


def to_12_hour(time24: str) -> TimeFormat12Hour:
    """Convert "HH:MM" (00-23) to its 12-hour form.

    >>> to_12_hour("00:00")
    TimeFormat12Hour(time='12:00', period='AM', display='12:00 AM')
    >>> to_12_hour("13:05").display
    '01:05 PM'
    """
    hours, minutes = _split(time24, _TIME24_RE)
    if not 0 <= hours <= 23 or not 0 <= minutes <= 59:
        raise TimeFormatError("Invalid time format")

    period = "PM" if hours >= 12 else "AM"
    display_hours = hours % 12 or 12

    formatted = f"{display_hours:02d}:{minutes:02d}"
    return TimeFormat12Hour(time=formatted, period=period, display=f"{formatted} {period}")


def to_24_hour(time12: str, period: str) -> str:
    """Convert a 12-hour time ("1"-"12", one or two digits) plus AM/PM to zero-padded "HH:MM"."""
    hours, minutes = _split(time12)
    if not 1 <= hours <= 12 or not 0 <= minutes <= 59:
        raise TimeFormatError("Invalid 12-hour time format")

    period = (period or "").upper()
    if period not in PERIODS:
        raise TimeFormatError(f"Invalid period '{period}'. Must be AM or PM")

    hours24 = hours
    if period == "AM" and hours == 12:
        hours24 = 0
    elif period == "PM" and hours != 12:
        hours24 = hours + 12

    return f"{hours24:02d}:{minutes:02d}"


def parse_display_time(display_time: str) -> Tuple[str, str]:
    """Split "02:30 PM" into ("02:30", "PM")."""
    match = _DISPLAY_RE.match(display_time.strip()) if isinstance(display_time, str) else None
    if not match:
        raise TimeFormatError('Invalid display time format. Expected format: "HH:MM AM/PM"')
    return match.group(1), match.group(2).upper()
