"""
Date and time-of-day helpers shared by the extractor and the calculator.

Spreadsheet cells store dates as serial day counts and times as fractions of a
24 hour day. Report text prints times as H:MM and dates as MM/DD/YY or
M/D/YYYY. Everything is normalized to ISO dates and H:MM strings.
"""

import re
from datetime import date, datetime, time, timedelta

from core.errors import MalformedDate, MalformedTime

# Serial 25569 is 1970-01-01 in the 1900 date system
UNIX_EPOCH_SERIAL = 25569
UNIX_EPOCH = date(1970, 1, 1)
# The 1900 date system counts a 1900-02-29 that never existed (serial 60)
PHANTOM_LEAP_DAY_SERIAL = 60

MINUTES_PER_DAY = 24 * 60

DAY_ABBREVIATIONS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::\d{2})?\s*$")
SLASH_DATE_RE = re.compile(r"^\s*(\d{1,2})/(\d{1,2})/(\d{2}|\d{4})\s*$")


# =============================================================================
# TIME OF DAY
# =============================================================================


def parse_time_minutes(value: str) -> int:
    """Convert 'H:MM' or 'HH:MM' to minutes after midnight."""
    match = TIME_RE.match(str(value))
    if not match:
        raise MalformedTime(f"Not a time of day: '{value}'")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise MalformedTime(f"Time of day out of range: '{value}'")
    return hours * 60 + minutes


def format_minutes(total_minutes: int) -> str:
    """Format minutes after midnight as 'H:MM' (hour not zero-padded)."""
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}:{minutes:02d}"


def normalize_time(value: str) -> str:
    """Normalize a time string to 'H:MM'."""
    return format_minutes(parse_time_minutes(value))


def excel_time_to_string(value) -> str:
    """
    Convert a spreadsheet time cell to 'H:MM'.

    Accepts a fraction of a day, a datetime.time/datetime, or a time string.
    Empty cells return ''; a numeric 0 is midnight.
    """
    if value is None or value == "":
        return ""
    if isinstance(value, datetime):
        return format_minutes(value.hour * 60 + value.minute)
    if isinstance(value, time):
        return format_minutes(value.hour * 60 + value.minute)
    if isinstance(value, bool):
        raise MalformedTime(f"Not a time of day: {value!r}")
    if isinstance(value, (int, float)):
        fraction = value % 1 if value >= 1 else value
        if fraction < 0:
            raise MalformedTime(f"Negative time fraction: {value!r}")
        return format_minutes(round(fraction * MINUTES_PER_DAY) % MINUTES_PER_DAY)
    return normalize_time(str(value))


def time_string_to_excel(value: str) -> float:
    """Convert 'H:MM' to a fraction of a 24 hour day."""
    return parse_time_minutes(value) / MINUTES_PER_DAY


def hours_between(start: str, end: str) -> float:
    """Hours from start to end on the same day. Negative when end is earlier."""
    return (parse_time_minutes(end) - parse_time_minutes(start)) / 60


# =============================================================================
# DATES
# =============================================================================


def excel_serial_to_date(serial) -> date:
    """
    Convert a spreadsheet serial day count to a date.

    Serials before 61 get a +1 day correction for the phantom 1900-02-29,
    which itself (serial 60) is rejected.
    """
    if isinstance(serial, datetime):
        return serial.date()
    if isinstance(serial, date):
        return serial
    if isinstance(serial, bool) or not isinstance(serial, (int, float)):
        try:
            serial = float(str(serial).strip())
        except ValueError:
            raise MalformedDate(f"Not a date serial: {serial!r}") from None

    days = int(serial)
    if days < 1:
        raise MalformedDate(f"Date serial out of range: {serial!r}")
    if days == PHANTOM_LEAP_DAY_SERIAL:
        raise MalformedDate("Serial 60 is the nonexistent 1900-02-29")
    if days < PHANTOM_LEAP_DAY_SERIAL:
        days += 1
    return UNIX_EPOCH + timedelta(days=days - UNIX_EPOCH_SERIAL)


def date_to_excel_serial(d: date) -> int:
    """Inverse of excel_serial_to_date."""
    days = (d - UNIX_EPOCH).days + UNIX_EPOCH_SERIAL
    if days <= PHANTOM_LEAP_DAY_SERIAL:
        days -= 1
    return days


def parse_slash_date(value: str) -> date:
    """Parse 'MM/DD/YY' or 'M/D/YYYY'. Two digit years are 20YY."""
    match = SLASH_DATE_RE.match(str(value))
    if not match:
        raise MalformedDate(f"Not a M/D/Y date: '{value}'")
    month, day, year = (int(g) for g in match.groups())
    if len(match.group(3)) == 2:
        year += 2000
    try:
        return date(year, month, day)
    except ValueError as e:
        raise MalformedDate(f"Invalid date '{value}': {e}") from e


def parse_iso_date(value: str) -> date:
    """Parse 'YYYY-MM-DD'."""
    try:
        return datetime.strptime(str(value), "%Y-%m-%d").date()
    except ValueError as e:
        raise MalformedDate(f"Not an ISO date: '{value}'") from e


def month_day_keys(d: date) -> tuple[str, str]:
    """Narrative header keys for a date: ('9/6', '09/06')."""
    return f"{d.month}/{d.day}", f"{d.month:02d}/{d.day:02d}"


def day_index(d: date) -> int:
    """Sunday-first weekday index (Sunday=0 ... Saturday=6)."""
    return (d.weekday() + 1) % 7


def day_abbreviation(d: date) -> str:
    return DAY_ABBREVIATIONS[day_index(d)]


def is_saturday(d: date) -> bool:
    return day_index(d) == 6


def is_sunday(d: date) -> bool:
    return day_index(d) == 0
