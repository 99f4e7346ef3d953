"""
Per-day time row handling shared by every format variant.

A source row carries a date, up to four punches (arrive, lunch out, lunch in,
leave) and optionally an itinerary leg for the same date. build_time_entry
turns that into a TimeEntry: lunch from punches 2-3, onsite window from the
outer punches or the travel leg, narrative looked up by date.
"""

from datetime import date

from core.config import DEFAULT_ONSITE_END, DEFAULT_ONSITE_START, HOME_BASE_KEYWORDS
from core.errors import MalformedDate, MalformedTime
from core.timeutils import (
    day_abbreviation,
    excel_serial_to_date,
    excel_time_to_string,
    hours_between,
    month_day_keys,
)
from models.entries import RowTotals, TimeEntry, TimeSpan, TravelLeg
from services.rules import SERVICE_NOTE_RE


class ParseLog:
    """
    Collects values that were located but could not be parsed.

    In strict mode the MalformedTime/MalformedDate is raised instead.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict
        self.warnings: list[str] = []

    def time(self, value, field: str) -> str:
        try:
            return excel_time_to_string(value)
        except MalformedTime as e:
            if self.strict:
                raise MalformedTime(f"{field}: {e}") from e
            self.warnings.append(f"{field}: {e}")
            return ""

    def date(self, value, field: str, parser=excel_serial_to_date) -> date | None:
        try:
            return parser(value)
        except MalformedDate as e:
            if self.strict:
                raise MalformedDate(f"{field}: {e}") from e
            self.warnings.append(f"{field}: {e}")
            return None


def is_home_base(location: str, keywords: tuple[str, ...] = HOME_BASE_KEYWORDS) -> bool:
    """Check if a departure location is the home base."""
    location = location.lower()
    return any(keyword in location for keyword in keywords)


def parse_service_notes(text: str) -> dict[str, str]:
    """
    Split a 'SERVICE PERFORMED' narrative into notes keyed by 'M/D' header.

    'Monday 9/16- Replaced bearing Tuesday 9/17- Tested' ->
    {'9/16': 'Replaced bearing', '9/17': 'Tested'}
    """
    notes = {}
    for match in SERVICE_NOTE_RE.finditer(text or ""):
        key, description = match.group(1), match.group(2).strip()
        if key not in notes:
            notes[key] = description
    return notes


def find_service_text(notes: dict[str, str], entry_date: date | None) -> str:
    """Look up a date's note by 'M/D' first, then zero-padded 'MM/DD'."""
    if entry_date is None:
        return ""
    for key in month_day_keys(entry_date):
        if notes.get(key):
            return notes[key]
    return ""


def lunch_hours(lunch_out: str, lunch_in: str) -> float:
    """Lunch length from punches 2 and 3; 0 unless both present and positive."""
    if not (lunch_out and lunch_in):
        return 0.0
    duration = hours_between(lunch_out, lunch_in)
    return duration if duration > 0 else 0.0


def build_time_entry(
    entry_date: date | None,
    punches: list[str],
    *,
    day: str = "",
    travel_leg: TravelLeg | None = None,
    service_notes: dict[str, str] | None = None,
    home_base_keywords: tuple[str, ...] = HOME_BASE_KEYWORDS,
    totals: RowTotals | None = None,
) -> TimeEntry | None:
    """
    Build one day's TimeEntry.

    Returns:
        TimeEntry, or None when the row has no punch and no travel
    """
    punch1, punch2, punch3, punch4 = (list(punches) + [""] * 4)[:4]

    lunch_duration = lunch_hours(punch2, punch3)
    travel_to = TimeSpan()
    travel_home = TimeSpan()
    onsite_start = punch1 or DEFAULT_ONSITE_START
    onsite_end = punch4 or punch2 or DEFAULT_ONSITE_END

    if travel_leg is not None:
        segment = TimeSpan(active=True, start=travel_leg.depart_time, end=travel_leg.arrive_time)
        if is_home_base(travel_leg.depart_location, home_base_keywords):
            travel_to = segment
            onsite_start = travel_leg.arrive_time or onsite_start
            lunch_duration = 0.0
        else:
            travel_home = segment
            onsite_end = travel_leg.depart_time or onsite_end

    if not (any(punches) or travel_to.active or travel_home.active):
        return None

    if not day and entry_date is not None:
        day = day_abbreviation(entry_date)

    return TimeEntry(
        date=entry_date.isoformat() if entry_date else "",
        day=day,
        travel_to=travel_to,
        travel_home=travel_home,
        onsite=TimeSpan(active=True, start=onsite_start, end=onsite_end),
        lunch=lunch_duration > 0,
        lunch_duration=lunch_duration,
        service_work=find_service_text(service_notes or {}, entry_date),
        totals=totals or RowTotals(),
    )
