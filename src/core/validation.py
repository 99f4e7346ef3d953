"""
Time entry and time-sheet document validation.
"""

from collections import Counter

from core.errors import MalformedDate, MalformedTime
from core.timeutils import hours_between, parse_iso_date

TIMESHEET_REQUIRED_KEYS = (
    "customerInfo",
    "entries",
    "serviceReportData",
    "travelData",
    "machineInfo",
    "invoiceInfo",
)

SPAN_LABELS = {
    "travel_to": "Travel to",
    "travel_home": "Travel home",
    "onsite": "Onsite",
}


def validate_entries(entries: list) -> list[str]:
    """
    Check time entries against the time sheet invariants.

    Checks:
    1. Date is a valid ISO date and unique within the sheet
    2. Every active span has start and end, and ends after it starts
    3. Lunch is not longer than the onsite span
    4. Travel-only days carry no active onsite span

    Returns:
        List of error messages (empty if all valid)
    """
    errors = []

    date_counts = Counter(entry.date for entry in entries)
    for entry_date, count in sorted(date_counts.items()):
        if count > 1:
            errors.append(f"Date {entry_date} appears {count} times")

    for entry in entries:
        label = entry.date or "(no date)"
        try:
            parse_iso_date(entry.date)
        except MalformedDate:
            errors.append(f"{label}: invalid date '{entry.date}'")

        if entry.travel_only and entry.onsite.active:
            errors.append(f"{label}: travel-only day has an active onsite span")

        span_lengths = {}
        for attr, name in SPAN_LABELS.items():
            span = getattr(entry, attr)
            if not span.active:
                continue
            if not span.start or not span.end:
                errors.append(f"{label}: {name} span is missing start or end time")
                continue
            try:
                length = hours_between(span.start, span.end)
            except MalformedTime as e:
                errors.append(f"{label}: {name} {e}")
                continue
            if length <= 0:
                errors.append(
                    f"{label}: {name} end {span.end} is not after start {span.start}"
                )
            span_lengths[attr] = length

        if entry.lunch:
            if entry.lunch_duration < 0:
                errors.append(f"{label}: lunch duration is negative")
            onsite = span_lengths.get("onsite")
            if onsite is not None and entry.lunch_duration > onsite:
                errors.append(
                    f"{label}: lunch {entry.lunch_duration:g}h exceeds onsite span {onsite:g}h"
                )

    return errors


def missing_timesheet_keys(document: dict) -> list[str]:
    """Return required top-level keys absent from a time-sheet document."""
    return [key for key in TIMESHEET_REQUIRED_KEYS if key not in document]
