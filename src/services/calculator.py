"""
Hours and charge calculation for time sheets.

Derives travel/work hours per entry, classifies work hours into pay tiers
(straight, overtime, double) and totals labor and travel charge buckets.
Pure functions: no I/O and no raised errors. Spans that end before they start
give negative hours; use core.validation.validate_entries to catch them.
"""

from collections import defaultdict

from core.errors import MalformedDate, MalformedTime
from core.timeutils import hours_between, is_saturday, is_sunday, parse_iso_date
from models.charges import (
    ChargeBucket,
    ChargeSummary,
    EntryHours,
    RateTable,
    TravelData,
    TravelExpenses,
)
from models.entries import TimeEntry, TimeSpan

PER_DIEM_LOCAL_TYPE = "local"


def span_hours(span: TimeSpan) -> float:
    """Length of an active span in hours; inactive or unreadable spans are 0."""
    if not span.active or not span.start or not span.end:
        return 0.0
    try:
        return hours_between(span.start, span.end)
    except MalformedTime:
        return 0.0


def to_number(value) -> float:
    """Parse '1,250.00', 40 or '' as a float (unparseable is 0)."""
    if value is None or value == "":
        return 0.0
    try:
        return float(str(value).replace(",", "").replace("$", "").strip())
    except ValueError:
        return 0.0


def calculate_hours(entry: TimeEntry, rates: RateTable | None = None) -> EntryHours:
    """
    Derive hours for one entry.

    Tier order: holiday -> double, Sunday -> double, Saturday -> overtime,
    weekday -> straight up to the daily limit with the remainder overtime.
    """
    rates = rates or RateTable()

    try:
        entry_date = parse_iso_date(entry.date)
    except MalformedDate:
        return EntryHours(date=entry.date)

    travel_hours = span_hours(entry.travel_to) + span_hours(entry.travel_home)

    work_hours = 0.0
    if entry.onsite.active and not entry.travel_only:
        lunch = entry.lunch_duration if entry.lunch else 0.0
        work_hours = span_hours(entry.onsite) - lunch

    straight = overtime = double = 0.0
    if work_hours > 0:
        if entry.holiday or is_sunday(entry_date):
            double = work_hours
        elif is_saturday(entry_date):
            overtime = work_hours
        else:
            straight = min(work_hours, rates.straight_hours_per_day)
            overtime = work_hours - straight

    return EntryHours(
        date=entry.date,
        travel_hours=travel_hours,
        work_hours=work_hours,
        straight=straight,
        overtime=overtime,
        double=double,
        total=travel_hours + work_hours,
    )


def travel_bucket(entry: TimeEntry, rates: RateTable) -> str | None:
    """Travel bucket for an entry by its date's weekday; None if undated."""
    try:
        entry_date = parse_iso_date(entry.date)
    except MalformedDate:
        return None
    if is_sunday(entry_date) or (entry.holiday and rates.holiday_travel_as_sunday):
        return "sunday"
    if is_saturday(entry_date):
        return "saturday"
    return "weekday"


def make_bucket(hours: float, rate: float) -> ChargeBucket:
    return ChargeBucket(hours=hours, rate=rate, charge=hours * rate)


def calculate_travel_expenses(
    travel_data: TravelData | dict | None, rates: RateTable | None = None
) -> TravelExpenses:
    """Per diem, mileage, other and air travel expenses of a time sheet."""
    rates = rates or RateTable()
    if travel_data is None:
        return TravelExpenses()
    if isinstance(travel_data, dict):
        travel_data = TravelData.model_validate(travel_data)

    per_diem_rate = (
        rates.per_diem_local
        if travel_data.per_diem_type == PER_DIEM_LOCAL_TYPE
        else rates.per_diem_overnight
    )
    per_diem_total = to_number(travel_data.per_diem_days) * per_diem_rate
    mileage_total = to_number(travel_data.mileage) * rates.mileage
    other_travel = to_number(travel_data.other_travel)
    air_travel = to_number(travel_data.air_travel.cost)

    return TravelExpenses(
        per_diem_total=per_diem_total,
        mileage_total=mileage_total,
        other_travel=other_travel,
        air_travel=air_travel,
        travel_expenses_subtotal=per_diem_total + mileage_total + other_travel + air_travel,
    )


def calculate_charges(
    entries: list[TimeEntry],
    rates: RateTable | None = None,
    travel_data: TravelData | dict | None = None,
) -> ChargeSummary:
    """
    Aggregate labor and travel charge buckets across entries.

    Returns:
        ChargeSummary with per-tier buckets, subtotals and per-entry hours
    """
    rates = rates or RateTable()
    processed = [calculate_hours(entry, rates) for entry in entries]

    travel_hours: dict[str, float] = defaultdict(float)
    for entry, hours in zip(entries, processed):
        bucket = travel_bucket(entry, rates)
        if bucket is not None:
            travel_hours[bucket] += hours.travel_hours

    straight = make_bucket(sum(h.straight for h in processed), rates.straight)
    overtime = make_bucket(sum(h.overtime for h in processed), rates.overtime)
    double = make_bucket(sum(h.double for h in processed), rates.double)

    weekday_travel = make_bucket(travel_hours["weekday"], rates.weekday_travel)
    saturday_travel = make_bucket(travel_hours["saturday"], rates.saturday_travel)
    sunday_travel = make_bucket(travel_hours["sunday"], rates.sunday_travel)

    return ChargeSummary(
        straight=straight,
        overtime=overtime,
        double=double,
        weekday_travel=weekday_travel,
        saturday_travel=saturday_travel,
        sunday_travel=sunday_travel,
        labor_subtotal=straight.charge + overtime.charge + double.charge,
        travel_charges_subtotal=(
            weekday_travel.charge + saturday_travel.charge + sunday_travel.charge
        ),
        travel=calculate_travel_expenses(travel_data, rates),
        processed_entries=processed,
    )
