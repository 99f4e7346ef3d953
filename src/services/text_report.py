"""
Pattern-based extraction from the text of a PDF service report page.

Two templates are supported. Variant A is the older layout where values
follow their labels; variant B is the later layout with values printed in a
right-hand column ahead of the labels. Both share the weekday time row,
narrative and itinerary patterns.
"""

from dataclasses import dataclass, field

from core.config import HOME_BASE_KEYWORDS, VARIANT_TEXT_A, VARIANT_TEXT_B
from core.errors import FormatError
from core.timeutils import DAY_ABBREVIATIONS, parse_slash_date
from models.entries import (
    CustomerInfo,
    ExtractedReport,
    ReportCharges,
    RowTotals,
    TimeEntry,
    TravelLeg,
)
from services.rules import ITINERARY_RE, TIME_ROW_PATTERNS, VARIANT_RULES, read_field
from services.timerows import ParseLog, build_time_entry, parse_service_notes

CUSTOMER_FIELDS = ("company", "address", "location", "equipment")
CHARGE_FIELDS = (
    "straight_hours",
    "overtime_hours",
    "weekday_travel_hours",
    "per_diem_days",
    "per_diem_rate",
    "auto_rental",
    "air_transport",
)
TOTAL_FIELDS = ("travel_time", "labor_time", "total_hours", "straight_time", "overtime")
MAX_LOGGED_FRAGMENTS = 40


@dataclass(frozen=True)
class TextSource:
    """Concatenated page text plus the individual text fragments."""

    text: str
    fragments: list[dict] = field(default_factory=list)


def parse_itinerary(text: str, log: ParseLog) -> list[TravelLeg]:
    """Find 'Monday 6/20/2022 5:00 MST Gilbert, AZ 13:30 PST Portland, OR' legs."""
    legs = []
    for match in ITINERARY_RE.finditer(text):
        leg_date = log.date(match.group(1), "itinerary date", parser=parse_slash_date)
        legs.append(
            TravelLeg(
                date=leg_date.isoformat() if leg_date else "",
                depart_time=log.time(match.group(2), "itinerary depart time"),
                depart_zone=match.group(3),
                depart_location=match.group(4).strip(),
                arrive_time=log.time(match.group(5), "itinerary arrive time"),
                arrive_zone=match.group(6),
                arrive_location=match.group(7).strip(),
            )
        )
    return legs


def parse_time_rows(
    text: str,
    log: ParseLog,
    travel_by_date: dict[str, TravelLeg],
    service_notes: dict[str, str],
    home_base_keywords: tuple[str, ...],
) -> list[TimeEntry]:
    """
    Read weekday time rows, Sunday through Saturday.

    Rows with an unreadable date, or with no punches and no travel on their
    date, are skipped.
    """
    entries = []
    for day in DAY_ABBREVIATIONS:
        for match in TIME_ROW_PATTERNS[day].finditer(text):
            raw_date = match.group(1)
            entry_date = log.date(raw_date, f"{day} date", parser=parse_slash_date)
            if entry_date is None:
                continue
            punches = [
                log.time(value, f"{day} {raw_date} punch {i}") if value else ""
                for i, value in enumerate(match.groups()[1:5], start=1)
            ]
            totals = RowTotals(
                **{name: value or "" for name, value in zip(TOTAL_FIELDS, match.groups()[5:10])}
            )
            entry = build_time_entry(
                entry_date,
                punches,
                day=day,
                travel_leg=travel_by_date.get(entry_date.isoformat()),
                service_notes=service_notes,
                home_base_keywords=home_base_keywords,
                totals=totals,
            )
            if entry is not None:
                entries.append(entry)
    return entries


def extract_text_report(
    source: TextSource,
    variant: str,
    *,
    home_base_keywords: tuple[str, ...] = HOME_BASE_KEYWORDS,
    strict: bool = False,
    silent: bool = True,
) -> ExtractedReport:
    """
    Extract a report from page text using the variant's rule table.

    Raises:
        FormatError: Page has no text
        ValueError: Variant is not a text variant
    """
    if variant not in (VARIANT_TEXT_A, VARIANT_TEXT_B):
        raise ValueError(f"Not a text format variant: '{variant}'")

    text = source.text or ""
    if not text.strip():
        raise FormatError("Page text not found in PDF file")

    rules = VARIANT_RULES[variant]

    if not silent:
        print(f"Parsing {variant} page text ({len(text)} chars, {len(source.fragments)} fragments)")
        shown = source.fragments[:MAX_LOGGED_FRAGMENTS]
        print("  Fragments: " + " | ".join(f'"{f.get("text", "")}"' for f in shown))

    log = ParseLog(strict)

    customer_values = {name: read_field(rules[name], text) for name in CUSTOMER_FIELDS}
    title = read_field(rules["title"], text)
    customer = CustomerInfo(
        **customer_values,
        title=title,
        contact=read_field(rules["contact"], text, title=title),
        purpose=read_field(rules["purpose"], text, location=customer_values["location"]),
    )

    itinerary = parse_itinerary(text, log)
    travel_by_date = {leg.date: leg for leg in itinerary if leg.date}
    service_notes = parse_service_notes(text)
    entries = parse_time_rows(text, log, travel_by_date, service_notes, home_base_keywords)

    charges = ReportCharges(**{name: read_field(rules[name], text) for name in CHARGE_FIELDS})

    if not silent:
        print(f"  - {len(entries)} time entries, {len(itinerary)} travel legs")
        for warning in log.warnings:
            print(f"  - WARNING: {warning}")

    return ExtractedReport(
        sr_number=read_field(rules["sr_number"], text),
        variant=variant,
        customer=customer,
        time_entries=entries,
        charges=charges,
        travel_itinerary=itinerary,
        warnings=log.warnings,
    )
