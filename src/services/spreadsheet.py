"""
Positional extraction from the Excel field service report (EFSR sheet).

Every field lives in a fixed cell. The grid is a mapping of sheet name to
{"B6": value} cells, as produced by services.sources.load_cell_grid.
"""

from typing import Any, Mapping

from core.config import (
    HOME_BASE_KEYWORDS,
    PER_DIEM_OVERNIGHT,
    SPREADSHEET_SHEET,
    SPREADSHEET_TIME_ROWS,
    SPREADSHEET_TRAVEL_ROWS,
    VARIANT_SPREADSHEET,
)
from core.errors import FormatError
from models.entries import CustomerInfo, ExtractedReport, ReportCharges, TravelLeg
from services.timerows import ParseLog, build_time_entry, parse_service_notes

CellGrid = Mapping[str, Mapping[str, Any]]

# Fixed cell addresses in the EFSR template
CUSTOMER_CELLS = {
    "company": "B6",
    "address": "B7",
    "location": "B8",
    "contact": "B9",
    "title": "B10",
    "equipment": "F8",
    "purpose": "F11",
}
SR_NUMBER_CELL = "B3"
SERVICE_PERFORMED_CELL = "A13"
CHARGE_CELLS = {
    "straight_hours": "C49",
    "overtime_hours": "C50",
    "weekday_travel_hours": "C52",
    "per_diem_days": "H49",
    "auto_rental": "J51",
    "air_transport": "J52",
}
# Travel rows: A date, C/D/E depart time/zone/location, G/H/I arrive
TRAVEL_COLUMNS = {
    "depart_time": "C",
    "depart_zone": "D",
    "depart_location": "E",
    "arrive_time": "G",
    "arrive_zone": "H",
    "arrive_location": "I",
}
PUNCH_COLUMNS = ("B", "C", "D", "E")


def cell_text(value: Any) -> str:
    """Render a cell as text; whole floats lose their '.0', empty is ''."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def format_rate(rate: float) -> str:
    return cell_text(float(rate))


def is_empty(value: Any) -> bool:
    return value is None or value == "" or value == 0


def extract_spreadsheet(
    grid: CellGrid,
    *,
    home_base_keywords: tuple[str, ...] = HOME_BASE_KEYWORDS,
    strict: bool = False,
    silent: bool = True,
) -> ExtractedReport:
    """
    Extract a report from the EFSR sheet of a workbook.

    Raises:
        FormatError: EFSR sheet not present
        MalformedTime, MalformedDate: strict mode only
    """
    sheet = grid.get(SPREADSHEET_SHEET)
    if sheet is None:
        raise FormatError(f"{SPREADSHEET_SHEET} sheet not found in Excel file")

    if not silent:
        print(f"Reading '{SPREADSHEET_SHEET}' sheet ({len(sheet)} cells)")

    log = ParseLog(strict)

    def get_cell(address: str) -> Any:
        value = sheet.get(address)
        return "" if value is None else value

    customer = CustomerInfo(
        **{name: cell_text(get_cell(address)) for name, address in CUSTOMER_CELLS.items()}
    )
    service_notes = parse_service_notes(cell_text(get_cell(SERVICE_PERFORMED_CELL)))

    # Travel itinerary
    itinerary = []
    travel_by_date = {}
    for row in SPREADSHEET_TRAVEL_ROWS:
        raw_date = get_cell(f"A{row}")
        if is_empty(raw_date):
            continue
        leg_date = log.date(raw_date, f"A{row}")
        if leg_date is None:
            continue

        addresses = {name: f"{col}{row}" for name, col in TRAVEL_COLUMNS.items()}
        leg = TravelLeg(
            date=leg_date.isoformat(),
            depart_time=log.time(get_cell(addresses["depart_time"]), addresses["depart_time"]),
            depart_zone=cell_text(get_cell(addresses["depart_zone"])),
            depart_location=cell_text(get_cell(addresses["depart_location"])),
            arrive_time=log.time(get_cell(addresses["arrive_time"]), addresses["arrive_time"]),
            arrive_zone=cell_text(get_cell(addresses["arrive_zone"])),
            arrive_location=cell_text(get_cell(addresses["arrive_location"])),
        )
        itinerary.append(leg)
        travel_by_date[leg_date] = leg

    # Time sheet rows
    entries = []
    for row in SPREADSHEET_TIME_ROWS:
        raw_date = get_cell(f"A{row}")
        if is_empty(raw_date):
            continue
        entry_date = log.date(raw_date, f"A{row}")
        if entry_date is None:
            continue

        punches = [log.time(get_cell(f"{col}{row}"), f"{col}{row}") for col in PUNCH_COLUMNS]
        entry = build_time_entry(
            entry_date,
            punches,
            travel_leg=travel_by_date.get(entry_date),
            service_notes=service_notes,
            home_base_keywords=home_base_keywords,
        )
        if entry is not None:
            entries.append(entry)

    charges = ReportCharges(
        **{name: cell_text(get_cell(address)) for name, address in CHARGE_CELLS.items()},
        per_diem_rate=format_rate(PER_DIEM_OVERNIGHT),
    )

    if not silent:
        print(f"  - {len(entries)} time entries, {len(itinerary)} travel legs")
        for warning in log.warnings:
            print(f"  - WARNING: {warning}")

    return ExtractedReport(
        sr_number=cell_text(get_cell(SR_NUMBER_CELL)),
        variant=VARIANT_SPREADSHEET,
        customer=customer,
        time_entries=entries,
        charges=charges,
        travel_itinerary=itinerary,
        warnings=log.warnings,
    )
