"""
Service Report Workbook (Excel Version)

Writes an extracted report and its calculated charges to an Excel workbook:
a "Time Entries" sheet with one row per day and a "Charges" sheet with the
labor and travel buckets and their subtotals as formulas.
"""

from datetime import date
from io import BytesIO
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Color, Font, PatternFill

from core.config import OUTPUT_DIR
from core.errors import MalformedDate
from core.timeutils import parse_iso_date
from models.charges import ChargeSummary
from models.entries import ExtractedReport
from services.calculator import calculate_charges

ENTRY_HEADERS = [
    "Date", "Day", "Travel To", "Onsite", "Lunch", "Travel Home",
    "Travel Hrs", "Work Hrs", "Straight", "Overtime", "Double", "Total", "Service Performed",
]
ENTRY_COLUMN_WIDTHS = {
    "A": 30.0, "B": 6.0, "C": 13.0, "D": 13.0, "E": 7.0, "F": 13.0,
    "G": 10.0, "H": 10.0, "I": 9.0, "J": 9.0, "K": 9.0, "L": 9.0, "M": 60.0,
}
# Summed in the total row
HOURS_COLUMNS = ["G", "H", "I", "J", "K", "L"]

CHARGE_HEADERS = ["Category", "Hours", "Rate", "Charge"]
LABOR_ROWS = [("Straight", "straight"), ("Sat/OT", "overtime"), ("Sun/Hol", "double")]
TRAVEL_ROWS = [
    ("Weekday", "weekday_travel"),
    ("Saturday", "saturday_travel"),
    ("Sun/Hol", "sunday_travel"),
]

HEADER_FONT = Font(bold=True, color=Color(rgb="FFFFFFFF"))
HEADER_FILL = PatternFill(patternType="solid", fgColor=Color(indexed=11))
CURRENCY_FORMAT = '"$"#,##0.00'
HOURS_FORMAT = "0.00"


def ordinal_suffix(day: int) -> str:
    """Return ordinal suffix for a day number (1st, 2nd, 3rd, etc.)."""
    if 11 <= day <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def format_entry_date(value: str) -> str:
    """Format '2024-09-16' as 'Monday, September 16th 2024'."""
    try:
        d = parse_iso_date(value)
    except MalformedDate:
        return value
    return d.strftime(f"%A, %B {d.day}{ordinal_suffix(d.day)} %Y")


def format_span(span) -> str:
    return f"{span.start}-{span.end}" if span.active else ""


def write_header_row(ws, headers: list[str], row: int = 1) -> None:
    for col_idx, header in enumerate(headers, start=1):
        cell = ws.cell(row=row, column=col_idx, value=header)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL


def create_entries_sheet(wb, report: ExtractedReport, summary: ChargeSummary) -> None:
    """Write one row per time entry with its derived hours and a total row."""
    ws = wb.active
    ws.title = "Time Entries"
    ws.sheet_view.showGridLines = False

    write_header_row(ws, ENTRY_HEADERS)

    first_data_row = 2
    for row_offset, (entry, hours) in enumerate(
        zip(report.time_entries, summary.processed_entries)
    ):
        row = first_data_row + row_offset
        values = [
            format_entry_date(entry.date),
            entry.day,
            format_span(entry.travel_to),
            format_span(entry.onsite),
            entry.lunch_duration if entry.lunch else 0,
            format_span(entry.travel_home),
            hours.travel_hours,
            hours.work_hours,
            hours.straight,
            hours.overtime,
            hours.double,
            hours.total,
            entry.service_work,
        ]
        for col_idx, value in enumerate(values, start=1):
            ws.cell(row=row, column=col_idx, value=value)
        for col_letter in HOURS_COLUMNS:
            ws[f"{col_letter}{row}"].number_format = HOURS_FORMAT

    last_data_row = first_data_row + len(report.time_entries) - 1
    total_row = last_data_row + 1

    total_cell = ws.cell(row=total_row, column=1, value="Total")
    total_cell.font = Font(bold=True)
    if report.time_entries:
        for col_letter in HOURS_COLUMNS:
            cell = ws[f"{col_letter}{total_row}"]
            cell.value = f"=SUM({col_letter}{first_data_row}:{col_letter}{last_data_row})"
            cell.font = Font(bold=True)
            cell.number_format = HOURS_FORMAT

    for col_letter, width in ENTRY_COLUMN_WIDTHS.items():
        ws.column_dimensions[col_letter].width = width


def write_bucket_table(ws, start_row: int, title: str, rows, summary: ChargeSummary) -> int:
    """Write a titled bucket table with a subtotal formula; returns the next free row."""
    ws.cell(row=start_row, column=1, value=title).font = Font(bold=True)
    write_header_row(ws, CHARGE_HEADERS, row=start_row + 1)

    first_row = start_row + 2
    for offset, (label, attr) in enumerate(rows):
        row = first_row + offset
        bucket = getattr(summary, attr)
        ws.cell(row=row, column=1, value=label)
        ws.cell(row=row, column=2, value=bucket.hours).number_format = HOURS_FORMAT
        ws.cell(row=row, column=3, value=bucket.rate).number_format = CURRENCY_FORMAT
        ws.cell(row=row, column=4, value=f"=B{row}*C{row}").number_format = CURRENCY_FORMAT

    last_row = first_row + len(rows) - 1
    subtotal_row = last_row + 1
    ws.cell(row=subtotal_row, column=1, value="Subtotal").font = Font(bold=True)
    subtotal = ws.cell(row=subtotal_row, column=4, value=f"=SUM(D{first_row}:D{last_row})")
    subtotal.font = Font(bold=True)
    subtotal.number_format = CURRENCY_FORMAT
    return subtotal_row + 2


def create_charges_sheet(wb, report: ExtractedReport, summary: ChargeSummary) -> None:
    """Write report header fields and the labor/travel charge tables."""
    ws = wb.create_sheet(title="Charges")
    ws.sheet_view.showGridLines = False

    header_fields = [
        ("SR #", report.sr_number),
        ("Company", report.customer.company),
        ("Contact", report.customer.contact),
        ("Location", report.customer.location),
        ("Purpose", report.customer.purpose),
    ]
    for row, (label, value) in enumerate(header_fields, start=1):
        ws.cell(row=row, column=1, value=label).font = Font(bold=True)
        ws.cell(row=row, column=2, value=value)

    next_row = write_bucket_table(ws, len(header_fields) + 2, "Service Charges", LABOR_ROWS, summary)
    next_row = write_bucket_table(ws, next_row, "Travel Charges", TRAVEL_ROWS, summary)

    expenses = summary.travel
    expense_rows = [
        ("Per Diem", expenses.per_diem_total),
        ("Mileage", expenses.mileage_total),
        ("Other Travel", expenses.other_travel),
        ("Air Travel", expenses.air_travel),
        ("Subtotal", expenses.travel_expenses_subtotal),
    ]
    ws.cell(row=next_row, column=1, value="Travel Expenses").font = Font(bold=True)
    for offset, (label, amount) in enumerate(expense_rows, start=1):
        ws.cell(row=next_row + offset, column=1, value=label)
        ws.cell(row=next_row + offset, column=4, value=amount).number_format = CURRENCY_FORMAT

    for col_letter, width in {"A": 18.0, "B": 40.0, "C": 10.0, "D": 14.0}.items():
        ws.column_dimensions[col_letter].width = width


def create_report_workbook(
    report: ExtractedReport,
    summary: ChargeSummary | None = None,
    travel_data: dict | None = None,
):
    """Create the workbook for a report, calculating charges if not given."""
    if summary is None:
        summary = calculate_charges(report.time_entries, travel_data=travel_data)

    wb = Workbook()
    create_entries_sheet(wb, report, summary)
    create_charges_sheet(wb, report, summary)
    return wb


def generate_output_filename(report: ExtractedReport) -> str:
    """service_report_<SR#>.xlsx, or dated when the SR number is unknown."""
    if report.sr_number:
        return f"service_report_{report.sr_number}.xlsx"
    return f"service_report_{date.today():%Y_%m_%d}.xlsx"


def report_workbook_to_bytes(
    report: ExtractedReport, travel_data: dict | None = None
) -> tuple[bytes, str]:
    """
    Build the workbook and return it as bytes (for API usage).

    Returns:
        Tuple of (excel_bytes, filename)
    """
    wb = create_report_workbook(report, travel_data=travel_data)
    buffer = BytesIO()
    wb.save(buffer)
    buffer.seek(0)
    return buffer.getvalue(), generate_output_filename(report)


def save_report_workbook(
    report: ExtractedReport,
    output_dir: Path | None = None,
    travel_data: dict | None = None,
    silent: bool = False,
) -> Path:
    """Write the workbook under output/reports and return its path."""
    output_dir = output_dir or OUTPUT_DIR / "reports"
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / generate_output_filename(report)

    wb = create_report_workbook(report, travel_data=travel_data)
    wb.save(str(output_path))
    if not silent:
        print(f"Saved Excel report to: {output_path}")
    return output_path
