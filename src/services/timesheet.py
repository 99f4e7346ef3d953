"""
Time-sheet document export and import.

The time-sheet application imports a flat JSON document with the keys
customerInfo, entries, serviceReportData, travelData, machineInfo and
invoiceInfo. This module builds that document from an ExtractedReport, reads
one back into typed entries, and keeps it in an injected StateStore.
"""

from dataclasses import dataclass

from core.errors import FormatError
from core.store import StateStore
from core.validation import missing_timesheet_keys
from models.charges import ChargeSummary, RateTable, TravelData
from models.entries import ExtractedReport, TimeEntry, TimeSpan
from services.calculator import PER_DIEM_LOCAL_TYPE, calculate_charges, to_number

PER_DIEM_OVERNIGHT_TYPE = "overnight"


@dataclass
class TimesheetState:
    """A loaded time-sheet document."""

    entries: list[TimeEntry]
    travel_data: TravelData
    document: dict


def format_number(value: float) -> str:
    """0.5 -> '0.5', 1.0 -> '1'."""
    return f"{value:g}"


def split_location(location: str) -> tuple[str, str]:
    """'Portland, OR' -> ('Portland', 'OR')."""
    city, _, state = location.partition(",")
    return city.strip(), state.strip()


def span_to_dict(span: TimeSpan) -> dict:
    return {"active": span.active, "start": span.start, "end": span.end}


def entry_to_timesheet(entry: TimeEntry, customer: str) -> dict:
    return {
        "date": entry.date,
        "travel": {
            "to": span_to_dict(entry.travel_to),
            "home": span_to_dict(entry.travel_home),
        },
        "onsite": span_to_dict(entry.onsite),
        "lunch": entry.lunch,
        "lunchDuration": format_number(entry.lunch_duration),
        "travelOnly": entry.travel_only,
        "holiday": entry.holiday,
        "serviceWork": entry.service_work,
        "customer": customer,
    }


def timesheet_to_entry(item: dict, service_report_data: dict | None = None) -> TimeEntry:
    """Convert one document entry back to a TimeEntry."""
    travel = item.get("travel") or {}
    entry_date = item.get("date", "")
    service_work = item.get("serviceWork") or (service_report_data or {}).get(entry_date, "")
    return TimeEntry(
        date=entry_date,
        travel_to=TimeSpan.model_validate(travel.get("to") or {}),
        travel_home=TimeSpan.model_validate(travel.get("home") or {}),
        onsite=TimeSpan.model_validate(item.get("onsite") or {}),
        lunch=bool(item.get("lunch", False)),
        lunch_duration=to_number(item.get("lunchDuration")),
        holiday=bool(item.get("holiday", False)),
        travel_only=bool(item.get("travelOnly", False)),
        service_work=service_work,
    )


def to_timesheet_document(report: ExtractedReport, rates: RateTable | None = None) -> dict:
    """Build the time-sheet import document for an extracted report."""
    rates = rates or RateTable()
    customer = report.customer
    city, state = split_location(customer.location)

    service_report_data = {
        entry.date: entry.service_work
        for entry in report.time_entries
        if entry.date and entry.service_work
    }

    per_diem_type = PER_DIEM_LOCAL_TYPE
    if report.charges.per_diem_rate and to_number(report.charges.per_diem_rate) == rates.per_diem_overnight:
        per_diem_type = PER_DIEM_OVERNIGHT_TYPE

    itinerary = report.travel_itinerary
    outbound = itinerary[0] if itinerary else None
    inbound = itinerary[1] if len(itinerary) > 1 else None

    return {
        "customerInfo": {
            "company": customer.company,
            "contact": customer.contact,
            "address": customer.address,
            "city": city,
            "state": state,
            "phone": "",
            "email": "",
            "purpose": customer.purpose,
        },
        "entries": [entry_to_timesheet(entry, customer.company) for entry in report.time_entries],
        "serviceReportData": service_report_data,
        "travelData": {
            "perDiemDays": report.charges.per_diem_days,
            "perDiemType": per_diem_type,
            "mileage": "",
            "otherTravel": report.charges.auto_rental.replace(",", ""),
            "airTravel": {
                "cost": report.charges.air_transport.replace(",", ""),
                "origin": outbound.depart_location if outbound else "",
                "destination": outbound.arrive_location if outbound else "",
                "return": inbound.arrive_location if inbound else "",
            },
        },
        "machineInfo": [],
        "invoiceInfo": {
            "invoiceNumber": report.sr_number,
            "invoiceDate": "",
            "dueDate": "",
            "poRefer": "",
            "serviceDates": "",
            "paymentTerms": "",
        },
    }


def load_timesheet_document(document: dict) -> TimesheetState:
    """
    Read a time-sheet document.

    Raises:
        FormatError: Required top-level keys missing
    """
    missing = missing_timesheet_keys(document)
    if missing:
        raise FormatError(f"Time-sheet document missing keys: {', '.join(missing)}")

    service_report_data = document.get("serviceReportData") or {}
    entries = [timesheet_to_entry(item, service_report_data) for item in document["entries"]]
    travel_data = TravelData.model_validate(document.get("travelData") or {})
    return TimesheetState(entries=entries, travel_data=travel_data, document=document)


class TimesheetSession:
    """Time-sheet state backed by an injected store."""

    def __init__(self, store: StateStore, rates: RateTable | None = None):
        self.store = store
        self.rates = rates or RateTable()

    def has_document(self) -> bool:
        return bool(self.store.load())

    def import_report(self, report: ExtractedReport) -> dict:
        """Replace the stored document with one built from a report."""
        document = to_timesheet_document(report, self.rates)
        self.store.save(document)
        return document

    def import_document(self, document: dict) -> TimesheetState:
        """Validate and store a document (e.g. an uploaded JSON file)."""
        state = load_timesheet_document(document)
        self.store.save(document)
        return state

    def state(self) -> TimesheetState:
        """
        Raises:
            FormatError: Store is empty or holds an invalid document
        """
        document = self.store.load()
        if not document:
            raise FormatError("No time-sheet document has been imported")
        return load_timesheet_document(document)

    def charges(self) -> ChargeSummary:
        state = self.state()
        return calculate_charges(state.entries, self.rates, state.travel_data)
