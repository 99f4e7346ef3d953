"""
Data models for time entries and extracted service reports.

Pydantic models with camelCase JSON aliases so a report serializes to the flat
document the time-sheet application imports.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model: snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True)


class TimeSpan(CamelModel):
    """A start/end window within one day, times as 'H:MM'."""

    active: bool = False
    start: str = ""
    end: str = ""


class RowTotals(CamelModel):
    """Numeric totals printed at the end of a time row (informational)."""

    travel_time: str = ""
    labor_time: str = ""
    total_hours: str = ""
    straight_time: str = ""
    overtime: str = ""


class TimeEntry(CamelModel):
    """One workday's activity."""

    date: str  # YYYY-MM-DD, empty if the source date was malformed
    day: str = ""
    travel_to: TimeSpan = Field(default_factory=TimeSpan)
    travel_home: TimeSpan = Field(default_factory=TimeSpan)
    onsite: TimeSpan = Field(default_factory=TimeSpan)
    lunch: bool = False
    lunch_duration: float = 0.0
    holiday: bool = False
    travel_only: bool = False
    service_work: str = ""
    totals: RowTotals = Field(default_factory=RowTotals)


class CustomerInfo(CamelModel):
    company: str = ""
    contact: str = ""
    title: str = ""
    address: str = ""
    location: str = ""  # "City, ST"
    equipment: str = ""
    purpose: str = ""


class ReportCharges(CamelModel):
    """Charge totals as printed on the report; '' means not found."""

    straight_hours: str = ""
    overtime_hours: str = ""
    weekday_travel_hours: str = ""
    per_diem_days: str = ""
    per_diem_rate: str = ""
    auto_rental: str = ""
    air_transport: str = ""


class TravelLeg(CamelModel):
    """One directional travel segment from the itinerary."""

    date: str = ""  # YYYY-MM-DD
    depart_time: str = ""
    depart_zone: str = ""
    depart_location: str = ""
    arrive_time: str = ""
    arrive_zone: str = ""
    arrive_location: str = ""


class ExtractedReport(CamelModel):
    """Result of extracting one service report document."""

    model_config = ConfigDict(frozen=True)

    sr_number: str = ""
    variant: str = ""
    customer: CustomerInfo = Field(default_factory=CustomerInfo)
    time_entries: list[TimeEntry] = Field(default_factory=list)
    charges: ReportCharges = Field(default_factory=ReportCharges)
    travel_itinerary: list[TravelLeg] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
