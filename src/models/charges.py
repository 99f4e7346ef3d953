"""
Data models for derived hours, rate tables and charge summaries.
"""

from pydantic import BaseModel, Field

from core import config
from models.entries import CamelModel


class RateTable(BaseModel):
    """Hourly rates per bucket kind plus tiering policy."""

    straight: float = config.STRAIGHT_RATE
    overtime: float = config.OVERTIME_RATE
    double: float = config.DOUBLE_RATE
    weekday_travel: float = config.WEEKDAY_TRAVEL_RATE
    saturday_travel: float = config.SATURDAY_TRAVEL_RATE
    sunday_travel: float = config.SUNDAY_TRAVEL_RATE
    straight_hours_per_day: float = config.STRAIGHT_HOURS_PER_DAY
    holiday_travel_as_sunday: bool = config.HOLIDAY_TRAVEL_AS_SUNDAY
    per_diem_overnight: float = config.PER_DIEM_OVERNIGHT
    per_diem_local: float = config.PER_DIEM_LOCAL
    mileage: float = config.MILEAGE_RATE


class ChargeBucket(CamelModel):
    hours: float = 0.0
    rate: float = 0.0
    charge: float = 0.0


class EntryHours(CamelModel):
    """Hours derived from one TimeEntry."""

    date: str
    travel_hours: float = 0.0
    work_hours: float = 0.0
    straight: float = 0.0
    overtime: float = 0.0
    double: float = 0.0
    total: float = 0.0


class AirTravel(CamelModel):
    cost: str = ""
    origin: str = ""
    destination: str = ""
    return_: str = Field(default="", alias="return")


class TravelData(CamelModel):
    """Travel expense inputs of a time-sheet document."""

    per_diem_days: str = ""
    per_diem_type: str = "overnight"  # "overnight" or "local"
    mileage: str = ""
    other_travel: str = ""
    air_travel: AirTravel = Field(default_factory=AirTravel)


class TravelExpenses(CamelModel):
    per_diem_total: float = 0.0
    mileage_total: float = 0.0
    other_travel: float = 0.0
    air_travel: float = 0.0
    travel_expenses_subtotal: float = 0.0


class ChargeSummary(CamelModel):
    straight: ChargeBucket
    overtime: ChargeBucket
    double: ChargeBucket
    weekday_travel: ChargeBucket
    saturday_travel: ChargeBucket
    sunday_travel: ChargeBucket
    labor_subtotal: float
    travel_charges_subtotal: float
    travel: TravelExpenses = Field(default_factory=TravelExpenses)
    processed_entries: list[EntryHours] = Field(default_factory=list)
