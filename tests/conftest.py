"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from models.entries import TimeEntry, TimeSpan  # noqa: E402
from services.text_report import TextSource  # noqa: E402

# Older template: values follow their labels
TEXT_VARIANT_A = (
    "SR#2024133 Josh@JTIAZ.com Acme Packaging 6/20/2022 "
    "1200 Industrial Way, Portland, OR Repair wrapper drive "
    "SERVICE PERFORMED Monday 6/20- Travel to site Tuesday 6/21- Replaced bearing "
    "Accepted By Customer signature: Jane Smith Maintenance Manager $1,200.00 $2,400.00 "
    "Straight Time 8.5 Hours Saturday/Overtime 0 Hours Weekday Travel 16 Hours "
    "Per Diem Days 3 x $220 /Day Auto Rental and Fuel Cost $350.00 "
    "Air Transportation $1,250.00 "
    "TRAVEL ITINERARY Monday 6/20/2022 5:00 MST Gilbert, AZ 13:30 PST Portland, OR "
    "Wednesday 6/22/2022 14:00 PST Portland, OR 19:30 MST Gilbert, AZ "
    "TIME Mon 06/20/22 Tue 06/21/22 7:00 12:00 12:30 16:00 Wed 06/22/22 7:00 12:00"
)

# Newer template: values printed ahead of their labels
TEXT_VARIANT_B = (
    "2024133 SERVICE REPORT # Acme Packaging 1200 Industrial Way, Portland, OR "
    "Jane Smith Maintenance Manager "
    "Purpose of Service Call Repair wrapper drive SERVICE PERFORMED "
    "Monday 9/16- Replaced bearing Mon 09/16/24 7:00 12:00 12:30 16:00 0 8.5 8.5 8 0.5 "
    "Tuesday 9/17- Tested wrapper Tue 09/17/24 7:00 12:00 12:30 17:00 "
    "Auto Rental / Fuel Cost $412.50 Air Transportation $1,250.00"
)


@pytest.fixture
def sample_grid():
    """EFSR cell grid with one Sunday time row (serial 44927 = 2023-01-01)."""
    return {
        "EFSR": {
            "B3": "2024016",
            "B6": "Acme Co",
            "B7": "1200 Industrial Way",
            "B8": "Portland, OR",
            "B9": "Jane Smith",
            "B10": "Maintenance Manager",
            "F8": "WR-2000",
            "F11": "Repair",
            "A13": "Sunday 1/1- Emergency bearing replacement",
            "A41": 44927,
            "B41": "7:00",
            "C41": "12:00",
            "D41": "12:30",
            "E41": "15:30",
            "C49": 8.0,
            "H49": 1,
            "J52": "1,250.00",
        }
    }


@pytest.fixture
def text_source_a():
    return TextSource(text=TEXT_VARIANT_A, fragments=[{"text": w} for w in TEXT_VARIANT_A.split()])


@pytest.fixture
def text_source_b():
    return TextSource(text=TEXT_VARIANT_B, fragments=[{"text": w} for w in TEXT_VARIANT_B.split()])


def make_entry(
    entry_date: str,
    start: str = "8:00",
    end: str = "16:00",
    lunch: float = 0.0,
    **kwargs,
) -> TimeEntry:
    """Onsite-only entry; extra fields (holiday, travel_to, ...) pass through."""
    return TimeEntry(
        date=entry_date,
        onsite=TimeSpan(active=True, start=start, end=end),
        lunch=lunch > 0,
        lunch_duration=lunch,
        **kwargs,
    )


@pytest.fixture
def sample_entries():
    """One week in September 2024: Mon-Fri 10h days, Saturday 8h, Sunday travel home."""
    week = [
        make_entry("2024-09-16", "7:00", "17:30", lunch=0.5,
                   travel_to=TimeSpan(active=True, start="5:00", end="7:00")),
        make_entry("2024-09-17", "7:00", "17:30", lunch=0.5),
        make_entry("2024-09-18", "7:00", "17:30", lunch=0.5),
        make_entry("2024-09-19", "7:00", "17:30", lunch=0.5),
        make_entry("2024-09-20", "7:00", "17:30", lunch=0.5),
        make_entry("2024-09-21", "8:00", "16:00"),
        TimeEntry(
            date="2024-09-22",
            travel_only=True,
            travel_home=TimeSpan(active=True, start="9:00", end="13:00"),
        ),
    ]
    return week
