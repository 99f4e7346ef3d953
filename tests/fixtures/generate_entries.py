#!/usr/bin/env python3
"""
Generate randomized time-sheet entries for calculator tests.

Run directly to write a time-sheet JSON document for trying out
src/scripts/calculate_charges.py.
"""

import json
import random
import sys
from datetime import date, timedelta
from pathlib import Path

from faker import Faker

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from core.store import JsonFileStore  # noqa: E402
from core.timeutils import format_minutes  # noqa: E402
from models.entries import TimeEntry, TimeSpan  # noqa: E402
from services.timesheet import entry_to_timesheet  # noqa: E402

# Output file
OUTPUT_FILE = Path(__file__).parent / "timesheet.json"

# Onsite windows start between 5:00 and 9:00 and run 2-13 hours
START_MINUTES = range(5 * 60, 9 * 60 + 1, 15)
DURATION_MINUTES = range(2 * 60, 13 * 60 + 1, 15)
LUNCH_DURATIONS = [0.0, 0.0, 0.5, 0.5, 1.0]

SERVICE_DESCRIPTIONS = [
    "Replaced drive bearing",
    "Adjusted film carriage",
    "Calibrated load cell",
    "Rebuilt gearbox",
    "Operator training",
    "Preventive maintenance",
    "Replaced worn belts",
]


def random_entry(fake: Faker, entry_date: date, holiday: bool = False) -> TimeEntry:
    """One onsite day with a random window and lunch."""
    start = random.choice(START_MINUTES)
    end = start + random.choice(DURATION_MINUTES)
    lunch = random.choice(LUNCH_DURATIONS)
    return TimeEntry(
        date=entry_date.isoformat(),
        onsite=TimeSpan(active=True, start=format_minutes(start), end=format_minutes(end)),
        lunch=lunch > 0,
        lunch_duration=lunch,
        holiday=holiday,
        service_work=random.choice(SERVICE_DESCRIPTIONS) + ". " + fake.sentence(nb_words=5),
    )


def generate_entries(count: int = 20, seed: int | None = None) -> list[TimeEntry]:
    """Entries on consecutive days from a random start date; about 1 in 10 is a holiday."""
    fake = Faker()
    if seed is not None:
        Faker.seed(seed)
        random.seed(seed)

    first = fake.date_between(start_date=date(2023, 1, 1), end_date=date(2025, 12, 31))
    return [
        random_entry(fake, first + timedelta(days=i), holiday=random.random() < 0.1)
        for i in range(count)
    ]


def main():
    entries = generate_entries(14)
    company = Faker().company()
    document = {
        "customerInfo": {"company": company},
        "entries": [entry_to_timesheet(e, company) for e in entries],
        "serviceReportData": {},
        "travelData": {"perDiemDays": "3", "perDiemType": "overnight"},
        "machineInfo": [],
        "invoiceInfo": {},
    }
    JsonFileStore(OUTPUT_FILE).save(document)
    print(f"Wrote {len(entries)} entries to: {OUTPUT_FILE}")
    print(json.dumps(document["entries"][0], indent=2))


if __name__ == "__main__":
    main()
