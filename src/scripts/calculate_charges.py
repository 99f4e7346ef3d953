#!/usr/bin/env python3
"""
Calculate labor and travel charges for a time-sheet JSON document.

Usage:
    uv run python src/scripts/calculate_charges.py <timesheet.json>

Example:
    uv run python src/scripts/calculate_charges.py output/timesheets/sr_2024016.json
"""

import argparse
import json
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.store import JsonFileStore
from core.validation import validate_entries
from services.timesheet import TimesheetSession


def print_summary(summary) -> None:
    """Print the charge buckets as a small table."""
    rows = [
        ("Straight", summary.straight),
        ("Sat/OT", summary.overtime),
        ("Sun/Hol", summary.double),
        ("Weekday travel", summary.weekday_travel),
        ("Saturday travel", summary.saturday_travel),
        ("Sun/Hol travel", summary.sunday_travel),
    ]
    print(f"{'Category':<18}{'Hours':>8}{'Rate':>10}{'Charge':>12}")
    for label, bucket in rows:
        print(f"{label:<18}{bucket.hours:>8.2f}{bucket.rate:>10.2f}{bucket.charge:>12.2f}")
    print(f"\nLabor subtotal:           {summary.labor_subtotal:>12.2f}")
    print(f"Travel charges subtotal:  {summary.travel_charges_subtotal:>12.2f}")
    print(f"Travel expenses subtotal: {summary.travel.travel_expenses_subtotal:>12.2f}")


def main():
    parser = argparse.ArgumentParser(
        description="Calculate labor and travel charges for a time-sheet document"
    )
    parser.add_argument(
        "input_file",
        type=Path,
        help="Path to the time-sheet JSON document",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full charge summary as JSON",
    )

    args = parser.parse_args()

    try:
        if not args.input_file.exists():
            raise FileNotFoundError(f"Input file not found: {args.input_file}")

        session = TimesheetSession(JsonFileStore(args.input_file))
        state = session.state()

        for problem in validate_entries(state.entries):
            print(f"Warning: {problem}", file=sys.stderr)

        summary = session.charges()
        if args.json:
            print(json.dumps(summary.to_json_dict(), indent=2))
        else:
            print_summary(summary)
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
