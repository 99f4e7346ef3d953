#!/usr/bin/env python3
"""
Extract a field service report into structured JSON.

Reads an EFSR Excel workbook or a single-page PDF service report, prints the
extracted report (or the time-sheet import document) as JSON and optionally
writes an Excel workbook with the calculated charges.

Usage:
    uv run python src/scripts/extract_report.py <input_file> --variant <variant>

Example:
    uv run python src/scripts/extract_report.py data/SR2024016.xlsx --variant spreadsheet --xlsx
    uv run python src/scripts/extract_report.py data/SR2024133.pdf --variant text-variant-B --timesheet
"""

import argparse
import json
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import STRICT_PARSING, VARIANTS
from services.extractor import extract_file
from services.timesheet import to_timesheet_document
from services.workbook import save_report_workbook


def main():
    parser = argparse.ArgumentParser(
        description="Extract a field service report into structured JSON"
    )
    parser.add_argument(
        "input_file",
        type=Path,
        help="Path to the service report (.xlsx/.xlsm or .pdf)",
    )
    parser.add_argument(
        "--variant",
        required=True,
        choices=VARIANTS,
        help="Report format variant",
    )
    parser.add_argument(
        "--timesheet",
        action="store_true",
        help="Print the time-sheet import document instead of the raw report",
    )
    parser.add_argument(
        "--xlsx",
        action="store_true",
        help="Also write an Excel workbook with calculated charges",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=STRICT_PARSING,
        help="Fail on malformed times/dates instead of recording warnings",
    )

    args = parser.parse_args()

    try:
        # stdout carries only the JSON document
        report = extract_file(args.input_file, args.variant, strict=args.strict, silent=True)

        if args.timesheet:
            output = to_timesheet_document(report)
        else:
            output = report.to_json_dict()
        print(json.dumps(output, indent=2))

        for warning in report.warnings:
            print(f"Warning: {warning}", file=sys.stderr)

        if args.xlsx:
            output_path = save_report_workbook(report, silent=True)
            print(f"Saved Excel report to: {output_path}", file=sys.stderr)
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
