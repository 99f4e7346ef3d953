"""Tests for PDF page text extraction (both templates)."""

import pytest

from core.config import VARIANT_SPREADSHEET, VARIANT_TEXT_A, VARIANT_TEXT_B
from core.errors import FormatError, MalformedDate
from services.calculator import calculate_hours
from services.extractor import extract_report
from services.text_report import TextSource, extract_text_report


class TestVariantB:
    def test_narrative_attached_to_time_row(self, text_source_b):
        report = extract_text_report(text_source_b, VARIANT_TEXT_B)

        monday = report.time_entries[0]
        assert monday.date == "2024-09-16"
        assert monday.day == "Mon"
        assert monday.service_work == "Replaced bearing"
        assert report.time_entries[1].service_work == "Tested wrapper"

    def test_entries_and_hours(self, text_source_b):
        report = extract_text_report(text_source_b, VARIANT_TEXT_B)

        assert [e.date for e in report.time_entries] == ["2024-09-16", "2024-09-17"]
        monday = report.time_entries[0]
        assert (monday.onsite.start, monday.onsite.end) == ("7:00", "16:00")
        assert monday.lunch_duration == 0.5
        assert monday.totals.total_hours == "8.5"
        assert calculate_hours(monday).work_hours == 8.5
        assert calculate_hours(report.time_entries[1]).work_hours == 9.5

    def test_header_fields(self, text_source_b):
        report = extract_text_report(text_source_b, VARIANT_TEXT_B)

        assert report.sr_number == "2024133"
        assert report.customer.company == "Acme Packaging"
        assert report.customer.address == "1200 Industrial Way"
        assert report.customer.location == "Portland, OR"
        assert report.customer.title == "Maintenance Manager"
        assert report.customer.contact == "Jane Smith"
        assert report.customer.purpose == "Repair wrapper drive"

    def test_charges(self, text_source_b):
        charges = extract_text_report(text_source_b, VARIANT_TEXT_B).charges

        assert charges.auto_rental == "412.50"
        assert charges.air_transport == "1250.00"
        assert charges.straight_hours == ""

    def test_no_warnings(self, text_source_b):
        assert extract_text_report(text_source_b, VARIANT_TEXT_B).warnings == []


class TestVariantA:
    def test_header_fields(self, text_source_a):
        report = extract_text_report(text_source_a, VARIANT_TEXT_A)

        assert report.sr_number == "2024133"
        assert report.customer.company == "Acme Packaging"
        assert report.customer.address == "1200 Industrial Way"
        assert report.customer.location == "Portland, OR"
        assert report.customer.purpose == "Repair wrapper drive"
        assert report.customer.contact == "Jane Smith"
        assert report.customer.title == "Maintenance Manager"

    def test_charges(self, text_source_a):
        charges = extract_text_report(text_source_a, VARIANT_TEXT_A).charges

        assert charges.straight_hours == "8.5"
        assert charges.overtime_hours == "0"
        assert charges.weekday_travel_hours == "16"
        assert charges.per_diem_days == "3"
        assert charges.per_diem_rate == "220"
        assert charges.auto_rental == "350.00"
        assert charges.air_transport == "1250.00"

    def test_itinerary(self, text_source_a):
        legs = extract_text_report(text_source_a, VARIANT_TEXT_A).travel_itinerary

        assert len(legs) == 2
        outbound, inbound = legs
        assert outbound.date == "2022-06-20"
        assert (outbound.depart_time, outbound.depart_zone) == ("5:00", "MST")
        assert outbound.depart_location == "Gilbert, AZ"
        assert (outbound.arrive_time, outbound.arrive_location) == ("13:30", "Portland, OR")
        assert inbound.date == "2022-06-22"
        assert inbound.arrive_location == "Gilbert, AZ"

    def test_travel_to_day(self, text_source_a):
        monday = extract_text_report(text_source_a, VARIANT_TEXT_A).time_entries[0]

        assert monday.date == "2022-06-20"
        assert monday.travel_to.active is True
        assert (monday.travel_to.start, monday.travel_to.end) == ("5:00", "13:30")
        assert monday.onsite.start == "13:30"
        assert monday.onsite.end == "17:00"
        assert monday.lunch is False
        assert monday.service_work == "Travel to site"

    def test_work_day(self, text_source_a):
        tuesday = extract_text_report(text_source_a, VARIANT_TEXT_A).time_entries[1]

        assert (tuesday.onsite.start, tuesday.onsite.end) == ("7:00", "16:00")
        assert tuesday.lunch_duration == 0.5
        assert tuesday.service_work == "Replaced bearing"
        assert tuesday.travel_to.active is False

    def test_travel_home_day(self, text_source_a):
        wednesday = extract_text_report(text_source_a, VARIANT_TEXT_A).time_entries[2]

        assert wednesday.travel_home.active is True
        assert (wednesday.travel_home.start, wednesday.travel_home.end) == ("14:00", "19:30")
        assert wednesday.onsite.end == "14:00"

    def test_custom_home_base(self, text_source_a):
        report = extract_text_report(
            text_source_a, VARIANT_TEXT_A, home_base_keywords=("portland",)
        )
        monday = report.time_entries[0]
        # Outbound leg now departs from somewhere other than home base
        assert monday.travel_to.active is False
        assert monday.travel_home.active is True


class TestErrors:
    def test_empty_text_raises_format_error(self):
        with pytest.raises(FormatError):
            extract_text_report(TextSource(text="   "), VARIANT_TEXT_A)

    def test_spreadsheet_variant_rejected(self, text_source_a):
        with pytest.raises(ValueError):
            extract_text_report(text_source_a, VARIANT_SPREADSHEET)

    def test_dispatch_rejects_cell_grid(self, sample_grid):
        with pytest.raises(ValueError):
            extract_report(sample_grid, VARIANT_TEXT_B)

    def test_unreadable_row_date_is_warning(self):
        source = TextSource(text="Mon 13/45/24 7:00 12:00 12:30 16:00")
        report = extract_text_report(source, VARIANT_TEXT_B)

        assert report.time_entries == []
        assert report.warnings

    def test_unreadable_row_date_strict(self):
        source = TextSource(text="Mon 13/45/24 7:00 12:00 12:30 16:00")
        with pytest.raises(MalformedDate):
            extract_text_report(source, VARIANT_TEXT_B, strict=True)

    def test_missing_fields_default_to_empty(self):
        report = extract_text_report(TextSource(text="nothing useful"), VARIANT_TEXT_A)

        assert report.sr_number == ""
        assert report.customer.company == ""
        assert report.time_entries == []


def test_progress_printed_unless_silent(text_source_b, capsys):
    extract_text_report(text_source_b, VARIANT_TEXT_B, silent=False)
    assert "time entries" in capsys.readouterr().out

    extract_text_report(text_source_b, VARIANT_TEXT_B)
    assert capsys.readouterr().out == ""
