"""Tests for date serial and time-of-day conversion."""

from datetime import date, datetime, time

import pytest

from core.errors import MalformedDate, MalformedTime
from core.timeutils import (
    MINUTES_PER_DAY,
    date_to_excel_serial,
    day_abbreviation,
    excel_serial_to_date,
    excel_time_to_string,
    hours_between,
    is_saturday,
    is_sunday,
    month_day_keys,
    normalize_time,
    parse_iso_date,
    parse_slash_date,
    parse_time_minutes,
    time_string_to_excel,
)


class TestTimeOfDay:
    def test_fraction_of_day(self):
        assert excel_time_to_string(0.5) == "12:00"
        assert excel_time_to_string(0.25) == "6:00"
        assert excel_time_to_string(7 / 24) == "7:00"

    def test_fraction_rounds_to_nearest_minute(self):
        assert excel_time_to_string(0.3541666) == "8:30"

    def test_datetime_and_time_values(self):
        assert excel_time_to_string(time(16, 45)) == "16:45"
        assert excel_time_to_string(datetime(2023, 1, 1, 7, 5)) == "7:05"

    def test_string_values_normalized(self):
        assert excel_time_to_string("07:00") == "7:00"
        assert normalize_time("16:30:00") == "16:30"

    def test_empty_values(self):
        assert excel_time_to_string(None) == ""
        assert excel_time_to_string("") == ""

    def test_midnight(self):
        assert excel_time_to_string(0) == "0:00"
        assert excel_time_to_string(0.0) == "0:00"
        assert excel_time_to_string(time(0, 0)) == "0:00"

    @pytest.mark.parametrize("value", ["noon", "24:00", "25:00", "7:75", True])
    def test_malformed_time(self, value):
        with pytest.raises(MalformedTime):
            excel_time_to_string(value)

    def test_string_to_fraction(self):
        assert time_string_to_excel("12:00") == 0.5
        assert time_string_to_excel("0:00") == 0.0

    @pytest.mark.parametrize("minute", range(MINUTES_PER_DAY))
    def test_every_minute_survives_fraction(self, minute):
        hours, minutes = divmod(minute, 60)
        for text in (f"{hours}:{minutes:02d}", f"{hours:02d}:{minutes:02d}"):
            restored = excel_time_to_string(time_string_to_excel(text))
            assert parse_time_minutes(restored) == minute
            assert restored == f"{hours}:{minutes:02d}"

    def test_hours_between(self):
        assert hours_between("7:00", "16:00") == 9.0
        assert hours_between("12:00", "12:30") == 0.5
        assert hours_between("16:00", "7:00") == -9.0


class TestDateSerial:
    def test_epoch_serial(self):
        assert excel_serial_to_date(25569) == date(1970, 1, 1)

    def test_known_serial(self):
        assert excel_serial_to_date(44927) == date(2023, 1, 1)
        assert excel_serial_to_date(44927.75) == date(2023, 1, 1)

    def test_serials_before_phantom_leap_day(self):
        assert excel_serial_to_date(1) == date(1900, 1, 1)
        assert excel_serial_to_date(59) == date(1900, 2, 28)
        assert excel_serial_to_date(61) == date(1900, 3, 1)

    def test_phantom_leap_day_rejected(self):
        with pytest.raises(MalformedDate):
            excel_serial_to_date(60)

    @pytest.mark.parametrize("value", [0, -5, "next week", True])
    def test_malformed_serial(self, value):
        with pytest.raises(MalformedDate):
            excel_serial_to_date(value)

    def test_date_cells_pass_through(self):
        assert excel_serial_to_date(datetime(2024, 9, 16, 0, 0)) == date(2024, 9, 16)
        assert excel_serial_to_date(date(2024, 9, 16)) == date(2024, 9, 16)

    @pytest.mark.parametrize("d", [date(1900, 1, 1), date(1900, 3, 1), date(2024, 9, 16)])
    def test_inverse(self, d):
        assert excel_serial_to_date(date_to_excel_serial(d)) == d

    @pytest.mark.parametrize(
        "serial",
        [*range(1, 60), *range(61, 101), *range(44897, 44958)],
    )
    def test_serial_survives_date(self, serial):
        assert date_to_excel_serial(excel_serial_to_date(serial)) == serial


class TestTextDates:
    def test_two_digit_year(self):
        assert parse_slash_date("09/16/24") == date(2024, 9, 16)

    def test_four_digit_year(self):
        assert parse_slash_date("6/20/2022") == date(2022, 6, 20)

    @pytest.mark.parametrize("value", ["13/01/24", "2024-09-16", "9/16"])
    def test_malformed(self, value):
        with pytest.raises(MalformedDate):
            parse_slash_date(value)

    def test_iso(self):
        assert parse_iso_date("2024-09-16") == date(2024, 9, 16)
        with pytest.raises(MalformedDate):
            parse_iso_date("")

    def test_month_day_keys(self):
        assert month_day_keys(date(2024, 9, 6)) == ("9/6", "09/06")


class TestWeekdays:
    def test_sunday_first_abbreviations(self):
        assert day_abbreviation(date(2024, 9, 15)) == "Sun"
        assert day_abbreviation(date(2024, 9, 16)) == "Mon"
        assert day_abbreviation(date(2024, 9, 21)) == "Sat"

    def test_weekend(self):
        assert is_saturday(date(2024, 9, 21))
        assert is_sunday(date(2024, 9, 22))
        assert not is_sunday(date(2024, 9, 21))
