from __future__ import annotations

from datetime import date, datetime

import pytest

from core.errors import InvalidInput
from core.holidays import generate_available_dates, is_croatian_public_holiday, is_weekend, parse_booking_date


def test_parse_booking_date_accepts_iso_strings_and_datetimes():
    assert parse_booking_date("2026-10-24") == date(2026, 10, 24)
    assert parse_booking_date("2026-10-24T09:30:00") == date(2026, 10, 24)
    assert parse_booking_date(datetime(2026, 10, 24, 9, 30)) == date(2026, 10, 24)


@pytest.mark.parametrize("value", ["24.10.2026.", "", 20261024])
def test_parse_booking_date_rejects_other_formats(value):
    with pytest.raises(InvalidInput):
        parse_booking_date(value)


def test_weekend_detection():
    assert is_weekend(date(2026, 10, 24)) is True
    assert is_weekend(date(2026, 10, 25)) is True
    assert is_weekend(date(2026, 10, 26)) is False


@pytest.mark.parametrize("day", [date(2026, 1, 1), date(2026, 5, 30), date(2026, 8, 5), date(2026, 12, 26)])
def test_fixed_public_holidays(day):
    assert is_croatian_public_holiday(day) is True


def test_ordinary_day_is_not_a_holiday():
    assert is_croatian_public_holiday("2026-10-21") is False


def test_available_dates_skip_sundays():
    dates = generate_available_dates(7, today=date(2026, 10, 19))

    assert dates[0] == date(2026, 10, 20)
    assert date(2026, 10, 25) not in dates
    assert len(dates) == 6
    assert all(day.weekday() != 6 for day in dates)
