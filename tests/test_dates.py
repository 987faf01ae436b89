"""
Unit tests for tirefleet.excel.dates
====================================

Spreadsheet cells are normalized to YYYY-MM-DD; unreadable input falls back
to "today", which is pinned here to keep the tests deterministic.
"""

import datetime

import pytest

from tirefleet.excel.dates import normalize_date, parse_cell_date
from tirefleet.utils.date_helpers import format_date_display

TODAY = datetime.date(2026, 10, 18)


# -------------------------
# Tests: strings
# -------------------------
@pytest.mark.parametrize("value", ["2026-01-08", "1999-12-31", "2024-02-29"])
def test_canonical_string_is_unchanged(value):
    assert normalize_date(value, today=TODAY) == value
    assert normalize_date(normalize_date(value, today=TODAY), today=TODAY) == value


def test_day_first_dashes():
    # 8 January, never 1 August
    assert normalize_date("08-01-2026", today=TODAY) == "2026-01-08"


@pytest.mark.parametrize("value", ["8/1/2026", "08/01/2026", "8-1-2026"])
def test_day_first_single_digits_and_slashes(value):
    assert normalize_date(value, today=TODAY) == "2026-01-08"


def test_day_first_pattern_rejects_impossible_date():
    assert normalize_date("31-02-2026", today=TODAY) == "2026-10-18"


def test_generic_parsing_fallbacks():
    assert normalize_date("2026-01-08T10:15:00", today=TODAY) == "2026-01-08"
    assert normalize_date("2026/01/08", today=TODAY) == "2026-01-08"
    assert normalize_date("2025.9.1", today=TODAY) == "2025-09-01"
    assert normalize_date("  2026-01-08  ", today=TODAY) == "2026-01-08"


@pytest.mark.parametrize("value", ["2026-1-8", "2026-01-8", "2026-1-08"])
def test_unpadded_year_first_dates(value):
    assert normalize_date(value, today=TODAY) == "2026-01-08"


@pytest.mark.parametrize("value", ["not a date", "13-13-13", "2026-13-01", "01.02"])
def test_unparseable_string_falls_back_to_today(value):
    assert normalize_date(value, today=TODAY) == "2026-10-18"


# -------------------------
# Tests: native and numeric cells
# -------------------------
def test_serial_number_uses_epoch_offset():
    # 45000 - 25569 = 19431 days after 1970-01-01
    assert normalize_date(45000, today=TODAY) == "2023-03-15"
    assert normalize_date(45000.75, today=TODAY) == "2023-03-15"
    assert normalize_date(25569, today=TODAY) == "1970-01-01"


def test_datetime_keeps_calendar_parts():
    value = datetime.datetime(2026, 1, 8, 23, 59)
    assert normalize_date(value, today=TODAY) == "2026-01-08"


def test_aware_datetime_is_not_converted():
    tz = datetime.timezone(datetime.timedelta(hours=7))
    value = datetime.datetime(2026, 1, 8, 1, 0, tzinfo=tz)
    assert normalize_date(value, today=TODAY) == "2026-01-08"


def test_date_is_zero_padded():
    assert normalize_date(datetime.date(2026, 3, 5), today=TODAY) == "2026-03-05"


@pytest.mark.parametrize("value", [None, "", "   ", True, float("nan")])
def test_missing_values_fall_back_to_today(value):
    assert normalize_date(value, today=TODAY) == "2026-10-18"


def test_default_today_is_local_date():
    assert normalize_date(None) == datetime.date.today().isoformat()


def test_parse_cell_date_returns_none_for_garbage():
    assert parse_cell_date("garbage") is None
    assert parse_cell_date(45000) == datetime.date(2023, 3, 15)


# -------------------------
# Tests: display helper
# -------------------------
def test_format_date_display():
    assert format_date_display("2026-01-08") == "08-01-2026"
    assert format_date_display(None) == "-"
    assert format_date_display("") == "-"
    assert format_date_display("kemarin") == "kemarin"
