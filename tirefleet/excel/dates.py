"""Spreadsheet date normalization.

Cells in imported workbooks arrive as native datetimes, numeric serial dates
or free-form strings. Everything is reduced to a canonical ``YYYY-MM-DD``
string; anything unreadable becomes today's local date.

Strings of the form ``DD-MM-YYYY`` / ``DD/MM/YYYY`` are always read day-first.
``08-01-2026`` is the 8th of January, never August 1st.
"""

from __future__ import annotations

import datetime
import math
import re
from typing import Any, Final

# Day 0 of the spreadsheet calendar is 1899-12-30, which is 25569 days
# before the Unix epoch.
SERIAL_EPOCH_OFFSET_DAYS: Final[int] = 25569
SECONDS_PER_DAY: Final[int] = 86400

_DAY_FIRST = re.compile(r"^(\d{1,2})[-/](\d{1,2})[-/](\d{4})$")
_DOTTED = re.compile(r"^(\d{4})\.(\d{1,2})\.(\d{1,2})$")

_FALLBACK_FORMATS: Final[tuple[str, ...]] = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
)


def _iso(value: datetime.date) -> str:
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def _from_serial(serial: float) -> datetime.date | None:
    if math.isnan(serial) or math.isinf(serial):
        return None
    seconds = (serial - SERIAL_EPOCH_OFFSET_DAYS) * SECONDS_PER_DAY
    try:
        moment = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc) + datetime.timedelta(
            seconds=seconds
        )
    except OverflowError:
        return None
    return moment.date()


def _parse_string(text: str) -> datetime.date | None:
    m = _DAY_FIRST.match(text)
    if m:
        day, month, year = (int(g) for g in m.groups())
        try:
            return datetime.date(year, month, day)
        except ValueError:
            return None

    m = _DOTTED.match(text)
    if m:
        try:
            return datetime.date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        except ValueError:
            return None

    try:
        return datetime.date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.datetime.fromisoformat(text).date()
    except ValueError:
        pass
    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_cell_date(value: Any) -> datetime.date | None:
    """Convert one spreadsheet cell to a date, or None if it can't be read."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime.datetime):
        # Calendar parts as written, no timezone conversion
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, (int, float)):
        return _from_serial(float(value))
    text = str(value).strip()
    if not text:
        return None
    return _parse_string(text)


def normalize_date(value: Any, today: datetime.date | None = None) -> str:
    """Return ``value`` as ``YYYY-MM-DD``, falling back to today's local date."""
    parsed = parse_cell_date(value)
    if parsed is None:
        parsed = today or datetime.date.today()
    return _iso(parsed)


def today_iso() -> str:
    return _iso(datetime.date.today())
