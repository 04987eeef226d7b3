"""ISO-8601 week arithmetic.

Week ids look like ``2026-W05``. Week 1 is the week holding the year's first
Thursday (equivalently, the week containing January 4th).
"""
import logging
import re
from datetime import date, timedelta
from typing import Optional, Tuple

from papersync.domain.WeeklyNote import DateRange
from papersync.utilities.constants import DAY_OFFSETS, ISO_DATE_FORMAT, WEEK_ID_PATTERN

logger = logging.getLogger(__name__)

_WEEK_ID_RE = re.compile(WEEK_ID_PATTERN)


def format_week_id(year: int, week_number: int) -> str:
    return f"{year}-W{week_number:02d}"


def is_week_id(value: str) -> bool:
    return bool(value) and bool(_WEEK_ID_RE.match(value))


def parse_week_id(week_id: str) -> Tuple[int, int]:
    """Split ``YYYY-Www`` into (year, week). Raises ValueError on bad syntax."""
    if not is_week_id(week_id):
        raise ValueError(f"Invalid week id: {week_id!r} (expected YYYY-Www)")
    year_str, week_str = week_id.split("-W")
    return int(year_str), int(week_str)


def week_id_from_date(d: date) -> str:
    iso = d.isocalendar()
    return format_week_id(iso[0], iso[1])


def current_week_id(today: Optional[date] = None) -> str:
    return week_id_from_date(today or date.today())


def week_start_date(week_id: str) -> date:
    """Monday of the given ISO week."""
    year, week_number = parse_week_id(week_id)
    jan1 = date(year, 1, 1)
    day_offset = jan1.weekday()  # Monday = 0
    first_monday = jan1 - timedelta(days=day_offset)
    if day_offset > 3:
        # Jan 1 falls Fri..Sun, so it still belongs to the previous year's last week
        first_monday += timedelta(days=7)
    return first_monday + timedelta(weeks=week_number - 1)


def week_end_date(week_id: str) -> date:
    """Sunday of the given ISO week."""
    return week_start_date(week_id) + timedelta(days=6)


def week_date_range(week_id: str) -> DateRange:
    return DateRange(
        start=week_start_date(week_id).strftime(ISO_DATE_FORMAT),
        end=week_end_date(week_id).strftime(ISO_DATE_FORMAT),
    )


def weekday_offset(day_name: str) -> int:
    """0 for Monday .. 6 for Sunday; unknown names fall back to Monday."""
    key = (day_name or "").strip().capitalize()
    if key not in DAY_OFFSETS:
        logger.warning("Unrecognized weekday %r, defaulting to Monday", day_name)
        return 0
    return DAY_OFFSETS[key]


def date_for_weekday(day_name: str, week_id: str) -> str:
    target = week_start_date(week_id) + timedelta(days=weekday_offset(day_name))
    return target.strftime(ISO_DATE_FORMAT)


def normalize_day_name(day: str) -> str:
    """Canonical capitalization for known weekdays; anything else passes through."""
    key = (day or "").strip().capitalize()
    return key if key in DAY_OFFSETS else day


__all__ = [
    'format_week_id', 'is_week_id', 'parse_week_id', 'week_id_from_date', 'current_week_id',
    'week_start_date', 'week_end_date', 'week_date_range', 'weekday_offset',
    'date_for_weekday', 'normalize_day_name',
]
