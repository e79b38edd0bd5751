# src/datebook/tasks/dates.py

"""
Calendar helpers for date keys and view windows.

All dates are local wall-clock calendar days (datetime.date); nothing here
looks at time zones.

Month/year arithmetic rolls day-of-month overflow into the following month
instead of clamping: 2024-01-31 + 1 month is 2024-03-02. Results past the
range datetime.date supports (years 1..9999) are pinned to date.min/date.max.
"""

from __future__ import annotations

import calendar
import re
from datetime import MAXYEAR, MINYEAR, date, timedelta

from .task_models import DateWindow

DATE_KEY_FORMAT = "%Y-%m-%d"

_DATE_KEY_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

# Fixed English names: labels must not depend on the process locale.
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def format_date_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def parse_date_key(raw: object) -> date | None:
    """Parse a `yyyy-MM-dd` key. Returns None for anything malformed."""
    if not isinstance(raw, str):
        return None
    m = _DATE_KEY_RE.match(raw)
    if not m:
        return None
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None


def day_window(day: date) -> DateWindow:
    return DateWindow(day, day)


def week_window(day: date) -> DateWindow:
    # weekday(): Monday == 0 ... Sunday == 6, so Sunday closes the week it ends.
    start = day - timedelta(days=day.weekday())
    return DateWindow(start, add_days(start, 6))


def month_window(day: date) -> DateWindow:
    last = calendar.monthrange(day.year, day.month)[1]
    return DateWindow(date(day.year, day.month, 1), date(day.year, day.month, last))


def year_window(day: date) -> DateWindow:
    return DateWindow(date(day.year, 1, 1), date(day.year, 12, 31))


def add_days(day: date, days: int) -> date:
    try:
        return day + timedelta(days=days)
    except OverflowError:
        return date.max if days > 0 else date.min


def _rolled(year: int, month: int, day_of_month: int) -> date:
    if year > MAXYEAR:
        return date.max
    if year < MINYEAR:
        return date.min
    return date(year, month, 1) + timedelta(days=day_of_month - 1)


def add_months(day: date, months: int) -> date:
    total = day.year * 12 + (day.month - 1) + months
    year, month0 = divmod(total, 12)
    return _rolled(year, month0 + 1, day.day)


def add_years(day: date, years: int) -> date:
    return _rolled(day.year + years, day.month, day.day)


def short_date(day: date) -> str:
    """`Mar 4, 2024`"""
    return f"{MONTH_NAMES[day.month - 1][:3]} {day.day}, {day.year}"


def long_date(day: date) -> str:
    """`March 4, 2024`"""
    return f"{MONTH_NAMES[day.month - 1]} {day.day}, {day.year}"


def weekday_name(day: date) -> str:
    return WEEKDAY_NAMES[day.weekday()]


def month_label(day: date) -> str:
    return f"{MONTH_NAMES[day.month - 1]} {day.year}"
