# lifeweeks/util/dates.py
from __future__ import annotations

import datetime as dt

MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def parse_date_yyyy_mm_dd(s: str) -> dt.date:
    return dt.datetime.strptime(s.strip(), "%Y-%m-%d").date()


def iso(d: dt.date) -> str:
    return d.isoformat()


def week_start_sunday(d: dt.date) -> dt.date:
    # date.weekday(): Monday=0 .. Sunday=6
    return d - dt.timedelta(days=(d.weekday() + 1) % 7)


def anniversary(birth: dt.date, year: int) -> dt.date:
    """Month/day of `birth` in `year`.

    Computed as an offset from the first of the month, so Feb 29 rolls over
    to Mar 1 in common years instead of raising.
    """
    return dt.date(year, birth.month, 1) + dt.timedelta(days=birth.day - 1)


def age_on(d: dt.date, birth: dt.date) -> int:
    """Completed years between `birth` and `d` (0 before the first birthday)."""
    years = d.year - birth.year
    if (d.month, d.day) < (birth.month, birth.day):
        years -= 1
    return max(0, years)


def format_tooltip_date(date_str: str, show_full_date: bool = True) -> str:
    d = parse_date_yyyy_mm_dd(date_str)
    month = MONTH_ABBR[d.month - 1]
    if show_full_date:
        return f"{month} {d.day}, {d.year}"
    return f"{month} {d.year}"
