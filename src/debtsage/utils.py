"""Date helpers shared by the payoff engine and the CLI."""

from __future__ import annotations

import calendar
from datetime import date


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def parse_year_month(ym: str) -> date:
    """Parse a ``YYYY-MM`` string into the first day of that month.

    Raises
    ------
    ValueError
        If the string is not a valid year-month.
    """
    try:
        parts = ym.split("-")
        if len(parts) < 2:
            raise ValueError
        return date(int(parts[0]), int(parts[1]), 1)
    except Exception as exc:
        raise ValueError(f"Invalid year-month string: {ym}") from exc


def format_months(months: int) -> str:
    """Render a month count as ``"2 years and 3 months"``."""

    if months <= 0:
        return "0 months"
    years, remaining = divmod(months, 12)
    year_part = f"{years} {'year' if years == 1 else 'years'}"
    month_part = f"{remaining} {'month' if remaining == 1 else 'months'}"
    if years == 0:
        return month_part
    if remaining == 0:
        return year_part
    return f"{year_part} and {month_part}"
