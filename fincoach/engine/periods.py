"""Calendar-month helpers.

Months are identified by ``(year, month)`` tuples so that they sort
chronologically and can be used directly as mapping keys.
"""

from datetime import date

MonthKey = tuple[int, int]

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


def month_key(d: date) -> MonthKey:
    """Return the ``(year, month)`` key for a date."""
    return (d.year, d.month)


def previous_month(key: MonthKey) -> MonthKey:
    """Return the calendar month before ``key``, wrapping the year."""
    year, month = key
    if month == 1:
        return (year - 1, 12)
    return (year, month - 1)


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start's month to end's month.

    Days are ignored: 2024-01-31 to 2024-02-01 is one month.
    Negative when end is in an earlier month than start.

    Example:
        >>> months_between(date(2024, 11, 15), date(2025, 2, 1))
        3
    """
    return (end.year - start.year) * 12 + (end.month - start.month)


def format_month(key: MonthKey) -> str:
    """Format a month key for display, e.g. ``"January 2024"``."""
    year, month = key
    return f"{MONTH_NAMES[month - 1]} {year}"
