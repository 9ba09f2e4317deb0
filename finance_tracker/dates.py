"""Calendar helpers for due dates and month filtering.

All arithmetic is on calendar dates (no time of day, no timezone shift): an
ISO string such as ``"2024-03-01"`` always belongs to March.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional

import pandas as pd
from dateutil.relativedelta import relativedelta

from . import config
from .money import to_number_or_zero

logger = logging.getLogger(__name__)


def to_date(value: Any) -> Optional[date]:
    """Coerce a stored date value into a :class:`datetime.date`.

    Accepts ``date``/``datetime``/``pandas.Timestamp`` objects, ISO strings and
    epoch milliseconds.  Returns ``None`` for anything that cannot be read.
    """
    if value is None or value is pd.NaT or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            parsed = pd.to_datetime(text, errors="coerce")
    elif isinstance(value, (int, float)):
        parsed = pd.to_datetime(value, unit="ms", errors="coerce")
    else:
        parsed = pd.to_datetime(value, errors="coerce")
    if parsed is None or pd.isna(parsed):
        logger.debug("Unreadable date value %r", value)
        return None
    return parsed.date()


def add_installment_months(start_date: Any, month_count: Any) -> str:
    """Advance ``start_date`` by ``month_count`` calendar months.

    A start day missing from the target month is pinned to that month's last
    day (Jan 31 + 1 month is Feb 28/29, never early March).  Returns ``""``
    when the start date is empty or unreadable, the count is not positive, or
    the result lies past the last representable year.

    >>> add_installment_months("2024-05-15", 3)
    '2024-08-15'
    >>> add_installment_months("2023-01-31", 1)
    '2023-02-28'
    """
    months = int(to_number_or_zero(month_count))
    if not start_date or months <= 0:
        return ""
    start = to_date(start_date)
    if start is None:
        return ""
    try:
        return (start + relativedelta(months=months)).isoformat()
    except (ValueError, OverflowError):
        logger.debug("Due date out of range for %r + %d months", start, months)
        return ""


def add_one_month(start_date: Any) -> str:
    """Due date of a monthly client: one calendar month after ``start_date``."""
    return add_installment_months(start_date, 1)


def month_number(month_name: Any) -> Optional[int]:
    """Return the 1-based month for a localized (or English) month name."""
    if not isinstance(month_name, str):
        return None
    return config.month_lookup().get(month_name.strip().lower())


def is_all_periods(month_name: Any) -> bool:
    """True when ``month_name`` is the "all months" sentinel."""
    return isinstance(month_name, str) and month_name.strip().lower() in config.ALL_PERIOD_ALIASES


def classify_month(date_value: Any, month_name: Any) -> bool:
    """Whether ``date_value`` falls in the month called ``month_name``.

    The all-periods sentinel and unrecognized month names match everything,
    even missing dates.  A recognized month never matches an unreadable date.
    """
    if is_all_periods(month_name):
        return True
    selected = month_number(month_name)
    if selected is None:
        return True
    parsed = to_date(date_value)
    if parsed is None:
        return False
    return parsed.month == selected


def month_label(value: Any) -> str:
    """Short month label (``jan.``, ``fev.`` ...) for chart axes."""
    parsed = to_date(value)
    if parsed is None:
        return ""
    return config.MONTH_ABBREVIATIONS[parsed.month - 1]


def days_until(due_date: Any, today: Optional[date] = None) -> Optional[int]:
    """Whole days from ``today`` to ``due_date``; negative once overdue."""
    due = to_date(due_date)
    if due is None:
        return None
    return (due - (today or date.today())).days
