from __future__ import annotations

from datetime import date, timedelta
from typing import Tuple

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
QUARTER_KEYS = ("q1", "q2", "q3", "q4")


def quarter_of(value: date) -> int:
    return (value.month - 1) // 3 + 1


def week_bounds(value: date) -> Tuple[date, date]:
    """Monday through Sunday of the week containing ``value``."""
    start = value - timedelta(days=value.weekday())
    return start, start + timedelta(days=6)


def add_months(value: date, months: int) -> date:
    """First day of the month ``months`` away from ``value``'s month."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, 1)


def subtract_months(value: date, months: int) -> date:
    """Same day ``months`` earlier, clamped to the end of shorter months."""
    first = add_months(value, -months)
    next_first = add_months(first, 1)
    last_day = (next_first - timedelta(days=1)).day
    return first.replace(day=min(value.day, last_day))


def days_in_month(value: date) -> int:
    return (add_months(value, 1) - timedelta(days=1)).day
