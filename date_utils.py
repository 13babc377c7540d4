"""
date_utils.py
Lightweight date helpers for coupon schedules.

- parse_date("YYYY-MM-DD")                         -> date
- split_date(d)                                    -> (year, month, day)
- is_end_of_month(d) / end_of_month(y, m)          -> bool / date
- add_calendar_offset(d, years, months, days, eom) -> date (month roll with end-of-month handling)
- has_required_args(*values)                       -> bool
- as_date(d)                                       -> date (datetime truncated to its date)
"""

from __future__ import annotations
from datetime import date, datetime, timedelta
from typing import Tuple
from calendar import monthrange


def parse_date(s: str) -> date:
    try:
        y, m, d = map(int, s.strip().split("-"))
        return date(y, m, d)
    except (AttributeError, TypeError, ValueError) as exc:
        raise ValueError(f"Expected a YYYY-MM-DD date, got {s!r}") from exc


def split_date(d: date) -> Tuple[int, int, int]:
    return d.year, d.month, d.day


def end_of_month(y: int, m: int) -> date:
    return date(y, m, monthrange(y, m)[1])


def is_end_of_month(d: date) -> bool:
    return d.day == monthrange(d.year, d.month)[1]


def add_calendar_offset(
    d: date,
    years: int = 0,
    months: int = 0,
    days: int = 0,
    eom: bool = False,
) -> date:
    """
    Shift ``d`` by whole years and months, then by days.

    A day that does not exist in the target month is clamped to that month's
    last day. With ``eom`` set and ``d`` on the last day of its month,
    the month roll lands on the last day of the target month.
    """
    total = d.month - 1 + months + 12 * years
    y = d.year + total // 12
    m = total % 12 + 1
    last = monthrange(y, m)[1]
    if eom and is_end_of_month(d):
        day = last
    else:
        day = min(d.day, last)
    return date(y, m, day) + timedelta(days=days)


def has_required_args(*values) -> bool:
    """True iff none of ``values`` is missing (None)."""
    return all(v is not None for v in values)


def as_date(d: date) -> date:
    """Drop the time part of a datetime; dates pass through."""
    return d.date() if isinstance(d, datetime) else d
