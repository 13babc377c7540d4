"""
daycount.py
Day counts between two dates under the spreadsheet coupon-function bases.

Supported bases:
- 0  US (NASD) 30/360 (default for the coupon functions)
- 1  Actual/actual
- 2  Actual/360
- 3  Actual/365
- 4  European 30/360

Counts are signed integers: positive when ``end`` is later than ``start``.
"""

from __future__ import annotations
from datetime import date
from enum import IntEnum


class Basis(IntEnum):
    """Day-count basis codes, numbered as in COUPDAYS(..., basis)."""

    US_NASD_30_360 = 0
    ACTUAL_ACTUAL = 1
    ACTUAL_360 = 2
    ACTUAL_365 = 3
    EUROPEAN_30_360 = 4


# ------------------------------
# Helpers
# ------------------------------
def is_leap(y: int) -> bool:
    return (y % 4 == 0 and y % 100 != 0) or (y % 400 == 0)


def _is_last_day_of_february(d: date) -> bool:
    return d.month == 2 and d.day == (29 if is_leap(d.year) else 28)


def _days_360(start: date, end: date, d1: int, d2: int) -> int:
    return (end.year - start.year) * 360 + (end.month - start.month) * 30 + (d2 - d1)


# ------------------------------
# Day counts
# ------------------------------
def _thirty_360_us(start: date, end: date) -> int:
    d1 = start.day
    d2 = end.day
    if _is_last_day_of_february(start):
        if _is_last_day_of_february(end):
            d2 = 30
        d1 = 30
    if d2 == 31 and d1 >= 30:
        d2 = 30
    if d1 == 31:
        d1 = 30
    return _days_360(start, end, d1, d2)


def _thirty_360_eu(start: date, end: date) -> int:
    d1 = 30 if start.day == 31 else start.day
    d2 = 30 if end.day == 31 else end.day
    return _days_360(start, end, d1, d2)


def _actual(start: date, end: date) -> int:
    return (end - start).days


def day_count(start: date, end: date, basis: int = Basis.US_NASD_30_360) -> int:
    """Signed number of days from ``start`` to ``end`` under ``basis``."""
    if basis == Basis.US_NASD_30_360:
        return _thirty_360_us(start, end)
    if basis == Basis.EUROPEAN_30_360:
        return _thirty_360_eu(start, end)
    if basis in (Basis.ACTUAL_ACTUAL, Basis.ACTUAL_360, Basis.ACTUAL_365):
        return _actual(start, end)
    raise ValueError(f"Unsupported day-count basis: {basis}")


def days_in_year(year: int, basis: int = Basis.US_NASD_30_360) -> int:
    """
    Nominal number of days in ``year`` for ``basis``.

    360 for both 30/360 variants and Actual/360, 365 for Actual/365 and the
    calendar length of ``year`` for Actual/actual.
    """
    if basis in (Basis.US_NASD_30_360, Basis.ACTUAL_360, Basis.EUROPEAN_30_360):
        return 360
    if basis == Basis.ACTUAL_365:
        return 365
    if basis == Basis.ACTUAL_ACTUAL:
        return 366 if is_leap(year) else 365
    raise ValueError(f"Unsupported day-count basis: {basis}")
