"""
coupon.py
Coupon schedule facts for a bond, compatible with the spreadsheet COUP* functions.

Functions (spreadsheet alias in brackets):
- previous_coupon_date                  [COUPPCD]
- next_coupon_date                      [COUPNCD]
- days_from_period_start_to_settlement  [COUPDAYBS]
- days_in_period                        [COUPDAYS]
- days_from_settlement_to_next_coupon   [COUPDAYSNC]
- coupons_remaining                     [COUPNUM]

All take (settlement, maturity, frequency, basis=DEFAULT_BASIS) and validate the
arguments before any date arithmetic. Coupon boundaries are anchored on the
maturity date's day-of-month; an end-of-month maturity keeps every boundary on
the last day of its month.
"""

from __future__ import annotations
from datetime import date
from enum import IntEnum
from typing import Tuple
import logging
import math
import numbers

from daycount import Basis, day_count, days_in_year
from date_utils import (
    add_calendar_offset,
    as_date,
    end_of_month,
    has_required_args,
    is_end_of_month,
    split_date,
)

logger = logging.getLogger(__name__)


class Frequency(IntEnum):
    """Coupon payments per year."""

    ANNUAL = 1
    SEMIANNUAL = 2
    QUARTERLY = 4


# Basis used when a caller does not pass one (US NASD 30/360, as in the spreadsheet functions).
DEFAULT_BASIS: Basis = Basis.US_NASD_30_360

VALID_FREQUENCIES = tuple(int(f) for f in Frequency)
VALID_BASES = tuple(int(b) for b in Basis)


# ------------------------------
# Errors
# ------------------------------
class CouponArgumentError(ValueError):
    """Base class for invalid arguments to the coupon functions."""


class MissingArgumentError(CouponArgumentError, TypeError):
    pass


class InvalidDateError(CouponArgumentError, TypeError):
    pass


class InvalidFrequencyError(CouponArgumentError):
    pass


class InvalidBasisError(CouponArgumentError):
    pass


class InvalidDateRangeError(CouponArgumentError):
    pass


# ------------------------------
# Validation
# ------------------------------
def _valid_date(x) -> bool:
    return isinstance(x, date)


def _valid_code(x, allowed) -> bool:
    # bool is an int subclass; True must not pass for 1. numpy scalars are Real
    return not isinstance(x, bool) and isinstance(x, numbers.Real) and x in allowed


def validate_coupon_args(func_name: str, settlement, maturity, frequency, basis) -> bool:
    """
    Check the common coupon-function arguments, raising on the first failure.

    Order: presence, settlement date, maturity date, frequency, basis and
    finally settlement strictly before maturity (counted under 30/360 US
    whatever ``basis`` is).
    """
    if not has_required_args(settlement, maturity, frequency):
        raise MissingArgumentError(f"{func_name} is missing required arguments.")
    if not _valid_date(settlement):
        raise InvalidDateError(
            f"{func_name}: #VALUE! error - settlement argument {settlement!r} is not a valid date."
        )
    if not _valid_date(maturity):
        raise InvalidDateError(
            f"{func_name}: #VALUE! error - maturity argument {maturity!r} is not a valid date."
        )
    if not _valid_code(frequency, VALID_FREQUENCIES):
        raise InvalidFrequencyError(
            f"{func_name}: #NUM! error - frequency can be equal to 1, 2 or 4, "
            f"received {frequency!r} instead."
        )
    if not _valid_code(basis, VALID_BASES):
        raise InvalidBasisError(
            f"{func_name}: #NUM! error - basis can be an integer from 0 to 4, "
            f"received {basis!r} instead."
        )
    if day_count(as_date(settlement), as_date(maturity), Basis.US_NASD_30_360) <= 0:
        raise InvalidDateRangeError(
            f"{func_name}: #NUM! error - settlement date {settlement} shall be "
            f"before maturity date {maturity}."
        )
    return True


def _checked(func_name, settlement, maturity, frequency, basis) -> Tuple[date, date, int, Basis]:
    validate_coupon_args(func_name, settlement, maturity, frequency, basis)
    return as_date(settlement), as_date(maturity), int(frequency), Basis(int(basis))


# ------------------------------
# Coupon boundaries
# ------------------------------
def _clamped(y: int, m: int, day: int) -> date:
    return date(y, m, min(day, end_of_month(y, m).day))


def _previous_coupon_date(settlement: date, maturity: date, frequency: int) -> date:
    months = 12 // frequency
    eom = is_end_of_month(maturity)
    # each boundary is taken from maturity so short months do not pull the day down
    k = 0
    d = maturity
    while settlement < d:
        k += 1
        d = add_calendar_offset(maturity, months=-k * months, eom=eom)
    logger.debug("Previous coupon for %s -> %s: %s (%s periods back)", settlement, maturity, d, k)
    return d


def _anchored(d: date, day: int, eom: bool = False) -> date:
    if eom:
        return end_of_month(d.year, d.month)
    return _clamped(d.year, d.month, max(d.day, day))


def _next_coupon_date(settlement: date, maturity: date, frequency: int) -> date:
    months = 12 // frequency
    _, mm, md = split_date(maturity)
    eom = is_end_of_month(maturity)

    # maturity's month/day in the settlement year; a month-end maturity stays
    # on month end (Feb 28 2025 -> Feb 29 2024)
    d = _anchored(date(settlement.year, mm, 1), md, eom)
    if settlement < d:
        # a whole year back; one period back can overshoot quarterly schedules
        d = _anchored(add_calendar_offset(d, years=-1, eom=eom), md, eom)
    # stepping through short months loses days (08-30 -> 02-28 -> 08-28),
    # so every step is re-anchored on maturity's day before comparing
    while settlement >= d:
        d = _anchored(add_calendar_offset(d, months=months, eom=eom), md, eom)
    logger.debug("Next coupon for %s -> %s: %s", settlement, maturity, d)
    return d


def previous_coupon_date(settlement: date, maturity: date, frequency: int,
                         basis: int = DEFAULT_BASIS) -> date:
    """Coupon date on or before settlement (COUPPCD)."""
    s, m, f, _ = _checked("couppcd", settlement, maturity, frequency, basis)
    return _previous_coupon_date(s, m, f)


def next_coupon_date(settlement: date, maturity: date, frequency: int,
                     basis: int = DEFAULT_BASIS) -> date:
    """First coupon date strictly after settlement (COUPNCD)."""
    s, m, f, _ = _checked("coupncd", settlement, maturity, frequency, basis)
    return _next_coupon_date(s, m, f)


# ------------------------------
# Day counts within the coupon period
# ------------------------------
def _days_in_period(settlement: date, maturity: date, frequency: int, basis: Basis) -> int:
    if basis == Basis.ACTUAL_ACTUAL:
        pcd = _previous_coupon_date(settlement, maturity, frequency)
        ncd = _next_coupon_date(settlement, maturity, frequency)
        return day_count(pcd, ncd, basis)
    # nominal period length, halves rounded up (365 / 2 -> 183)
    return int(math.floor(days_in_year(settlement.year, basis) / frequency + 0.5))


def _days_from_period_start(settlement: date, maturity: date, frequency: int, basis: Basis) -> int:
    pcd = _previous_coupon_date(settlement, maturity, frequency)
    return day_count(pcd, settlement, basis)


def days_from_period_start_to_settlement(settlement: date, maturity: date, frequency: int,
                                         basis: int = DEFAULT_BASIS) -> int:
    """Days from the start of the coupon period to settlement (COUPDAYBS)."""
    s, m, f, b = _checked("coupdaybs", settlement, maturity, frequency, basis)
    return _days_from_period_start(s, m, f, b)


def days_in_period(settlement: date, maturity: date, frequency: int,
                   basis: int = DEFAULT_BASIS) -> int:
    """
    Days in the coupon period containing settlement (COUPDAYS).

    Actual/actual counts the real period; every other basis returns the
    nominal length ``days_in_year / frequency`` (180 for semiannual 30/360).
    """
    s, m, f, b = _checked("coupdays", settlement, maturity, frequency, basis)
    return _days_in_period(s, m, f, b)


def days_from_settlement_to_next_coupon(settlement: date, maturity: date, frequency: int,
                                        basis: int = DEFAULT_BASIS) -> int:
    """
    Days from settlement to the next coupon date (COUPDAYSNC).

    Under US (NASD) 30/360 this is COUPDAYS - COUPDAYBS: counting directly to
    the next coupon date is one day off the spreadsheet result at period ends.
    """
    s, m, f, b = _checked("coupdaysnc", settlement, maturity, frequency, basis)
    if b == Basis.US_NASD_30_360:
        return _days_in_period(s, m, f, b) - _days_from_period_start(s, m, f, b)
    return day_count(s, _next_coupon_date(s, m, f), b)


def coupons_remaining(settlement: date, maturity: date, frequency: int,
                      basis: int = DEFAULT_BASIS) -> float:
    """
    Coupons payable between settlement and maturity (COUPNUM).

    Whole months from the previous coupon date to maturity times periods per
    month. Returned unrounded.
    """
    s, m, f, _ = _checked("coupnum", settlement, maturity, frequency, basis)
    py, pm, _ = split_date(_previous_coupon_date(s, m, f))
    my, mm, _ = split_date(m)
    months = (my - py) * 12 + (mm - pm)
    return months * f / 12


# spreadsheet names
couppcd = previous_coupon_date
coupncd = next_coupon_date
coupdaybs = days_from_period_start_to_settlement
coupdays = days_in_period
coupdaysnc = days_from_settlement_to_next_coupon
coupnum = coupons_remaining
