"""
coupon_schedule.py
----------
Schedule views built on the coupon functions in coupon.py.

- coupon_dates      : remaining coupon dates after settlement, up to and including maturity
- coupon_summary    : the six coupon facts for one settlement/maturity as a dict
- coupon_table      : one row of coupon facts per day-count basis (DataFrame)
- schedule_frame    : remaining coupon dates with the day count of each period (DataFrame)
- accrual_profile   : coupon facts over a grid of settlement dates (DataFrame)
"""

from __future__ import annotations
from datetime import date
from typing import Dict, Iterable, List, Optional
import logging

import numpy as np
import pandas as pd

from coupon import (
    DEFAULT_BASIS,
    coupons_remaining,
    days_from_period_start_to_settlement,
    days_from_settlement_to_next_coupon,
    days_in_period,
    next_coupon_date,
    previous_coupon_date,
    validate_coupon_args,
)
from daycount import Basis, day_count
from date_utils import add_calendar_offset, as_date, is_end_of_month

logger = logging.getLogger(__name__)

BASIS_LABELS: Dict[Basis, str] = {
    Basis.US_NASD_30_360: "US (NASD) 30/360",
    Basis.ACTUAL_ACTUAL: "Actual/actual",
    Basis.ACTUAL_360: "Actual/360",
    Basis.ACTUAL_365: "Actual/365",
    Basis.EUROPEAN_30_360: "European 30/360",
}


def coupon_dates(
    settlement: date,
    maturity: date,
    freq: int,
    basis: int = DEFAULT_BASIS,
) -> List[date]:
    """
    Return coupon dates strictly after settlement up to and including maturity, ascending.
    """
    validate_coupon_args("coupon_dates", settlement, maturity, freq, basis)
    settlement, maturity = as_date(settlement), as_date(maturity)
    step = 12 // int(freq)
    eom = is_end_of_month(maturity)
    dates: List[date] = []
    k = 0
    d = maturity
    while d > settlement:
        dates.append(d)
        k += 1
        d = add_calendar_offset(maturity, months=-k * step, eom=eom)
    dates.reverse()
    logger.debug("%d coupon dates between %s and %s", len(dates), settlement, maturity)
    return dates


def coupon_summary(
    settlement: date,
    maturity: date,
    freq: int,
    basis: int = DEFAULT_BASIS,
) -> Dict[str, object]:
    args = (settlement, maturity, freq, basis)
    return {
        "previous_coupon": previous_coupon_date(*args),
        "next_coupon": next_coupon_date(*args),
        "days_from_period_start": days_from_period_start_to_settlement(*args),
        "days_in_period": days_in_period(*args),
        "days_to_next_coupon": days_from_settlement_to_next_coupon(*args),
        "coupons_remaining": coupons_remaining(*args),
    }


def coupon_table(
    settlement: date,
    maturity: date,
    freq: int,
    bases: Optional[Iterable[int]] = None,
) -> pd.DataFrame:
    """Coupon facts for the same bond under each basis (all five by default)."""
    bases = list(Basis) if bases is None else list(bases)
    rows = []
    for b in bases:
        validate_coupon_args("coupon_table", settlement, maturity, freq, b)
        row = {"basis": int(b), "convention": BASIS_LABELS[Basis(int(b))]}
        row.update(coupon_summary(settlement, maturity, freq, b))
        rows.append(row)
    return pd.DataFrame(rows).set_index("basis")


def schedule_frame(
    settlement: date,
    maturity: date,
    freq: int,
    basis: int = DEFAULT_BASIS,
) -> pd.DataFrame:
    """
    Remaining coupon dates with the start of each accrual period and its day count.

    The first row's period starts at the previous coupon date, so it spans settlement.
    """
    dates = coupon_dates(settlement, maturity, freq, basis)
    starts = [previous_coupon_date(settlement, maturity, freq, basis)] + dates[:-1]
    return pd.DataFrame(
        {
            "period_start": starts,
            "coupon_date": dates,
            "days": [day_count(a, b, basis) for a, b in zip(starts, dates)],
        }
    )


def accrual_profile(
    start: date,
    end: date,
    maturity: date,
    freq: int,
    basis: int = DEFAULT_BASIS,
    step_days: int = 1,
) -> pd.DataFrame:
    """
    Coupon-period day counts for settlement dates from ``start`` to ``end`` (inclusive)
    every ``step_days`` days. Settlement dates not before maturity are dropped.
    """
    maturity = as_date(maturity)
    if step_days <= 0:
        raise ValueError("step_days must be positive")
    grid = np.arange(
        np.datetime64(start, "D"),
        np.datetime64(end, "D") + np.timedelta64(1, "D"),
        np.timedelta64(step_days, "D"),
    )
    settlements = [
        d for d in grid.astype(object) if day_count(d, maturity, Basis.US_NASD_30_360) > 0
    ]
    rows = []
    for s in settlements:
        rows.append(
            {
                "settlement": s,
                "previous_coupon": previous_coupon_date(s, maturity, freq, basis),
                "next_coupon": next_coupon_date(s, maturity, freq, basis),
                "days_from_period_start": days_from_period_start_to_settlement(s, maturity, freq, basis),
                "days_to_next_coupon": days_from_settlement_to_next_coupon(s, maturity, freq, basis),
                "days_in_period": days_in_period(s, maturity, freq, basis),
            }
        )
    logger.debug("Accrual profile: %d settlement dates for maturity %s", len(rows), maturity)
    return pd.DataFrame(
        rows,
        columns=[
            "settlement",
            "previous_coupon",
            "next_coupon",
            "days_from_period_start",
            "days_to_next_coupon",
            "days_in_period",
        ],
    )
