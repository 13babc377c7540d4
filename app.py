# app.py
import pandas as pd
import matplotlib.pyplot as plt
import streamlit as st
from datetime import date
from io import BytesIO

from coupon import (
    DEFAULT_BASIS,
    CouponArgumentError,
    Frequency,
    coupons_remaining,
    days_from_period_start_to_settlement,
    days_from_settlement_to_next_coupon,
    days_in_period,
    next_coupon_date,
    previous_coupon_date,
)
from coupon_schedule import BASIS_LABELS, coupon_table, schedule_frame
from daycount import Basis
from date_utils import parse_date


# ---------------------------
# Micro-caching wrappers
# ---------------------------
@st.cache_data(show_spinner=False, ttl=300)
def cached_accrual_profile(
    start: date, end: date, maturity: date, freq: int, basis: int, step_days: int
) -> pd.DataFrame:
    from coupon_schedule import accrual_profile as _accrual_profile

    return _accrual_profile(start, end, maturity, freq, basis, step_days=step_days)


# ---------------------------
# Page config
# ---------------------------
st.set_page_config(page_title="Coupon Schedule Calculator", page_icon="📅", layout="wide")

st.title("📅 Coupon Schedule Calculator")
st.caption(
    "Previous/next coupon dates, day counts within the coupon period and coupons remaining, "
    "matching the spreadsheet COUP* functions."
)


# ========== Shared inputs ==========
def render_coupon_inputs(defaults_key: str = "coupon_defaults"):
    """
    Renders bond date inputs at the top of the page.

    Returns dict: settlement, maturity, freq, basis (or None on a malformed date)
    """
    if defaults_key not in st.session_state:
        st.session_state[defaults_key] = {
            "settlement": "2024-06-15",
            "maturity": "2029-12-31",
            "freq": int(Frequency.SEMIANNUAL),
            "basis": int(DEFAULT_BASIS),
        }
    s = st.session_state[defaults_key]
    key = lambda name: f"{defaults_key}__{name}"

    c1, c2, c3, c4 = st.columns(4)
    s["settlement"] = c1.text_input("Settlement (YYYY-MM-DD)", value=s["settlement"], key=key("settlement"))
    s["maturity"] = c2.text_input("Maturity (YYYY-MM-DD)", value=s["maturity"], key=key("maturity"))
    s["freq"] = int(
        c3.selectbox(
            "Payments per year",
            options=[int(f) for f in Frequency],
            index=[int(f) for f in Frequency].index(s["freq"]),
            key=key("freq"),
        )
    )
    s["basis"] = int(
        c4.selectbox(
            "Day-count basis",
            options=[int(b) for b in Basis],
            index=s["basis"],
            format_func=lambda b: f"{b} - {BASIS_LABELS[Basis(b)]}",
            key=key("basis"),
        )
    )

    try:
        settlement = parse_date(s["settlement"])
        maturity = parse_date(s["maturity"])
    except ValueError as e:
        st.error(str(e))
        return None
    return {"settlement": settlement, "maturity": maturity, "freq": s["freq"], "basis": s["basis"]}


inputs = render_coupon_inputs()

# ===================== TABS =====================
tab1, tab2, tab3 = st.tabs(["🧾 Coupon Facts", "🗓️ Schedule & Bases", "📈 Accrual Profile"])

# ===== TAB 1: Coupon facts =====
with tab1:
    st.subheader("Coupon period containing settlement")
    if inputs is not None:
        args = (inputs["settlement"], inputs["maturity"], inputs["freq"], inputs["basis"])
        try:
            pcd = previous_coupon_date(*args)
            ncd = next_coupon_date(*args)
            daybs = days_from_period_start_to_settlement(*args)
            days = days_in_period(*args)
            daysnc = days_from_settlement_to_next_coupon(*args)
            num = coupons_remaining(*args)
        except CouponArgumentError as e:
            st.error(str(e))
        else:
            c1, c2, c3 = st.columns(3)
            c1.metric("Previous coupon (COUPPCD)", pcd.isoformat())
            c2.metric("Next coupon (COUPNCD)", ncd.isoformat())
            c3.metric("Coupons remaining (COUPNUM)", f"{num:g}")
            c4, c5, c6 = st.columns(3)
            c4.metric("Days from period start (COUPDAYBS)", f"{daybs}")
            c5.metric("Days in period (COUPDAYS)", f"{days}")
            c6.metric("Days to next coupon (COUPDAYSNC)", f"{daysnc}")
            if inputs["basis"] != int(Basis.ACTUAL_ACTUAL):
                st.info("Days in period is the nominal length for this basis (days in year / payments per year).")

# ===== TAB 2: Schedule & bases =====
with tab2:
    st.subheader("Remaining coupon dates")
    if inputs is not None:
        args = (inputs["settlement"], inputs["maturity"], inputs["freq"], inputs["basis"])
        try:
            sched = schedule_frame(*args)
            by_basis = coupon_table(inputs["settlement"], inputs["maturity"], inputs["freq"])
        except CouponArgumentError as e:
            st.error(str(e))
        else:
            st.dataframe(sched, use_container_width=True)
            st.subheader("Same bond under every basis")
            st.dataframe(by_basis, use_container_width=True)
            st.download_button(
                "⬇️ Download schedule (CSV)",
                data=sched.to_csv(index=False).encode("utf-8"),
                file_name="coupon_schedule.csv",
                mime="text/csv",
            )

# ===== TAB 3: Accrual profile =====
with tab3:
    st.subheader("Day counts as settlement moves")
    if inputs is not None:
        p1, p2, p3 = st.columns(3)
        start_s = p1.text_input("From (YYYY-MM-DD)", value=str(inputs["settlement"]))
        end_s = p2.text_input("To (YYYY-MM-DD)", value=str(min(inputs["maturity"], date(inputs["settlement"].year + 2, 1, 1))))
        step = int(p3.number_input("Step (days)", min_value=1, value=7, step=1))
        try:
            prof = cached_accrual_profile(
                parse_date(start_s), parse_date(end_s), inputs["maturity"], inputs["freq"], inputs["basis"], step
            )
        except (ValueError, CouponArgumentError) as e:
            st.error(str(e))
        else:
            if prof.empty:
                st.warning("No settlement dates before maturity in this range.")
            else:
                fig, ax = plt.subplots(figsize=(8, 3.5))
                ax.plot(prof["settlement"], prof["days_from_period_start"], label="COUPDAYBS")
                ax.plot(prof["settlement"], prof["days_to_next_coupon"], label="COUPDAYSNC")
                ax.set_xlabel("Settlement")
                ax.set_ylabel("Days")
                ax.legend()
                st.pyplot(fig)

                buf = BytesIO()
                fig.savefig(buf, format="png", bbox_inches="tight")
                st.download_button("⬇️ Download chart (PNG)", data=buf.getvalue(), file_name="accrual_profile.png", mime="image/png")
                st.dataframe(prof, use_container_width=True)
