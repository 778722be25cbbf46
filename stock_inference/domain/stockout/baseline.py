"""Baseline sales pattern estimation.

The baseline is the product's "normal" selling behaviour over the analysed
range: flat averages, a day-of-week profile, four seasonal multipliers and a
coarse trend. Gap detection compares zero-sales runs against it.
"""

from __future__ import annotations

from datetime import date

from stock_inference.domain.stockout.models import WEEKDAY_NAMES, BaselinePattern, SalesDataPoint
from stock_inference.domain.stockout.series import fill_missing_dates

VELOCITY_WINDOW_DAYS = 30

# Calendar months (1-12) per season; winter wraps the year end
SEASON_MONTHS: dict[str, tuple[int, int, int]] = {
    "spring": (3, 4, 5),
    "summer": (6, 7, 8),
    "autumn": (9, 10, 11),
    "winter": (12, 1, 2),
}


def season_for_month(month: int) -> str:
    """Map calendar month (1-12) to its season name."""
    if 3 <= month <= 5:
        return "spring"
    if 6 <= month <= 8:
        return "summer"
    if 9 <= month <= 11:
        return "autumn"
    return "winter"


def weekday_index(d: date) -> int:
    """Day of week with 0=Sunday .. 6=Saturday."""
    return (d.weekday() + 1) % 7


def weekly_pattern(series: list[SalesDataPoint]) -> dict[str, float]:
    """Average quantity per weekday; weekdays never observed are absent."""
    totals = [0] * 7
    counts = [0] * 7
    for point in series:
        idx = weekday_index(point.date)
        totals[idx] += point.quantity
        counts[idx] += 1

    return {
        WEEKDAY_NAMES[i]: totals[i] / counts[i]
        for i in range(7)
        if counts[i] > 0
    }


def seasonal_factors(series: list[SalesDataPoint]) -> dict[str, float]:
    """Season multipliers relative to the mean of the twelve monthly averages.

    Months with no observations count as a zero average. When every month
    averages zero the multipliers default to 1.0.
    """
    totals: dict[int, int] = {}
    counts: dict[int, int] = {}
    for point in series:
        m = point.date.month
        totals[m] = totals.get(m, 0) + point.quantity
        counts[m] = counts.get(m, 0) + 1

    monthly_avg = {m: (totals[m] / counts[m] if counts.get(m) else 0.0) for m in range(1, 13)}
    overall = sum(monthly_avg.values()) / 12

    factors: dict[str, float] = {}
    for season, months in SEASON_MONTHS.items():
        if overall == 0:
            factors[season] = 1.0
        else:
            factors[season] = sum(monthly_avg[m] for m in months) / 3 / overall
    return factors


def sales_velocity(series: list[SalesDataPoint]) -> float:
    """Average of the last 30 days minus average of the first 30 days.

    Returns 0.0 for series shorter than 30 days.
    """
    if len(series) < VELOCITY_WINDOW_DAYS:
        return 0.0

    first = series[:VELOCITY_WINDOW_DAYS]
    last = series[-VELOCITY_WINDOW_DAYS:]
    first_avg = sum(p.quantity for p in first) / VELOCITY_WINDOW_DAYS
    last_avg = sum(p.quantity for p in last) / VELOCITY_WINDOW_DAYS
    return last_avg - first_avg


def estimate_baseline(series: list[SalesDataPoint], start: date, end: date) -> BaselinePattern:
    """Compute the baseline pattern of a dense daily series.

    Args:
        series: Daily series for [start, end]; missing days are zero-filled
        start: First analysed day
        end: Last analysed day

    Returns:
        BaselinePattern; all-zero with empty maps when the series is empty

    """
    if not series:
        return BaselinePattern.empty()

    series = fill_missing_dates(series, start, end)
    if not series:
        return BaselinePattern.empty()

    avg_daily = sum(p.quantity for p in series) / len(series)

    return BaselinePattern(
        avg_daily_sales=avg_daily,
        avg_weekly_sales=avg_daily * 7,
        avg_monthly_sales=avg_daily * 30,
        seasonal_factors=seasonal_factors(series),
        weekly_pattern=weekly_pattern(series),
        sales_velocity=sales_velocity(series),
    )


__all__ = [
    "SEASON_MONTHS",
    "VELOCITY_WINDOW_DAYS",
    "estimate_baseline",
    "sales_velocity",
    "season_for_month",
    "seasonal_factors",
    "weekday_index",
    "weekly_pattern",
]
