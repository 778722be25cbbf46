"""Stock-out inference from zero-sales gaps.

A gap is a maximal run of consecutive zero-sales days. Gaps of at least
MIN_GAP_DAYS are scored against the baseline; a gap becomes an inferred
stock-out period when its confidence reaches CONFIDENCE_THRESHOLD.

Confidence is an additive heuristic, not a probability:

    gap length       >=30d +0.4 | >=14d +0.3 | >=7d +0.2
    expected/day     >1.0 +0.3  | >0.5 +0.2  | >0.1 +0.1
    baseline/day     >0.5 +0.2  | >0.1 +0.1  | <0.05 -0.3
    UK holiday overlap            -0.2

The result is clamped to [0, 1].
"""

from __future__ import annotations

from datetime import date

from stock_inference.domain.stockout.baseline import season_for_month
from stock_inference.domain.stockout.models import (
    COMPLETE_SALES_DROP,
    ONGOING_SALES_DROP,
    BaselinePattern,
    InferredStockOutPeriod,
    SalesDataPoint,
)

MIN_GAP_DAYS = 7
CONFIDENCE_THRESHOLD = 0.6

# (month, day) bounds; a window whose end precedes its start wraps the year
HOLIDAY_WINDOWS: tuple[tuple[tuple[int, int], tuple[int, int]], ...] = (
    ((12, 20), (1, 5)),  # Christmas / New Year
    ((4, 10), (4, 20)),  # Easter (approximate)
    ((8, 1), (8, 31)),  # Summer holidays
)


def overlaps_holiday_period(start: date, end: date) -> bool:
    """Check whether [start, end] touches any UK holiday window."""
    for year in range(start.year - 1, end.year + 1):
        for (sm, sd), (em, ed) in HOLIDAY_WINDOWS:
            window_start = date(year, sm, sd)
            window_end = date(year + 1 if (em, ed) < (sm, sd) else year, em, ed)
            if window_start <= end and start <= window_end:
                return True
    return False


def stockout_confidence(
    gap_days: int,
    expected_daily_sales: float,
    baseline: BaselinePattern,
    start: date,
    end: date,
) -> float:
    """Score how strongly a zero-sales gap points to a stock-out."""
    confidence = 0.0

    if gap_days >= 30:
        confidence += 0.4
    elif gap_days >= 14:
        confidence += 0.3
    elif gap_days >= 7:
        confidence += 0.2

    if expected_daily_sales > 1.0:
        confidence += 0.3
    elif expected_daily_sales > 0.5:
        confidence += 0.2
    elif expected_daily_sales > 0.1:
        confidence += 0.1

    if baseline.avg_daily_sales > 0.5:
        confidence += 0.2
    elif baseline.avg_daily_sales > 0.1:
        confidence += 0.1

    # Rarely sold products go quiet for weeks without being out of stock
    if baseline.avg_daily_sales < 0.05:
        confidence -= 0.3

    if overlaps_holiday_period(start, end):
        confidence -= 0.2

    # Weights are tenths; rounding drops float noise before the threshold test
    return max(0.0, min(1.0, round(confidence, 2)))


def expected_daily_sales(baseline: BaselinePattern, day: date) -> float:
    """Baseline average scaled by the seasonal factor of the day's month."""
    return baseline.avg_daily_sales * baseline.seasonal_factor(season_for_month(day.month))


def detect_stockout_periods(
    series: list[SalesDataPoint],
    baseline: BaselinePattern,
    min_gap_days: int = MIN_GAP_DAYS,
    confidence_threshold: float = CONFIDENCE_THRESHOLD,
) -> list[InferredStockOutPeriod]:
    """Find zero-sales gaps in a dense daily series that look like stock-outs.

    Args:
        series: Gapless daily series, ascending by date
        baseline: Baseline computed from the same series
        min_gap_days: Shortest gap worth scoring
        confidence_threshold: Minimum confidence for a period to be reported

    Returns:
        Inferred periods in chronological order. A gap still open on the
        last day is reported as ongoing, without end date or duration.

    """
    periods: list[InferredStockOutPeriod] = []

    # Without any sales there is nothing to tell a stock-out from no demand
    if baseline.avg_daily_sales == 0:
        return periods

    gap_start: date | None = None
    zero_days = 0

    for i, day in enumerate(series):
        if day.quantity == 0:
            if gap_start is None:
                gap_start = day.date
                zero_days = 1
            else:
                zero_days += 1
            continue

        if gap_start is not None and zero_days >= min_gap_days:
            gap_end = series[i - 1].date
            # Expectation is taken at the day whose sale closed the gap
            expected = expected_daily_sales(baseline, day.date)
            confidence = stockout_confidence(zero_days, expected, baseline, gap_start, gap_end)

            if confidence >= confidence_threshold:
                periods.append(
                    InferredStockOutPeriod(
                        start_date=gap_start,
                        end_date=gap_end,
                        duration_days=zero_days,
                        confidence=confidence,
                        detection_method=COMPLETE_SALES_DROP,
                        reason=(
                            f"{zero_days} consecutive days of zero sales with expected "
                            f"{expected:.1f} sales/day"
                        ),
                        expected_sales=expected * zero_days,
                    )
                )

        gap_start = None
        zero_days = 0

    if gap_start is not None and zero_days >= min_gap_days:
        expected = baseline.avg_daily_sales
        confidence = stockout_confidence(
            zero_days, expected, baseline, gap_start, series[-1].date
        )

        if confidence >= confidence_threshold:
            periods.append(
                InferredStockOutPeriod(
                    start_date=gap_start,
                    end_date=None,
                    duration_days=None,
                    confidence=confidence,
                    detection_method=ONGOING_SALES_DROP,
                    reason=(
                        f"Ongoing {zero_days}+ days of zero sales with expected "
                        f"{expected:.1f} sales/day"
                    ),
                    expected_sales=expected * zero_days,
                )
            )

    return periods


__all__ = [
    "CONFIDENCE_THRESHOLD",
    "HOLIDAY_WINDOWS",
    "MIN_GAP_DAYS",
    "detect_stockout_periods",
    "expected_daily_sales",
    "overlaps_holiday_period",
    "stockout_confidence",
]
