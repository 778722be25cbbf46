"""Daily sales series construction."""

from __future__ import annotations

from datetime import date, timedelta

from stock_inference.domain.stockout.models import SalesDataPoint


def day_range(start: date, end: date) -> list[date]:
    """Every calendar day from start to end inclusive (empty if start > end)."""
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def fill_missing_dates(
    sales_data: list[SalesDataPoint], start: date, end: date
) -> list[SalesDataPoint]:
    """Expand sparse daily points into a gapless series over [start, end].

    Days without a matching point get a zero-quantity entry. Points outside
    the range are dropped.
    """
    by_day = {point.date: point for point in sales_data}
    return [
        by_day.get(d) or SalesDataPoint(date=d, quantity=0, orders=0)
        for d in day_range(start, end)
    ]


__all__ = ["day_range", "fill_missing_dates"]
