"""Value types for historical stock-out inference."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

COMPLETE_SALES_DROP = "complete_sales_drop"
ONGOING_SALES_DROP = "ongoing_sales_drop"

SEASONS = ("spring", "summer", "autumn", "winter")

# Sunday-first, matching the 0=Sunday..6=Saturday numbering of the reports
WEEKDAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


@dataclass(frozen=True)
class Order:
    """Order header as returned by the order history provider."""

    id: int
    created_at: datetime


@dataclass(frozen=True)
class LineItem:
    """Product sold within one order."""

    order_id: int
    product_id: int
    variant_id: int | None
    quantity: int


@dataclass(frozen=True)
class SalesDataPoint:
    """Units sold on one UTC calendar day."""

    date: date
    quantity: int
    orders: int  # distinct orders containing the product


@dataclass(frozen=True)
class BaselinePattern:
    """Expected sales pattern derived from the product's own history."""

    avg_daily_sales: float
    avg_weekly_sales: float
    avg_monthly_sales: float
    seasonal_factors: dict[str, float] = field(default_factory=dict)
    weekly_pattern: dict[str, float] = field(default_factory=dict)
    sales_velocity: float = 0.0

    @classmethod
    def empty(cls) -> BaselinePattern:
        """Baseline for a series with no days."""
        return cls(avg_daily_sales=0.0, avg_weekly_sales=0.0, avg_monthly_sales=0.0)

    def seasonal_factor(self, season: str) -> float:
        """Multiplier for a season; 1.0 when undefined."""
        return self.seasonal_factors.get(season) or 1.0


@dataclass(frozen=True)
class InferredStockOutPeriod:
    """A zero-sales gap judged to be a stock-out.

    end_date and duration_days are None while the gap is still open at the
    end of the analysed data.
    """

    start_date: date
    end_date: date | None
    duration_days: int | None
    confidence: float
    detection_method: str
    reason: str
    expected_sales: float
    actual_sales: int = 0
    sales_gap_percentage: float = 100.0


@dataclass(frozen=True)
class StockoutInferenceReport:
    """Result of one inference request."""

    product_id: int
    variant_id: int | None
    start: datetime
    end: datetime
    generated_at: datetime
    inferred_stockouts: list[InferredStockOutPeriod]
    baseline: BaselinePattern
    sales_data: list[SalesDataPoint]
    confidence: float
    data_points: int
    failed_order_fetches: int = 0


__all__ = [
    "COMPLETE_SALES_DROP",
    "ONGOING_SALES_DROP",
    "SEASONS",
    "WEEKDAY_NAMES",
    "Order",
    "LineItem",
    "SalesDataPoint",
    "BaselinePattern",
    "InferredStockOutPeriod",
    "StockoutInferenceReport",
]
