"""Historical stock-out inference from order history."""

from stock_inference.domain.stockout.baseline import estimate_baseline, season_for_month
from stock_inference.domain.stockout.errors import (
    FetchError,
    NoDataError,
    PartialItemFetchError,
    StockInferenceError,
)
from stock_inference.domain.stockout.gaps import (
    CONFIDENCE_THRESHOLD,
    MIN_GAP_DAYS,
    detect_stockout_periods,
    stockout_confidence,
)
from stock_inference.domain.stockout.models import (
    BaselinePattern,
    InferredStockOutPeriod,
    LineItem,
    Order,
    SalesDataPoint,
    StockoutInferenceReport,
)
from stock_inference.domain.stockout.series import fill_missing_dates

__all__ = [
    "CONFIDENCE_THRESHOLD",
    "MIN_GAP_DAYS",
    "BaselinePattern",
    "FetchError",
    "InferredStockOutPeriod",
    "LineItem",
    "NoDataError",
    "Order",
    "PartialItemFetchError",
    "SalesDataPoint",
    "StockInferenceError",
    "StockoutInferenceReport",
    "detect_stockout_periods",
    "estimate_baseline",
    "fill_missing_dates",
    "season_for_month",
    "stockout_confidence",
]
