"""Historical stock-out inference for a single product.

Reconstructs the product's daily sales from order history, estimates its
baseline and reports zero-sales gaps that most likely were stock-outs.
Pipeline: order pages -> line items -> per-day sales -> dense series ->
baseline -> gap detection.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from stock_inference.core.config import Settings
from stock_inference.core.logging import get_logger
from stock_inference.core.metrics import inferred_stockouts_total, stockout_inference_runs_total
from stock_inference.domain.stockout.baseline import estimate_baseline
from stock_inference.domain.stockout.errors import FetchError, NoDataError
from stock_inference.domain.stockout.gaps import detect_stockout_periods
from stock_inference.domain.stockout.models import StockoutInferenceReport
from stock_inference.domain.stockout.providers import StockDataSource
from stock_inference.domain.stockout.series import fill_missing_dates
from stock_inference.services.line_items import (
    DEFAULT_BATCH_DELAY_SEC,
    DEFAULT_BATCH_SIZE,
    LineItemAggregator,
    extract_product_sales,
)
from stock_inference.services.order_history import (
    DEFAULT_PAGE_DELAY_SEC,
    DEFAULT_PAGE_SIZE,
    OrderHistoryFetcher,
)

log = get_logger("stock_inference.inference")

DEFAULT_LOOKBACK_DAYS = 730


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def resolve_range(
    start: datetime | None,
    end: datetime | None,
    now: datetime,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
) -> tuple[datetime, datetime]:
    """Apply the default window [now - lookback, now] to missing bounds.

    Raises:
        ValueError: If the resolved start is after the resolved end

    """
    end = _as_utc(end) if end else _as_utc(now)
    start = _as_utc(start) if start else _as_utc(now) - timedelta(days=lookback_days)
    if start > end:
        raise ValueError("startDate must not be after endDate")
    return start, end


async def infer_historical_stockouts(
    source: StockDataSource,
    product_id: int,
    variant_id: int | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    *,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> StockoutInferenceReport:
    """Run the full inference for one product/variant over a date range.

    Args:
        source: Order history and line-item provider
        product_id: Product to analyse (positive)
        variant_id: Restrict matching to this variant (positive) when given
        start: Range start; defaults to ``now`` minus the configured lookback
        end: Range end; defaults to ``now``
        settings: Paging/batching configuration; module defaults when omitted
        now: Clock reading used for defaults and ``generated_at``

    Returns:
        StockoutInferenceReport with the dense series, baseline and periods

    Raises:
        ValueError: On invalid identifiers or an inverted range
        FetchError: If order history could not be fetched
        NoDataError: If the range contains no orders

    """
    if product_id <= 0:
        raise ValueError("productId must be a positive integer")
    if variant_id is not None and variant_id <= 0:
        raise ValueError("variantId must be a positive integer")

    if settings is None:
        fetcher = OrderHistoryFetcher(source, DEFAULT_PAGE_SIZE, DEFAULT_PAGE_DELAY_SEC)
        aggregator = LineItemAggregator(source, DEFAULT_BATCH_SIZE, DEFAULT_BATCH_DELAY_SEC)
        lookback_days = DEFAULT_LOOKBACK_DAYS
    else:
        fetcher = OrderHistoryFetcher(
            source,
            page_size=settings.orders_page_size,
            page_delay_sec=settings.orders_page_delay,
        )
        aggregator = LineItemAggregator(
            source,
            batch_size=settings.line_items_batch_size,
            batch_delay_sec=settings.line_items_batch_delay,
        )
        lookback_days = settings.default_lookback_days

    now = _as_utc(now or datetime.now(timezone.utc))
    start, end = resolve_range(start, end, now, lookback_days)

    log.info(
        "stock_inference_started",
        extra={"product_id": product_id, "variant_id": variant_id, "from": start, "to": end},
    )

    try:
        orders = await fetcher.fetch(start, end)
    except FetchError:
        stockout_inference_runs_total.labels(status="fetch_error").inc()
        raise

    if not orders:
        stockout_inference_runs_total.labels(status="no_data").inc()
        raise NoDataError("No orders found in the specified date range")

    line_items = await aggregator.fetch([order.id for order in orders])

    sparse = extract_product_sales(orders, line_items, product_id, variant_id)
    series = fill_missing_dates(sparse, start.date(), end.date())
    baseline = estimate_baseline(series, start.date(), end.date())
    periods = detect_stockout_periods(series, baseline)

    confidence = sum(p.confidence for p in periods) / len(periods) if periods else 0.0

    for period in periods:
        inferred_stockouts_total.labels(method=period.detection_method).inc()
    stockout_inference_runs_total.labels(status="success").inc()

    log.info(
        "stock_inference_completed",
        extra={
            "product_id": product_id,
            "variant_id": variant_id,
            "orders": len(orders),
            "sales_days": len(sparse),
            "data_points": len(series),
            "avg_daily_sales": round(baseline.avg_daily_sales, 4),
            "stockouts": len(periods),
            "failed_orders": len(aggregator.failures),
        },
    )

    return StockoutInferenceReport(
        product_id=product_id,
        variant_id=variant_id,
        start=start,
        end=end,
        generated_at=now,
        inferred_stockouts=periods,
        baseline=baseline,
        sales_data=series,
        confidence=confidence,
        data_points=len(series),
        failed_order_fetches=len(aggregator.failures),
    )


__all__ = ["infer_historical_stockouts", "resolve_range"]
