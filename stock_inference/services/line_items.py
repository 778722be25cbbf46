"""Line-item retrieval and per-day product sales aggregation."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from datetime import date, timezone

from stock_inference.clients.ratelimit import courtesy_pause
from stock_inference.core.logging import get_logger
from stock_inference.core.metrics import line_item_fetch_failures_total
from stock_inference.domain.stockout.errors import PartialItemFetchError
from stock_inference.domain.stockout.models import LineItem, Order, SalesDataPoint
from stock_inference.domain.stockout.providers import LineItemSource

log = get_logger("stock_inference.line_items")

DEFAULT_BATCH_SIZE = 10
DEFAULT_BATCH_DELAY_SEC = 0.1


class LineItemAggregator:
    """Fetches line items for many orders in bounded concurrent batches.

    Failures of individual orders are recorded in ``failures`` and the order
    contributes no items; they never abort the batch.
    """

    def __init__(
        self,
        source: LineItemSource,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_delay_sec: float = DEFAULT_BATCH_DELAY_SEC,
    ):
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self.source = source
        self.batch_size = batch_size
        self.batch_delay_sec = batch_delay_sec
        self.failures: list[PartialItemFetchError] = []

    async def _fetch_one(self, order_id: int) -> list[LineItem]:
        try:
            return await self.source.get_line_items(order_id)
        except Exception as e:
            failure = PartialItemFetchError(order_id, e)
            self.failures.append(failure)
            line_item_fetch_failures_total.inc()
            log.warning(
                "order_products_failed",
                extra={"order_id": order_id, "error": str(e) or type(e).__name__},
            )
            return []

    async def fetch(self, order_ids: list[int]) -> list[LineItem]:
        """Fetch line items of all orders; result order is not meaningful."""
        items: list[LineItem] = []

        for offset in range(0, len(order_ids), self.batch_size):
            batch = order_ids[offset : offset + self.batch_size]
            results = await asyncio.gather(*(self._fetch_one(oid) for oid in batch))
            for order_items in results:
                items.extend(order_items)

            if offset + self.batch_size < len(order_ids):
                await courtesy_pause(self.batch_delay_sec)

        log.info(
            "order_products_fetched",
            extra={
                "orders": len(order_ids),
                "line_items": len(items),
                "failed_orders": len(self.failures),
            },
        )
        return items


def order_day(order: Order) -> date:
    """UTC calendar day an order was placed on."""
    created = order.created_at
    if created.tzinfo is not None:
        created = created.astimezone(timezone.utc)
    return created.date()


def extract_product_sales(
    orders: Iterable[Order],
    line_items: Iterable[LineItem],
    product_id: int,
    variant_id: int | None = None,
) -> list[SalesDataPoint]:
    """Aggregate one product's sold quantity per day.

    Args:
        orders: Orders of the analysed range
        line_items: Line items of those orders, in any order
        product_id: Product to keep
        variant_id: When given, keep only this variant

    Returns:
        One point per day with at least one matching item, ascending by date.
        Items whose order is not among ``orders`` are skipped.

    """
    order_dates = {order.id: order_day(order) for order in orders}

    quantities: dict[date, int] = {}
    order_sets: dict[date, set[int]] = {}

    for item in line_items:
        if item.product_id != product_id:
            continue
        if variant_id is not None and item.variant_id != variant_id:
            continue

        day = order_dates.get(item.order_id)
        if day is None:
            continue

        quantities[day] = quantities.get(day, 0) + item.quantity
        order_sets.setdefault(day, set()).add(item.order_id)

    return [
        SalesDataPoint(date=day, quantity=quantities[day], orders=len(order_sets[day]))
        for day in sorted(quantities)
    ]


__all__ = ["LineItemAggregator", "extract_product_sales", "order_day"]
