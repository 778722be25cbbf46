"""Shared pytest fixtures and in-memory providers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta, timezone

import aiohttp
import pytest

from stock_inference.core.config import Settings
from stock_inference.domain.stockout.models import LineItem, Order, SalesDataPoint


def build_series(start: date, quantities: Iterable[int]) -> list[SalesDataPoint]:
    """Dense daily series starting at `start`, one point per quantity."""
    return [
        SalesDataPoint(date=start + timedelta(days=i), quantity=q, orders=1 if q else 0)
        for i, q in enumerate(quantities)
    ]


def make_order(order_id: int, day: date, hour: int = 12) -> Order:
    """Order placed on `day` at `hour` UTC."""
    return Order(id=order_id, created_at=datetime.combine(day, time(hour), tzinfo=timezone.utc))


class FakeStockDataSource:
    """In-memory order history and line-item provider.

    Pages are slices of the orders created within the requested range. Line
    item calls yield to the loop so concurrent batches actually overlap.
    """

    def __init__(
        self,
        orders: Iterable[Order] = (),
        items_by_order: dict[int, list[LineItem]] | None = None,
        failing_orders: Iterable[int] = (),
        fail_on_page: int | None = None,
        item_delay: float = 0.0,
    ):
        self.orders = sorted(orders, key=lambda o: o.created_at)
        self.items_by_order = dict(items_by_order or {})
        self.failing_orders = set(failing_orders)
        self.fail_on_page = fail_on_page
        self.item_delay = item_delay

        self.page_calls: list[tuple[int, int]] = []
        self.item_calls: list[int] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    @classmethod
    def with_sales(
        cls,
        sales: dict[date, int],
        product_id: int,
        variant_id: int | None = None,
        **kwargs,
    ) -> FakeStockDataSource:
        """One order per day carrying `quantity` units of the product."""
        orders = []
        items: dict[int, list[LineItem]] = {}
        for order_id, (day, quantity) in enumerate(sorted(sales.items()), start=1):
            orders.append(make_order(order_id, day))
            items[order_id] = [LineItem(order_id, product_id, variant_id, quantity)]
        return cls(orders, items, **kwargs)

    async def get_orders_page(
        self, start: datetime, end: datetime, page: int, limit: int
    ) -> list[Order]:
        self.page_calls.append((page, limit))
        if self.fail_on_page == page:
            raise aiohttp.ClientConnectionError("Connection reset by peer")

        in_range = [o for o in self.orders if start <= o.created_at <= end]
        offset = (page - 1) * limit
        return in_range[offset : offset + limit]

    async def get_line_items(self, order_id: int) -> list[LineItem]:
        self.item_calls.append(order_id)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.item_delay)
            if order_id in self.failing_orders:
                raise TimeoutError()
            return list(self.items_by_order.get(order_id, []))
        finally:
            self.in_flight -= 1

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings() -> Settings:
    """Settings with courtesy delays disabled."""
    return Settings(
        bigcommerce_store_hash="abc123",
        bigcommerce_access_token="test-token",
        orders_page_delay_ms=0,
        line_items_batch_delay_ms=0,
    )


@pytest.fixture
def series():
    """Factory for dense daily series."""
    return build_series


@pytest.fixture
def fake_source():
    """FakeStockDataSource class, used as a factory."""
    return FakeStockDataSource


@pytest.fixture
def order():
    """Factory for orders placed on a given day."""
    return make_order


@pytest.fixture
def scenario_a_sales() -> dict[date, int]:
    """Two weeks of March sales with a ten-day zero run (Mar 4-13)."""
    return {
        date(2024, 3, 1): 2,
        date(2024, 3, 2): 2,
        date(2024, 3, 3): 2,
        date(2024, 3, 14): 3,
    }


@pytest.fixture
def root_logger():
    """Root logger whose handlers and level are restored after the test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
