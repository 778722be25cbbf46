"""Tests for line-item batching and per-day product sales."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from stock_inference.domain.stockout.errors import PartialItemFetchError
from stock_inference.domain.stockout.models import LineItem, Order, SalesDataPoint
from stock_inference.services.line_items import (
    LineItemAggregator,
    extract_product_sales,
    order_day,
)


@pytest.fixture
def pauses(monkeypatch):
    """Record courtesy pauses instead of sleeping."""
    calls: list[float] = []

    async def fake_pause(delay_sec: float) -> None:
        calls.append(delay_sec)

    monkeypatch.setattr("stock_inference.services.line_items.courtesy_pause", fake_pause)
    return calls


def _items_for(order_ids):
    return {oid: [LineItem(oid, 42, None, 1)] for oid in order_ids}


@pytest.mark.asyncio
async def test_batches_are_bounded(fake_source, pauses):
    """At most batch_size requests are in flight; pauses fall between batches."""
    ids = list(range(1, 26))
    source = fake_source([], _items_for(ids), item_delay=0.01)
    aggregator = LineItemAggregator(source, batch_size=10, batch_delay_sec=0.1)

    items = await aggregator.fetch(ids)

    assert len(items) == 25
    assert sorted(source.item_calls) == ids
    assert source.max_in_flight == 10
    assert pauses == [0.1, 0.1]


@pytest.mark.asyncio
async def test_single_batch_has_no_pause(fake_source, pauses):
    """One batch needs no courtesy delay."""
    source = fake_source([], _items_for([1, 2, 3]))
    aggregator = LineItemAggregator(source, batch_size=10)

    await aggregator.fetch([1, 2, 3])

    assert pauses == []


@pytest.mark.asyncio
async def test_failed_order_contributes_no_items(fake_source, pauses):
    """A failing order is recorded and skipped; the rest still arrive."""
    source = fake_source([], _items_for([1, 2, 3]), failing_orders=[2])
    aggregator = LineItemAggregator(source, batch_size=10)

    items = await aggregator.fetch([1, 2, 3])

    assert sorted(item.order_id for item in items) == [1, 3]
    assert len(aggregator.failures) == 1
    failure = aggregator.failures[0]
    assert isinstance(failure, PartialItemFetchError)
    assert failure.order_id == 2
    assert isinstance(failure.cause, TimeoutError)


@pytest.mark.asyncio
async def test_empty_order_list(fake_source, pauses):
    """Nothing to fetch."""
    source = fake_source([])
    aggregator = LineItemAggregator(source)

    assert await aggregator.fetch([]) == []
    assert source.item_calls == []


def test_invalid_batch_size(fake_source):
    """Batch size must be positive."""
    with pytest.raises(ValueError):
        LineItemAggregator(fake_source([]), batch_size=0)


def test_order_day_is_utc():
    """An evening order west of UTC belongs to the next UTC day."""
    tz = timezone(timedelta(hours=-5))
    assert order_day(Order(1, datetime(2024, 3, 1, 23, 30, tzinfo=tz))) == date(2024, 3, 2)
    assert order_day(Order(2, datetime(2024, 3, 1, 23, 30))) == date(2024, 3, 1)


def test_extract_product_sales_aggregates_per_day(order):
    """Quantities sum per day; orders counts distinct orders."""
    orders = [
        order(1, date(2024, 3, 2)),
        order(2, date(2024, 3, 2)),
        order(3, date(2024, 3, 1)),
    ]
    items = [
        LineItem(1, 42, None, 2),
        LineItem(1, 42, None, 1),  # same order, second line
        LineItem(2, 42, None, 4),
        LineItem(3, 42, None, 1),
        LineItem(3, 99, None, 10),  # other product
    ]

    sales = extract_product_sales(orders, items, product_id=42)

    assert sales == [
        SalesDataPoint(date=date(2024, 3, 1), quantity=1, orders=1),
        SalesDataPoint(date=date(2024, 3, 2), quantity=7, orders=2),
    ]


def test_extract_product_sales_filters_variant(order):
    """A variant id restricts matching to that variant."""
    orders = [order(1, date(2024, 3, 1))]
    items = [LineItem(1, 42, 7, 2), LineItem(1, 42, 8, 5), LineItem(1, 42, None, 1)]

    assert extract_product_sales(orders, items, 42, variant_id=7) == [
        SalesDataPoint(date=date(2024, 3, 1), quantity=2, orders=1)
    ]
    assert extract_product_sales(orders, items, 42)[0].quantity == 8


def test_extract_product_sales_skips_unknown_orders(order):
    """Items whose order is not in the range are dropped."""
    orders = [order(1, date(2024, 3, 1))]
    items = [LineItem(1, 42, None, 1), LineItem(99, 42, None, 5)]

    sales = extract_product_sales(orders, items, 42)

    assert sales == [SalesDataPoint(date=date(2024, 3, 1), quantity=1, orders=1)]


def test_extract_product_sales_no_match(order):
    """No matching items: empty sparse series."""
    orders = [order(1, date(2024, 3, 1))]

    assert extract_product_sales(orders, [LineItem(1, 99, None, 1)], 42) == []
