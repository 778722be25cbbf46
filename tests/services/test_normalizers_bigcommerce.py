"""Tests for BigCommerce payload normalization."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from stock_inference.domain.stockout.models import LineItem
from stock_inference.services.normalizers_bigcommerce import (
    norm_order_products,
    norm_orders,
    parse_timestamp,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Tue, 20 Nov 2012 00:00:00 +0000", datetime(2012, 11, 20, tzinfo=timezone.utc)),
        ("Fri, 01 Mar 2024 22:30:00 -0500", datetime(2024, 3, 2, 3, 30, tzinfo=timezone.utc)),
        ("2024-03-01T10:00:00Z", datetime(2024, 3, 1, 10, tzinfo=timezone.utc)),
        ("2024-03-01T10:00:00+02:00", datetime(2024, 3, 1, 8, tzinfo=timezone.utc)),
        ("2024-03-01T10:00:00", datetime(2024, 3, 1, 10, tzinfo=timezone.utc)),
    ],
)
def test_parse_timestamp(raw, expected):
    """RFC-2822 and ISO-8601 both end up as aware UTC."""
    parsed = parse_timestamp(raw)

    assert parsed == expected
    assert parsed.tzinfo == timezone.utc


@pytest.mark.parametrize("raw", ["", "yesterday"])
def test_parse_timestamp_invalid(raw):
    """Unparseable values raise ValueError."""
    with pytest.raises(ValueError):
        parse_timestamp(raw)


def test_norm_orders():
    """id and date_created are extracted; incomplete records are skipped."""
    rows = [
        {"id": 101, "date_created": "Tue, 20 Nov 2012 00:00:00 +0000", "status": "Shipped"},
        {"id": None, "date_created": "Tue, 20 Nov 2012 00:00:00 +0000"},
        {"id": 102, "date_created": ""},
        {"id": "103", "date_created": "Wed, 21 Nov 2012 09:15:00 +0000"},
    ]

    orders = norm_orders(rows)

    assert [o.id for o in orders] == [101, 103]
    assert orders[1].created_at == datetime(2012, 11, 21, 9, 15, tzinfo=timezone.utc)


def test_norm_order_products():
    """Variant 0 means no variant; custom products without id are skipped."""
    rows = [
        {"id": 1, "product_id": 42, "variant_id": 7, "quantity": 2},
        {"id": 2, "product_id": 42, "variant_id": 0, "quantity": "3"},
        {"id": 3, "product_id": None, "variant_id": None, "quantity": 1},
        {"id": 4, "product_id": 43, "quantity": None},
    ]

    items = norm_order_products(rows, order_id=500)

    assert items == [
        LineItem(order_id=500, product_id=42, variant_id=7, quantity=2),
        LineItem(order_id=500, product_id=42, variant_id=None, quantity=3),
        LineItem(order_id=500, product_id=43, variant_id=None, quantity=0),
    ]


def test_norm_empty_payloads():
    """Empty pages normalize to empty lists."""
    assert norm_orders([]) == []
    assert norm_order_products([], order_id=1) == []
