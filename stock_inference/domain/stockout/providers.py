"""Collaborator interfaces consumed by the inference pipeline."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from stock_inference.domain.stockout.models import LineItem, Order


class OrderHistorySource(Protocol):
    """Returns one page of orders created within [start, end], oldest first."""

    async def get_orders_page(
        self, start: datetime, end: datetime, page: int, limit: int
    ) -> list[Order]: ...


class LineItemSource(Protocol):
    """Returns the products sold within one order."""

    async def get_line_items(self, order_id: int) -> list[LineItem]: ...


class StockDataSource(OrderHistorySource, LineItemSource, Protocol):
    """A provider offering both capabilities, e.g. one store platform."""


__all__ = ["OrderHistorySource", "LineItemSource", "StockDataSource"]
