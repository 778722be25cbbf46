"""Errors raised by the stock-out inference pipeline."""

from __future__ import annotations


class StockInferenceError(Exception):
    """Base class for inference failures surfaced to callers."""


class FetchError(StockInferenceError):
    """Order history could not be fetched; fatal for the request."""


class NoDataError(StockInferenceError):
    """The requested range contains no orders at all."""


class PartialItemFetchError(StockInferenceError):
    """Line items of a single order could not be fetched.

    Recorded by the aggregator and logged; the order contributes no items.
    """

    def __init__(self, order_id: int, cause: BaseException):
        self.order_id = order_id
        self.cause = cause
        super().__init__(f"Failed to fetch products for order {order_id}: {cause!r}")


__all__ = ["StockInferenceError", "FetchError", "NoDataError", "PartialItemFetchError"]
