"""Paginated order history retrieval."""

from __future__ import annotations

from datetime import datetime

from stock_inference.clients.ratelimit import courtesy_pause
from stock_inference.core.logging import get_logger
from stock_inference.domain.stockout.errors import FetchError
from stock_inference.domain.stockout.models import Order
from stock_inference.domain.stockout.providers import OrderHistorySource

log = get_logger("stock_inference.order_history")

DEFAULT_PAGE_SIZE = 250
DEFAULT_PAGE_DELAY_SEC = 0.2


class OrderHistoryFetcher:
    """Pages through an order history source for one date range.

    Pages are requested strictly one after another; a full page means there
    may be more, a short or empty page ends the walk.
    """

    def __init__(
        self,
        source: OrderHistorySource,
        page_size: int = DEFAULT_PAGE_SIZE,
        page_delay_sec: float = DEFAULT_PAGE_DELAY_SEC,
    ):
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.source = source
        self.page_size = page_size
        self.page_delay_sec = page_delay_sec

    async def fetch(self, start: datetime, end: datetime) -> list[Order]:
        """Fetch every order created in [start, end], oldest first.

        Raises:
            FetchError: If any page request fails (no retry)

        """
        orders: list[Order] = []
        page = 1

        while True:
            try:
                batch = await self.source.get_orders_page(start, end, page, self.page_size)
            except Exception as e:
                log.error(
                    "orders_page_failed",
                    extra={"page": page, "error": str(e) or type(e).__name__},
                )
                raise FetchError("Failed to fetch orders history") from e

            orders.extend(batch)
            if len(batch) < self.page_size:
                break

            page += 1
            await courtesy_pause(self.page_delay_sec)

        log.info(
            "orders_history_fetched",
            extra={"orders": len(orders), "pages": page, "from": start, "to": end},
        )
        return orders


__all__ = ["OrderHistoryFetcher"]
