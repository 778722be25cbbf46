"""BigCommerce-backed order history and line-item provider."""

from __future__ import annotations

from datetime import datetime

from stock_inference.clients.bigcommerce import BigCommerceClient
from stock_inference.core.config import Settings
from stock_inference.domain.stockout.models import LineItem, Order
from stock_inference.services.normalizers_bigcommerce import norm_order_products, norm_orders


class BigCommerceSource:
    """Adapts BigCommerceClient to the inference provider protocols."""

    def __init__(self, client: BigCommerceClient):
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> BigCommerceSource:
        """Build a source with its own HTTP session from application settings."""
        client = BigCommerceClient(
            settings.api_base_url,
            settings.bigcommerce_access_token,
            rate_limit_per_min=settings.bigcommerce_rate_per_min,
            timeout_sec=settings.http_timeout_seconds,
            max_retries=settings.http_max_retries,
            backoff_base=settings.http_backoff_base,
            backoff_max=settings.http_backoff_max,
        )
        return cls(client)

    async def get_orders_page(
        self, start: datetime, end: datetime, page: int, limit: int
    ) -> list[Order]:
        rows = await self.client.get_orders(
            page=page,
            limit=limit,
            min_date_created=start.isoformat(),
            max_date_created=end.isoformat(),
        )
        return norm_orders(rows)

    async def get_line_items(self, order_id: int) -> list[LineItem]:
        rows = await self.client.get_order_products(order_id)
        return norm_order_products(rows, order_id)

    async def close(self) -> None:
        await self.client.close()


__all__ = ["BigCommerceSource"]
