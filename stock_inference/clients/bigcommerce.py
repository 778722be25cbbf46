"""BigCommerce REST API client.

Thin wrapper around BaseHTTPClient for the order endpoints used by
historical stock-out inference.
"""

from __future__ import annotations

from typing import Any

from stock_inference.clients.http import DEFAULT_TIMEOUT, BaseHTTPClient

MAX_PAGE_SIZE = 250


class BigCommerceClient:
    """BigCommerce v2 orders API client."""

    def __init__(
        self,
        base_url: str,
        access_token: str,
        rate_limit_per_min: int | None = 450,
        timeout_sec: int = DEFAULT_TIMEOUT,
        max_retries: int = 1,
        backoff_base: float = 0.75,
        backoff_max: float = 8.0,
    ):
        """Initialize BigCommerce client.

        Args:
            base_url: Store API root, e.g. https://api.bigcommerce.com/stores/{hash}
            access_token: API account access token
            rate_limit_per_min: Request rate limit per minute
            timeout_sec: Total timeout per request
            max_retries: Attempts per request (1 = no retry)
            backoff_base: Retry backoff base delay
            backoff_max: Retry backoff max delay

        """
        headers = {
            "X-Auth-Token": access_token,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        self.http = BaseHTTPClient(
            base_url,
            default_headers=headers,
            timeout_sec=timeout_sec,
            rate_limit_per_min=rate_limit_per_min,
            max_retries=max_retries,
            backoff_base=backoff_base,
            backoff_max=backoff_max,
            service="bigcommerce",
        )

    async def get_orders(
        self,
        page: int = 1,
        limit: int = MAX_PAGE_SIZE,
        min_date_created: str | None = None,
        max_date_created: str | None = None,
        sort: str = "date_created:asc",
    ) -> list[dict[str, Any]]:
        """Get one page of orders.

        Endpoint: GET /v2/orders

        Args:
            page: 1-based page number
            limit: Orders per page (max 250)
            min_date_created: Lower bound on creation date (ISO-8601 or RFC-2822)
            max_date_created: Upper bound on creation date (ISO-8601 or RFC-2822)
            sort: Sort expression; ascending creation date by default

        Returns:
            List of raw order records; empty when the page is past the end

        """
        params: dict[str, Any] = {"page": page, "limit": min(limit, MAX_PAGE_SIZE), "sort": sort}
        if min_date_created:
            params["min_date_created"] = min_date_created
        if max_date_created:
            params["max_date_created"] = max_date_created

        data = await self.http.json("GET", "/v2/orders", params=params, endpoint="/v2/orders")
        return data if isinstance(data, list) else []

    async def get_order_products(self, order_id: int) -> list[dict[str, Any]]:
        """Get the line items of one order.

        Endpoint: GET /v2/orders/{order_id}/products
        """
        data = await self.http.json(
            "GET",
            f"/v2/orders/{order_id}/products",
            endpoint="/v2/orders/{id}/products",
        )
        return data if isinstance(data, list) else []

    async def close(self) -> None:
        """Close HTTP client session."""
        await self.http.close()


__all__ = ["BigCommerceClient", "MAX_PAGE_SIZE"]
