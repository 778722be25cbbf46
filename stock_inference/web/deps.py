"""FastAPI dependencies for settings and the order data provider."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends

from stock_inference.core.config import Settings, get_settings
from stock_inference.domain.stockout.providers import StockDataSource
from stock_inference.services.bigcommerce_source import BigCommerceSource


def get_app_settings() -> Settings:
    """Settings dependency (overridable in tests)."""
    return get_settings()


async def get_stock_data_source(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AsyncIterator[StockDataSource]:
    """Request-scoped BigCommerce provider; its HTTP session is closed afterwards."""
    source = BigCommerceSource.from_settings(settings)
    try:
        yield source
    finally:
        await source.close()


AppSettings = Annotated[Settings, Depends(get_app_settings)]
DataSource = Annotated[StockDataSource, Depends(get_stock_data_source)]
