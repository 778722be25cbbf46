"""FastAPI middleware."""

from __future__ import annotations

from stock_inference.web.middleware.prometheus import PrometheusMiddleware

__all__ = ["PrometheusMiddleware"]
