"""Prometheus metrics for monitoring."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# HTTP Request metrics (inbound API)
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 120.0],
)

http_requests_in_progress = Gauge(
    "http_requests_in_progress",
    "Number of HTTP requests in progress",
    ["method", "endpoint"],
)

# External API metrics (outbound calls to the store platform)
external_api_requests_total = Counter(
    "external_api_requests_total",
    "Total external API requests",
    ["service", "endpoint", "status"],  # status: HTTP code or "error"
)

external_api_duration_seconds = Histogram(
    "external_api_duration_seconds",
    "External API request duration",
    ["service", "endpoint"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

# Inference metrics
stockout_inference_runs_total = Counter(
    "stockout_inference_runs_total",
    "Total historical stock-out inference runs",
    ["status"],  # status: success, no_data, fetch_error
)

inferred_stockouts_total = Counter(
    "inferred_stockouts_total",
    "Total inferred stock-out periods",
    ["method"],  # method: complete_sales_drop, ongoing_sales_drop
)

line_item_fetch_failures_total = Counter(
    "line_item_fetch_failures_total",
    "Orders whose line items could not be fetched (treated as empty)",
)

# System metrics
app_uptime_seconds = Gauge(
    "app_uptime_seconds",
    "Application uptime in seconds",
)

app_info = Gauge(
    "app_info",
    "Application info",
    ["version", "environment"],
)
