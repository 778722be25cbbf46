"""FastAPI application exposing historical stock-out inference."""

from __future__ import annotations

import time

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from stock_inference.core.logging import get_logger, get_request_id, set_request_id
from stock_inference.core.metrics import app_info, app_uptime_seconds
from stock_inference.web.middleware import PrometheusMiddleware
from stock_inference.web.routers import analytics
from stock_inference.web.schemas import ErrorResponse

log = get_logger("stock_inference.web")

APP_VERSION = "0.1.0"

# Application start time for uptime calculation
APP_START_TIME = time.time()

app = FastAPI(
    title="Stock Inference API",
    version=APP_VERSION,
    description="Historical stock-out inference from order history",
)

app.add_middleware(PrometheusMiddleware)

app_info.labels(version=APP_VERSION, environment="production").set(1)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are answered like any other invalid input (400)."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'][1:]) or 'body'}: {err['msg']}"
        for err in exc.errors()
    )
    body = ErrorResponse(error="Invalid request", details=details)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump(by_alias=True)
    )


# Global exception handler for unhandled errors (500)
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions with proper logging and response."""
    request_id = get_request_id() or set_request_id()

    log.error(
        "unhandled_exception",
        extra={
            "path": str(request.url.path),
            "method": request.method,
            "error": str(exc),
            "error_type": type(exc).__name__,
        },
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": "internal_server_error",
            "requestId": request_id,
        },
    )


app.include_router(analytics.router)


@app.get("/health")
def health():
    """Basic health check for monitoring."""
    return {"status": "healthy"}


@app.get("/metrics")
def metrics():
    """Prometheus metrics endpoint."""
    app_uptime_seconds.set(time.time() - APP_START_TIME)
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
