"""Historical stock inference API endpoint."""

from __future__ import annotations

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from stock_inference.core.logging import get_logger, set_request_id
from stock_inference.domain.stockout.errors import FetchError, NoDataError
from stock_inference.services.stockout_inference import infer_historical_stockouts
from stock_inference.web.deps import AppSettings, DataSource
from stock_inference.web.schemas import (
    ErrorResponse,
    StockInferenceData,
    StockInferenceRequest,
    StockInferenceResponse,
)

log = get_logger("stock_inference.web.analytics")

router = APIRouter(prefix="/api/v1/analytics", tags=["analytics"])


def _error(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))


@router.post(
    "/historical-stock-inference",
    response_model=StockInferenceResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def historical_stock_inference(
    body: StockInferenceRequest,
    source: DataSource,
    settings: AppSettings,
):
    """Infer historical stock-out periods for one product from its order history.

    Defaults to the last two years when no range is given.
    """
    set_request_id()

    if not body.product_id:
        return _error(status.HTTP_400_BAD_REQUEST, "Product ID is required")

    try:
        report = await infer_historical_stockouts(
            source,
            body.product_id,
            body.variant_id or None,
            body.start_date,
            body.end_date,
            settings=settings,
        )
    except ValueError as e:
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid request", str(e))
    except NoDataError as e:
        return _error(status.HTTP_404_NOT_FOUND, "no_data", str(e))
    except FetchError as e:
        log.error(
            "stock_inference_fetch_failed",
            extra={"product_id": body.product_id, "cause": repr(e.__cause__)},
        )
        return _error(
            status.HTTP_502_BAD_GATEWAY,
            "Failed to analyze historical stock patterns",
            str(e),
        )

    return StockInferenceResponse(data=StockInferenceData.from_report(report))
