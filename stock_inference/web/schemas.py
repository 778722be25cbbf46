"""Pydantic schemas for API requests and responses.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from stock_inference.domain.stockout.gaps import CONFIDENCE_THRESHOLD, MIN_GAP_DAYS
from stock_inference.domain.stockout.models import StockoutInferenceReport

METHODOLOGY = "sales-gap-analysis"


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StockInferenceRequest(CamelModel):
    """Historical stock inference request."""

    product_id: int | None = Field(None, description="Product to analyse")
    variant_id: int | None = Field(None, description="Restrict to one variant")
    start_date: dt.datetime | None = Field(None, description="Range start (ISO-8601)")
    end_date: dt.datetime | None = Field(None, description="Range end (ISO-8601)")


class SalesDataPointDTO(CamelModel):
    """Units sold on one day."""

    date: dt.date
    quantity: int
    orders: int


class BaselineDTO(CamelModel):
    """Baseline sales pattern."""

    avg_daily_sales: float
    avg_weekly_sales: float
    avg_monthly_sales: float
    seasonal_factors: dict[str, float]
    weekly_pattern: dict[str, float]
    sales_velocity: float


class InferredStockOutDTO(CamelModel):
    """Inferred stock-out period (end/duration null while ongoing)."""

    start_date: dt.date
    end_date: dt.date | None
    duration_days: int | None
    confidence: float
    detection_method: str
    reason: str
    expected_sales: float
    actual_sales: int
    sales_gap_percentage: float


class AnalysisRange(CamelModel):
    start_date: dt.datetime
    end_date: dt.datetime


class InferenceMetadata(CamelModel):
    generated_at: dt.datetime
    methodology: str = METHODOLOGY
    min_gap_days: int = MIN_GAP_DAYS
    confidence_threshold: float = CONFIDENCE_THRESHOLD
    failed_order_fetches: int = 0


class StockInferenceData(CamelModel):
    """Full inference report."""

    product_id: int
    variant_id: int | None
    analysis_range: AnalysisRange
    inferred_stock_outs: list[InferredStockOutDTO]
    baseline: BaselineDTO
    sales_data: list[SalesDataPointDTO]
    confidence: float
    data_points: int
    metadata: InferenceMetadata

    @classmethod
    def from_report(cls, report: StockoutInferenceReport) -> StockInferenceData:
        """Build the wire representation of a report."""
        b = report.baseline
        return cls(
            product_id=report.product_id,
            variant_id=report.variant_id,
            analysis_range=AnalysisRange(start_date=report.start, end_date=report.end),
            inferred_stock_outs=[
                InferredStockOutDTO(
                    start_date=p.start_date,
                    end_date=p.end_date,
                    duration_days=p.duration_days,
                    confidence=p.confidence,
                    detection_method=p.detection_method,
                    reason=p.reason,
                    expected_sales=p.expected_sales,
                    actual_sales=p.actual_sales,
                    sales_gap_percentage=p.sales_gap_percentage,
                )
                for p in report.inferred_stockouts
            ],
            baseline=BaselineDTO(
                avg_daily_sales=b.avg_daily_sales,
                avg_weekly_sales=b.avg_weekly_sales,
                avg_monthly_sales=b.avg_monthly_sales,
                seasonal_factors=dict(b.seasonal_factors),
                weekly_pattern=dict(b.weekly_pattern),
                sales_velocity=b.sales_velocity,
            ),
            sales_data=[
                SalesDataPointDTO(date=p.date, quantity=p.quantity, orders=p.orders)
                for p in report.sales_data
            ],
            confidence=report.confidence,
            data_points=report.data_points,
            metadata=InferenceMetadata(
                generated_at=report.generated_at,
                failed_order_fetches=report.failed_order_fetches,
            ),
        )


class StockInferenceResponse(CamelModel):
    success: bool = True
    data: StockInferenceData


class ErrorResponse(CamelModel):
    success: bool = False
    error: str
    details: str | None = None
