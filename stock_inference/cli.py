"""Command-line runner for historical stock-out inference.

Usage:
    python -m stock_inference.cli --product-id 123 [--variant-id 456]
        [--start 2024-01-01] [--end 2024-12-31] [--pretty]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import datetime

from stock_inference.core.config import get_settings
from stock_inference.core.logging import set_request_id, setup_logging
from stock_inference.domain.stockout.errors import StockInferenceError
from stock_inference.services.bigcommerce_source import BigCommerceSource
from stock_inference.services.stockout_inference import infer_historical_stockouts
from stock_inference.web.schemas import StockInferenceData


def _parse_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not an ISO-8601 date: {value!r}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Infer historical stock-out periods for a product from its order history"
    )
    parser.add_argument("--product-id", type=int, required=True, help="Product to analyse")
    parser.add_argument("--variant-id", type=int, default=None, help="Restrict to one variant")
    parser.add_argument("--start", type=_parse_datetime, default=None, help="Range start (ISO-8601)")
    parser.add_argument("--end", type=_parse_datetime, default=None, help="Range end (ISO-8601)")
    parser.add_argument("--pretty", action="store_true", help="Indent the JSON report")
    return parser


async def run(args: argparse.Namespace) -> dict:
    """Run one inference against BigCommerce and return the report payload."""
    settings = get_settings()
    source = BigCommerceSource.from_settings(settings)
    try:
        report = await infer_historical_stockouts(
            source,
            args.product_id,
            args.variant_id,
            args.start,
            args.end,
            settings=settings,
        )
    finally:
        await source.close()
    return StockInferenceData.from_report(report).model_dump(by_alias=True, mode="json")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    # stdout carries the report; JSON logs go to stderr or the log file
    setup_logging(level=settings.log_level, file_path=settings.log_file)
    set_request_id()

    try:
        payload = asyncio.run(run(args))
    except (StockInferenceError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(payload, indent=2 if args.pretty else None, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
