"""BigCommerce API response normalizers.

Functions to normalize BigCommerce v2 order payloads into domain records.

All dates converted to UTC.
"""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

from stock_inference.domain.stockout.models import LineItem, Order


def parse_timestamp(value: str) -> datetime:
    """Parse a BigCommerce timestamp into an aware UTC datetime.

    The v2 API returns RFC-2822 dates ("Tue, 20 Nov 2012 00:00:00 +0000");
    ISO-8601 is accepted as well. Naive values are taken as UTC.

    Raises:
        ValueError: If the value is empty or in neither format

    """
    if not value:
        raise ValueError("empty timestamp")

    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        try:
            dt = parsedate_to_datetime(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"unrecognised timestamp: {value!r}") from e

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def norm_orders(rows: list[dict]) -> list[Order]:
    """Normalize a page of GET /v2/orders records.

    Input fields used: id, date_created. Records missing either are skipped;
    page order is preserved.
    """
    out = []
    for r in rows:
        order_id = r.get("id")
        created = r.get("date_created")
        if order_id is None or not created:
            continue
        out.append(Order(id=int(order_id), created_at=parse_timestamp(created)))
    return out


def norm_order_products(rows: list[dict], order_id: int) -> list[LineItem]:
    """Normalize GET /v2/orders/{id}/products records.

    Input fields used: product_id, variant_id, quantity. The order id is
    taken from the request, since it is the join key downstream.
    """
    out = []
    for r in rows:
        product_id = r.get("product_id")
        if product_id is None:
            continue  # custom products have no catalogue id

        variant_id = r.get("variant_id")
        out.append(
            LineItem(
                order_id=order_id,
                product_id=int(product_id),
                variant_id=int(variant_id) if variant_id else None,
                quantity=int(r.get("quantity") or 0),
            )
        )
    return out


__all__ = ["norm_order_products", "norm_orders", "parse_timestamp"]
