"""Order records consumed by the recommender algorithms."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

import polars as pl
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .fields import ORDER_ID, ORDER_ITEM_ID, PRODUCT_ID, QUANTITY, USER_ID


class Entity(BaseModel):
    """Read-only record; accepts both snake_case and the camelCase wire names."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class OrderItem(Entity):
    """A single product line of an order."""

    id: int
    product_id: int
    order_id: int
    quantity: int = 1
    unit_price_in_cents: int = 0


class Order(Entity):
    """A placed order of one user."""

    id: int
    user_id: int
    time: datetime
    total_price_in_cents: int = 0
    address_name: str | None = None
    address1: str | None = None
    address2: str | None = None
    credit_card_company: str | None = None
    credit_card_number: str | None = None
    credit_card_expiry_date: str | None = None


def order_items_frame(items: Iterable[OrderItem]) -> pl.DataFrame:
    """Tabulate order items as ``id, order_id, product_id, quantity``."""
    rows = [
        {
            ORDER_ITEM_ID: item.id,
            ORDER_ID: item.order_id,
            PRODUCT_ID: item.product_id,
            QUANTITY: item.quantity,
        }
        for item in items
    ]
    schema = {ORDER_ITEM_ID: pl.Int64, ORDER_ID: pl.Int64, PRODUCT_ID: pl.Int64, QUANTITY: pl.Int64}
    return pl.DataFrame(rows, schema=schema)


def orders_frame(orders: Iterable[Order]) -> pl.DataFrame:
    """Tabulate orders as ``order_id, user_id``."""
    rows = [{ORDER_ID: order.id, USER_ID: order.user_id} for order in orders]
    schema = {ORDER_ID: pl.Int64, USER_ID: pl.Int64}
    return pl.DataFrame(rows, schema=schema)


__all__ = ["Order", "OrderItem", "order_items_frame", "orders_frame"]
