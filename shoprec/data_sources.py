from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
from loguru import logger
from pydantic import TypeAdapter

from .config import RestClientConfig
from .entities import Order, OrderItem
from .http import RestClient

_ORDERS = TypeAdapter(list[Order])
_ORDER_ITEMS = TypeAdapter(list[OrderItem])

TrainingData = tuple[list[OrderItem], list[Order]]


def parse_training_data(orders: Any, order_items: Any) -> TrainingData:
    """Validate raw JSON-like lists into entities."""
    return _ORDER_ITEMS.validate_python(order_items or []), _ORDERS.validate_python(orders or [])


def load_training_data(path: Path) -> TrainingData:
    """Read ``{"orders": [...], "orderItems": [...]}`` from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Training data file not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError("Training data root must be an object with orders/orderItems")

    order_items, orders = parse_training_data(
        data.get("orders"),
        data.get("orderItems", data.get("order_items")),
    )
    logger.info("Loaded {} orders and {} order items from {}", len(orders), len(order_items), path)
    return order_items, orders


def fetch_training_data(
    config: RestClientConfig,
    *,
    transport: httpx.BaseTransport | None = None,
) -> TrainingData:
    """Pull all orders and order items from the persistence service."""
    orders = RestClient(config, "orders", transport=transport).get_all()
    order_items = RestClient(config, "orderitems", transport=transport).get_all()
    result = parse_training_data(orders, order_items)
    logger.info(
        "Fetched {} orders and {} order items from {}",
        len(result[1]),
        len(result[0]),
        config.host,
    )
    return result


__all__ = ["fetch_training_data", "load_training_data", "parse_training_data"]
